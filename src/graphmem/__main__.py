"""Entry point: python -m graphmem [serve]

- No args / "serve": run the knowledge graph server on stdio
"""

from __future__ import annotations

import asyncio
import logging
import sys

from graphmem.config import load_config


def _setup_logging(level: str) -> None:
    # stdout carries the protocol; basicConfig logs to stderr
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _run_serve() -> None:
    config = load_config()
    _setup_logging(config.log_level)

    from graphmem.graph.manager import KnowledgeGraphManager
    from graphmem.server import GraphMemoryServer

    manager = KnowledgeGraphManager.from_config(config)
    server = GraphMemoryServer(manager, config.server)
    try:
        asyncio.run(server.serve_stdio())
    except KeyboardInterrupt:
        pass
    except Exception:
        logging.getLogger("graphmem").exception("Fatal error in server")
        sys.exit(1)


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "serve"

    if cmd == "serve":
        _run_serve()
    else:
        print("Usage: python -m graphmem [serve]", file=sys.stderr)
        print("  serve  — Knowledge graph server on stdio (default)", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
