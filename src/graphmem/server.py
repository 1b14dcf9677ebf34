"""Stdio server: exposes the knowledge graph tools to an agent.

Protocol: JSON-RPC 2.0 over stdio (NDJSON). Requests are handled one at a
time, which is the serialization KnowledgeGraphManager relies on.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from graphmem.config import ServerConfig
from graphmem.errors import KnowledgeGraphError, MissingArgumentsError, UnknownToolError
from graphmem.tools.graph_tools import call_tool, get_graph_tools

if TYPE_CHECKING:
    from graphmem.graph.manager import KnowledgeGraphManager

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


# ── JSON-RPC 2.0 helpers ─────────────────────────────────────


def jsonrpc_result(req_id, result):
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def jsonrpc_error(req_id, code, message):
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


class GraphMemoryServer:
    """Routes JSON-RPC requests to the knowledge graph tools."""

    def __init__(self, manager: KnowledgeGraphManager, config: ServerConfig | None = None) -> None:
        self.manager = manager
        self.config = config or ServerConfig()
        self.tools = get_graph_tools(manager)

    # ── Request handler ──────────────────────────────────────

    async def handle_request(self, req: dict) -> dict | None:
        req_id = req.get("id")
        method = req.get("method", "")

        # Notifications (no id) — no response
        if req_id is None:
            if method == "notifications/initialized":
                logger.info("Client initialized")
            return None

        if method == "initialize":
            return jsonrpc_result(req_id, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": self.config.name, "version": self.config.version},
            })

        if method == "ping":
            return jsonrpc_result(req_id, {})

        if method == "tools/list":
            return jsonrpc_result(req_id, {"tools": [t.schema() for t in self.tools.values()]})

        if method == "tools/call":
            params = req.get("params") or {}
            if not isinstance(params, dict):
                return jsonrpc_error(req_id, INVALID_PARAMS, "params must be an object")
            name = params.get("name", "")
            if not isinstance(name, str):
                return jsonrpc_error(req_id, INVALID_PARAMS, "Tool name must be a string")
            return self._call_tool(req_id, name, params.get("arguments"))

        return jsonrpc_error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    def _call_tool(self, req_id: Any, name: str, arguments: Any) -> dict:
        try:
            text = call_tool(self.tools, name, arguments)
        except UnknownToolError as e:
            return jsonrpc_error(req_id, METHOD_NOT_FOUND, str(e))
        except (MissingArgumentsError, ValueError) as e:
            return jsonrpc_error(req_id, INVALID_PARAMS, str(e))
        except KnowledgeGraphError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return jsonrpc_error(req_id, INTERNAL_ERROR, str(e))
        return jsonrpc_result(req_id, {"content": [{"type": "text", "text": text}]})

    async def handle_line(self, raw: bytes) -> dict | None:
        """Decode one NDJSON line and handle it. Bad input never escapes."""
        try:
            line = raw.decode("utf-8").strip()
            if not line:
                return None
            req = json.loads(line)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Parse error: %s", e)
            return None
        if not isinstance(req, dict):
            logger.warning("Ignoring non-object message: %s", line[:200])
            return None

        logger.debug("<- %s", req.get("method", "?"))
        try:
            return await self.handle_request(req)
        except Exception as e:
            logger.exception("Handler error for %s", req.get("method", "?"))
            req_id = req.get("id")
            if req_id is None:
                return None
            return jsonrpc_error(req_id, INTERNAL_ERROR, f"Internal error: {e}")

    # ── Stdio transport (NDJSON) ─────────────────────────────

    async def serve(self, reader: asyncio.StreamReader, write: Callable[[str], None]) -> None:
        """Answer requests from ``reader`` one at a time until EOF."""
        while True:
            line = await reader.readline()
            if not line:
                break
            response = await self.handle_line(line)
            if response:
                write(json.dumps(response, ensure_ascii=False) + "\n")

    async def serve_stdio(self) -> None:
        logger.info("Knowledge Graph server running on stdio (store=%s)", self.manager.store.path)

        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)
        await self.serve(reader, _write_stdout)


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()
