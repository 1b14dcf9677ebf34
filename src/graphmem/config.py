"""Configuration loading from environment variables and graphmem.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

PROGRAM_DIR = Path(__file__).resolve().parent
DEFAULT_MEMORY_FILENAME = "memory.json"
_CONFIG_FILENAME = "graphmem.toml"


def resolve_memory_path(value: str | None, program_dir: Path = PROGRAM_DIR) -> Path:
    """Resolve the store location.

    Unset → ``program_dir/memory.json``; absolute → as given; relative →
    relative to ``program_dir``, never to the current working directory.
    """
    if not value:
        return program_dir / DEFAULT_MEMORY_FILENAME
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return program_dir / path


@dataclass
class ServerConfig:
    """Identity reported by the stdio server on initialize."""

    name: str = "memory-server"
    version: str = "1.0.0"


@dataclass
class GraphMemConfig:
    """Top-level graphmem configuration."""

    memory_file: Path = field(default_factory=lambda: resolve_memory_path(None))
    log_level: str = "INFO"
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(config_path: Path | None = None, program_dir: Path = PROGRAM_DIR) -> GraphMemConfig:
    """Load configuration from environment variables and optional graphmem.toml.

    Priority: environment variables > graphmem.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.graphmem/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".graphmem" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    server_data = file_data.get("server", {})

    return GraphMemConfig(
        memory_file=resolve_memory_path(
            os.getenv("MEMORY_FILE_PATH") or file_data.get("memory_file"), program_dir
        ),
        log_level=os.getenv("GRAPHMEM_LOG_LEVEL", file_data.get("log_level", "INFO")),
        server=ServerConfig(
            name=server_data.get("name", "memory-server"),
            version=server_data.get("version", "1.0.0"),
        ),
    )
