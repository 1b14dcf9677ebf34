"""Exception types shared across the graph, store and tool layers."""

from __future__ import annotations

from pathlib import Path


class KnowledgeGraphError(Exception):
    """Base class for failures surfaced by graph operations."""


class EntityNotFoundError(KnowledgeGraphError):
    """An operation that requires an existing entity could not find it."""

    def __init__(self, entity_name: str) -> None:
        super().__init__(f"Entity with name {entity_name} not found")
        self.entity_name = entity_name


class StoreIOError(KnowledgeGraphError):
    """The backing store could not be read or written."""

    def __init__(self, path: Path, action: str, reason: str) -> None:
        super().__init__(f"Failed to {action} memory store {path}: {reason}")
        self.path = path
        self.action = action


class RecordError(ValueError):
    """A single store line could not be decoded into an entity or relation."""


class ToolError(KnowledgeGraphError):
    """Base class for tool dispatch failures."""


class UnknownToolError(ToolError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class MissingArgumentsError(ToolError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No arguments provided for tool: {name}")
        self.name = name
