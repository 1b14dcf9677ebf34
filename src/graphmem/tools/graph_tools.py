"""Knowledge graph tools exposed to the agent.

Each tool pairs a JSON input schema with a handler that converts wire dicts
to model objects, calls KnowledgeGraphManager and returns the result as text.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from graphmem.errors import MissingArgumentsError, UnknownToolError
from graphmem.graph.models import (
    Entity,
    ObservationDeletion,
    ObservationRequest,
    Relation,
)

if TYPE_CHECKING:
    from graphmem.graph.manager import KnowledgeGraphManager


@dataclass
class ToolDefinition:
    """A tool the agent can call, handled within graphmem."""

    name: str
    description: str
    parameters: dict[str, Any]
    handler: Callable[[dict[str, Any]], str]

    def schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }


# ── Input schemas ─────────────────────────────────────────────

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

_RELATION_SCHEMA = {
    "type": "object",
    "properties": {
        "from": {"type": "string", "description": "The name of the entity where the relation starts"},
        "to": {"type": "string", "description": "The name of the entity where the relation ends"},
        "relationType": {"type": "string", "description": "The type of the relation"},
    },
    "required": ["from", "to", "relationType"],
}

_ENTITY_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "The name of the entity"},
        "entityType": {"type": "string", "description": "The type of the entity"},
        "subdomain": {
            "type": "string",
            "description": (
                "The subdomain this knowledge belongs to (e.g., 'allocation', 'report', "
                "'accounts', 'plans', 'actual' etc.). "
                "Can be omitted if the knowledge spans multiple domains."
            ),
        },
        "observations": {
            **_STRING_LIST,
            "description": "An array of observation contents associated with the entity",
        },
    },
    "required": ["name", "entityType", "observations"],
}

SEARCH_DESCRIPTION = (
    "Search for nodes in the knowledge graph based on one or more keywords. "
    "The search covers entity names, types, subdomains, and observation content. "
    "Multiple keywords are treated as OR conditions, where any keyword must match "
    "somewhere in the entity's fields."
)


def _object(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


# ── Argument helpers ──────────────────────────────────────────


def _list_arg(args: dict[str, Any], key: str) -> list:
    value = args.get(key)
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be an array")
    return value


def _str_list_arg(args: dict[str, Any], key: str) -> list[str]:
    value = _list_arg(args, key)
    if not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return value


def _str_arg(args: dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


# ── Registry ──────────────────────────────────────────────────


def get_graph_tools(manager: KnowledgeGraphManager) -> dict[str, ToolDefinition]:
    """Return a dict of tool_name -> ToolDefinition bound to ``manager``."""

    def create_entities(args: dict[str, Any]) -> str:
        entities = [Entity.from_dict(e) for e in _list_arg(args, "entities")]
        return _to_json([e.to_dict() for e in manager.create_entities(entities)])

    def create_relations(args: dict[str, Any]) -> str:
        relations = [Relation.from_dict(r) for r in _list_arg(args, "relations")]
        return _to_json([r.to_dict() for r in manager.create_relations(relations)])

    def add_observations(args: dict[str, Any]) -> str:
        requests = [ObservationRequest.from_dict(o) for o in _list_arg(args, "observations")]
        return _to_json([r.to_dict() for r in manager.add_observations(requests)])

    def delete_entities(args: dict[str, Any]) -> str:
        names = _str_list_arg(args, "entityNames")
        manager.delete_entities(names)
        return "Entities deleted successfully"

    def delete_observations(args: dict[str, Any]) -> str:
        deletions = [ObservationDeletion.from_dict(d) for d in _list_arg(args, "deletions")]
        manager.delete_observations(deletions)
        return "Observations deleted successfully"

    def delete_relations(args: dict[str, Any]) -> str:
        relations = [Relation.from_dict(r) for r in _list_arg(args, "relations")]
        manager.delete_relations(relations)
        return "Relations deleted successfully"

    def read_graph(args: dict[str, Any]) -> str:
        return _to_json(manager.read_graph().to_dict())

    def search_nodes(args: dict[str, Any]) -> str:
        return _to_json(manager.search_nodes(_str_arg(args, "query")).to_dict())

    def open_nodes(args: dict[str, Any]) -> str:
        names = _str_list_arg(args, "names")
        return _to_json(manager.open_nodes(names).to_dict())

    tools = [
        ToolDefinition(
            name="create_entities",
            description="Create multiple new entities in the knowledge graph",
            parameters=_object(
                {"entities": {"type": "array", "items": _ENTITY_SCHEMA}}, ["entities"]
            ),
            handler=create_entities,
        ),
        ToolDefinition(
            name="create_relations",
            description=(
                "Create multiple new relations between entities in the knowledge graph. "
                "Relations should be in active voice"
            ),
            parameters=_object(
                {"relations": {"type": "array", "items": _RELATION_SCHEMA}}, ["relations"]
            ),
            handler=create_relations,
        ),
        ToolDefinition(
            name="add_observations",
            description="Add new observations to existing entities in the knowledge graph",
            parameters=_object(
                {
                    "observations": {
                        "type": "array",
                        "items": _object(
                            {
                                "entityName": {
                                    "type": "string",
                                    "description": "The name of the entity to add the observations to",
                                },
                                "contents": {
                                    **_STRING_LIST,
                                    "description": "An array of observation contents to add",
                                },
                            },
                            ["entityName", "contents"],
                        ),
                    }
                },
                ["observations"],
            ),
            handler=add_observations,
        ),
        ToolDefinition(
            name="delete_entities",
            description=(
                "Delete multiple entities and their associated relations from the knowledge graph"
            ),
            parameters=_object(
                {
                    "entityNames": {
                        **_STRING_LIST,
                        "description": "An array of entity names to delete",
                    }
                },
                ["entityNames"],
            ),
            handler=delete_entities,
        ),
        ToolDefinition(
            name="delete_observations",
            description="Delete specific observations from entities in the knowledge graph",
            parameters=_object(
                {
                    "deletions": {
                        "type": "array",
                        "items": _object(
                            {
                                "entityName": {
                                    "type": "string",
                                    "description": "The name of the entity containing the observations",
                                },
                                "observations": {
                                    **_STRING_LIST,
                                    "description": "An array of observations to delete",
                                },
                            },
                            ["entityName", "observations"],
                        ),
                    }
                },
                ["deletions"],
            ),
            handler=delete_observations,
        ),
        ToolDefinition(
            name="delete_relations",
            description="Delete multiple relations from the knowledge graph",
            parameters=_object(
                {
                    "relations": {
                        "type": "array",
                        "items": _RELATION_SCHEMA,
                        "description": "An array of relations to delete",
                    }
                },
                ["relations"],
            ),
            handler=delete_relations,
        ),
        ToolDefinition(
            name="read_graph",
            description="Read the entire knowledge graph",
            parameters={"type": "object", "properties": {}},
            handler=read_graph,
        ),
        ToolDefinition(
            name="search_nodes",
            description=SEARCH_DESCRIPTION,
            parameters=_object(
                {
                    "query": {
                        "type": "string",
                        "description": (
                            "Space-separated keywords to match against entity fields. "
                            "Any keyword must match (OR condition). Example: 'budget management' "
                            "will find entities where either 'budget' or 'management' appears "
                            "in any field."
                        ),
                    }
                },
                ["query"],
            ),
            handler=search_nodes,
        ),
        ToolDefinition(
            name="open_nodes",
            description=(
                "Open specific nodes in the knowledge graph by their names. Returns the "
                "complete node information including subdomain and all metadata."
            ),
            parameters=_object(
                {
                    "names": {
                        **_STRING_LIST,
                        "description": (
                            "An array of entity names to retrieve, returning full entity "
                            "information including subdomain"
                        ),
                    }
                },
                ["names"],
            ),
            handler=open_nodes,
        ),
    ]
    return {t.name: t for t in tools}


def call_tool(
    tools: dict[str, ToolDefinition], name: str, arguments: Any
) -> str:
    """Dispatch one tool call.

    Raises UnknownToolError, MissingArgumentsError, ValueError for a bad
    argument shape, or whatever the manager raises.
    """
    tool = tools.get(name)
    if tool is None:
        raise UnknownToolError(name)
    if arguments is None:
        raise MissingArgumentsError(name)
    if not isinstance(arguments, dict):
        raise ValueError(f"Arguments for tool {name} must be an object")
    return tool.handler(arguments)
