"""Tests for the knowledge graph tool surface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from graphmem.errors import EntityNotFoundError, MissingArgumentsError, UnknownToolError
from graphmem.graph.manager import KnowledgeGraphManager
from graphmem.tools.graph_tools import ToolDefinition, call_tool, get_graph_tools


@pytest.fixture
def manager(tmp_path: Path) -> KnowledgeGraphManager:
    return KnowledgeGraphManager(tmp_path / "memory.json")


@pytest.fixture
def tools(manager: KnowledgeGraphManager) -> dict[str, ToolDefinition]:
    return get_graph_tools(manager)


def _call(tools, name, **arguments):
    return call_tool(tools, name, arguments)


class TestRegistry:
    def test_tool_names(self, tools):
        assert list(tools) == [
            "create_entities",
            "create_relations",
            "add_observations",
            "delete_entities",
            "delete_observations",
            "delete_relations",
            "read_graph",
            "search_nodes",
            "open_nodes",
        ]

    def test_schema_shape(self, tools):
        schema = tools["create_entities"].schema()
        assert schema["name"] == "create_entities"
        assert schema["inputSchema"]["required"] == ["entities"]
        item = schema["inputSchema"]["properties"]["entities"]["items"]
        assert item["required"] == ["name", "entityType", "observations"]
        assert "subdomain" in item["properties"]

    def test_read_graph_takes_no_params(self, tools):
        assert tools["read_graph"].schema()["inputSchema"] == {"type": "object", "properties": {}}


class TestDispatch:
    def test_unknown_tool(self, tools):
        with pytest.raises(UnknownToolError, match="Unknown tool: nope"):
            call_tool(tools, "nope", {})

    def test_missing_arguments(self, tools):
        with pytest.raises(MissingArgumentsError, match="No arguments provided for tool: read_graph"):
            call_tool(tools, "read_graph", None)

    def test_missing_required_key(self, tools):
        with pytest.raises(ValueError, match="entities"):
            _call(tools, "create_entities")

    def test_missing_entity_field(self, tools):
        with pytest.raises(ValueError, match="entityType"):
            _call(tools, "create_entities", entities=[{"name": "A", "observations": []}])


class TestHandlers:
    def test_create_entities_returns_new_as_json(self, tools):
        text = _call(
            tools,
            "create_entities",
            entities=[
                {"name": "A", "entityType": "T", "observations": ["x"], "subdomain": "budget"},
                {"name": "B", "entityType": "T", "observations": []},
            ],
        )
        assert json.loads(text) == [
            {"name": "A", "entityType": "T", "observations": ["x"], "subdomain": "budget"},
            {"name": "B", "entityType": "T", "observations": []},
        ]
        assert json.loads(_call(tools, "create_entities", entities=[
            {"name": "A", "entityType": "T", "observations": []},
        ])) == []

    def test_create_relations(self, tools):
        text = _call(tools, "create_relations", relations=[{"from": "A", "to": "B", "relationType": "uses"}])
        assert json.loads(text) == [{"from": "A", "to": "B", "relationType": "uses"}]

    def test_add_observations(self, tools):
        _call(tools, "create_entities", entities=[{"name": "A", "entityType": "T", "observations": ["x"]}])
        text = _call(tools, "add_observations", observations=[{"entityName": "A", "contents": ["x", "y"]}])
        assert json.loads(text) == [{"entityName": "A", "addedObservations": ["y"]}]

    def test_add_observations_unknown_entity(self, tools):
        with pytest.raises(EntityNotFoundError):
            _call(tools, "add_observations", observations=[{"entityName": "Z", "contents": ["x"]}])

    def test_deletions_return_messages(self, tools, manager: KnowledgeGraphManager):
        _call(tools, "create_entities", entities=[
            {"name": "A", "entityType": "T", "observations": ["x"]},
            {"name": "B", "entityType": "T", "observations": []},
        ])
        _call(tools, "create_relations", relations=[{"from": "A", "to": "B", "relationType": "uses"}])

        assert _call(tools, "delete_relations", relations=[
            {"from": "A", "to": "B", "relationType": "uses"},
        ]) == "Relations deleted successfully"
        assert _call(tools, "delete_observations", deletions=[
            {"entityName": "A", "observations": ["x"]},
        ]) == "Observations deleted successfully"
        assert _call(tools, "delete_entities", entityNames=["B"]) == "Entities deleted successfully"

        graph = manager.read_graph()
        assert [(e.name, e.observations) for e in graph.entities] == [("A", [])]
        assert graph.relations == []

    def test_read_graph(self, tools):
        _call(tools, "create_entities", entities=[{"name": "A", "entityType": "T", "observations": []}])
        assert json.loads(_call(tools, "read_graph")) == {
            "entities": [{"name": "A", "entityType": "T", "observations": []}],
            "relations": [],
        }

    def test_search_and_open(self, tools):
        _call(tools, "create_entities", entities=[
            {"name": "BudgetCalculator", "entityType": "CODE", "observations": ["calculation"],
             "subdomain": "budget_management"},
            {"name": "Other", "entityType": "CODE", "observations": []},
        ])
        _call(tools, "create_relations", relations=[
            {"from": "BudgetCalculator", "to": "Other", "relationType": "uses"},
        ])

        found = json.loads(_call(tools, "search_nodes", query="calculation"))
        assert [e["name"] for e in found["entities"]] == ["BudgetCalculator"]
        assert found["relations"] == []

        opened = json.loads(_call(tools, "open_nodes", names=["BudgetCalculator", "Other"]))
        assert len(opened["entities"]) == 2
        assert opened["relations"] == [
            {"from": "BudgetCalculator", "to": "Other", "relationType": "uses"},
        ]

    def test_search_requires_string_query(self, tools):
        with pytest.raises(ValueError, match="query"):
            _call(tools, "search_nodes", query=["budget"])

    def test_open_nodes_requires_string_names(self, tools):
        with pytest.raises(ValueError, match="names"):
            _call(tools, "open_nodes", names=[{"a": 1}])

    def test_arguments_must_be_object(self, tools):
        with pytest.raises(ValueError, match="must be an object"):
            call_tool(tools, "read_graph", ["x"])
