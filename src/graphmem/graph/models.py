"""Graph data types — entities, relations and the request/result shapes.

Python attributes are snake_case; ``from_dict`` / ``to_dict`` translate to
and from the camelCase wire keys used by the store and the tool surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _require_str_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return list(value)


def _require_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    return data


# ── Graph elements ────────────────────────────────────────────


@dataclass
class Entity:
    """A named, typed knowledge unit."""

    name: str
    entity_type: str
    observations: list[str] = field(default_factory=list)
    subdomain: str | None = None  # None = spans multiple domains

    @classmethod
    def from_dict(cls, data: Any) -> Entity:
        data = _require_mapping(data)
        subdomain = data.get("subdomain")
        if subdomain is not None and not isinstance(subdomain, str):
            raise ValueError("'subdomain' must be a string when present")
        return cls(
            name=_require_str(data, "name"),
            entity_type=_require_str(data, "entityType"),
            observations=_require_str_list(data, "observations"),
            subdomain=subdomain,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "entityType": self.entity_type,
            "observations": list(self.observations),
        }
        if self.subdomain is not None:
            data["subdomain"] = self.subdomain
        return data


@dataclass
class Relation:
    """A directed, typed edge between two entity names."""

    from_entity: str
    to_entity: str
    relation_type: str

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used for deduplication and deletion."""
        return (self.from_entity, self.to_entity, self.relation_type)

    @classmethod
    def from_dict(cls, data: Any) -> Relation:
        data = _require_mapping(data)
        return cls(
            from_entity=_require_str(data, "from"),
            to_entity=_require_str(data, "to"),
            relation_type=_require_str(data, "relationType"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_entity,
            "to": self.to_entity,
            "relationType": self.relation_type,
        }


@dataclass
class KnowledgeGraph:
    """Transient snapshot of the whole store."""

    entities: list[Entity] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list)

    def find_entity(self, name: str) -> Entity | None:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def induced(self, entities: list[Entity]) -> KnowledgeGraph:
        """Return ``entities`` plus every relation with both endpoints among them."""
        names = {e.name for e in entities}
        relations = [
            r for r in self.relations if r.from_entity in names and r.to_entity in names
        ]
        return KnowledgeGraph(entities=entities, relations=relations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self.entities],
            "relations": [r.to_dict() for r in self.relations],
        }


# ── Observation requests / results ───────────────────────────


@dataclass
class ObservationRequest:
    """Observations to add to one entity."""

    entity_name: str
    contents: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ObservationRequest:
        data = _require_mapping(data)
        return cls(
            entity_name=_require_str(data, "entityName"),
            contents=_require_str_list(data, "contents"),
        )


@dataclass
class ObservationDeletion:
    """Observations to remove from one entity."""

    entity_name: str
    observations: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ObservationDeletion:
        data = _require_mapping(data)
        return cls(
            entity_name=_require_str(data, "entityName"),
            observations=_require_str_list(data, "observations"),
        )


@dataclass
class AddedObservations:
    """What add_observations actually appended to one entity."""

    entity_name: str
    added_observations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entityName": self.entity_name,
            "addedObservations": list(self.added_observations),
        }
