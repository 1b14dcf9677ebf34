"""KnowledgeGraphManager — create / delete / observe / search over the store.

Every operation loads a fresh snapshot from disk, works on it in memory and,
if it changed anything, saves it back before returning. Nothing is cached
between calls. Callers must serialize calls; there is no locking.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from graphmem.errors import EntityNotFoundError
from graphmem.graph.models import (
    AddedObservations,
    Entity,
    KnowledgeGraph,
    ObservationDeletion,
    ObservationRequest,
    Relation,
)
from graphmem.graph.search import filter_entities, tokenize
from graphmem.graph.store import GraphStore

if TYPE_CHECKING:
    from graphmem.config import GraphMemConfig

logger = logging.getLogger(__name__)


class KnowledgeGraphManager:
    """All operations on the persistent knowledge graph."""

    def __init__(self, store: GraphStore | Path) -> None:
        self.store = store if isinstance(store, GraphStore) else GraphStore(store)

    @classmethod
    def from_config(cls, config: GraphMemConfig) -> KnowledgeGraphManager:
        return cls(GraphStore(config.memory_file))

    # ── Creation ──────────────────────────────────────────────

    def create_entities(self, entities: list[Entity]) -> list[Entity]:
        """Add entities whose name is not taken yet. Returns only the new ones."""
        graph = self.store.load()
        seen = {e.name for e in graph.entities}
        new_entities: list[Entity] = []
        for entity in entities:
            if entity.name in seen:
                continue
            seen.add(entity.name)
            new_entities.append(entity)

        if new_entities:
            graph.entities.extend(new_entities)
            self.store.save(graph)
        logger.debug(
            "create_entities: %d requested, %d added", len(entities), len(new_entities)
        )
        return new_entities

    def create_relations(self, relations: list[Relation]) -> list[Relation]:
        """Add relations whose (from, to, relationType) is not present yet."""
        graph = self.store.load()
        seen = {r.key for r in graph.relations}
        new_relations: list[Relation] = []
        for relation in relations:
            if relation.key in seen:
                continue
            seen.add(relation.key)
            new_relations.append(relation)

        if new_relations:
            graph.relations.extend(new_relations)
            self.store.save(graph)
        logger.debug(
            "create_relations: %d requested, %d added", len(relations), len(new_relations)
        )
        return new_relations

    def add_observations(self, requests: list[ObservationRequest]) -> list[AddedObservations]:
        """Append new observation strings to existing entities.

        Raises EntityNotFoundError as soon as one target entity is missing;
        nothing is saved in that case.
        """
        graph = self.store.load()
        results: list[AddedObservations] = []
        for request in requests:
            entity = graph.find_entity(request.entity_name)
            if entity is None:
                raise EntityNotFoundError(request.entity_name)
            added: list[str] = []
            for content in request.contents:
                if content in entity.observations:
                    continue
                entity.observations.append(content)
                added.append(content)
            results.append(AddedObservations(request.entity_name, added))

        if any(r.added_observations for r in results):
            self.store.save(graph)
        return results

    # ── Deletion ──────────────────────────────────────────────

    def delete_entities(self, entity_names: list[str]) -> None:
        """Remove entities and every relation that starts or ends at one of them."""
        names = set(entity_names)
        graph = self.store.load()
        graph.entities = [e for e in graph.entities if e.name not in names]
        graph.relations = [
            r
            for r in graph.relations
            if r.from_entity not in names and r.to_entity not in names
        ]
        self.store.save(graph)

    def delete_observations(self, deletions: list[ObservationDeletion]) -> None:
        """Remove observation strings. Unknown entities are skipped silently."""
        graph = self.store.load()
        for deletion in deletions:
            entity = graph.find_entity(deletion.entity_name)
            if entity is None:
                continue
            doomed = set(deletion.observations)
            entity.observations = [o for o in entity.observations if o not in doomed]
        self.store.save(graph)

    def delete_relations(self, relations: list[Relation]) -> None:
        """Remove relations matching any of the given triples exactly."""
        keys = {r.key for r in relations}
        graph = self.store.load()
        graph.relations = [r for r in graph.relations if r.key not in keys]
        self.store.save(graph)

    # ── Queries ───────────────────────────────────────────────

    def read_graph(self) -> KnowledgeGraph:
        return self.store.load()

    def search_nodes(self, query: str) -> KnowledgeGraph:
        """Entities matching any keyword in ``query`` plus the relations among them."""
        graph = self.store.load()
        logger.debug("search_nodes: query=%r keywords=%s", query, tokenize(query))
        matched = filter_entities(graph.entities, query)
        logger.debug("search_nodes: matched %s", [e.name for e in matched])
        return graph.induced(matched)

    def open_nodes(self, names: list[str]) -> KnowledgeGraph:
        """The named entities plus the relations among them."""
        wanted = set(names)
        graph = self.store.load()
        return graph.induced([e for e in graph.entities if e.name in wanted])
