"""Knowledge graph model, persistence and operations."""

from graphmem.graph.manager import KnowledgeGraphManager
from graphmem.graph.models import (
    AddedObservations,
    Entity,
    KnowledgeGraph,
    ObservationDeletion,
    ObservationRequest,
    Relation,
)
from graphmem.graph.store import GraphStore

__all__ = [
    "AddedObservations",
    "Entity",
    "GraphStore",
    "KnowledgeGraph",
    "KnowledgeGraphManager",
    "ObservationDeletion",
    "ObservationRequest",
    "Relation",
]
