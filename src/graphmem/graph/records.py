"""Store record codec — one JSON object per line, tagged by ``type``.

Entity line:   {"type": "entity", "name", "entityType", "observations", "subdomain"}
Relation line: {"type": "relation", "from", "to", "relationType"}

``subdomain`` is always written (``null`` when the entity has none).
"""

from __future__ import annotations

import json

from graphmem.errors import RecordError
from graphmem.graph.models import Entity, Relation

ENTITY_TAG = "entity"
RELATION_TAG = "relation"

Record = Entity | Relation


def decode_record(line: str) -> Record:
    """Decode one store line into an Entity or Relation.

    Raises RecordError for anything that is not a well-formed, tagged record.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise RecordError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RecordError(f"expected an object, got {type(data).__name__}")

    tag = data.get("type")
    try:
        if tag == ENTITY_TAG:
            return Entity.from_dict(data)
        if tag == RELATION_TAG:
            return Relation.from_dict(data)
    except ValueError as e:
        raise RecordError(f"malformed {tag} record: {e}") from e

    raise RecordError(f"unknown record type: {tag!r}")


def encode_entity(entity: Entity) -> str:
    return json.dumps(
        {
            "type": ENTITY_TAG,
            "name": entity.name,
            "entityType": entity.entity_type,
            "observations": entity.observations,
            "subdomain": entity.subdomain,
        },
        ensure_ascii=False,
    )


def encode_relation(relation: Relation) -> str:
    return json.dumps({"type": RELATION_TAG, **relation.to_dict()}, ensure_ascii=False)
