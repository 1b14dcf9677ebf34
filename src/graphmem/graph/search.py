"""Keyword search over entities.

A query is lower-cased and split into keywords on whitespace, ``,``, ``&``
and ``+``. An entity matches when any keyword is a substring of its name,
type, subdomain or any observation (OR across keywords and fields). There is
no ranking.
"""

from __future__ import annotations

import re

from graphmem.graph.models import Entity

_SEPARATORS = re.compile(r"[\s,&+]+")


def tokenize(query: str) -> list[str]:
    """Lower-case ``query`` and split it into non-empty keywords."""
    return [k for k in _SEPARATORS.split(query.lower()) if k]


def keyword_matches(keyword: str, entity: Entity) -> bool:
    """Check one (already lower-cased) keyword against all searchable fields."""
    if keyword in entity.name.lower():
        return True
    if keyword in entity.entity_type.lower():
        return True
    if keyword in (entity.subdomain or "").lower():
        return True
    return any(keyword in o.lower() for o in entity.observations)


def entity_matches(keywords: list[str], entity: Entity) -> bool:
    return any(keyword_matches(k, entity) for k in keywords)


def filter_entities(entities: list[Entity], query: str) -> list[Entity]:
    """Entities matching ``query``, in their original order. Empty query → []."""
    keywords = tokenize(query)
    if not keywords:
        return []
    return [e for e in entities if entity_matches(keywords, e)]
