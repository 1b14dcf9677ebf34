"""Whole-file persistence for the knowledge graph.

The store is read in full on every load and rewritten in full on every save.
Saves go through a temp file in the same directory and an atomic rename, so a
reader never observes a half-written store.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import tempfile
from pathlib import Path

from graphmem.errors import RecordError, StoreIOError
from graphmem.graph.models import Entity, KnowledgeGraph
from graphmem.graph.records import decode_record, encode_entity, encode_relation

logger = logging.getLogger(__name__)


class GraphStore:
    """Load/save a KnowledgeGraph from a newline-delimited record file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    # ── Load ──────────────────────────────────────────────────

    def load(self) -> KnowledgeGraph:
        """Read the store. A missing file is created empty and yields an empty graph."""
        if not self.path.exists():
            self._create_empty()
            return KnowledgeGraph()

        try:
            data = self.path.read_bytes()
        except OSError as e:
            raise StoreIOError(self.path, "read", str(e)) from e

        graph = KnowledgeGraph()
        # Records are separated by "\n" only; U+2028 and friends may appear raw inside strings
        for lineno, raw in enumerate(data.split(b"\n"), start=1):
            if not raw.strip():
                continue
            try:
                record = decode_record(raw.decode("utf-8"))
            except UnicodeDecodeError as e:
                logger.warning("Skipping %s line %d: invalid UTF-8 (%s)", self.path.name, lineno, e)
                continue
            except RecordError as e:
                logger.warning("Skipping %s line %d: %s", self.path.name, lineno, e)
                continue
            if isinstance(record, Entity):
                graph.entities.append(record)
            else:
                graph.relations.append(record)

        logger.debug(
            "Loaded %d entities and %d relations from %s",
            len(graph.entities),
            len(graph.relations),
            self.path,
        )
        return graph

    def _create_empty(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("", encoding="utf-8")
        except OSError as e:
            raise StoreIOError(self.path, "create", str(e)) from e
        logger.info("Created empty memory store: %s", self.path)

    # ── Save ──────────────────────────────────────────────────

    def save(self, graph: KnowledgeGraph) -> None:
        """Replace the store's contents with ``graph``."""
        lines = [encode_entity(e) for e in graph.entities]
        lines += [encode_relation(r) for r in graph.relations]
        content = "\n".join(lines) + "\n"

        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                tmp_file.write(content)
            if self.path.exists():
                # NamedTemporaryFile is 0600; keep the store's existing mode
                shutil.copymode(self.path, tmp_path)
            tmp_path.replace(self.path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            raise StoreIOError(self.path, "write", str(e)) from e

        logger.debug(
            "Saved %d entities and %d relations to %s",
            len(graph.entities),
            len(graph.relations),
            self.path,
        )
