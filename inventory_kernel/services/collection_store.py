"""
inventory_kernel.services.collection_store -- Key-value persistence for ledger collections.

Responsibility:
    Persist each ledger collection as one JSON blob keyed by collection
    name.  The LedgerStore reads the blobs once at start-up and rewrites a
    collection after every successful mutation.

Architecture position:
    Kernel > Services.  SqlCollectionStore uses db.engine.session_scope and
    the LedgerCollectionModel ORM model; InMemoryCollectionStore has no I/O.

Failure modes:
    - SQLAlchemy errors propagate from SqlCollectionStore.write after the
      transaction is rolled back.  The caller's in-memory state is left as
      it was (no rollback is modeled above this layer).
"""

from __future__ import annotations

import copy
from typing import Any, Protocol

from inventory_kernel.db.engine import session_scope
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.collection import LedgerCollectionModel

logger = get_logger("services.collection_store")

Rows = list[dict[str, Any]]


class CollectionStore(Protocol):
    """Blob store keyed by collection name."""

    def read(self, name: str) -> Rows | None:
        """Return the stored rows, or None when the collection was never written."""
        ...

    def write(self, name: str, rows: Rows) -> None:
        """Replace the stored rows for ``name``."""
        ...


class InMemoryCollectionStore:
    """Dict-backed store for tests and database-less sessions."""

    def __init__(self, initial: dict[str, Rows] | None = None):
        self._blobs: dict[str, Rows] = copy.deepcopy(initial) if initial else {}
        self.write_count = 0

    def read(self, name: str) -> Rows | None:
        rows = self._blobs.get(name)
        return copy.deepcopy(rows) if rows is not None else None

    def write(self, name: str, rows: Rows) -> None:
        self._blobs[name] = copy.deepcopy(rows)
        self.write_count += 1
        logger.debug("collection_written", extra={
            "collection": name,
            "row_count": len(rows),
            "backend": "memory",
        })


class SqlCollectionStore:
    """
    SQLAlchemy-backed store: one ``ledger_collections`` row per collection.

    Contract:
        The engine must be initialized (db.engine.init_engine_from_url) and
        the tables created before the first read or write.
    """

    def read(self, name: str) -> Rows | None:
        with session_scope() as session:
            model = session.get(LedgerCollectionModel, name)
            if model is None:
                return None
            rows = list(model.payload)

        logger.debug("collection_read", extra={
            "collection": name,
            "row_count": len(rows),
            "backend": "sql",
        })
        return rows

    def write(self, name: str, rows: Rows) -> None:
        with session_scope() as session:
            model = session.get(LedgerCollectionModel, name)
            if model is None:
                session.add(LedgerCollectionModel(
                    name=name,
                    payload=list(rows),
                    row_count=len(rows),
                ))
            else:
                # Assign a fresh list so the JSON column is flagged dirty
                model.payload = list(rows)
                model.row_count = len(rows)

        logger.debug("collection_written", extra={
            "collection": name,
            "row_count": len(rows),
            "backend": "sql",
        })
