"""
Module: inventory_kernel.models.collection
Responsibility: ORM persistence for ledger collection blobs.  Each row holds
    one whole collection (categories, products or transactions) as a JSON
    array, rewritten after every successful ledger mutation.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - One row per collection name (primary key).
    - row_count always equals len(payload) at write time.

Failure modes:
    - IntegrityError on a concurrent insert of the same collection name
      (single-writer deployment assumed).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TimestampedBase


class LedgerCollectionModel(TimestampedBase):
    """
    Persistent blob for one ledger collection.

    Non-goals:
        - Does NOT normalize records into per-entity tables; the ledger is
          read once at start-up and written collection-at-a-time.
    """

    __tablename__ = "ledger_collections"

    name: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
    )

    payload: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
    )

    row_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<LedgerCollectionModel {self.name} rows={self.row_count}>"
