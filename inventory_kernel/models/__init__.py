"""SQLAlchemy ORM models for the inventory kernel."""

from inventory_kernel.models.collection import LedgerCollectionModel

__all__ = [
    "LedgerCollectionModel",
]
