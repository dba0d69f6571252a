"""Services for the inventory kernel (ledger write side and persistence)."""

from inventory_kernel.services.collection_store import (
    CollectionStore,
    InMemoryCollectionStore,
    SqlCollectionStore,
)
from inventory_kernel.services.ledger_store import LedgerStore

__all__ = [
    "CollectionStore",
    "InMemoryCollectionStore",
    "SqlCollectionStore",
    "LedgerStore",
]
