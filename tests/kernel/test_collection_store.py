"""
Tests for the collection stores (in-memory and SQLAlchemy-backed).
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from inventory_kernel.db.engine import get_session, reset_engine, session_scope
from inventory_kernel.models.collection import LedgerCollectionModel
from inventory_kernel.services.collection_store import (
    InMemoryCollectionStore,
    SqlCollectionStore,
)
from inventory_kernel.services.ledger_store import LedgerStore
from inventory_kernel.snapshot import decode_collection

ROWS = [{"id": "cat-1", "name": "Beverages", "description": ""}]


class TestInMemoryCollectionStore:

    def test_never_written_reads_none(self):
        assert InMemoryCollectionStore().read("categories") is None

    def test_written_empty_reads_empty(self):
        store = InMemoryCollectionStore()
        store.write("categories", [])

        assert store.read("categories") == []

    def test_rows_are_copied(self):
        store = InMemoryCollectionStore()
        rows = [dict(ROWS[0])]
        store.write("categories", rows)

        rows[0]["name"] = "Changed"
        store.read("categories")[0]["name"] = "Changed again"

        assert store.read("categories") == ROWS

    def test_initial_blobs(self):
        store = InMemoryCollectionStore({"categories": ROWS})

        assert store.read("categories") == ROWS
        assert store.write_count == 0


class TestSqlCollectionStore:

    def test_never_written_reads_none(self, sqlite_engine):
        assert SqlCollectionStore().read("products") is None

    def test_write_then_read(self, sqlite_engine):
        store = SqlCollectionStore()

        store.write("categories", ROWS)

        assert store.read("categories") == ROWS

    def test_overwrite_replaces_payload(self, sqlite_engine):
        store = SqlCollectionStore()
        store.write("categories", ROWS)

        store.write("categories", [])

        assert store.read("categories") == []
        with session_scope() as session:
            model = session.get(LedgerCollectionModel, "categories")
            assert model.row_count == 0

    def test_one_row_per_collection(self, sqlite_engine):
        store = SqlCollectionStore()
        store.write("categories", ROWS)
        store.write("categories", ROWS)
        store.write("products", [])

        session = get_session()
        try:
            names = session.scalars(select(LedgerCollectionModel.name)).all()
        finally:
            session.close()

        assert sorted(names) == ["categories", "products"]

    def test_ledger_writes_through_to_database(self, sqlite_engine):
        ledger = LedgerStore(store=SqlCollectionStore())
        category = ledger.add_category("Hardware")
        product = ledger.add_product("Hammer", category.id, "HAM-1")
        ledger.add_transaction(product.id, "entry", 4, "2024-02-01", "7.5")

        store = SqlCollectionStore()
        assert store.read("categories")[0]["id"] == category.id
        assert store.read("transactions")[0]["unitCost"] == "7.5"

    def test_ledger_cost_precision_survives_database(self, sqlite_engine):
        precise = Decimal("1.23456789012345678901")
        ledger = LedgerStore(store=SqlCollectionStore())
        category = ledger.add_category("Hardware")
        product = ledger.add_product("Hammer", category.id, "HAM-1", price=precise)
        ledger.add_transaction(product.id, "entry", 4, "2024-02-01", precise)

        store = SqlCollectionStore()
        (txn,) = decode_collection("transactions", store.read("transactions"))
        (stored_product,) = decode_collection("products", store.read("products"))

        assert txn.unit_cost == precise
        assert stored_product.price == precise

    def test_requires_initialized_engine(self):
        reset_engine()

        with pytest.raises(RuntimeError, match="Engine not initialized"):
            SqlCollectionStore().read("categories")
