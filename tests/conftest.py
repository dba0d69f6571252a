"""
Pytest fixtures for the inventory ledger test suite.

Provides:
- Structured logging configured for the whole session, plus a log capture fixture
- An in-memory LedgerStore and a stocked product
- A file-backed SQLite engine for the SQL collection store
- A transaction factory for the pure valuation engine tests
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from io import StringIO
from itertools import count

import pytest

from inventory_kernel.db.engine import create_tables, init_engine_from_url, reset_engine
from inventory_kernel.domain.ledger import Transaction, TransactionType, to_instant
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from inventory_kernel.services.collection_store import InMemoryCollectionStore
from inventory_kernel.services.ledger_store import LedgerStore


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, ledger):
            ledger.add_category("Tools")
            logs = captured_logs()
            assert any(r["message"] == "category_added" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Ledger fixtures
# =============================================================================


@pytest.fixture
def collection_store() -> InMemoryCollectionStore:
    return InMemoryCollectionStore()


@pytest.fixture
def ledger(collection_store) -> LedgerStore:
    """Empty ledger writing through an in-memory collection store."""
    return LedgerStore(store=collection_store)


@pytest.fixture
def category(ledger):
    return ledger.add_category("Hardware", "Hand tools and fasteners")


@pytest.fixture
def product(ledger, category):
    return ledger.add_product("Claw hammer", category.id, "HAM-001", min_stock=5)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture
def sqlite_engine(sqlite_url):
    """File-backed SQLite engine with the collection table created."""
    engine = init_engine_from_url(sqlite_url)
    create_tables()
    yield engine
    reset_engine()


# =============================================================================
# Engine fixtures
# =============================================================================


@pytest.fixture
def make_transaction():
    """
    Factory for Transaction value objects with sequential ids.

    Usage::

        entry = make_transaction("entry", 10, "2024-01-01", "2")
        exit_ = make_transaction("exit", 15, "2024-01-03")
    """
    ids = count(1)

    def _make(
        type: str,
        quantity: int,
        date: str | datetime,
        unit_cost: str | int = 0,
        product_id: str = "prod-1",
        notes: str = "",
    ) -> Transaction:
        return Transaction(
            id=f"txn-{next(ids)}",
            product_id=product_id,
            type=TransactionType.parse(type),
            quantity=quantity,
            date=to_instant(date),
            unit_cost=Decimal(str(unit_cost)),
            notes=notes,
        )

    return _make
