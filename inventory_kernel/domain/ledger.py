"""
Ledger -- Immutable entities held by the inventory ledger.

Responsibility:
    Frozen value objects for the three ledger collections: categories,
    products and transactions.  These carry identity (a UUID string
    assigned by the LedgerStore) but no I/O.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - All entities are frozen dataclasses; a transaction is never edited
      after it is appended (append-only ledger).
    - Monetary fields are Decimal, never float.
    - Transaction dates are naive datetimes (see ``to_instant``) so any two
      ledger dates compare without raising.

Failure modes:
    - ValueError from ``TransactionType.parse`` on an unknown literal.
    - ValueError / TypeError from ``to_instant`` on unparseable dates.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum


class TransactionType(str, Enum):
    """Direction of a ledger transaction."""

    ENTRY = "entry"  # purchase / receipt, carries a unit cost
    EXIT = "exit"    # sale / consumption, no cost basis of its own

    @classmethod
    def parse(cls, value: TransactionType | str) -> TransactionType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Transaction type must be 'entry' or 'exit', got {value!r}"
            ) from None


def to_instant(value: datetime | date | str) -> datetime:
    """
    Normalize a calendar value to a naive datetime.

    - ``date`` and date-only ISO strings become midnight of that day.
    - Timezone-aware datetimes are converted to UTC and made naive.
    - Naive datetimes are returned unchanged.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    elif not isinstance(value, datetime):
        raise TypeError(f"Expected date, datetime or ISO string, got {type(value).__name__}")

    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


@dataclass(frozen=True, slots=True)
class Category:
    """A product grouping. Deleted only when no product references it."""

    id: str
    name: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class Product:
    """
    A stocked product.

    ``min_stock`` is the low-stock alert threshold: a product whose stock is
    at or below it is reported by ``LedgerStore.get_low_stock_products``.
    """

    id: str
    name: str
    category_id: str
    sku: str
    min_stock: int = 0
    description: str = ""
    image: str = ""
    price: Decimal = Decimal("0")
    barcode: str | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    One append-only ledger line.

    ``unit_cost`` is meaningful for entries only; exits draw their cost from
    the entries they consume.
    """

    id: str
    product_id: str
    type: TransactionType
    quantity: int
    date: datetime
    unit_cost: Decimal = Decimal("0")
    notes: str = ""

    @property
    def is_entry(self) -> bool:
        return self.type is TransactionType.ENTRY

    @property
    def is_exit(self) -> bool:
        return self.type is TransactionType.EXIT

    @property
    def signed_quantity(self) -> int:
        """+quantity for entries, -quantity for exits."""
        return self.quantity if self.is_entry else -self.quantity

    @property
    def total_cost(self) -> Decimal:
        return self.unit_cost * self.quantity


@dataclass(frozen=True, slots=True)
class ProductStock:
    """Stock figure for one product, as returned by category stock queries."""

    product_id: str
    stock: int
