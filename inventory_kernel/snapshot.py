"""
inventory_kernel.snapshot -- Ledger document codec.

Responsibility:
    Convert between the ledger entities and the bulk import/export
    document ``{categories: [...], products: [...], transactions: [...]}``.
    The same record shape is used for the seed dataset, exports, and the
    per-collection blobs written by the collection stores.

Document format:
    - camelCase field names (``categoryId``, ``minStock``, ``unitCost``...)
    - ``type`` is the literal string ``"entry"`` or ``"exit"``
    - dates are ISO strings; midnight values are written as calendar dates
    - monetary fields are written as integers when whole, otherwise as
      decimal strings (``"2.75"``); numbers and strings are both read

Failure modes:
    - SnapshotFormatError naming the collection and index of the first
      record that cannot be parsed.
    - FileNotFoundError / json.JSONDecodeError propagate from load_snapshot.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, TypeVar

from inventory_kernel.domain.ledger import (
    Category,
    Product,
    Transaction,
    TransactionType,
    to_instant,
)
from inventory_kernel.exceptions import SnapshotFormatError
from inventory_kernel.logging_config import get_logger

logger = get_logger("snapshot")

CATEGORIES = "categories"
PRODUCTS = "products"
TRANSACTIONS = "transactions"

COLLECTION_NAMES = (CATEGORIES, PRODUCTS, TRANSACTIONS)

T = TypeVar("T")


@dataclass(frozen=True)
class LedgerSnapshot:
    """Point-in-time copy of the three ledger collections."""

    categories: tuple[Category, ...] = field(default_factory=tuple)
    products: tuple[Product, ...] = field(default_factory=tuple)
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.categories or self.products or self.transactions)


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _as_int(value: Any) -> int:
    number = _as_decimal(value)
    if number != number.to_integral_value():
        raise ValueError(f"expected a whole number, got {value!r}")
    return int(number)


def _json_money(value: Decimal) -> int | str:
    # Fractional amounts stay strings; a JSON float would drop digits
    if value == value.to_integral_value():
        return int(value)
    return format(value, "f")


def _format_instant(value: datetime) -> str:
    if value.time() == time(0, 0):
        return value.date().isoformat()
    return value.isoformat()


# ---------------------------------------------------------------------------
# Record codecs
# ---------------------------------------------------------------------------


def category_from_dict(data: Mapping[str, Any]) -> Category:
    return Category(
        id=str(data["id"]),
        name=str(data["name"]),
        description=str(data.get("description") or ""),
    )


def category_to_dict(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
    }


def product_from_dict(data: Mapping[str, Any]) -> Product:
    barcode = data.get("barcode")
    return Product(
        id=str(data["id"]),
        name=str(data["name"]),
        category_id=str(data["categoryId"]),
        sku=str(data.get("sku") or ""),
        min_stock=_as_int(data.get("minStock", 0)),
        description=str(data.get("description") or ""),
        image=str(data.get("image") or ""),
        price=_as_decimal(data.get("price", 0)),
        barcode=str(barcode) if barcode is not None else None,
    )


def product_to_dict(product: Product) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "categoryId": product.category_id,
        "sku": product.sku,
        "minStock": product.min_stock,
        "image": product.image,
        "price": _json_money(product.price),
    }
    if product.barcode is not None:
        record["barcode"] = product.barcode
    return record


def transaction_from_dict(data: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=str(data["id"]),
        product_id=str(data["productId"]),
        type=TransactionType.parse(data["type"]),
        quantity=_as_int(data["quantity"]),
        date=to_instant(data["date"]),
        unit_cost=_as_decimal(data.get("unitCost", 0)),
        notes=str(data.get("notes") or ""),
    )


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "productId": transaction.product_id,
        "type": transaction.type.value,
        "quantity": transaction.quantity,
        "unitCost": _json_money(transaction.unit_cost),
        "date": _format_instant(transaction.date),
        "notes": transaction.notes,
    }


_DECODERS: dict[str, Callable[[Mapping[str, Any]], Any]] = {
    CATEGORIES: category_from_dict,
    PRODUCTS: product_from_dict,
    TRANSACTIONS: transaction_from_dict,
}

_ENCODERS: dict[str, Callable[[Any], dict[str, Any]]] = {
    CATEGORIES: category_to_dict,
    PRODUCTS: product_to_dict,
    TRANSACTIONS: transaction_to_dict,
}


def decode_collection(name: str, rows: Iterable[Mapping[str, Any]] | None) -> tuple:
    """
    Decode one collection's records.

    Raises:
        SnapshotFormatError: On the first record that cannot be parsed.
    """
    decoder = _DECODERS[name]
    decoded = []
    for index, row in enumerate(rows or ()):
        try:
            decoded.append(decoder(row))
        except KeyError as exc:
            raise SnapshotFormatError(name, index, f"missing field {exc.args[0]!r}") from exc
        except (ValueError, TypeError, InvalidOperation) as exc:
            raise SnapshotFormatError(name, index, str(exc) or type(exc).__name__) from exc
    return tuple(decoded)


def encode_collection(name: str, entities: Iterable[Any]) -> list[dict[str, Any]]:
    """Encode one collection as a list of JSON-safe records."""
    encoder = _ENCODERS[name]
    return [encoder(entity) for entity in entities]


# ---------------------------------------------------------------------------
# Document level
# ---------------------------------------------------------------------------


def snapshot_from_dict(data: Mapping[str, Any]) -> LedgerSnapshot:
    """Build a snapshot from a ledger document; missing collections are empty."""
    return LedgerSnapshot(
        categories=decode_collection(CATEGORIES, data.get(CATEGORIES)),
        products=decode_collection(PRODUCTS, data.get(PRODUCTS)),
        transactions=decode_collection(TRANSACTIONS, data.get(TRANSACTIONS)),
    )


def snapshot_to_dict(snapshot: LedgerSnapshot) -> dict[str, list[dict[str, Any]]]:
    return {
        CATEGORIES: encode_collection(CATEGORIES, snapshot.categories),
        PRODUCTS: encode_collection(PRODUCTS, snapshot.products),
        TRANSACTIONS: encode_collection(TRANSACTIONS, snapshot.transactions),
    }


def load_snapshot(path: Path | str) -> LedgerSnapshot:
    """
    Read a ledger document from a JSON file.

    Floats are parsed as Decimal so monetary values stay exact.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh, parse_float=Decimal)

    snapshot = snapshot_from_dict(data)
    logger.info("snapshot_loaded", extra={
        "path": str(path),
        "categories": len(snapshot.categories),
        "products": len(snapshot.products),
        "transactions": len(snapshot.transactions),
    })
    return snapshot


def dump_snapshot(snapshot: LedgerSnapshot, path: Path | str) -> Path:
    """Write a ledger document as indented JSON and return the path."""
    path = Path(path)
    path.write_text(
        json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info("snapshot_written", extra={
        "path": str(path),
        "transactions": len(snapshot.transactions),
    })
    return path
