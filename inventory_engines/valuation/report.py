"""
inventory_engines.valuation.report -- Valuation report value objects.

A report comes in two shapes:

    ValuationReport        entries, exits, remaining_stock, total_cost, average_cost
    FifoValuationReport    the same, plus the chronological kardex rows

Callers distinguish them with ``isinstance`` or ``report.has_kardex``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from inventory_engines.valuation.cost_layer import ZERO, CostMethod
from inventory_kernel.domain.ledger import Transaction, TransactionType


@dataclass(frozen=True, slots=True)
class KardexCell:
    """One quantity / unit cost / total cost column group."""

    quantity: int
    unit_cost: Decimal
    total_cost: Decimal

    @classmethod
    def of(cls, quantity: int, total_cost: Decimal) -> KardexCell:
        unit_cost = total_cost / quantity if quantity > 0 else ZERO
        return cls(quantity=quantity, unit_cost=unit_cost, total_cost=total_cost)


@dataclass(frozen=True, slots=True)
class KardexRow:
    """
    One kardex line: the transaction, its purchase or sale columns, and the
    running balance after it was applied.

    Exactly one of ``purchase`` / ``sale`` is set.  ``shortfall`` is the
    part of an exit that the layers on hand at that moment could not cover
    (zero for entries and for fully covered exits).
    """

    transaction_id: str
    date: datetime
    type: TransactionType
    purchase: KardexCell | None
    sale: KardexCell | None
    balance: KardexCell
    shortfall: int = 0
    notes: str = ""


@dataclass(frozen=True)
class ValuationReport:
    """
    Cost report for one product, method and date window.

    ``entries`` and ``exits`` are the in-window transactions in filter
    order, kept for audit display.  ``total_cost`` values the remaining
    stock; ``average_cost`` is total_cost / remaining_stock, or zero when
    nothing remains.
    """

    method: CostMethod
    entries: tuple[Transaction, ...]
    exits: tuple[Transaction, ...]
    remaining_stock: int
    total_cost: Decimal
    average_cost: Decimal

    @property
    def has_kardex(self) -> bool:
        return False

    @staticmethod
    def average(total_cost: Decimal, remaining_stock: int) -> Decimal:
        return total_cost / remaining_stock if remaining_stock > 0 else ZERO


@dataclass(frozen=True)
class FifoValuationReport(ValuationReport):
    """FIFO report carrying the kardex audit trail."""

    kardex: tuple[KardexRow, ...] = ()

    @property
    def has_kardex(self) -> bool:
        return True
