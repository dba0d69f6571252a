"""
inventory_engines.valuation.methods -- FIFO, LIFO and weighted-average valuation.

Responsibility:
    Filter a ledger down to one product and an inclusive date window, then
    value the remaining stock under the requested costing method.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The ValuationService in
    inventory_services binds these functions to the LedgerStore.

Invariants enforced:
    - Ledger order never determines layer order: FIFO/LIFO sort entries by
      date (stable) and always apply exits in ascending date order.
    - FIFO and LIFO share one consumption routine; they differ only in the
      order layers are stacked.
    - Never raises on empty input: no transactions give a zero report.

Failure modes:
    - None.  Exits larger than the available layers simply exhaust them;
      weighted-average skips exits that arrive when the pool is empty.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.cost_layer import (
    ZERO,
    CostLayer,
    CostMethod,
    WeightedExitOrder,
    consume_from_front,
    remaining_totals,
)
from inventory_engines.valuation.kardex import build_fifo_kardex
from inventory_engines.valuation.report import FifoValuationReport, ValuationReport
from inventory_kernel.domain.ledger import Transaction
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.methods")


def filter_product_transactions(
    transactions: Iterable[Transaction],
    product_id: str,
    start: datetime,
    end: datetime,
) -> list[Transaction]:
    """Transactions of ``product_id`` with start <= date <= end, in ledger order."""
    return [
        t for t in transactions
        if t.product_id == product_id and start <= t.date <= end
    ]


def split_entries_exits(
    transactions: Iterable[Transaction],
) -> tuple[tuple[Transaction, ...], tuple[Transaction, ...]]:
    entries: list[Transaction] = []
    exits: list[Transaction] = []
    for t in transactions:
        (entries if t.is_entry else exits).append(t)
    return tuple(entries), tuple(exits)


def _chronological(transactions: Iterable[Transaction], newest_first: bool = False) -> list[Transaction]:
    # sorted() is stable in both directions: same-date items keep ledger order
    return sorted(transactions, key=lambda t: t.date, reverse=newest_first)


def _layered_remaining(
    entries: Sequence[Transaction],
    exits: Sequence[Transaction],
    newest_first: bool,
) -> tuple[int, Decimal]:
    layers = deque(CostLayer.from_entry(e) for e in _chronological(entries, newest_first))

    for exit_ in _chronological(exits):
        consume_from_front(layers, exit_.quantity)

    return remaining_totals(layers)


def value_fifo(transactions: Sequence[Transaction]) -> FifoValuationReport:
    """
    First-in, first-out: exits consume the oldest surviving layers.

    Also replays the transactions into the FIFO kardex.
    """
    entries, exits = split_entries_exits(transactions)
    remaining_stock, total_cost = _layered_remaining(entries, exits, newest_first=False)

    return FifoValuationReport(
        method=CostMethod.FIFO,
        entries=entries,
        exits=exits,
        remaining_stock=remaining_stock,
        total_cost=total_cost,
        average_cost=ValuationReport.average(total_cost, remaining_stock),
        kardex=build_fifo_kardex(transactions),
    )


def value_lifo(transactions: Sequence[Transaction]) -> ValuationReport:
    """
    Last-in, first-out: exits, still taken in date order, consume the
    newest surviving layers.
    """
    entries, exits = split_entries_exits(transactions)
    remaining_stock, total_cost = _layered_remaining(entries, exits, newest_first=True)

    return ValuationReport(
        method=CostMethod.LIFO,
        entries=entries,
        exits=exits,
        remaining_stock=remaining_stock,
        total_cost=total_cost,
        average_cost=ValuationReport.average(total_cost, remaining_stock),
    )


def value_weighted(
    transactions: Sequence[Transaction],
    exit_order: WeightedExitOrder = WeightedExitOrder.CHRONOLOGICAL,
) -> ValuationReport:
    """
    Weighted average: every in-window entry joins one pool, then each exit
    removes units at the pool's current average cost.

    An exit arriving when the pool holds no units is skipped.
    """
    entries, exits = split_entries_exits(transactions)

    total_units = sum(e.quantity for e in entries)
    total_value = sum((e.total_cost for e in entries), ZERO)

    ordered_exits = exits if exit_order is WeightedExitOrder.LEDGER else _chronological(exits)
    skipped = 0
    for exit_ in ordered_exits:
        if total_units <= 0:
            skipped += 1
            continue
        current_average = total_value / total_units
        total_value -= exit_.quantity * current_average
        total_units -= exit_.quantity

    if skipped:
        logger.debug("weighted_exits_skipped", extra={
            "skipped": skipped,
            "exits": len(exits),
        })

    return ValuationReport(
        method=CostMethod.WEIGHTED,
        entries=entries,
        exits=exits,
        remaining_stock=total_units,
        total_cost=total_value,
        average_cost=ValuationReport.average(total_value, total_units),
    )


@traced_engine("valuation", "1.0", fingerprint_fields=("transactions", "method"))
def calculate_inventory_cost(
    transactions: Sequence[Transaction],
    method: CostMethod | str,
    weighted_exit_order: WeightedExitOrder = WeightedExitOrder.CHRONOLOGICAL,
) -> ValuationReport:
    """
    Value one product's in-window transactions with ``method``.

    ``transactions`` must already be filtered to a single product and date
    window (see filter_product_transactions).
    """
    method = CostMethod.parse(method)

    if method is CostMethod.FIFO:
        report: ValuationReport = value_fifo(transactions)
    elif method is CostMethod.LIFO:
        report = value_lifo(transactions)
    else:
        report = value_weighted(transactions, weighted_exit_order)

    logger.info("inventory_cost_calculated", extra={
        "method": method.value,
        "entries": len(report.entries),
        "exits": len(report.exits),
        "remaining_stock": report.remaining_stock,
        "total_cost": str(report.total_cost),
        "average_cost": str(report.average_cost),
    })
    return report
