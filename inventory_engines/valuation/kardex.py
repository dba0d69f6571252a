"""
inventory_engines.valuation.kardex -- FIFO kardex replay.

Replays the in-window transactions of one product in chronological order
(stable: same-instant transactions keep ledger order), maintaining a FIFO
layer queue.  Each row shows the purchase or sale columns and the balance
immediately after the row was applied.  A sale's unit cost is the weighted
cost of the layers it consumed.

Unlike the summary FIFO pass, an exit here can only draw on layers that
exist at its own date.  When the window cuts off earlier stock an exit may
be larger than the balance on hand; the uncovered units are reported in
``KardexRow.shortfall``.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from inventory_engines.valuation.cost_layer import (
    CostLayer,
    consume_from_front,
    remaining_totals,
)
from inventory_engines.valuation.report import KardexCell, KardexRow
from inventory_kernel.domain.ledger import Transaction
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.kardex")


def build_fifo_kardex(transactions: Iterable[Transaction]) -> tuple[KardexRow, ...]:
    """Build the FIFO kardex for one product's in-window transactions."""
    layers: deque[CostLayer] = deque()
    rows: list[KardexRow] = []

    for transaction in sorted(transactions, key=lambda t: t.date):
        purchase = sale = None
        shortfall = 0

        if transaction.is_entry:
            layers.append(CostLayer.from_entry(transaction))
            purchase = KardexCell(
                quantity=transaction.quantity,
                unit_cost=transaction.unit_cost,
                total_cost=transaction.total_cost,
            )
        else:
            consumption = consume_from_front(layers, transaction.quantity)
            sale = KardexCell(
                quantity=consumption.quantity,
                unit_cost=consumption.unit_cost,
                total_cost=consumption.total_cost,
            )
            shortfall = consumption.shortfall

        balance_quantity, balance_cost = remaining_totals(layers)
        rows.append(KardexRow(
            transaction_id=transaction.id,
            date=transaction.date,
            type=transaction.type,
            purchase=purchase,
            sale=sale,
            balance=KardexCell.of(balance_quantity, balance_cost),
            shortfall=shortfall,
            notes=transaction.notes,
        ))

    short_rows = sum(1 for row in rows if row.shortfall)
    if short_rows:
        logger.warning("kardex_uncovered_exits", extra={
            "rows": len(rows),
            "uncovered_rows": short_rows,
        })

    return tuple(rows)
