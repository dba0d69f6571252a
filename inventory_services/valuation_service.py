"""
inventory_services.valuation_service -- Inventory cost reports over the ledger.

Responsibility:
    Bind the pure valuation engine to the LedgerStore: filter one product's
    transactions to an inclusive date window and value them with FIFO, LIFO
    or weighted-average costing.

Architecture position:
    Services -- stateless orchestration over engines + kernel.  Reads the
    LedgerStore's collections, never mutates them.

Invariants enforced:
    - Inclusive bounds: a transaction dated exactly at start or end is in
      the window.
    - Read-only: no call changes the ledger.

Failure modes:
    - None for unknown products or empty windows: the report is zero-valued.
    - ValueError / TypeError from to_instant on unparseable bounds, and
      ValueError from CostMethod.parse on an unknown method name.

Usage:
    service = ValuationService(ledger)
    report = service.calculate_inventory_cost(
        product_id, "fifo", "2024-01-01", "2024-12-31",
    )
    for row in report.kardex:
        ...
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from inventory_engines.valuation import (
    CostMethod,
    ValuationReport,
    WeightedExitOrder,
    calculate_inventory_cost,
    filter_product_transactions,
)
from inventory_kernel.domain.ledger import Transaction, to_instant
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.valuation")

DateBound = datetime | date | str


class ValuationService:
    """
    Cost reports for one product, one method and one date window.

    Contract:
        Receives the LedgerStore via constructor injection.
    Guarantees:
        - ``get_product_transactions`` returns transactions in ledger order.
        - ``calculate_inventory_cost`` returns a FifoValuationReport (with
          kardex) for FIFO and a ValuationReport otherwise.
    Non-goals:
        - Does not check that the product exists; callers validate input.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        weighted_exit_order: WeightedExitOrder = WeightedExitOrder.CHRONOLOGICAL,
    ):
        self.ledger = ledger
        self.weighted_exit_order = weighted_exit_order

    def get_product_transactions(
        self,
        product_id: str,
        start_date: DateBound,
        end_date: DateBound,
    ) -> list[Transaction]:
        """Transactions of ``product_id`` dated within [start_date, end_date]."""
        return filter_product_transactions(
            self.ledger.transactions,
            product_id,
            to_instant(start_date),
            to_instant(end_date),
        )

    def calculate_inventory_cost(
        self,
        product_id: str,
        method: CostMethod | str,
        start_date: DateBound,
        end_date: DateBound,
    ) -> ValuationReport:
        """
        Value the product's in-window stock with ``method``.

        Returns:
            ValuationReport; FifoValuationReport when method is FIFO.
        """
        method = CostMethod.parse(method)
        report_id = str(uuid4())

        with LogContext.bind(product_id=product_id, report_id=report_id):
            logger.info("valuation_report_started", extra={
                "method": method.value,
                "start_date": str(start_date),
                "end_date": str(end_date),
            })

            transactions = self.get_product_transactions(product_id, start_date, end_date)
            if not transactions and self.ledger.get_product(product_id) is None:
                logger.warning("valuation_unknown_product")

            report = calculate_inventory_cost(
                transactions=transactions,
                method=method,
                weighted_exit_order=self.weighted_exit_order,
            )

            logger.info("valuation_report_completed", extra={
                "method": method.value,
                "transactions": len(transactions),
                "remaining_stock": report.remaining_stock,
                "total_cost": str(report.total_cost),
            })

        return report
