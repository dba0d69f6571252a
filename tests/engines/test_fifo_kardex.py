"""
Tests for the FIFO kardex (running purchase / sale / balance ledger).
"""

from datetime import datetime
from decimal import Decimal

from inventory_engines.valuation import KardexCell, build_fifo_kardex, calculate_inventory_cost
from inventory_kernel.domain.ledger import TransactionType


class TestKardexRows:

    def test_one_row_per_transaction_in_date_order(self, make_transaction):
        e2 = make_transaction("entry", 10, "2024-01-02", "3")
        x1 = make_transaction("exit", 15, "2024-01-03")
        e1 = make_transaction("entry", 10, "2024-01-01", "2")

        rows = build_fifo_kardex([e2, x1, e1])

        assert [row.transaction_id for row in rows] == [e1.id, e2.id, x1.id]
        assert [row.type for row in rows] == [
            TransactionType.ENTRY, TransactionType.ENTRY, TransactionType.EXIT,
        ]

    def test_purchase_sale_and_balance_columns(self, make_transaction):
        rows = build_fifo_kardex([
            make_transaction("entry", 10, "2024-01-01", "2"),
            make_transaction("entry", 10, "2024-01-02", "3"),
            make_transaction("exit", 15, "2024-01-03", notes="Invoice 88"),
        ])

        first, second, sale_row = rows

        assert first.purchase == KardexCell(10, Decimal("2"), Decimal("20"))
        assert first.sale is None
        assert first.balance == KardexCell(10, Decimal("2"), Decimal("20"))

        assert second.balance == KardexCell(20, Decimal("2.5"), Decimal("50"))

        assert sale_row.purchase is None
        assert sale_row.sale.quantity == 15
        assert sale_row.sale.total_cost == Decimal("35")
        assert sale_row.sale.unit_cost == Decimal("35") / Decimal("15")
        assert sale_row.balance == KardexCell(5, Decimal("3"), Decimal("15"))
        assert sale_row.shortfall == 0
        assert sale_row.notes == "Invoice 88"

    def test_same_date_keeps_ledger_order(self, make_transaction):
        entry = make_transaction("entry", 5, "2024-03-01", "4")
        exit_ = make_transaction("exit", 5, "2024-03-01")

        rows = build_fifo_kardex([entry, exit_])

        assert rows[1].sale.quantity == 5
        assert rows[1].balance == KardexCell(0, Decimal("0"), Decimal("0"))

    def test_exit_before_window_stock_reports_shortfall(self, make_transaction, captured_logs):
        """An exit whose covering entry lies outside the window cannot be fully costed."""
        rows = build_fifo_kardex([
            make_transaction("exit", 4, "2024-01-01"),
            make_transaction("entry", 10, "2024-01-02", "1"),
        ])

        exit_row, entry_row = rows
        assert exit_row.sale == KardexCell(0, Decimal("0"), Decimal("0"))
        assert exit_row.shortfall == 4
        assert exit_row.balance.quantity == 0
        assert entry_row.balance.quantity == 10

        warnings = [r for r in captured_logs() if r["message"] == "kardex_uncovered_exits"]
        assert warnings and warnings[0]["uncovered_rows"] == 1

    def test_empty(self):
        assert build_fifo_kardex([]) == ()


class TestKardexInReport:

    def test_final_balance_matches_summary_when_covered(self, make_transaction):
        ledger = [
            make_transaction("entry", 8, "2024-05-01", "1.25"),
            make_transaction("exit", 3, "2024-05-02"),
            make_transaction("entry", 6, "2024-05-03", "2"),
            make_transaction("exit", 7, "2024-05-04"),
        ]

        report = calculate_inventory_cost(transactions=ledger, method="fifo")

        final = report.kardex[-1].balance
        assert final.quantity == report.remaining_stock == 4
        assert final.total_cost == report.total_cost == Decimal("8")

    def test_row_dates_are_transaction_dates(self, make_transaction):
        ledger = [make_transaction("entry", 1, "2024-05-01T09:15:00", "1")]

        report = calculate_inventory_cost(transactions=ledger, method="fifo")

        assert report.kardex[0].date == datetime(2024, 5, 1, 9, 15)
