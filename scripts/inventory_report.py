#!/usr/bin/env python3
"""
Print an inventory valuation report for one product.

Opens the ledger described by a YAML config (or the defaults), values the
product's stock over an inclusive date window, and prints the summary.
FIFO reports also print the kardex: purchases, sales and the running
balance after each transaction.

Usage:
    python3 scripts/inventory_report.py --product <id> [options]

Examples:
    # Weighted-average over the whole of 2024
    python3 scripts/inventory_report.py --config ledger.yaml \\
        --product 0b6c... --method weighted --start 2024-01-01 --end 2024-12-31

    # FIFO with kardex, using the Spanish method label
    python3 scripts/inventory_report.py --config ledger.yaml --product 0b6c... --method PEPS

    # Export the whole ledger document
    python3 scripts/inventory_report.py --config ledger.yaml --export ledger.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path

import yaml
from sqlalchemy.exc import SQLAlchemyError

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from inventory_config import get_active_config  # noqa: E402
from inventory_engines.valuation import CostMethod, KardexCell, ValuationReport  # noqa: E402
from inventory_kernel.exceptions import InventoryKernelError  # noqa: E402
from inventory_kernel.logging_config import configure_logging  # noqa: E402
from inventory_kernel.snapshot import dump_snapshot  # noqa: E402
from inventory_services.bootstrap import open_ledger  # noqa: E402

METHOD_TITLES = {
    CostMethod.FIFO: "First In, First Out (FIFO / PEPS)",
    CostMethod.LIFO: "Last In, First Out (LIFO / UEPS)",
    CostMethod.WEIGHTED: "Weighted Average Cost",
}

W = 100


def fmt_money(value: Decimal) -> str:
    """Format a monetary value with two decimals (e.g. $1,234.50)."""
    return f"${Decimal(value):,.2f}"


def _cell(cell: KardexCell | None) -> str:
    if cell is None:
        return f"{'-':>6} {'-':>10} {'-':>11}"
    return f"{cell.quantity:>6} {fmt_money(cell.unit_cost):>10} {fmt_money(cell.total_cost):>11}"


def print_summary(report: ValuationReport, product_name: str, start: str, end: str) -> None:
    print()
    print("=" * W)
    print("  INVENTORY REPORT".center(W))
    print("=" * W)
    print(f"  Product:       {product_name}")
    print(f"  Method:        {METHOD_TITLES[report.method]}")
    print(f"  Period:        {start} - {end}")
    print()
    print(f"  Final stock:   {report.remaining_stock} units")
    print(f"  Total cost:    {fmt_money(report.total_cost)}")
    print(f"  Average cost:  {fmt_money(report.average_cost)}")
    print()


def print_movements(report: ValuationReport) -> None:
    print(f"  ENTRIES ({len(report.entries)})")
    print(f"  {'Date':<12} {'Qty':>6} {'Unit cost':>12} {'Total':>14}")
    for entry in report.entries:
        print(
            f"  {entry.date.date().isoformat():<12} {entry.quantity:>6} "
            f"{fmt_money(entry.unit_cost):>12} {fmt_money(entry.total_cost):>14}"
        )
    print()
    print(f"  EXITS ({len(report.exits)})")
    print(f"  {'Date':<12} {'Qty':>6}")
    for exit_ in report.exits:
        print(f"  {exit_.date.date().isoformat():<12} {exit_.quantity:>6}")
    print()


def print_kardex(report: ValuationReport) -> None:
    print("  KARDEX")
    print(f"  {'Date':<12} {'Purchases':^29} {'Sales':^29} {'Balance':^29}")
    print("  " + "-" * (W - 4))
    for row in report.kardex:
        line = f"  {row.date.date().isoformat():<12} {_cell(row.purchase)} {_cell(row.sale)} {_cell(row.balance)}"
        if row.shortfall:
            line += f"  (uncovered: {row.shortfall})"
        print(line)
    print()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print an inventory valuation report (FIFO, LIFO or weighted average).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Ledger YAML configuration (default: in-memory ledger, no seed).",
    )
    parser.add_argument(
        "--product",
        default=None,
        help="Product id to value.",
    )
    parser.add_argument(
        "--method",
        default="weighted",
        help="fifo | lifo | weighted (PEPS / UEPS accepted). Default: weighted.",
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=date.min,
        help="Window start date, inclusive (YYYY-MM-DD). Default: no lower bound.",
    )
    parser.add_argument(
        "--end",
        type=date.fromisoformat,
        default=date.today(),
        help="Window end date, inclusive (YYYY-MM-DD). Default: today.",
    )
    parser.add_argument(
        "--export",
        type=Path,
        default=None,
        help="Write the ledger document to this JSON file.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at the configured level (default: warnings only).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if not args.verbose:
        # Warnings only; open_ledger's configure_logging() is then a no-op
        configure_logging(level=logging.WARNING)

    if args.product is None and args.export is None:
        print("ERROR: nothing to do; pass --product and/or --export", file=sys.stderr)
        return 2

    try:
        method = CostMethod.parse(args.method)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    try:
        config = get_active_config(args.config)
        session = open_ledger(config)
    except (InventoryKernelError, OSError, yaml.YAMLError, SQLAlchemyError) as exc:
        print(f"ERROR: could not open ledger: {exc}", file=sys.stderr)
        return 1

    with session:
        if args.export is not None:
            path = dump_snapshot(session.ledger.snapshot(), args.export)
            print(f"  Ledger exported to {path}")

        if args.product is None:
            return 0

        product = session.ledger.get_product(args.product)
        if product is None:
            print(f"ERROR: unknown product: {args.product}", file=sys.stderr)
            return 1

        # --end covers the whole day
        end = datetime.combine(args.end, time.max)
        report = session.valuation.calculate_inventory_cost(
            product.id, method, args.start, end,
        )
        print_summary(report, product.name, args.start.isoformat(), args.end.isoformat())
        if report.has_kardex:
            print_kardex(report)
        else:
            print_movements(report)

    return 0


if __name__ == "__main__":
    sys.exit(main())
