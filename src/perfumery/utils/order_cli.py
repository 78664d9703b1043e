"""
Manufacturing Order CLI Utility

Command-line interface for exporting, importing and inspecting
manufacturing orders without the desktop UI.

Usage Examples:
    # Export all orders
    python -m perfumery.utils.order_cli export orders.json

    # Import orders, skipping order numbers that already exist
    python -m perfumery.utils.order_cli import orders.json

    # Import with replace mode (deletes stored orders first)
    python -m perfumery.utils.order_cli import orders.json --mode replace

    # List orders, optionally by status
    python -m perfumery.utils.order_cli list --status QC

    # Print the production plan for one order
    python -m perfumery.utils.order_cli plan MO-20240501-001

    # Move an order to its next status
    python -m perfumery.utils.order_cli advance MO-20240501-001
"""

import argparse
import json
import sys

from perfumery.models.enums import OrderStatus
from perfumery.services import manufacturing_order_service
from perfumery.services.database import initialize_app_database
from perfumery.services.exceptions import ServiceError
from perfumery.services.manufacturing.lifecycle import NEXT_ACTION_LABELS
from perfumery.services.order_export_service import (
    ImportVersionError,
    export_orders_to_json,
    import_orders_from_json,
)


def export_orders(output_file: str):
    """Export all manufacturing orders."""
    print(f"Exporting manufacturing orders to {output_file}...")
    result = export_orders_to_json(output_file)

    if result.success:
        print(result.get_summary())
        return 0
    else:
        print(f"ERROR: {result.error}")
        return 1


def import_orders(input_file: str, mode: str = "merge"):
    """Import manufacturing orders from an export file."""
    print(f"Importing manufacturing orders from {input_file} (mode: {mode})...")

    try:
        result = import_orders_from_json(input_file, mode=mode)
    except (OSError, ValueError, ImportVersionError, ServiceError) as e:
        print(f"ERROR: {e}")
        return 1

    print(result.get_summary())
    if result.failed > 0:
        return 1
    return 0


def list_orders(status: str = None):
    """Print one line per stored order."""
    orders = manufacturing_order_service.list_orders(
        status=OrderStatus(status) if status else None
    )
    if not orders:
        print("No manufacturing orders found.")
        return 0

    for order in orders:
        print(
            f"{order.order_number:<16} {order.status.value:<12} "
            f"{order.units_requested:>6} x {order.bottle_size_ml:g} ml  {order.product_name}"
        )
    return 0


def print_plan(order_number: str):
    """Print the yield, scaled formula and stock table for one order."""
    try:
        plan = manufacturing_order_service.get_order_plan(order_number)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1

    order = plan.order
    order_yield = order.order_yield
    print(f"{order.order_number}  {order.product_name}  [{order.status.value}]")
    print(f"Batch: {order.batch_code}")
    print(
        f"Theoretical: {order_yield.theoretical_ml:.2f} ml  "
        f"Expected: {order_yield.expected_ml:.2f} ml  "
        f"({order_yield.expected_units} units)"
    )

    print("\nFormula:")
    for scaled, row in zip(plan.scaled_lines, plan.materials):
        flag = "OK" if row.is_sufficient else f"SHORT {row.shortfall:.2f}"
        print(
            f"  {scaled.line.percentage:>6.2f}%  {row.material_name:<30} "
            f"{scaled.required_ml:>10.2f} ml {scaled.required_g:>10.2f} g  "
            f"stock {row.available:.2f} {row.unit}  {flag}"
        )

    if plan.packaging:
        print("\nPackaging:")
        for row in plan.packaging:
            flag = "OK" if row.is_sufficient else f"SHORT {row.shortfall:g}"
            print(f"  {row.name:<30} need {row.required:g}  stock {row.available:g}  {flag}")

    label = NEXT_ACTION_LABELS.get(order.status)
    if label:
        print(f"\nNext step: {label}")
    if plan.has_shortage:
        print("WARNING: insufficient stock at the order's branch")
    return 0


def advance_order(order_number: str):
    """Move an order to its next status."""
    try:
        result = manufacturing_order_service.advance_order_status(order_number)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1

    print(result.message)
    if result.errors:
        print(json.dumps(result.errors, indent=2, ensure_ascii=False))
    return 0 if result.accepted else 1


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Manufacturing order utility for the Perfumery Manufacturing Tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Export all orders:
    python -m perfumery.utils.order_cli export orders.json

  Import orders (merge is the default):
    python -m perfumery.utils.order_cli import orders.json --mode replace

  Production plan for one order:
    python -m perfumery.utils.order_cli plan MO-20240501-001
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    export_parser = subparsers.add_parser("export", help="Export all manufacturing orders")
    export_parser.add_argument("file", help="JSON file path")

    import_parser = subparsers.add_parser("import", help="Import manufacturing orders")
    import_parser.add_argument("file", help="JSON file path")
    import_parser.add_argument(
        "--mode",
        choices=["merge", "replace"],
        default="merge",
        help="Import mode: 'merge' (default) skips existing orders, 'replace' deletes them first",
    )

    list_parser = subparsers.add_parser("list", help="List manufacturing orders")
    list_parser.add_argument(
        "--status",
        choices=[status.value for status in OrderStatus],
        help="Only orders in this status",
    )

    plan_parser = subparsers.add_parser("plan", help="Show the production plan for an order")
    plan_parser.add_argument("order_number", help="Order number (MO-YYYYMMDD-NNN)")

    advance_parser = subparsers.add_parser("advance", help="Move an order to its next status")
    advance_parser.add_argument("order_number", help="Order number (MO-YYYYMMDD-NNN)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 1

    initialize_app_database()

    if args.command == "export":
        return export_orders(args.file)
    elif args.command == "import":
        return import_orders(args.file, mode=args.mode)
    elif args.command == "list":
        return list_orders(args.status)
    elif args.command == "plan":
        return print_plan(args.order_number)
    elif args.command == "advance":
        return advance_order(args.order_number)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
