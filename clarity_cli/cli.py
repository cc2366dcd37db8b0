"""Console interface for the expense ledger."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from clarity.config import Settings
from clarity.controller import LedgerController
from clarity.exceptions import PersistenceError, RecordNotFoundError
from clarity.exporter import EXPORT_FILENAME, write_export
from clarity.logging_config import setup_logging
from clarity.models import ALL_CATEGORIES, CATEGORIES, Expense
from clarity.storage import FileBlobStore


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _format_money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _format_expense(expense: Expense) -> str:
    return (
        f"[{expense.id}] {expense.date} {_format_money(expense.amount)}\n"
        f"  Category: {expense.category}\n"
        f"  Description: {expense.description}\n"
    )


def _load_controller(settings: Settings) -> LedgerController:
    return LedgerController.open(
        FileBlobStore(settings.data_dir), notification_ttl=settings.notification_ttl
    )


def _report(ledger: LedgerController) -> int:
    """Print the notification left by the last submit; exit status 1 for errors."""
    notification = ledger.notification
    if notification is None:
        return 0
    if notification.kind == "error":
        print(f"Validation error: {notification.message}", file=sys.stderr)
        return 1
    print(notification.message)
    return 0


def _apply_filters(args: argparse.Namespace, ledger: LedgerController) -> None:
    ledger.set_filters(
        search=args.search or "",
        category=args.category or ALL_CATEGORIES,
        date_from=args.date_from or "",
        date_to=args.date_to or "",
    )


def handle_add(args: argparse.Namespace, ledger: LedgerController) -> int:
    ledger.edit_draft(
        description=args.description,
        amount=args.amount,
        category=args.category,
        date=args.date or date.today().isoformat(),
    )
    expense = ledger.submit()
    status = _report(ledger)
    if expense is not None:
        print(_format_expense(expense))
    return status


def handle_edit(args: argparse.Namespace, ledger: LedgerController) -> int:
    try:
        ledger.start_edit(args.id)
    except RecordNotFoundError:
        # Unknown ids are not an error; there is simply nothing to edit.
        print(f"No expense {args.id}; nothing to update.")
        return 0
    changes = {
        "description": args.description,
        "amount": args.amount,
        "category": args.category,
        "date": args.date,
    }
    ledger.edit_draft(**{k: v for k, v in changes.items() if v is not None})
    expense = ledger.submit()
    status = _report(ledger)
    if expense is not None:
        print(_format_expense(expense))
    return status


def handle_delete(args: argparse.Namespace, ledger: LedgerController) -> int:
    if ledger.delete(args.id):
        print(f"Expense {args.id} deleted.")
    else:
        print(f"No expense {args.id}; nothing to delete.")
    return 0


def handle_list(args: argparse.Namespace, ledger: LedgerController) -> int:
    _apply_filters(args, ledger)
    view = ledger.view()
    if not view.rows:
        print("No expenses match your filters.")
        return 0
    total = sum((expense.amount for expense in view.rows), start=Decimal("0"))
    suffix = "" if view.count == 1 else "s"
    print(f"{view.count} result{suffix} (total {_format_money(total)}):")
    for expense in view.rows:
        print(_format_expense(expense))
    return 0


def handle_summary(args: argparse.Namespace, ledger: LedgerController) -> int:
    summary = ledger.view(today=date.fromisoformat(args.today) if args.today else None).summary
    print(f"Total spend:  {_format_money(summary.total_spent)}")
    print(f"This month:   {_format_money(summary.monthly_spent)} ({summary.month})")
    if summary.has_top_category:
        top = summary.top_category
        print(f"Top category: {top.category} ({_format_money(top.total)})")
    else:
        print("Top category: - (no data)")
    print("By category:")
    for entry in summary.totals:
        print(f"  {entry.category:<15} {_format_money(entry.total)}")
    return 0


def handle_export(args: argparse.Namespace, ledger: LedgerController) -> int:
    _apply_filters(args, ledger)
    if not ledger.view().can_export or not write_export(ledger.visible_rows(), args.output):
        print("Nothing to export.")
        return 0
    print(f"Exported to {args.output}")
    return 0


def handle_categories(args: argparse.Namespace, ledger: LedgerController) -> int:
    for category in CATEGORIES:
        print(category)
    return 0


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", help="Case-insensitive text to find in descriptions")
    parser.add_argument("--category", choices=(ALL_CATEGORIES, *CATEGORIES))
    parser.add_argument("--from", dest="date_from", type=_parse_date)
    parser.add_argument("--to", dest="date_to", type=_parse_date)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clarity expense ledger")
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding the ledger data (default: $CLARITY_DATA_DIR or ./data)",
    )
    parser.add_argument("--log-level", help="Logging level (default: $CLARITY_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Record a new expense")
    add.add_argument("description")
    add.add_argument("amount")
    add.add_argument("--category", default=CATEGORIES[0], choices=CATEGORIES)
    add.add_argument("--date", help="YYYY-MM-DD (default: today)")
    add.set_defaults(handler=handle_add)

    edit = subparsers.add_parser("edit", help="Edit an existing expense")
    edit.add_argument("id")
    edit.add_argument("--description")
    edit.add_argument("--amount")
    edit.add_argument("--category", choices=CATEGORIES)
    edit.add_argument("--date")
    edit.set_defaults(handler=handle_edit)

    delete = subparsers.add_parser("delete", help="Delete an expense")
    delete.add_argument("id")
    delete.set_defaults(handler=handle_delete)

    listing = subparsers.add_parser("list", help="List expenses, newest first")
    _add_filter_arguments(listing)
    listing.set_defaults(handler=handle_list)

    summary = subparsers.add_parser("summary", help="Show spending summary")
    summary.add_argument("--today", type=_parse_date, help="Reference date for 'this month'")
    summary.set_defaults(handler=handle_summary)

    export = subparsers.add_parser("export", help="Export filtered expenses to CSV")
    _add_filter_arguments(export)
    export.add_argument("--output", type=Path, default=Path(EXPORT_FILENAME))
    export.set_defaults(handler=handle_export)

    categories = subparsers.add_parser("categories", help="List the expense categories")
    categories.set_defaults(handler=handle_categories)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env()
    setup_logging(args.log_level or settings.log_level, stream=sys.stderr)
    if args.data_dir is not None:
        settings = replace(settings, data_dir=args.data_dir)

    try:
        ledger = _load_controller(settings)
        return args.handler(args, ledger)
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
