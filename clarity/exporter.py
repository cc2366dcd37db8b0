"""CSV export of expense listings."""

from __future__ import annotations

import csv
import io
import logging
from decimal import ROUND_HALF_UP, Context, Decimal
from pathlib import Path
from typing import Optional, Sequence

from .exceptions import PersistenceError
from .models import Expense

__all__ = [
    "EXPORT_FILENAME",
    "EXPORT_HEADER",
    "EXPORT_MIMETYPE",
    "format_amount",
    "to_delimited_text",
    "write_export",
]

EXPORT_FILENAME = "expenses.csv"
EXPORT_MIMETYPE = "text/csv"
EXPORT_HEADER = ("Description", "Amount", "Category", "Date")

logger = logging.getLogger(__name__)


TWO_PLACES = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    """Two-decimal rendering, rounding halves up.

    The context grows with the amount so large values never overflow the
    default 28-digit precision.
    """
    context = Context(prec=max(amount.adjusted() + 4, 28), rounding=ROUND_HALF_UP)
    return str(amount.quantize(TWO_PLACES, context=context))


def to_delimited_text(records: Sequence[Expense]) -> Optional[str]:
    """Render ``records`` as CSV in the order given, or ``None`` when there is nothing to export.

    The header is bare; every data field is quoted, with embedded quotes doubled.
    """
    if not records:
        return None
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(EXPORT_HEADER)
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for expense in records:
        writer.writerow(
            [expense.description, format_amount(expense.amount), expense.category, expense.date]
        )
    return buffer.getvalue().rstrip("\n")


def write_export(records: Sequence[Expense], path: Path) -> bool:
    """Write the CSV for ``records`` to ``path``; returns False without writing when empty."""
    text = to_delimited_text(records)
    if text is None:
        return False
    try:
        Path(path).write_text(text, encoding="utf-8", newline="")
    except OSError as exc:
        raise PersistenceError(f"Unable to write export to {path}") from exc
    logger.info("Exported %d expenses to %s", len(records), path)
    return True
