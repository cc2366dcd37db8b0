"""Read-side views over the expense collection.

Every function here is pure: results are derived from the records and the
filter spec passed in, never from cached state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from .models import ALL_CATEGORIES, CATEGORIES, CategoryTotal, Expense, FilterSpec

__all__ = [
    "Summary",
    "category_shares",
    "filtered",
    "month_key",
    "monthly_spent",
    "summarize",
    "top_category",
    "total_spent",
    "totals_by_category",
]

ZERO = Decimal("0")

# Smallest bar width, in percent, so empty categories still render a sliver.
MIN_SHARE_PERCENT = Decimal("6")


def filtered(records: Iterable[Expense], spec: FilterSpec) -> List[Expense]:
    """Return the records matching ``spec``, newest date first.

    Dates compare as ``yyyy-mm-dd`` strings. The sort is stable, so records
    sharing a date keep their collection order (newest created first).
    """
    search = spec.search.strip().lower()

    def matches(expense: Expense) -> bool:
        if spec.category != ALL_CATEGORIES and expense.category != spec.category:
            return False
        if search not in expense.description.lower():
            return False
        if spec.date_from and expense.date < spec.date_from:
            return False
        if spec.date_to and expense.date > spec.date_to:
            return False
        return True

    return sorted(filter(matches, records), key=lambda exp: exp.date, reverse=True)


def totals_by_category(records: Iterable[Expense]) -> List[CategoryTotal]:
    sums: Dict[str, Decimal] = {category: ZERO for category in CATEGORIES}
    for expense in records:
        if expense.category in sums:
            sums[expense.category] += expense.amount
    return [CategoryTotal(category, sums[category]) for category in CATEGORIES]


def total_spent(records: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in records), start=ZERO)


def month_key(today: date) -> str:
    return f"{today.year:04d}-{today.month:02d}"


def monthly_spent(records: Iterable[Expense], year_month: str) -> Decimal:
    """Sum the amounts of records dated within ``year_month`` (``yyyy-mm``)."""
    return sum(
        (expense.amount for expense in records if expense.date.startswith(year_month)),
        start=ZERO,
    )


def top_category(totals: Sequence[CategoryTotal]) -> CategoryTotal:
    """Return the largest total; ties and the all-zero case go to the earliest category."""
    if not totals:
        return CategoryTotal(CATEGORIES[0], ZERO)
    top = totals[0]
    for current in totals[1:]:
        if current.total > top.total:
            top = current
    return top


def category_shares(totals: Sequence[CategoryTotal]) -> List[Tuple[str, Decimal, Decimal]]:
    """Return ``(category, total, percent)`` bar widths relative to the largest total."""
    ceiling = max([entry.total for entry in totals] + [Decimal("1")])
    shares = []
    for entry in totals:
        percent = max(entry.total / ceiling * 100, MIN_SHARE_PERCENT)
        shares.append((entry.category, entry.total, percent))
    return shares


@dataclass(frozen=True)
class Summary:
    total_spent: Decimal
    month: str
    monthly_spent: Decimal
    top_category: CategoryTotal
    totals: Tuple[CategoryTotal, ...]

    @property
    def has_top_category(self) -> bool:
        return self.top_category.total > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_spent": f"{self.total_spent:.2f}",
            "month": self.month,
            "monthly_spent": f"{self.monthly_spent:.2f}",
            "top_category": self.top_category.to_dict() if self.has_top_category else None,
            "categories": [
                {"category": category, "total": f"{total:.2f}", "percent": f"{percent:.1f}"}
                for category, total, percent in category_shares(self.totals)
            ],
        }


def summarize(records: Sequence[Expense], today: date) -> Summary:
    """Compute the summary cards over the whole, unfiltered collection."""
    totals = totals_by_category(records)
    month = month_key(today)
    return Summary(
        total_spent=total_spent(records),
        month=month,
        monthly_spent=monthly_spent(records, month),
        top_category=top_category(totals),
        totals=tuple(totals),
    )
