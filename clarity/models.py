"""Data models for the expense ledger domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Union

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORIES",
    "CategoryTotal",
    "Expense",
    "ExpenseDraft",
    "FilterSpec",
    "isoformat_utc",
    "parse_datetime",
]

CATEGORIES = (
    "Food",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Bills",
    "Other",
)

# Filter sentinel meaning "no category constraint".
ALL_CATEGORIES = "All"


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 string with trailing Z for UTC-aware datetimes."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    iso = dt.isoformat()
    return iso.replace("+00:00", "Z")


def parse_datetime(value: Union[str, int, float]) -> datetime:
    """Parse an ISO 8601 string (optional trailing Z) or epoch milliseconds into UTC."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        # Naive timestamps are treated as UTC.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class Expense:
    id: str
    description: str
    amount: Decimal
    category: str
    date: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": str(self.amount),
            "category": self.category,
            "date": self.date,
            "created_at": isoformat_utc(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data.

        Accepts both the current layout and the browser-era layout, where
        ``amount`` was a JSON number and ``createdAt`` held epoch milliseconds.
        """
        created = data["created_at"] if "created_at" in data else data["createdAt"]
        return cls(
            id=str(data["id"]),
            description=data["description"],
            amount=Decimal(str(data["amount"])),
            category=data["category"],
            date=data["date"],
            created_at=parse_datetime(created),
        )


@dataclass(frozen=True)
class ExpenseDraft:
    """Raw form fields, as typed by the user, before validation."""

    description: str = ""
    amount: Union[str, int, float, Decimal, None] = ""
    category: str = "Food"
    date: Optional[str] = None

    @classmethod
    def blank(cls, today: Optional[date] = None) -> "ExpenseDraft":
        today = today or date.today()
        return cls(date=today.isoformat())

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseDraft":
        return cls(
            description=expense.description,
            amount=str(expense.amount),
            category=expense.category,
            date=expense.date,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpenseDraft":
        return cls(
            description=data.get("description") or "",
            amount=data.get("amount"),
            category=data.get("category") or "Food",
            date=data.get("date"),
        )


@dataclass(frozen=True)
class FilterSpec:
    search: str = ""
    category: str = ALL_CATEGORIES
    date_from: str = ""
    date_to: str = ""

    @classmethod
    def from_params(cls, params: Dict[str, Optional[str]]) -> "FilterSpec":
        """Build a spec from query-string style keys (``search``, ``category``, ``from``, ``to``)."""
        return cls(
            search=params.get("search") or "",
            category=params.get("category") or ALL_CATEGORIES,
            date_from=params.get("from") or "",
            date_to=params.get("to") or "",
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "search": self.search,
            "category": self.category,
            "from": self.date_from,
            "to": self.date_to,
        }


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "total": f"{self.total:.2f}"}
