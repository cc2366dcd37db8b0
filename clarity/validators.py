"""Validation helpers for expense drafts."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Optional

from .exceptions import (
    EmptyDescription,
    InvalidAmount,
    InvalidCategory,
    InvalidDate,
    MissingDate,
    ValidationError,
)
from .models import CATEGORIES, Expense, ExpenseDraft

__all__ = [
    "clean_draft",
    "parse_amount",
    "validate",
    "validate_category",
    "validate_date",
    "validate_description",
    "validate_expense",
]


def validate_description(value: object) -> str:
    trimmed = "" if value is None else str(value).strip()
    if not trimmed:
        raise EmptyDescription()
    return trimmed


def validate_date(value: object) -> str:
    """Return the date unchanged when it is a real ``yyyy-mm-dd`` calendar date."""
    if value is None or not str(value).strip():
        raise MissingDate()
    text = str(value).strip()
    # date.fromisoformat accepts other layouts on newer interpreters; pin the shape.
    if len(text) != 10 or text[4] != "-" or text[7] != "-":
        raise InvalidDate()
    try:
        date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDate() from exc
    return text


def parse_amount(raw: object) -> Decimal:
    """Convert raw input to a positive, finite Decimal."""
    if raw is None or isinstance(raw, bool):
        raise InvalidAmount()
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmount() from exc

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount()
    return amount


def validate_category(value: object, allowed: Iterable[str] = CATEGORIES) -> str:
    if not isinstance(value, str) or value not in allowed:
        raise InvalidCategory()
    return value


def clean_draft(draft: ExpenseDraft) -> Dict[str, object]:
    """Return the normalised mutable fields of ``draft`` or raise the first failure."""
    description = validate_description(draft.description)
    if draft.date is None or not str(draft.date).strip():
        raise MissingDate()
    amount = parse_amount(draft.amount)
    return {
        "description": description,
        "amount": amount,
        "date": validate_date(draft.date),
        "category": validate_category(draft.category),
    }


def validate(draft: ExpenseDraft) -> Optional[ValidationError]:
    """Return the first validation failure for ``draft``, or ``None`` when it is valid."""
    try:
        clean_draft(draft)
    except ValidationError as exc:
        return exc
    return None


def validate_expense(expense: Expense) -> Expense:
    """Check a stored record against the same rules as a fresh draft."""
    if not isinstance(expense.description, str):
        raise ValidationError("description must be a string")
    validate_description(expense.description)
    parse_amount(expense.amount)
    if not isinstance(expense.date, str):
        raise InvalidDate()
    validate_date(expense.date)
    validate_category(expense.category)
    return expense
