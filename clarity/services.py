"""Framework-agnostic mutation services for the expense ledger."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Tuple
from uuid import uuid4

from .exceptions import RecordNotFoundError
from .models import Expense, ExpenseDraft
from .storage import ExpenseStore
from .validators import clean_draft

__all__ = ["ExpenseService", "create_expense", "delete_expense", "update_expense"]

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_expense(
    records: Iterable[Expense],
    draft: ExpenseDraft,
    *,
    id_factory: IdFactory = _new_id,
    clock: Clock = _utcnow,
) -> Tuple[Tuple[Expense, ...], Expense]:
    """Validate ``draft`` and return ``(new_records, expense)`` with the expense prepended."""
    data = clean_draft(draft)
    expense = Expense(id=id_factory(), created_at=clock(), **data)
    return (expense, *records), expense


def update_expense(
    records: Iterable[Expense], expense_id: str, draft: ExpenseDraft
) -> Tuple[Tuple[Expense, ...], Optional[Expense]]:
    """Overwrite the mutable fields of ``expense_id``; unknown ids leave the records as given."""
    data = clean_draft(draft)
    updated: Optional[Expense] = None
    result = []
    for expense in records:
        if expense.id == expense_id:
            expense = replace(expense, **data)
            updated = expense
        result.append(expense)
    return tuple(result), updated


def delete_expense(records: Iterable[Expense], expense_id: str) -> Tuple[Expense, ...]:
    return tuple(expense for expense in records if expense.id != expense_id)


class ExpenseService:
    """Applies validated create/update/delete operations to an ExpenseStore."""

    def __init__(
        self,
        store: ExpenseStore,
        *,
        id_factory: IdFactory = _new_id,
        clock: Clock = _utcnow,
    ) -> None:
        self._store = store
        self._id_factory = id_factory
        self._clock = clock

    @property
    def records(self) -> Tuple[Expense, ...]:
        return self._store.records

    # Public API -----------------------------------------------------------
    def create(self, draft: ExpenseDraft) -> Expense:
        records, expense = create_expense(
            self._store.records, draft, id_factory=self._id_factory, clock=self._clock
        )
        self._store.replace(records)
        logger.info("Expense %s added (%s %s)", expense.id, expense.category, expense.amount)
        return expense

    def update(self, expense_id: str, draft: ExpenseDraft) -> Optional[Expense]:
        """Return the updated expense, or ``None`` when ``expense_id`` is unknown."""
        records, updated = update_expense(self._store.records, expense_id, draft)
        self._store.replace(records)
        if updated is None:
            logger.debug("Ignoring update of unknown expense %s", expense_id)
        else:
            logger.info("Expense %s updated", expense_id)
        return updated

    def delete(self, expense_id: str) -> bool:
        """Remove ``expense_id``; returns whether a record was removed."""
        before = self._store.records
        records = self._store.replace(delete_expense(before, expense_id))
        removed = len(records) != len(before)
        if removed:
            logger.info("Expense %s deleted", expense_id)
        else:
            logger.debug("Ignoring delete of unknown expense %s", expense_id)
        return removed

    def get(self, expense_id: str) -> Expense:
        """Return an expense or raise if it does not exist."""
        for expense in self._store.records:
            if expense.id == expense_id:
                return expense
        raise RecordNotFoundError(f"Expense {expense_id} not found")
