"""Top-level controller holding the ledger's application state."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from .exceptions import ValidationError
from .exporter import to_delimited_text
from .models import Expense, ExpenseDraft, FilterSpec
from .notifications import DEFAULT_TTL, Notification, active
from .queries import Summary, filtered, summarize
from .services import ExpenseService
from .storage import BlobStore, ExpenseStore

__all__ = ["LedgerController", "LedgerView"]


@dataclass(frozen=True)
class LedgerView:
    """Everything a surface needs to render one frame of the ledger."""

    filters: FilterSpec
    rows: List[Expense]
    summary: Summary
    can_export: bool

    @property
    def count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filters": self.filters.to_dict(),
            "items": [expense.to_dict() for expense in self.rows],
            "count": self.count,
            "summary": self.summary.to_dict(),
            "can_export": self.can_export,
        }


class LedgerController:
    """Owns the filter spec, the draft form, the edit target and the notification.

    Surfaces call into the controller on user intent and render whatever
    :meth:`view` returns; they keep no business state of their own.
    """

    def __init__(
        self,
        service: ExpenseService,
        *,
        notification_ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.service = service
        self.filters = FilterSpec()
        self.draft = ExpenseDraft.blank()
        self.editing_id: Optional[str] = None
        self.notification: Optional[Notification] = None
        self._ttl = notification_ttl
        self._clock = clock

    @classmethod
    def open(cls, blobs: BlobStore, *, notification_ttl: timedelta = DEFAULT_TTL) -> "LedgerController":
        """Load the persisted collection from ``blobs`` and wrap it in a controller."""
        return cls(ExpenseService(ExpenseStore(blobs)), notification_ttl=notification_ttl)

    # Form -----------------------------------------------------------------
    def edit_draft(self, **changes: Any) -> ExpenseDraft:
        self.draft = replace(self.draft, **changes)
        return self.draft

    def reset_form(self) -> None:
        self.draft = ExpenseDraft.blank()
        self.editing_id = None

    def start_edit(self, expense_id: str) -> ExpenseDraft:
        expense = self.service.get(expense_id)
        self.editing_id = expense.id
        self.draft = ExpenseDraft.from_expense(expense)
        return self.draft

    def cancel_edit(self) -> None:
        self.reset_form()

    def submit(self) -> Optional[Expense]:
        """Create or update from the draft; on failure the draft is kept for correction."""
        now = self._clock()
        try:
            if self.editing_id:
                expense = self.service.update(self.editing_id, self.draft)
                if expense is None:
                    # The record went away while being edited; nothing was updated.
                    self.notification = None
                    self.reset_form()
                    return None
                message = "Expense updated"
            else:
                expense = self.service.create(self.draft)
                message = "Expense added"
        except ValidationError as exc:
            self.notification = Notification.error(exc.message, now, self._ttl)
            return None
        self.notification = Notification.success(message, now, self._ttl)
        self.reset_form()
        return expense

    def delete(self, expense_id: str) -> bool:
        removed = self.service.delete(expense_id)
        if self.editing_id == expense_id:
            self.reset_form()
        return removed

    # Filters --------------------------------------------------------------
    def set_filters(self, **changes: str) -> FilterSpec:
        self.filters = replace(self.filters, **changes)
        return self.filters

    def clear_filters(self) -> FilterSpec:
        self.filters = FilterSpec()
        return self.filters

    # Views ----------------------------------------------------------------
    def active_notification(self, now: Optional[datetime] = None) -> Optional[Notification]:
        return active(self.notification, now or self._clock())

    def visible_rows(self) -> List[Expense]:
        return filtered(self.service.records, self.filters)

    def view(self, today: Optional[date] = None) -> LedgerView:
        records = self.service.records
        return LedgerView(
            filters=self.filters,
            rows=filtered(records, self.filters),
            summary=summarize(records, today or date.today()),
            can_export=bool(records),
        )

    def export_csv(self) -> Optional[str]:
        """CSV of the current filtered rows; ``None`` when the ledger is empty."""
        if not self.service.records:
            return None
        return to_delimited_text(self.visible_rows())
