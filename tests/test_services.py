from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from clarity.exceptions import EmptyDescription, InvalidAmount, RecordNotFoundError
from clarity.models import ExpenseDraft, FilterSpec
from clarity.queries import filtered
from clarity.services import ExpenseService, create_expense, delete_expense, update_expense
from clarity.storage import ExpenseStore

from .conftest import EPOCH


def _draft(**overrides) -> ExpenseDraft:
    fields = {"description": "Lunch", "amount": "12.40", "category": "Food", "date": "2024-01-10"}
    fields.update(overrides)
    return ExpenseDraft(**fields)


class TestPureMutations:
    def test_create_prepends_without_touching_input(self, coffee):
        records = (coffee,)
        new_records, expense = create_expense(
            records, _draft(), id_factory=lambda: "new", clock=lambda: EPOCH
        )
        assert records == (coffee,)
        assert new_records == (expense, coffee)
        assert expense.id == "new"
        assert expense.created_at == EPOCH

    def test_update_unknown_id_returns_records_unchanged(self, coffee):
        records, updated = update_expense((coffee,), "missing", _draft())
        assert records == (coffee,)
        assert updated is None

    def test_delete_returns_new_tuple(self, coffee, bus):
        assert delete_expense((coffee, bus), "e-coffee") == (bus,)


class TestExpenseServiceCreate:
    def test_create_assigns_id_timestamp_and_trims(self, service):
        expense = service.create(_draft(description="  Lunch  "))
        assert expense.id == "id-1"
        assert expense.created_at == EPOCH
        assert expense.description == "Lunch"
        assert expense.amount == Decimal("12.40")

    def test_created_record_is_visible_exactly_once(self, service):
        expense = service.create(_draft())
        rows = filtered(service.records, FilterSpec())
        assert [row for row in rows if row.id == expense.id] == [expense]

    def test_ids_are_unique_with_default_factory(self, store):
        service = ExpenseService(store)
        ids = {service.create(_draft()).id for _ in range(25)}
        assert len(ids) == 25

    def test_new_records_come_first(self, service):
        first = service.create(_draft(description="First"))
        second = service.create(_draft(description="Second"))
        assert service.records == (second, first)

    def test_create_persists(self, service, blobs):
        expense = service.create(_draft())
        assert ExpenseStore(blobs).records == (expense,)

    def test_blank_description_leaves_collection_unchanged(self, service, coffee, store):
        store.replace([coffee])
        with pytest.raises(EmptyDescription):
            service.create(ExpenseDraft(description="  ", amount="10", category="Food", date="2024-01-01"))
        assert service.records == (coffee,)

    def test_negative_amount_leaves_collection_unchanged(self, service):
        with pytest.raises(InvalidAmount):
            service.create(ExpenseDraft(description="Rent", amount="-5", category="Bills", date="2024-01-01"))
        assert service.records == ()


class TestExpenseServiceUpdate:
    def test_update_preserves_id_and_created_at(self, service):
        original = service.create(_draft())
        updated = service.update(
            original.id,
            ExpenseDraft(description="Dinner", amount="30", category="Entertainment", date="2024-02-01"),
        )
        assert updated == replace(
            original,
            description="Dinner",
            amount=Decimal("30"),
            category="Entertainment",
            date="2024-02-01",
        )
        assert service.records == (updated,)

    def test_update_with_current_values_is_idempotent(self, service, blobs):
        original = service.create(_draft())
        before = blobs.get("clarity-expenses-v1")
        service.update(original.id, ExpenseDraft.from_expense(original))
        assert service.records == (original,)
        assert blobs.get("clarity-expenses-v1") == before

    def test_update_unknown_id_is_silent(self, service, coffee, store):
        store.replace([coffee])
        assert service.update("missing", _draft()) is None
        assert service.records == (coffee,)

    def test_update_keeps_position(self, service):
        older = service.create(_draft(description="Older"))
        newer = service.create(_draft(description="Newer"))
        service.update(older.id, _draft(description="Older, edited"))
        assert [expense.id for expense in service.records] == [newer.id, older.id]

    def test_invalid_update_changes_nothing(self, service):
        original = service.create(_draft())
        with pytest.raises(InvalidAmount):
            service.update(original.id, _draft(amount="zero"))
        assert service.records == (original,)


class TestExpenseServiceDelete:
    def test_delete_twice_is_idempotent(self, service):
        expense = service.create(_draft())
        assert service.delete(expense.id) is True
        assert service.delete(expense.id) is False
        assert service.records == ()

    def test_delete_persists(self, service, blobs):
        expense = service.create(_draft())
        service.delete(expense.id)
        assert ExpenseStore(blobs).records == ()


class TestExpenseServiceGet:
    def test_get_existing(self, service):
        expense = service.create(_draft())
        assert service.get(expense.id) == expense

    def test_get_missing_raises(self, service):
        with pytest.raises(RecordNotFoundError):
            service.get("missing")
