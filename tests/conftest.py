from __future__ import annotations

import itertools
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from clarity.models import Expense
from clarity.services import ExpenseService
from clarity.storage import ExpenseStore, MemoryBlobStore

EPOCH = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _drop_app_log_handlers():
    """Entry points reconfigure root logging; keep their handlers from outliving a test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


def make_expense(
    id: str,
    description: str,
    amount: str,
    category: str,
    date: str,
    created_at: datetime = EPOCH,
) -> Expense:
    return Expense(
        id=id,
        description=description,
        amount=Decimal(amount),
        category=category,
        date=date,
        created_at=created_at,
    )


@pytest.fixture
def coffee() -> Expense:
    return make_expense("e-coffee", "Coffee", "4.50", "Food", "2024-01-05")


@pytest.fixture
def bus() -> Expense:
    return make_expense("e-bus", "Bus", "2.75", "Transportation", "2024-01-06")


@pytest.fixture
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def store(blobs: MemoryBlobStore) -> ExpenseStore:
    return ExpenseStore(blobs)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def clock():
    ticks = itertools.count()
    return lambda: EPOCH + timedelta(seconds=next(ticks))


@pytest.fixture
def service(store: ExpenseStore, id_factory, clock) -> ExpenseService:
    return ExpenseService(store, id_factory=id_factory, clock=clock)
