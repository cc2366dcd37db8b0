"""Core expense ledger engine: store, mutations, queries and export."""

from .controller import LedgerController, LedgerView
from .exceptions import (
    EmptyDescription,
    InvalidAmount,
    InvalidCategory,
    InvalidDate,
    MissingDate,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from .exporter import EXPORT_FILENAME, to_delimited_text
from .models import ALL_CATEGORIES, CATEGORIES, CategoryTotal, Expense, ExpenseDraft, FilterSpec
from .queries import filtered, monthly_spent, top_category, total_spent, totals_by_category
from .services import ExpenseService
from .storage import STORAGE_KEY, ExpenseStore, FileBlobStore, MemoryBlobStore
from .validators import validate

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORIES",
    "EXPORT_FILENAME",
    "STORAGE_KEY",
    "CategoryTotal",
    "EmptyDescription",
    "Expense",
    "ExpenseDraft",
    "ExpenseService",
    "ExpenseStore",
    "FileBlobStore",
    "FilterSpec",
    "InvalidAmount",
    "InvalidCategory",
    "InvalidDate",
    "LedgerController",
    "LedgerView",
    "MemoryBlobStore",
    "MissingDate",
    "PersistenceError",
    "RecordNotFoundError",
    "ValidationError",
    "filtered",
    "monthly_spent",
    "to_delimited_text",
    "top_category",
    "total_spent",
    "totals_by_category",
    "validate",
]
