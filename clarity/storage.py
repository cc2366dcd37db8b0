"""Persistence utilities for the expense ledger engine."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from decimal import InvalidOperation
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .exceptions import PersistenceError, ValidationError
from .models import Expense
from .validators import validate_expense

__all__ = ["STORAGE_KEY", "BlobStore", "ExpenseStore", "FileBlobStore", "MemoryBlobStore"]

STORAGE_KEY = "clarity-expenses-v1"

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Key-value store of text blobs."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the blob stored under ``key`` or ``None`` when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Overwrite the blob stored under ``key``."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Remove the blob stored under ``key``; absent keys are ignored."""


class MemoryBlobStore(BlobStore):
    """In-process blob store, handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._blobs: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def clear(self, key: str) -> None:
        self._blobs.pop(key, None)


class FileBlobStore(BlobStore):
    """File-based blob store with crash-safe writes, one ``<key>.json`` file per key."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._base_path / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Unable to read from %s: %s", path, exc)
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
            # Atomic on POSIX; readers never observe a half-written blob.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    def clear(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise PersistenceError(f"Unable to remove {self._path(key)}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path


class ExpenseStore:
    """Owns the authoritative expense collection and mirrors it to a blob store."""

    def __init__(self, blobs: BlobStore, key: str = STORAGE_KEY) -> None:
        self._blobs = blobs
        self._key = key
        self._records: Tuple[Expense, ...] = tuple(self.load())

    @property
    def records(self) -> Tuple[Expense, ...]:
        return self._records

    def load(self) -> List[Expense]:
        """Read the persisted collection; a missing or corrupt blob yields an empty list."""
        raw = self._blobs.get(self._key)
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"expected a list payload, got {type(payload).__name__}")
            return [validate_expense(Expense.from_dict(item)) for item in payload]
        except (
            ValidationError, ValueError, KeyError, TypeError, AttributeError, InvalidOperation
        ) as exc:
            logger.error("Failed to load expenses from %r, starting empty: %s", self._key, exc)
            return []

    def save(self, records: Iterable[Expense]) -> None:
        """Serialise the full collection and overwrite the blob."""
        payload = [expense.to_dict() for expense in records]
        self._blobs.set(self._key, json.dumps(payload, indent=2))
        logger.debug("Persisted %d expenses under %r", len(payload), self._key)

    def replace(self, records: Iterable[Expense]) -> Tuple[Expense, ...]:
        """Make ``records`` the held snapshot and persist it."""
        snapshot = tuple(records)
        self.save(snapshot)
        self._records = snapshot
        return snapshot

    def reload(self) -> Tuple[Expense, ...]:
        self._records = tuple(self.load())
        return self._records

    def reset(self) -> None:
        self._blobs.clear(self._key)
        self._records = ()
