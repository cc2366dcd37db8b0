"""Transient, display-only status messages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

__all__ = ["DEFAULT_TTL", "Notification", "active"]

DEFAULT_TTL = timedelta(seconds=2.2)

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: str
    message: str
    expires_at: datetime

    @classmethod
    def success(cls, message: str, now: datetime, ttl: timedelta = DEFAULT_TTL) -> "Notification":
        return cls(SUCCESS, message, now + ttl)

    @classmethod
    def error(cls, message: str, now: datetime, ttl: timedelta = DEFAULT_TTL) -> "Notification":
        return cls(ERROR, message, now + ttl)

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "message": self.message}


def active(notification: Optional[Notification], now: datetime) -> Optional[Notification]:
    """Return ``notification`` while it is unexpired, otherwise ``None``."""
    if notification is not None and notification.is_active(now):
        return notification
    return None
