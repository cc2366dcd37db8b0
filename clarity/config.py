"""Environment-driven settings for the ledger entry points."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import List, Mapping, Optional

from .notifications import DEFAULT_TTL

logger = logging.getLogger(__name__)


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _parse_ttl(raw: Optional[str]) -> timedelta:
    if not raw:
        return DEFAULT_TTL
    try:
        seconds = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid CLARITY_NOTIFICATION_TTL %r", raw)
        return DEFAULT_TTL
    if seconds <= 0:
        logger.warning("Ignoring non-positive CLARITY_NOTIFICATION_TTL %r", raw)
        return DEFAULT_TTL
    return timedelta(seconds=seconds)


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    env: str = "prod"
    allowed_origins: List[str] = field(default_factory=list)
    log_level: str = "INFO"
    notification_ttl: timedelta = DEFAULT_TTL

    @property
    def is_dev(self) -> bool:
        return self.env in {"dev", "development"}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            data_dir=Path(env.get("CLARITY_DATA_DIR") or "data"),
            env=(env.get("CLARITY_ENV") or "prod").lower(),
            allowed_origins=_split_origins(env.get("CLARITY_ALLOWED_ORIGINS")),
            log_level=(env.get("CLARITY_LOG_LEVEL") or "INFO").upper(),
            notification_ttl=_parse_ttl(env.get("CLARITY_NOTIFICATION_TTL")),
        )
