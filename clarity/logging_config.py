"""Logging setup shared by the API and console entry points."""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(
    level: str = "INFO", name: str = "clarity", stream: Optional[IO[str]] = None
) -> logging.Logger:
    """Configure root logging and return the named logger.

    Records go to ``stream`` (stdout by default). Unknown level names fall
    back to INFO.
    """
    logging.basicConfig(
        level=LOG_LEVELS.get(str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(stream or sys.stdout)],
        force=True,
    )
    return logging.getLogger(name)
