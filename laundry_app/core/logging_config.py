"""Logging setup shared by the API process and scripts."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("laundry_app")


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the root handler once and return the package logger."""
    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logger.setLevel(resolved)
    return logger
