"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
The first logger lookup configures it once from FEDSTORE_LOG_LEVEL;
later lookups reuse that configuration.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_CONFIGURE_LOCK = threading.Lock()
_configured_level: int | None = None


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if _configured_level is None:
        with _CONFIGURE_LOCK:
            if _configured_level is None:
                configure_logging(os.getenv("FEDSTORE_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    return structlog.get_logger(name)


def configure_logging(level_name: str) -> int:
    """Configure structlog processors and the minimum level for the process.

    Loggers are cached on first use, so call this before the store
    modules log anything when a level other than FEDSTORE_LOG_LEVEL
    is wanted.

    Args:
        level_name: Standard logging level name, e.g. ``INFO``.

    Returns:
        The numeric level applied.
    """
    global _configured_level
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured_level = level
    return level
