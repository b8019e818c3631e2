"""Logging helpers shared by the catalog, resolution and CLI modules.

Provides a single place to configure the root logger plus small utilities to
attach structured context to log records without paying for it when the
level is disabled.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_KEYS = ("event", "component", "action", "outcome", "target", "duration_ms")


def configure_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger with the project log format.

    Args:
        level: Logging level name, e.g. "DEBUG".
        logfile: Optional path; when given, records go to the file instead of stderr.
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    handlers: list = []
    if logfile:
        handlers.append(logging.FileHandler(logfile, encoding="utf-8"))
    else:
        handlers.append(logging.StreamHandler())
    logging.basicConfig(
        level=numeric_level,
        format=Constants.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    The standard keys are always present so formatters can reference them;
    any other keyword passed as None is dropped.
    """
    context = {key: value for key, value in kwargs.items() if value is not None}
    for key in _CONTEXT_KEYS:
        context.setdefault(key, None)
    return context


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds, up to now if the block is still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)
