"""Logging helpers shared by the CLI and the reconciliation modules.

Provides a single ``configure_logging`` entry point plus small helpers used by
DEBUG traces: ``extra_context`` for structured fields, ``is_debug_enabled`` to
skip building those fields when nobody listens, and ``Timer`` for durations.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any, Dict, Optional

from constants import Constants

_CONTEXT_ATTR = "featuregen_context"


class HumanFormatter(logging.Formatter):
    """Default formatter; appends structured context as ``key=value`` pairs at DEBUG."""

    def __init__(self) -> None:
        super().__init__(Constants.LOG_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        ctx = getattr(record, _CONTEXT_ATTR, None)
        if ctx and record.levelno <= logging.DEBUG:
            pairs = " ".join(f"{k}={v}" for k, v in ctx.items())
            return f"{base} [{pairs}]"
        return base


class JsonFormatter(logging.Formatter):
    """One JSON object per line, context fields merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = getattr(record, _CONTEXT_ATTR, None)
        if ctx:
            payload.update(ctx)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure the root logger once for CLI use.

    Level and format fall back to the FEATUREGEN_LOG_LEVEL and
    FEATUREGEN_LOG_FORMAT environment variables ("human" or "json").
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    fmt_name = (fmt or os.environ.get(Constants.ENV_LOG_FORMAT) or "human").lower()

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if fmt_name == "json" else HumanFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a log call, dropping None values."""
    return {_CONTEXT_ATTR: {k: v for k, v in fields.items() if v is not None}}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True if DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
