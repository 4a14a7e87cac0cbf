"""
Structured Logging — JSON Lines or Plain Text

Every pipeline module logs through get_logger(), which hangs its logger
under the "cognitive_insight" namespace. Nothing is emitted until the
host application calls setup_logging() (or configures the namespace
itself). JSON records carry a fixed set of analysis context fields when
they are passed via ``extra``.

Usage:
    from cognitive_insight.logging import get_logger
    logger = get_logger("engine")
    logger.info("Analysis complete", extra={"marker_count": 7, "duration_ms": 3})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

NAMESPACE = "cognitive_insight"

LOG_LEVEL = os.getenv("COGNITIVE_INSIGHT_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("COGNITIVE_INSIGHT_LOG_FORMAT", "json")  # "json" or "text"

# Context fields copied from ``extra`` into JSON records.
EXTRA_FIELDS = (
    "cache_key", "cache_hit", "text_length", "marker_count", "pattern_count",
    "driver_count", "conflict_count", "duration_ms", "batch_index",
    "error", "error_type",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno <= logging.DEBUG:
            entry["location"] = f"{record.module}:{record.lineno}"

        entry.update({
            key: getattr(record, key)
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for local runs."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """
    Attach a single stdout handler to the package logger.

    level and fmt default to COGNITIVE_INSIGHT_LOG_LEVEL and
    COGNITIVE_INSIGHT_LOG_FORMAT. Calling again replaces the handler.
    """
    root = logging.getLogger(NAMESPACE)
    root.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if (fmt or LOG_FORMAT) == "json" else TextFormatter())
    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Named logger under the cognitive_insight namespace."""
    return logging.getLogger(f"{NAMESPACE}.{name}")
