"""
Structured Logging — JSON Output for Production

Configures Python logging to emit structured JSON logs under the
"finsafe" namespace, plus a tracer factory for the scoring engine's
optional observability hook.

Usage:
    from finsafe.logging import get_logger
    logger = get_logger("checker")
    logger.info("Check complete", extra={"total_score": 72, "verdict": "SUSPICIOUS"})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Callable, Optional


LOG_LEVEL = os.getenv("FINSAFE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("FINSAFE_LOG_FORMAT", "json")  # "json" or "text"

# Extra fields copied from a LogRecord into the JSON entry when present
_EXTRA_FIELDS = (
    "total_score", "verdict", "check_mode", "matches_count", "source",
    "event", "pattern", "keyword", "score", "error", "error_type",
    "duration_ms", "status_code", "method", "path", "client",
    "engine_version",
)


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging():
    """Configure the finsafe logger. Call once at app startup."""
    root = logging.getLogger("finsafe")
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if LOG_FORMAT == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the finsafe namespace."""
    return logging.getLogger(f"finsafe.{name}")


def log_tracer(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
) -> Callable[[str, dict], None]:
    """
    Build a trace hook for ScamEngine that forwards every match event
    to a logger instead of printing it.

    Event data keys that are known JSON extras (pattern, keyword, score...)
    are attached to the record so they survive JSONFormatter.
    """
    logger = logger or get_logger("engine")

    def _trace(event: str, data: dict) -> None:
        if not logger.isEnabledFor(level):
            return
        extra = {k: v for k, v in data.items() if k in _EXTRA_FIELDS}
        extra["event"] = event
        logger.log(level, "engine %s: %s", event, data, extra=extra)

    return _trace
