"""Logging setup for moodrelay processes.

Modules log through ``logging.getLogger(__name__)``; the hosting service (or
the CLI) calls ``configure_logging`` once at startup to pick the output.

The backend client attaches request context to its log records with
``extra=`` (method, path, attempt, delay, operation, and the sentiment,
emotion and stress_score of an analysis). JSON output carries those as
``fields``; text output appends them as ``key=value`` pairs.

Usage:
    from moodrelay.logging_config import configure_logging

    configure_logging(level="DEBUG", format="json")

Environment Variables:
    MOODRELAY_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    MOODRELAY_LOG_FORMAT: Output format ("text" or "json")
    MOODRELAY_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ENV_PREFIX = "MOODRELAY_LOG_"

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_configured = False


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Structured fields passed to a log call via ``extra=``."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per log line.

    {
        "timestamp": "2026-10-19T14:30:00.123000",
        "level": "WARNING",
        "logger": "moodrelay.client.api_client",
        "message": "Request GET /stats/today failed, retrying in 1.0s (1/3): ...",
        "fields": {"method": "GET", "path": "/stats/today", "attempt": 1, "delay": 1.0}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = record_fields(record)
        if fields:
            entry["fields"] = fields
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Plain text with structured fields appended as key=value."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in fields.items())
        # Keep fields on the message line, ahead of any traceback
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure root logging.

    Subsequent calls are ignored unless force=True. Arguments left as None
    fall back to the MOODRELAY_LOG_* environment variables.

    Args:
        level: Log level name. Defaults to MOODRELAY_LOG_LEVEL or "INFO".
        format: "text" or "json". Defaults to MOODRELAY_LOG_FORMAT or "text".
        file_path: Also log to this file. Defaults to MOODRELAY_LOG_FILE.
        force: Reconfigure even if already configured.

    Raises:
        ValueError: If the level or format is not recognized.
    """
    global _configured
    if _configured and not force:
        return

    level_name = _setting(level, "LEVEL", "INFO").upper()
    output = _setting(format, "FORMAT", "text").lower()
    file_path = _setting(file_path, "FILE", "") or None

    if not isinstance(logging.getLevelName(level_name), int):
        raise ValueError(f"Unknown log level: {level_name}")
    if output not in ("text", "json"):
        raise ValueError(f"Unknown log format: {output!r} (expected 'text' or 'json')")

    formatter = JsonFormatter() if output == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if file_path:
        handlers.append(logging.FileHandler(file_path))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level_name, handlers=handlers, force=True)
    _configured = True


def _setting(value: str | None, name: str, default: str) -> str:
    if value:
        return value
    return os.environ.get(ENV_PREFIX + name) or default
