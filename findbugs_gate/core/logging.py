"""Structured JSON logging configuration.

All log output goes to stdout in JSON format so build servers can
collect and filter it.

Format per line:
    {"ts": "2025-03-01T12:00:00Z", "level": "DEBUG", "logger": "findbugs_gate.worker", "msg": "...", ...}
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # Optional context attached via extra={}
        if hasattr(record, "build_unit"):
            payload["build_unit"] = record.build_unit
        if hasattr(record, "stream"):
            payload["stream"] = record.stream

        # Include exception info when present
        if record.exc_info and record.exc_info[0] is not None:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(level_name: str | None = None) -> None:
    """Configure root logger with JSON output to stdout.

    The log level is controlled by ``level_name`` or else the ``LOG_LEVEL``
    env var (default ``INFO``). Worker output is only visible at ``DEBUG``.
    """
    level_name = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(level)

    root.handlers.clear()
    root.addHandler(handler)
