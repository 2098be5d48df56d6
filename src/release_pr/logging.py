"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Severity thresholds are
expressed with :class:`Severity` rather than level-name strings.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from enum import IntEnum
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


class Severity(IntEnum):
    """Log severities understood by the tool, ordered by numeric threshold."""

    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    NOTICE = 25
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: str) -> Severity:
        """Parse a configured level name.

        Raises:
            ValueError: if `value` names no severity.
        """

        try:
            return cls[value.strip().upper()]
        except KeyError:
            names = ", ".join(member.name for member in cls)
            raise ValueError(f"Unknown log level {value!r}; expected one of: {names}") from None


logging.addLevelName(Severity.TRACE, "TRACE")
logging.addLevelName(Severity.NOTICE, "NOTICE")


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter for logging records."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(threshold: Severity) -> None:
    """Configure root logging with structured JSON output at `threshold`."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(int(threshold))

    # Keep third-party loggers reasonably quiet unless tracing.
    quiet = int(threshold) if threshold <= Severity.TRACE else max(int(threshold), logging.INFO)
    for name in ("github", "urllib3"):
        logging.getLogger(name).setLevel(quiet)
