"""Logging for the discovery run.

Report lines own stdout and diagnostics are printed on stderr as ``Error:``
lines, so log records go to stderr with their own ``fleet-discovery:`` prefix
and carry the profile/region they concern.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from .config import LoggingConfig

PREFIX = "fleet-discovery"

# Scope of a record, rendered as "profile/region" in text output
_SCOPE_FIELDS = ("profile", "region")
# Counters and timings, rendered as key=value after the message
_METRIC_FIELDS = ("total_regions", "total_instances", "elapsed_seconds")

# The AWS SDK logs every request at DEBUG
_SDK_LOGGERS = ("boto3", "botocore", "urllib3", "asyncio")


def record_context(record: logging.LogRecord) -> dict:
    """Collect the discovery fields a caller passed through ``extra``."""
    return {
        key: getattr(record, key)
        for key in _SCOPE_FIELDS + _METRIC_FIELDS
        if getattr(record, key, None) is not None
    }


def _scope(context: dict) -> str:
    return "/".join(str(context[key]) for key in _SCOPE_FIELDS if key in context)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, including the worker thread that made the call."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        payload.update(record_context(record))

        if record.exc_info and record.exc_info[1]:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """``fleet-discovery: LEVEL profile/region: message (key=value ...)``."""

    def format(self, record: logging.LogRecord) -> str:
        context = record_context(record)
        parts = [f"{PREFIX}: {record.levelname}"]
        scope = _scope(context)
        if scope:
            parts.append(f"{scope}:")
        parts.append(record.getMessage())

        metrics = [f"{key}={context[key]}" for key in _METRIC_FIELDS if key in context]
        line = " ".join(parts)
        if metrics:
            line = f"{line} ({' '.join(metrics)})"

        if record.exc_info and record.exc_info[1]:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(config: LoggingConfig) -> None:
    """Route all records to stderr at the configured level (WARNING if unknown)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level.upper(), logging.WARNING))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if config.format == "json" else TextFormatter())
    root.addHandler(handler)

    for name in _SDK_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
