"""Structured Logging: JSON formatter and setup for hosting applications.

Invariants:
    - All records include timestamp, level, logger name, and message
    - calculator_id and error_code extras are surfaced when present
    - The library never calls setup_logging itself; the host application does
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from clinicalc.config import get_settings


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("calculator_id", "error_code", "field_count", "error_count"):
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Handler:
    """
    Configure the root logger and return the installed handler.

    ``level`` and ``fmt`` default to ``Settings.log_level`` / ``Settings.log_format``
    (``CLINICALC_LOG_LEVEL`` / ``CLINICALC_LOG_FORMAT``).
    """
    settings = get_settings()
    level = level or settings.log_level
    fmt = fmt or settings.log_format

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
