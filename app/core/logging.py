"""CleanAds Proxy — Structured JSON Logging.

All loggers hang off the "cleanads" parent, which owns the single stdout
handler. Keys passed through ``extra=`` land as top-level JSON fields.
"""

import logging
import json
import sys
from datetime import datetime, timezone

from app.config import settings
from app.core.date_window import iso_utc

ROOT_LOGGER = "cleanads"

# Attributes every LogRecord carries; anything else came in through extra=
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": iso_utc(datetime.fromtimestamp(record.created, timezone.utc)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return root


def get_logger(name: str) -> logging.Logger:
    """Return ``cleanads.<name>``, configuring the shared handler on first use."""
    _root_logger()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
