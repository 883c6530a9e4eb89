"""JSON log lines for the pricing API, one object per record."""
import logging
import json
import sys
from datetime import datetime, timezone

# Attributes a caller may attach via ``extra=``; anything else is dropped
_EXTRA_FIELDS = (
    "request_id",
    "duration_ms",
    "http_method",
    "http_path",
    "http_status",
    "operation",
    "function",
    "quote_total",
    "frame_count",
    "mat_count",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Libraries whose INFO output would drown the per-quote lines
_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        entry.update(
            (name, getattr(record, name)) for name in _EXTRA_FIELDS if hasattr(record, name)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_output: bool = True):
    """
    Route every logger to stdout. ``LOG_FORMAT=text`` in main.py switches to
    the plain format for local runs.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
