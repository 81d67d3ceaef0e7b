"""
Logging setup shared by the API server and the dashboard CLI.

Two output formats, selected by ``APP_LOG_FORMAT``:
  text: ``%(asctime)s %(levelname)s %(name)s %(message)s``
  json: one JSON object per line (see JsonFormatter)

Usage::

    from utils.logging import configure_logging
    configure_logging(cfg.log_format)
"""

from __future__ import annotations

import json
import logging

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Extra attributes copied into JSON records when present on the LogRecord.
_EXTRA_FIELDS = (
    "method", "path", "status", "duration_ms", "client_ip", "request_id",
    "seq", "records", "percentage", "milestone",
)


class JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def build_handler(log_format: str = "text") -> logging.Handler:
    """Return a stream handler using the requested format."""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    return handler


def configure_logging(log_format: str = "text", level: int = logging.INFO) -> None:
    """Replace the root handlers with a single handler in *log_format*."""
    logging.basicConfig(handlers=[build_handler(log_format)], level=level, force=True)
