"""
Logging setup for the label compliance service.

Text or JSON output on stdout, with the request id of the current HTTP
request attached to every record. Engine modules may pass structured data as
``extra={"extra_fields": {...}}``; the JSON formatter merges it into the record.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from label_compliance.core.config import settings
from label_compliance.core.error_handling import request_id_var

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("multipart", "python_multipart", "openpyxl")


class RequestIDFilter(logging.Filter):
    """Copy the request id from the ContextVar onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or ""
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", "")
        if settings.LOG_INCLUDE_REQUEST_ID and request_id:
            entry["request_id"] = request_id

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            entry.update(extra_fields)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _build_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT.lower() == "json":
        return JSONFormatter()
    if settings.LOG_INCLUDE_REQUEST_ID:
        return logging.Formatter(TEXT_FORMAT + " - request_id=%(request_id)s")
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Overrides LOG_LEVEL when given
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    if settings.LOG_INCLUDE_REQUEST_ID:
        handler.addFilter(RequestIDFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
