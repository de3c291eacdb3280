"""
Logging setup for the credential service.

Development gets a one-line human format, production gets one JSON object per
record. Each record is tagged with the id of the request being served (see
``RequestIdMiddleware``).

Credential material (passwords, salts, hashes, tokens) must never be passed
to a logger. Log the account id or the normalized key instead. As a backstop,
``SecretRedactionFilter`` masks ``extra`` fields whose names denote secrets.

Usage:
    from webauth.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Account registered", extra={"account_id": account.id})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

REDACTED = "***"

SECRET_FIELDS = frozenset(("password", "salt", "hash", "token", "secret_key", "authorization"))

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "request_id"}


class RequestIdFilter(logging.Filter):
    """Attach the current request id, unless the call already passed one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get() or "-"  # type: ignore[attr-defined]
        return True


class SecretRedactionFilter(logging.Filter):
    """Mask ``extra`` fields named after credential material."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in record.__dict__.keys() - _RECORD_ATTRS:
            if key.lower() in SECRET_FIELDS:
                setattr(record, key, REDACTED)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, ``extra`` fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", "-")
        if request_id != "-":
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key in sorted(record.__dict__.keys() - _RECORD_ATTRS):
            value = record.__dict__[key]
            if value is not None:
                entry[key] = value
        return json.dumps(entry, default=str)


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        log_level: Level name; ignored when ``debug`` is set
        environment: ``production`` selects JSON output
        debug: Force DEBUG level
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SecretRedactionFilter())
    if environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s %(message)s",
            datefmt="%H:%M:%S",
        ))

    root = logging.getLogger()
    root.setLevel(level)
    # Replace, not append, so a reload does not duplicate output
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    # SQL echo would print bound parameters, which include salts and hashes
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; records pick up the request id when one is set."""
    return logging.getLogger(name)
