"""Structured Logging — JSON formatter, email redaction, and idempotent setup.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (entrant_id, error_code, path, operation) surfaced when present
    - Anything shaped like an email address is masked before a record is emitted,
      including exception text
    - setup_logging() installs exactly one application handler however often
      the lifespan runs

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - Redaction as a handler Filter: covers third-party loggers (sqlalchemy, uvicorn)
      that propagate to root, not only our own call sites
"""

import json
import logging
import re
from datetime import datetime, timezone

HANDLER_NAME = "waitlist_api"
EXTRA_FIELDS = ("entrant_id", "error_code", "path", "operation")
EMAIL_LIKE = re.compile(r"[^\s@'\"(),<>\[\]]+@[^\s@'\"(),<>\[\]]+\.[A-Za-z]{2,}")
REDACTED_EMAIL = "<email>"


def redact_emails(text: str) -> str:
    return EMAIL_LIKE.sub(REDACTED_EMAIL, text)


class RedactEmailFilter(logging.Filter):
    """Mask email addresses in the rendered message and exception text."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_emails(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        if record.exc_info:
            text = logging.Formatter().formatException(record.exc_info)
            record.exc_text = redact_emails(text)
        return True


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_text:
            log["exception"] = record.exc_text
        elif record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install (or replace) the application's root handler."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.addFilter(RedactEmailFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
