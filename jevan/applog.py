"""Console logging with a correlation id carried in the current context."""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import uuid
from datetime import datetime
from typing import Any, TextIO

_LINEBREAK = "<LINEBREAK>"
_FORMAT = "%(asctime)s\t%(levelname)s\t%(filename)s:%(lineno)d\t%(message)s"

_correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
_context_logger: contextvars.ContextVar[_AppLogger | None] = contextvars.ContextVar(
    "context_logger", default=None
)


class LinebreakFilter(logging.Filter):
    """Keeps each record on one line by replacing newlines in its message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "\n" in message:
            record.msg = message.replace("\n", _LINEBREAK)
            record.args = None
        return True


class _ConsoleFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(_FORMAT)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created).astimezone()
        return moment.isoformat(timespec="milliseconds")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        fields = getattr(record, "fields", None)
        if fields:
            text += "\t" + json.dumps(fields)
        return text


class _AppLogger(logging.LoggerAdapter):
    """Logger that attaches its bound fields to every record."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = dict(kwargs.get("extra") or {})
        extra["fields"] = dict(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_fields(self, **fields: Any) -> _AppLogger:
        """Return a logger sharing the same output with extra bound fields."""
        return _AppLogger(self.logger, {**self.extra, **fields})


def new_logger(stream: TextIO | None = None) -> _AppLogger:
    """Create a debug-level logger writing one line per record to ``stream``."""
    base = logging.Logger("jevan")
    base.setLevel(logging.DEBUG)
    handler = logging.StreamHandler(sys.stdout if stream is None else stream)
    handler.setFormatter(_ConsoleFormatter())
    base.addHandler(handler)
    base.addFilter(LinebreakFilter())
    return _AppLogger(base, {})


def set_correlation_id(correlation_id: str = "") -> str:
    """Set the context's correlation id, generating one when blank; return it."""
    value = correlation_id if correlation_id.strip() else str(uuid.uuid4())
    _correlation_id.set(value)
    return value


def get_correlation_id() -> str:
    return _correlation_id.get()


def get_logger(clear_correlation_id: bool = False) -> _AppLogger | None:
    """Return the context's logger bound to the current correlation id, if any."""
    logger = _context_logger.get()
    if logger is None:
        return None
    correlation_id = "" if clear_correlation_id else get_correlation_id()
    if correlation_id.strip():
        return logger.with_fields(correlationid=correlation_id)
    return logger


def new_logger_with_correlation_id(correlation_id: str = "") -> _AppLogger:
    """Set the correlation id and return the context's logger, creating it if needed."""
    value = set_correlation_id(correlation_id)
    logger = get_logger()
    if logger is None:
        logger = new_logger().with_fields(correlationid=value)
        _context_logger.set(logger)
    return logger


def get_logger_with_correlation_id() -> _AppLogger:
    """Return the context's logger, or a fresh one when none was set up."""
    logger = _context_logger.get()
    return logger if logger is not None else new_logger()