import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

from fastapi import Request

CORRELATION_HEADER = "x-correlation-id"
_MISSING_CORRELATION_ID = "no-correlation-id"

# Context variable to store correlation ID
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "correlation_id"}


class CorrelationIdFormatter(logging.Formatter):
    """Formatter that stamps the request correlation ID on every record."""

    def format(self, record):
        record.correlation_id = correlation_id_var.get() or _MISSING_CORRELATION_ID
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": correlation_id_var.get() or _MISSING_CORRELATION_ID,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def extract_correlation_id_from_request(request: Request) -> str:
    """Reuse the caller's correlation ID or mint a new one."""
    return request.headers.get(CORRELATION_HEADER) or generate_correlation_id()


class StructuredLogger:
    """Logger wrapper taking structured fields as keyword arguments.

    ``logger.info("Relations added", movie_id=..., added=3)`` becomes a record
    whose extra attributes are rendered by :class:`JSONFormatter`.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, **kwargs):
        exc_info = kwargs.pop("exc_info", None)
        self.logger.log(level, message, extra=kwargs, exc_info=exc_info)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, message, **kwargs)


def setup_logging(level: str = "INFO", use_json: bool = False) -> None:
    """Replace root handlers with a single correlation-aware stream handler."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            CorrelationIdFormatter(
                "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
            )
        )

    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_structured_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
