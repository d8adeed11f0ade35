"""
Structured Logging for the History

JSON lines on top of stdlib logging. Keyword arguments passed to
StructuredLogger become top-level JSON fields; StructuredLogger.context()
adds fields (e.g. sensor name) to every record emitted inside it.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Iterator, Optional, TextIO


class LogLevel(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, name: str) -> Optional[LogLevel]:
        """Case-insensitive lookup by name, None if unknown."""
        return cls.__members__.get(name.strip().upper())


_scoped_fields: ContextVar[dict[str, Any]] = ContextVar("timebound_log_fields", default={})

# Fields of a bare logging.LogRecord; everything else came in via extra=
_STANDARD_FIELDS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        payload.update(_scoped_fields.get())
        payload.update(
            (k, v) for k, v in vars(record).items() if k not in _STANDARD_FIELDS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StructuredLogger:
    """
    Thin wrapper turning keyword arguments into structured fields.

    Usage:
        logger = StructuredLogger("timebound.history")

        with logger.context(sensor="boiler-1"):
            logger.info("History retention updated", retention="0:05:00")
    """

    __slots__ = ("_logger", "_fields")

    def __init__(self, name: str, level: Optional[LogLevel] = None) -> None:
        self._logger = logging.getLogger(name)
        if level is not None:
            self._logger.setLevel(level)
        self._fields: dict[str, Any] = {}

    @property
    def name(self) -> str:
        return self._logger.name

    def log(self, level: LogLevel, message: str, **fields: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra={**self._fields, **fields})

    def debug(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.ERROR, message, **fields)

    def critical(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.CRITICAL, message, **fields)

    def with_extra(self, **fields: Any) -> StructuredLogger:
        """Child logger that adds ``fields`` to every record."""
        child = StructuredLogger(self.name)
        child._fields = {**self._fields, **fields}
        return child

    @staticmethod
    @contextmanager
    def context(**fields: Any) -> Iterator[None]:
        token = _scoped_fields.set({**_scoped_fields.get(), **fields})
        try:
            yield
        finally:
            _scoped_fields.reset(token)


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """Replace root handlers with a single stream handler (stderr by default)."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        JsonFormatter() if json_output
        else logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
