"""
Logging - Structured logging for marshalkit.

Provides two output formats:
- text: human-readable, optionally coloured, ``key=value`` context
- json: one JSON object per line, suitable for log aggregation

Usage:
    >>> from marshalkit.logging import setup_logging, get_logger
    >>> setup_logging(level="DEBUG", log_format="json", static_fields={"service": "api"})
    >>> logger = get_logger("Marshaller", batch="users")
    >>> logger.info("Marshalled %d objects", 10)
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from marshalkit.core.ports.config_provider import MarshalConfig


__all__ = [
    "ContextLogger",
    "JSONFormatter",
    "TextFormatter",
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
]


# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def _extract_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON objects.

    Output fields: ``timestamp`` (ISO8601, UTC, ``Z`` suffix), ``level``,
    ``logger``, ``message``, plus ``context`` for extra fields, ``exception``
    when exc_info is set and ``location`` when enabled. Static fields are
    merged at the top level.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_location: bool = False,
        static_fields: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_location = include_location
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {}

        if self.include_timestamp:
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            entry["timestamp"] = created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}Z"
        if self.include_level:
            entry["level"] = record.levelname
        if self.include_logger:
            entry["logger"] = record.name

        entry["message"] = record.getMessage()
        entry.update(self.static_fields)

        context = _extract_context(record)
        if context:
            entry["context"] = context

        if self.include_location:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter with optional ANSI colours and context."""

    COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool | None = None, include_context: bool = True) -> None:
        super().__init__(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S")
        if use_colors is None:
            use_colors = sys.stderr.isatty()
        self.use_colors = use_colors
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        output = super().format(record)

        if self.include_context:
            context = _extract_context(record)
            if context:
                output += " " + " ".join(f"{key}={value!r}" for key, value in context.items())

        if self.use_colors:
            color = self.COLORS.get(record.levelno, "")
            if color:
                output = f"{color}{output}{self.RESET}"

        return output


class ContextLogger:
    """
    Logger wrapper that attaches bound context to every record.

    Context ends up in the record's ``extra`` and is rendered by both
    formatters. Call-site ``extra`` wins over bound context.
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None) -> None:
        self._logger = logging.getLogger(name)
        self._context = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **context: Any) -> ContextLogger:
        """Return a new logger with ``context`` merged into this one's."""
        return ContextLogger(self._logger.name, {**self._context, **context})

    def isEnabledFor(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        extra = {**self._context, **(kwargs.pop("extra", None) or {})}
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self.log(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str, **context: Any) -> ContextLogger:
    """Get a ContextLogger for ``name`` with optional bound context."""
    return ContextLogger(name, context)


def setup_logging(
    level: int | str = logging.INFO,
    log_format: str = "text",
    log_file: str | None = None,
    static_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure the root logger.

    Existing root handlers are removed. Logs go to stderr and, if
    ``log_file`` is given, to that file as well (never coloured).

    Args:
        level: Logging level (int or name such as "DEBUG")
        log_format: "text" or "json"
        log_file: Optional path of a file to append logs to
        static_fields: Fields added to every JSON record
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    def make_formatter(for_file: bool) -> logging.Formatter:
        if log_format == "json":
            return JSONFormatter(static_fields=static_fields)
        return TextFormatter(use_colors=False if for_file else None)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(make_formatter(for_file=False))
    root.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(make_formatter(for_file=True))
        root.addHandler(file_handler)

    root.setLevel(level)


def setup_logging_from_config(config: MarshalConfig, static_fields: dict[str, Any] | None = None) -> None:
    """Configure logging from a MarshalConfig."""
    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        static_fields=static_fields,
    )
