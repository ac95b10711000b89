"""
vcompiler Logger
================

Structured logging for compiler diagnostics.

Compile errors, tips and per-compile statistics go through named loggers
(``vcompiler.parser``, ``vcompiler.driver``, ``vcompiler.compiler``). All
of them write to the handlers of the root ``vcompiler`` logger, so an
embedding application redirects or silences the compiler in one place.

Example:
    configure_logging(LogLevel.INFO, format="json")
    get_logger("vcompiler.driver").debug("compiled template", size=120)
"""

from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, TextIO

import orjson

ROOT_LOGGER = "vcompiler"


class LogLevel(IntEnum):
    """Severity, numerically compatible with :mod:`logging`."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Optional[str], default: "LogLevel") -> "LogLevel":
        """Resolve a level name such as ``"debug"``; unknown names fall back."""
        if not value:
            return default
        return cls.__members__.get(value.strip().upper(), default)


@dataclass
class LogRecord:
    """
    One emitted diagnostic.

    Attributes:
        level: Severity
        message: Rendered message
        timestamp: Creation time
        context: Key/value details (template size, error and tip counts)
        exception: Exception being reported, if any
        logger_name: Name of the emitting logger
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = ROOT_LOGGER

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "logger": self.logger_name,
            "level": self.level.name,
            "message": self.message,
        }
        if self.context:
            data["context"] = dict(self.context)
        if self.exception is not None:
            data["exception"] = {
                "type": type(self.exception).__name__,
                "message": str(self.exception),
            }
        return data


# =============================================================================
# Formatters
# =============================================================================

_LEVEL_COLORS = {
    LogLevel.DEBUG: "\033[36m",
    LogLevel.INFO: "\033[32m",
    LogLevel.WARNING: "\033[33m",
    LogLevel.ERROR: "\033[31m",
    LogLevel.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


class LogFormatter:
    """Turns a record into one output string."""

    def format(self, record: LogRecord) -> str:
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Human readable lines.

    Context is appended as ``key=value`` pairs:
        2024-01-15 10:30:45 [ERROR] [vcompiler] invalid expression ... errors=1

    Args:
        format_string: Template with ``timestamp``, ``level``, ``message``
            and ``logger`` fields
        date_format: ``strftime`` format of the timestamp
        colors: Colorize the level when stderr is a terminal
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
        colors: bool = True,
    ):
        self.format_string = format_string or "{timestamp} [{level}] {message}"
        self.date_format = date_format
        self.colors = colors and sys.stderr.isatty()

    def format(self, record: LogRecord) -> str:
        level = record.level.name
        if self.colors:
            level = _LEVEL_COLORS.get(record.level, "") + level + _RESET

        parts = [record.message]
        parts.extend(f"{key}={value}" for key, value in record.context.items())

        line = self.format_string.format(
            timestamp=record.timestamp.strftime(self.date_format),
            level=level,
            message=" ".join(parts),
            logger=record.logger_name,
        )
        if record.exception is None:
            return line

        exc = record.exception
        return line + "\n" + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


class JsonFormatter(LogFormatter):
    """One JSON document per record, for log shippers."""

    def __init__(self, pretty: bool = False):
        self.option = orjson.OPT_INDENT_2 if pretty else 0

    def format(self, record: LogRecord) -> str:
        return orjson.dumps(record.to_dict(), default=str, option=self.option).decode()


# =============================================================================
# Handlers
# =============================================================================

class LogHandler:
    """Receives records at or above its own level."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        if record.level >= self.level:
            self.emit(record)

    def emit(self, record: LogRecord) -> None:
        raise NotImplementedError


class StreamHandler(LogHandler):
    """Writes formatted records to a stream (stderr unless given)."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        super().__init__(formatter, level)
        self.stream = stream

    def emit(self, record: LogRecord) -> None:
        # resolved per call so a replaced sys.stderr is honored
        stream = self.stream or sys.stderr
        stream.write(self.formatter.format(record) + "\n")
        stream.flush()


class MemoryHandler(LogHandler):
    """Keeps records in memory, for inspecting compiler output."""

    def __init__(self, level: LogLevel = LogLevel.DEBUG):
        super().__init__(level=level)
        self.records: List[LogRecord] = []

    def emit(self, record: LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        """Messages of the kept records, optionally only those of ``level``."""
        return [r.message for r in self.records if level is None or r.level == level]


# =============================================================================
# Loggers
# =============================================================================

class Logger:
    """
    Named logger with bound context.

    Args:
        name: Dotted logger name
        level: Records below this level are dropped before any handler
        handlers: Handler list; shared, not copied

    Example:
        logger = get_logger("vcompiler.driver").with_context(template="app.html")
        logger.error("[vcompiler] invalid expression")
    """

    def __init__(
        self,
        name: str = ROOT_LOGGER,
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[LogHandler]] = None,
    ):
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    @property
    def handlers(self) -> List[LogHandler]:
        return self._handlers

    def add_handler(self, handler: LogHandler) -> "Logger":
        self._handlers.append(handler)
        return self

    def remove_handler(self, handler: LogHandler) -> "Logger":
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def with_context(self, **context: Any) -> "Logger":
        """Logger writing to the same handlers with extra context bound."""
        child = Logger(self.name, self.level, self._handlers)
        child._context = {**self._context, **context}
        return child

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        if not self.is_enabled_for(level):
            return
        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            exception=exception,
            logger_name=self.name,
        )
        for handler in self._handlers:
            handler.handle(record)

    def debug(self, message: str, **context: Any) -> None:
        self.log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self.log(LogLevel.ERROR, message, exception, **context)


_loggers: Dict[str, Logger] = {}


def _root_logger() -> Logger:
    root = _loggers.get(ROOT_LOGGER)
    if root is None:
        from vcompiler.utils.env import env

        level = LogLevel.parse(env("VCOMPILER_LOG_LEVEL"), LogLevel.WARNING)
        root = _loggers[ROOT_LOGGER] = Logger(ROOT_LOGGER, level, [StreamHandler()])
    return root


def get_logger(name: str = ROOT_LOGGER, level: Optional[LogLevel] = None) -> Logger:
    """
    Get or create a logger.

    Every logger shares the handler list of the root ``vcompiler`` logger
    and starts at its level (``VCOMPILER_LOG_LEVEL``, WARNING by default).

    Args:
        name: Logger name
        level: Overrides the logger's level when given

    Returns:
        Logger instance
    """
    root = _root_logger()
    logger = _loggers.get(name)
    if logger is None:
        logger = _loggers[name] = Logger(name, root.level, root.handlers)
    if level is not None:
        logger.level = level
    return logger


def configure_logging(
    level: LogLevel = LogLevel.WARNING,
    format: str = "text",
    colors: bool = True,
    stream: Optional[TextIO] = None,
) -> Logger:
    """
    Route every compiler logger to one stream.

    Args:
        level: Level applied to all loggers and the stream handler
        format: ``"text"`` or ``"json"``
        colors: Colorize text output
        stream: Target stream, stderr by default

    Returns:
        The root ``vcompiler`` logger
    """
    formatter = JsonFormatter() if format == "json" else TextFormatter(colors=colors)

    root = _root_logger()
    # replaced in place: child loggers hold a reference to this list
    root.handlers[:] = [StreamHandler(stream, formatter, level)]
    for logger in _loggers.values():
        logger.level = level
    return root
