"""Logging for sqlmux.

Modules obtain loggers through :func:`get_logger`, which keeps every logger
under the ``sqlmux`` namespace and stamps records with the correlation ID of
the current context. Replica routing decisions go to their own
``sqlmux.routing`` logger, so an application can trace routing without
turning on statement logging (or the reverse).
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "ROOT_LOGGER_NAME",
    "ROUTING_LOGGER_NAME",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "sqlmux"
ROUTING_LOGGER_NAME = "sqlmux.routing"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

correlation_id_var: ContextVar[str | None] = ContextVar("sqlmux_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag records logged from the current context with ``correlation_id``.

    Args:
        correlation_id: The ID to attach, or None to stop tagging.
    """
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class StructuredFormatter(logging.Formatter):
    """Renders each record as one JSON object per line."""

    def format(self, record: LogRecord) -> str:
        """Serialize the record.

        Values that JSON cannot represent (connections, configs) are
        rendered with ``str()``.

        Args:
            record: The record to format.

        Returns:
            The JSON text.
        """
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class CorrelationIDFilter(logging.Filter):
    """Copies the context's correlation ID onto records; never drops a record."""

    def filter(self, record: LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the ``sqlmux`` namespace.

    Args:
        name: ``manager``, ``driver.dbapi`` and so on; names already starting
            with ``sqlmux`` are used as given. None returns the namespace root.

    Returns:
        The logger, with a :class:`CorrelationIDFilter` attached.
    """
    if name is None:
        full_name = ROOT_LOGGER_NAME
    elif name.startswith(ROOT_LOGGER_NAME):
        full_name = name
    else:
        full_name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(full_name)
    if full_name != ROOT_LOGGER_NAME and not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
    routing_level: str | None = None,
) -> None:
    """Install handlers on the ``sqlmux`` logger, replacing any it had.

    Args:
        level: Level for the whole namespace (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_style: ``structured`` for JSON lines on stdout, ``simple`` for plain text.
        log_to_file: Also write JSON lines to this path.
        extra_handlers: Further handlers to attach as given.
        routing_level: Separate level for ``sqlmux.routing``; defaults to ``level``.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.upper()))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredFormatter() if format_style == "structured" else logging.Formatter(TEXT_FORMAT))
    root.addHandler(console)

    if log_to_file:
        file_handler = logging.FileHandler(log_to_file)
        file_handler.setFormatter(StructuredFormatter())
        root.addHandler(file_handler)

    for handler in extra_handlers or ():
        root.addHandler(handler)

    routing = logging.getLogger(ROUTING_LOGGER_NAME)
    routing.setLevel(getattr(logging, routing_level.upper()) if routing_level else logging.NOTSET)

    root.propagate = False
    log_with_context(
        root,
        logging.INFO,
        "sqlmux logging configured",
        level=level,
        format_style=format_style,
        handlers_count=len(root.handlers),
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with fields that :class:`StructuredFormatter` merges into the JSON.

    Args:
        logger: The logger to use.
        level: Log level.
        message: The message; it is not %-formatted.
        **extra_fields: Fields to add to the structured entry.
    """
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(logger.name, level, "(unknown file)", 0, message, (), None)
    record.extra_fields = extra_fields  # type: ignore[attr-defined]
    logger.handle(record)
