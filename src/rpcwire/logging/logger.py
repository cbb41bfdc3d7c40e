"""rpcwire logging setup.

Library modules log through ``logging.getLogger(__name__)`` under the
``rpcwire`` namespace and never configure handlers themselves. Applications
that want rpcwire's own output call ``configure_logging`` once:

    from rpcwire.config import LoggingConfig
    from rpcwire.logging import configure_logging

    configure_logging(LoggingConfig(level=LogLevel.DEBUG, format=LogFormat.JSON))
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from opentelemetry import trace

from rpcwire.config.models import LoggingConfig
from rpcwire.types import LogFormat, LogLevel

from .colors import CYAN, LIGHT_BLUE, MAGENTA, RED, RESET, YELLOW

ROOT_LOGGER = "rpcwire"

_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName", "asctime",
    }
)


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter with trace context injection.

    Formats log records as JSON with:
    - timestamp (ISO 8601, UTC)
    - level
    - component (logger name)
    - message
    - trace_id / span_id (if a span is recording)
    - Additional fields from ``extra``
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }

        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            if ctx.is_valid:
                log_data["trace_id"] = format(ctx.trace_id, "032x")
                log_data["span_id"] = format(ctx.span_id, "016x")

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColoredLogFormatter(logging.Formatter):
    """Human-readable formatter: ``[LEVEL] logger: message`` with ANSI colors."""

    LEVEL_COLORS = {
        logging.DEBUG: LIGHT_BLUE,
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, RESET)
        output = (
            f"{color}[{record.levelname}]{RESET} "
            f"{MAGENTA}{record.name}{RESET}: {record.getMessage()}"
        )
        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)
        return output


def to_logging_level(level: LogLevel) -> int:
    """Map a LogLevel to the stdlib logging constant."""
    return _LEVELS.get(level, logging.INFO)


def configure_logging(
    config: LoggingConfig | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a single handler to the ``rpcwire`` logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        config: Level and format (defaults to LoggingConfig())
        stream: Output stream (defaults to stderr)

    Returns:
        The installed handler
    """
    config = config or LoggingConfig()
    root = logging.getLogger(ROOT_LOGGER)

    for existing in list(root.handlers):
        if getattr(existing, "_rpcwire_handler", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    if config.format == LogFormat.JSON:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(ColoredLogFormatter())
    handler._rpcwire_handler = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(to_logging_level(config.level))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the ``rpcwire`` namespace.

    Args:
        name: Component name, e.g. ``"client"``

    Returns:
        ``logging.Logger`` named ``rpcwire.<name>``
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
