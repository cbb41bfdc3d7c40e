"""rpcwire logging - JSON or colored output for the ``rpcwire`` logger tree."""

from .colors import (
    CYAN,
    GREEN,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    ROOT_LOGGER,
    ColoredLogFormatter,
    StructuredLogFormatter,
    configure_logging,
    get_logger,
    to_logging_level,
)

__all__ = [
    # Setup
    "ROOT_LOGGER",
    "configure_logging",
    "get_logger",
    "to_logging_level",
    # Formatters
    "StructuredLogFormatter",
    "ColoredLogFormatter",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
]
