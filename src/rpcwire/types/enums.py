"""Shared enumerations for rpcwire."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class CallKind(str, Enum):
    """Kind of outbound JSON-RPC exchange."""

    CALL = "call"
    NOTIFICATION = "notification"
    BATCH = "batch"
