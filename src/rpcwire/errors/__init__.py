"""rpcwire error handling - structured errors with context."""

from .errors import (
    DecodeError,
    ErrorCategory,
    ErrorMatcher,
    ErrorTemplate,
    InvalidArgument,
    MatchResult,
    RPCWireError,
    SerializationError,
    TransportError,
    TypeMismatch,
)
from .factory import ErrorFactory, create_error, get_error_factory
from .matchers import ErrorMatcherChain
from .registry import ErrorRegistry

__all__ = [
    # Core error types
    "RPCWireError",
    "TransportError",
    "DecodeError",
    "InvalidArgument",
    "TypeMismatch",
    "SerializationError",
    "ErrorCategory",
    "ErrorTemplate",
    "MatchResult",
    # Registry and factory
    "ErrorRegistry",
    "ErrorFactory",
    "ErrorMatcherChain",
    "ErrorMatcher",
    # Convenience functions
    "get_error_factory",
    "create_error",
]
