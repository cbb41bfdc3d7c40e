"""rpcwire error types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    TRANSPORT = "TRANSPORT"
    DECODE = "DECODE"
    VALIDATION = "VALIDATION"
    EXTRACTION = "EXTRACTION"
    SYSTEM = "SYSTEM"


@dataclass
class RPCWireError(Exception):
    """Structured error with context. Base exception for all rpcwire errors."""

    # Identity
    code: str  # e.g., "TRANSPORT_FAILED"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    retryable: bool = False  # Is retry potentially useful?
    method: str | None = None  # Remote method being invoked
    request_id: int | None = None  # JSON-RPC id of the request
    endpoint: str | None = None  # Target URL

    cause: "RPCWireError | None" = None

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and diagnostics.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "retryable": self.retryable,
            "method": self.method,
            "request_id": self.request_id,
            "endpoint": self.endpoint,
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }

    def with_context(
        self,
        method: str | None = None,
        request_id: int | None = None,
        endpoint: str | None = None,
    ) -> "RPCWireError":
        """Return copy with additional context.

        Args:
            method: Optional remote method name
            request_id: Optional JSON-RPC request id
            endpoint: Optional endpoint URL

        Returns:
            New error of the same type with updated context
        """
        return replace(
            self,
            method=method or self.method,
            request_id=request_id if request_id is not None else self.request_id,
            endpoint=endpoint or self.endpoint,
        )


@dataclass
class TransportError(RPCWireError):
    """The HTTP exchange could not be completed."""


@dataclass
class DecodeError(RPCWireError):
    """The reply body is not a valid JSON-RPC response."""


@dataclass
class InvalidArgument(RPCWireError):
    """A caller-supplied argument was rejected before any network activity."""


@dataclass
class TypeMismatch(RPCWireError):
    """A result was extracted as the wrong kind of value."""

    value: Any = None  # The offending value


@dataclass
class SerializationError(RPCWireError):
    """A value could not be encoded, or re-decoded into the requested shape."""


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Expected {expected} result, got {actual}"
    detail_template: str | None = None
    suggestion_template: str | None = None
    default_retryable: bool = False
    error_type: type[RPCWireError] = RPCWireError


@dataclass
class MatchResult:
    """Result of matching an exception."""

    code: str
    context: dict[str, Any]
    retryable: bool | None = None  # None = use template default


class ErrorMatcher(ABC):
    """Base class for exception matchers."""

    @abstractmethod
    def matches(self, error: Exception) -> bool:
        """Check if this matcher handles the error.

        Args:
            error: Exception to check

        Returns:
            True if this matcher can handle the error
        """

    @abstractmethod
    def extract(self, error: Exception) -> MatchResult:
        """Extract error info from the exception.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with error code and context
        """
