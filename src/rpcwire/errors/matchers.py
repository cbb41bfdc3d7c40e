"""Error matchers for converting exceptions to rpcwire errors."""

import json

import httpx
from pydantic import ValidationError

from .errors import ErrorMatcher, MatchResult


class TimeoutErrorMatcher(ErrorMatcher):
    """Matches httpx and builtin timeouts."""

    def matches(self, error: Exception) -> bool:
        """Check for an httpx or builtin timeout.

        Args:
            error: Exception to check

        Returns:
            True if error is a timeout error
        """
        return isinstance(error, (httpx.TimeoutException, TimeoutError))

    def extract(self, error: Exception) -> MatchResult:
        """Classify as TRANSPORT_TIMEOUT.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with TRANSPORT_TIMEOUT code
        """
        return MatchResult(
            code="TRANSPORT_TIMEOUT",
            context={"detail": str(error) or type(error).__name__},
        )


class TransportErrorMatcher(ErrorMatcher):
    """Matches connection-level failures raised by httpx."""

    def matches(self, error: Exception) -> bool:
        """Check if error is a transport failure.

        Args:
            error: Exception to check

        Returns:
            True if the HTTP request could not be sent or answered
        """
        return isinstance(error, (httpx.HTTPError, httpx.InvalidURL, OSError))

    def extract(self, error: Exception) -> MatchResult:
        """Extract transport error info.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with TRANSPORT_FAILED code
        """
        return MatchResult(
            code="TRANSPORT_FAILED",
            context={
                "detail": str(error) or type(error).__name__,
                "error_type": type(error).__name__,
            },
        )


class DecodeErrorMatcher(ErrorMatcher):
    """Matches malformed JSON and shape validation failures."""

    def matches(self, error: Exception) -> bool:
        """Check if error came from decoding a reply.

        Args:
            error: Exception to check

        Returns:
            True if error is a JSON or validation error
        """
        return isinstance(error, (json.JSONDecodeError, UnicodeDecodeError, ValidationError))

    def extract(self, error: Exception) -> MatchResult:
        """Extract decode error info.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with DECODE_FAILED code
        """
        return MatchResult(
            code="DECODE_FAILED",
            context={"detail": str(error)},
            retryable=False,
        )


class GenericErrorMatcher(ErrorMatcher):
    """Catch-all: anything unrecognized is an internal error."""

    def matches(self, error: Exception) -> bool:
        """Always matches."""
        return True

    def extract(self, error: Exception) -> MatchResult:
        """Classify as INTERNAL_ERROR.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with INTERNAL_ERROR code
        """
        return MatchResult(
            code="INTERNAL_ERROR",
            context={
                "detail": str(error),
                "error_type": type(error).__name__,
            },
            retryable=False,
        )


class ErrorMatcherChain:
    """Matchers tried in order; the first that accepts an exception classifies it."""

    def __init__(self) -> None:
        # Timeouts are httpx.HTTPError subclasses, so they are checked first
        self.matchers: list[ErrorMatcher] = [
            TimeoutErrorMatcher(),
            TransportErrorMatcher(),
            DecodeErrorMatcher(),
            GenericErrorMatcher(),
        ]

    def match(self, error: Exception) -> MatchResult:
        """Classify ``error``; GenericErrorMatcher guarantees a result."""
        return next(m.extract(error) for m in self.matchers if m.matches(error))
