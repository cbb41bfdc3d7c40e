"""Turns arbitrary exceptions into RPCWireErrors."""

from typing import Any

from .errors import RPCWireError
from .matchers import ErrorMatcherChain
from .registry import ErrorRegistry


class ErrorFactory:
    """Classifies exceptions with a matcher chain and renders them from the registry."""

    def __init__(
        self,
        registry: ErrorRegistry | None = None,
        matcher_chain: ErrorMatcherChain | None = None,
    ):
        self.registry = registry if registry is not None else ErrorRegistry()
        self.matcher_chain = matcher_chain if matcher_chain is not None else ErrorMatcherChain()

    def from_exception(
        self,
        error: Exception,
        method: str | None = None,
        request_id: int | None = None,
        endpoint: str | None = None,
    ) -> RPCWireError:
        """Wrap an exception raised while talking to an endpoint.

        An RPCWireError only gains the call context; anything else is
        classified by the matcher chain first.

        Args:
            error: Exception to convert
            method: Remote method being invoked
            request_id: JSON-RPC id of the request
            endpoint: Target URL

        Returns:
            RPCWireError subclass chosen by the matched template
        """
        if isinstance(error, RPCWireError):
            return error.with_context(method=method, request_id=request_id, endpoint=endpoint)

        matched = self.matcher_chain.match(error)
        call_context = {"method": method, "request_id": request_id, "endpoint": endpoint}
        context = {
            **matched.context,
            **{key: value for key, value in call_context.items() if value is not None},
        }

        converted = self.registry.create(code=matched.code, context=context)
        if matched.retryable is not None:
            converted.retryable = matched.retryable
        return converted

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> RPCWireError:
        """Render the template for ``code`` with ``context`` and ``kwargs`` merged."""
        return self.registry.create(code=code, context={**(context or {}), **kwargs})


_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Shared factory used by the library."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> RPCWireError:
    """Build an error from a registered code.

    Example:
        raise create_error("INVALID_ARGUMENT", detail="ids are unsigned")
    """
    return get_error_factory().create(code, context)
