"""Templates for every rpcwire error code."""

from dataclasses import fields
from typing import Any

from .errors import (
    DecodeError,
    ErrorCategory,
    ErrorTemplate,
    InvalidArgument,
    RPCWireError,
    SerializationError,
    TransportError,
    TypeMismatch,
)

_BASE_FIELDS = frozenset(f.name for f in fields(RPCWireError))


class ErrorRegistry:
    """Maps error codes to templates and renders errors from them.

    Built-in codes are registered on construction; ``register`` adds or
    replaces templates.
    """

    def __init__(self) -> None:
        self._templates: dict[str, ErrorTemplate] = {}
        self._register_builtins()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Template registered for ``code``, or None."""
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """Registered codes in registration order."""
        return list(self._templates)

    def register(self, template: ErrorTemplate) -> None:
        """Add or replace a template."""
        self._templates[template.code] = template

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: RPCWireError | None = None,
    ) -> RPCWireError:
        """Render the error for ``code``.

        Context keys that name a field of the template's error type (for
        example ``value`` on TypeMismatch) are copied onto the instance.

        Args:
            code: Error code
            context: Placeholder values, plus optional method, request_id and endpoint
            cause: Underlying rpcwire error, if any

        Returns:
            Error instance of the template's error type

        Raises:
            ValueError: If no template is registered for code
        """
        template = self._templates.get(code)
        if template is None:
            raise ValueError(f"No error template registered for {code}")

        context = context or {}

        message = self._interpolate(template.message_template, context) or code
        detail = self._interpolate(template.detail_template, context, keep_on_missing=False)
        suggestion = self._interpolate(template.suggestion_template, context)

        extra = {
            f.name: context[f.name]
            for f in fields(template.error_type)
            if f.name not in _BASE_FIELDS and f.name in context
        }

        return template.error_type(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            retryable=template.default_retryable,
            method=context.get("method"),
            request_id=context.get("request_id"),
            endpoint=context.get("endpoint"),
            cause=cause,
            **extra,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
        keep_on_missing: bool = True,
    ) -> str | None:
        """Fill {placeholders} from context.

        Args:
            template: Template string with {var} placeholders
            context: Context variables
            keep_on_missing: Return the raw template (True) or None (False)
                when a placeholder has no value in context

        Returns:
            Interpolated string or None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            return template if keep_on_missing else None

    def _register_builtins(self) -> None:
        # TRANSPORT errors
        self.register(
            ErrorTemplate(
                code="TRANSPORT_FAILED",
                category=ErrorCategory.TRANSPORT,
                message_template="HTTP request to JSON-RPC endpoint failed",
                detail_template="{detail}",
                suggestion_template="Check that the endpoint URL is correct and the server is reachable",
                default_retryable=True,
                error_type=TransportError,
            )
        )

        self.register(
            ErrorTemplate(
                code="TRANSPORT_TIMEOUT",
                category=ErrorCategory.TRANSPORT,
                message_template="HTTP request to JSON-RPC endpoint timed out",
                detail_template="{detail}",
                suggestion_template="Increase the client timeout or check server load",
                default_retryable=True,
                error_type=TransportError,
            )
        )

        # DECODE errors
        self.register(
            ErrorTemplate(
                code="DECODE_FAILED",
                category=ErrorCategory.DECODE,
                message_template="Invalid JSON-RPC response",
                detail_template="{detail}",
                suggestion_template="Check that the endpoint speaks JSON-RPC 2.0 over HTTP",
                error_type=DecodeError,
            )
        )

        # VALIDATION errors
        self.register(
            ErrorTemplate(
                code="INVALID_ARGUMENT",
                category=ErrorCategory.VALIDATION,
                message_template="Invalid argument",
                detail_template="{detail}",
                error_type=InvalidArgument,
            )
        )

        # EXTRACTION errors
        self.register(
            ErrorTemplate(
                code="TYPE_MISMATCH",
                category=ErrorCategory.EXTRACTION,
                message_template="Expected {expected} result, got {actual}",
                detail_template="Could not interpret {value!r} as {expected}",
                suggestion_template="Use the extractor that matches the method's result type",
                error_type=TypeMismatch,
            )
        )

        self.register(
            ErrorTemplate(
                code="SERIALIZATION_FAILED",
                category=ErrorCategory.EXTRACTION,
                message_template="Value could not be serialized",
                detail_template="{detail}",
                error_type=SerializationError,
            )
        )

        # SYSTEM errors
        self.register(
            ErrorTemplate(
                code="CONFIG_INVALID",
                category=ErrorCategory.SYSTEM,
                message_template="Invalid configuration",
                detail_template="{detail}",
                suggestion_template="Check the configuration file and fix errors",
            )
        )

        self.register(
            ErrorTemplate(
                code="INTERNAL_ERROR",
                category=ErrorCategory.SYSTEM,
                message_template="Internal rpcwire error",
                detail_template="{detail}",
                suggestion_template="Check the logs and report this issue",
            )
        )
