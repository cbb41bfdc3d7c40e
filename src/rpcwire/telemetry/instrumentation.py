"""rpcwire tracing - one OpenTelemetry span per JSON-RPC exchange.

Only the OpenTelemetry API is used, so spans are no-ops unless the
application installs an SDK tracer provider.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode, Tracer

from rpcwire.protocol.messages import JSONRPC_VERSION
from rpcwire.types import CallKind

TRACER_NAME = "rpcwire"


@contextmanager
def instrument_rpc_call(
    kind: CallKind,
    method: str,
    request_id: int | None = None,
    tracer: Tracer | None = None,
) -> Iterator[dict[str, Any]]:
    """Trace a call, notification or batch.

    Set ``error_code`` in the yielded dict when the server answered with an
    error object; it is recorded on the span without failing it.

    Args:
        kind: Exchange kind
        method: Remote method name (``"batch"`` for batches)
        request_id: JSON-RPC id, for calls
        tracer: Tracer to use (defaults to the global provider's)

    Yields:
        Dictionary to store call outcome
    """
    tracer = tracer or trace.get_tracer(TRACER_NAME)
    result: dict[str, Any] = {"error_code": None}

    with tracer.start_as_current_span(
        f"jsonrpc.{kind.value} {method}",
        kind=trace.SpanKind.CLIENT,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        span.set_attribute("rpc.system", "jsonrpc")
        span.set_attribute("rpc.method", method)
        span.set_attribute("rpc.jsonrpc.version", JSONRPC_VERSION)
        if request_id is not None:
            span.set_attribute("rpc.jsonrpc.request_id", str(request_id))

        try:
            yield result
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise

        if result["error_code"] is not None:
            span.set_attribute("rpc.jsonrpc.error_code", result["error_code"])
        span.set_status(Status(StatusCode.OK))
