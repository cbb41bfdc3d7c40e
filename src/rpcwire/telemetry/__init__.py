"""rpcwire telemetry - OpenTelemetry tracing of JSON-RPC exchanges."""

from .instrumentation import TRACER_NAME, instrument_rpc_call

__all__ = [
    "TRACER_NAME",
    "instrument_rpc_call",
]
