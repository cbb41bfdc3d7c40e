"""rpcwire - JSON-RPC 2.0 client over HTTP.

Usage:
    from rpcwire import RPCClient

    with RPCClient("http://localhost:8080/rpc") as client:
        response = client.call("sum", 1, 2)
        print(response.get_int())
"""

from rpcwire.client import AsyncRPCClient, RPCClient
from rpcwire.errors import (
    DecodeError,
    InvalidArgument,
    RPCWireError,
    SerializationError,
    TransportError,
    TypeMismatch,
)
from rpcwire.protocol import (
    Notification,
    Request,
    Response,
    ResponseError,
    match_responses,
    responses_by_id,
)

__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Clients
    "RPCClient",
    "AsyncRPCClient",
    # Messages
    "Request",
    "Notification",
    "Response",
    "ResponseError",
    "match_responses",
    "responses_by_id",
    # Errors
    "RPCWireError",
    "TransportError",
    "DecodeError",
    "InvalidArgument",
    "TypeMismatch",
    "SerializationError",
]
