"""JSON-RPC over HTTP clients."""

from .async_client import AsyncRPCClient
from .base import ClientBase
from .client import RPCClient
from .state import ClientState, basic_auth_header

__all__ = [
    "RPCClient",
    "AsyncRPCClient",
    "ClientBase",
    "ClientState",
    "basic_auth_header",
]
