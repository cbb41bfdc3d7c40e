"""Request and notification construction."""

from typing import Any

from rpcwire.errors import create_error

from .ids import IDAllocator
from .messages import JSONRPC_VERSION, Notification, Request


def _pack_params(params: tuple[Any, ...]) -> list[Any] | None:
    # No params means no "params" key on the wire, not an empty array
    return list(params) if params else None


def _check_method(method: Any) -> None:
    if not isinstance(method, str):
        raise create_error(
            "INVALID_ARGUMENT",
            detail=f"Method name must be a string, got {type(method).__name__}",
        )


class RequestBuilder:
    """Turns a method name and positional params into protocol messages."""

    def __init__(self, allocator: IDAllocator | None = None):
        """Initialize builder.

        Args:
            allocator: Id source for requests (defaults to a new IDAllocator)
        """
        self.allocator = allocator or IDAllocator()

    def build_request(self, method: str, *params: Any) -> Request:
        """Build a request with the next allocated id.

        Params are kept in the order and arity given; their types are not
        inspected.

        Args:
            method: Remote method name
            *params: Positional parameters

        Returns:
            Request

        Raises:
            InvalidArgument: If method is not a string
        """
        _check_method(method)
        return Request(
            jsonrpc=JSONRPC_VERSION,
            method=method,
            params=_pack_params(params),
            id=self.allocator.next_id(),
        )

    def build_notification(self, method: str, *params: Any) -> Notification:
        """Build a notification. Never allocates an id.

        Args:
            method: Remote method name
            *params: Positional parameters

        Returns:
            Notification

        Raises:
            InvalidArgument: If method is not a string
        """
        _check_method(method)
        return Notification(
            jsonrpc=JSONRPC_VERSION,
            method=method,
            params=_pack_params(params),
        )

    def update_request_id(self, request: Request) -> Request:
        """Re-stamp a request with a freshly allocated id.

        Used when a request (or a batch holding it) is sent again and must not
        reuse its old id.

        Raises:
            InvalidArgument: If request is not a Request
        """
        if not isinstance(request, Request):
            raise create_error(
                "INVALID_ARGUMENT",
                detail=f"Only Request objects carry an id, got {type(request).__name__}",
            )
        return self.allocator.restamp(request)
