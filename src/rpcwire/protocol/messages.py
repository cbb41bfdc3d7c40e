"""JSON-RPC 2.0 message models.

Request and Notification are built locally and serialized through
``to_wire()``, which omits ``params`` when there are none (and ``id`` for
notifications). Response and ResponseError are validated from decoded reply
bodies; ``result`` and ``error.data`` stay untyped until extracted.
"""

from decimal import Decimal
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, StrictInt, StrictStr

from . import extract

JSONRPC_VERSION = "2.0"

T = TypeVar("T")


class Request(BaseModel):
    """JSON-RPC request (expects a response)."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: str
    params: list[Any] | None = None
    id: int = Field(ge=0)

    def to_wire(self) -> dict[str, Any]:
        """Build the wire object: jsonrpc, method, params (if any), id."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        msg["id"] = self.id
        return msg


class Notification(BaseModel):
    """JSON-RPC notification (fire-and-forget, never carries an id)."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: str
    params: list[Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        """Build the wire object: jsonrpc, method, params (if any)."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg


BatchEntry = Request | Notification


class ResponseError(BaseModel):
    """Error object reported by the remote service."""

    code: StrictInt
    message: StrictStr
    data: Any = None


class Response(BaseModel):
    """JSON-RPC response.

    A populated ``error`` is data, not a failure: callers check ``is_error``.
    """

    jsonrpc: StrictStr = JSONRPC_VERSION
    result: Any = None
    error: ResponseError | None = None
    id: StrictInt | None = None

    @property
    def is_error(self) -> bool:
        """True if the server returned an error object."""
        return self.error is not None

    @property
    def has_result(self) -> bool:
        """True if the reply carried a ``result`` key, even a null one."""
        return "result" in self.model_fields_set

    def get_int(self) -> int:
        """Interpret the result as an integer."""
        return extract.as_int(self.result)

    def get_float(self) -> float:
        """Interpret the result as a float."""
        return extract.as_float(self.result)

    def get_decimal(self) -> Decimal:
        """Interpret the result as an exact decimal."""
        return extract.as_decimal(self.result)

    def get_bool(self) -> bool:
        """Interpret the result as a boolean."""
        return extract.as_bool(self.result)

    def get_str(self) -> str:
        """Interpret the result as a string."""
        return extract.as_str(self.result)

    def get_object(self, shape: type[T]) -> T:
        """Interpret the result as an instance of ``shape``."""
        return extract.as_object(self.result, shape)
