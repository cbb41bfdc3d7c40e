"""JSON-RPC 2.0 protocol layer: messages, ids, building, decoding, extraction."""

from . import codec, extract
from .batch import match_responses, responses_by_id
from .builder import RequestBuilder
from .codec import Number
from .ids import IDAllocator
from .messages import (
    JSONRPC_VERSION,
    BatchEntry,
    Notification,
    Request,
    Response,
    ResponseError,
)

__all__ = [
    # Messages
    "JSONRPC_VERSION",
    "Request",
    "Notification",
    "BatchEntry",
    "Response",
    "ResponseError",
    "Number",
    # Building
    "IDAllocator",
    "RequestBuilder",
    # Batch helpers
    "responses_by_id",
    "match_responses",
    # Submodules
    "codec",
    "extract",
]
