"""Transport-independent half of the JSON-RPC invoker.

Holds the configuration state and request builder, and implements encoding,
batch validation and reply decoding. ``RPCClient`` and ``AsyncRPCClient`` add
the httpx round trip on top.
"""

import logging
from collections.abc import Sequence
from typing import Any, Self

from pydantic import TypeAdapter, ValidationError

from rpcwire.config.models import DEFAULT_TIMEOUT, ClientConfig
from rpcwire.errors import SerializationError, create_error
from rpcwire.protocol import codec
from rpcwire.protocol.builder import RequestBuilder
from rpcwire.protocol.ids import IDAllocator
from rpcwire.protocol.messages import BatchEntry, Notification, Request, Response

from .state import ClientState

logger = logging.getLogger(__name__)

_RESPONSE_LIST = TypeAdapter(list[Response])


class ClientBase:
    """Configuration, request building and reply decoding shared by both clients."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        auto_increment: bool = True,
        next_id: int = 0,
    ):
        """Initialize client state.

        Args:
            endpoint: JSON-RPC endpoint URL
            timeout: Timeout in seconds for the default httpx handle
            auto_increment: Advance the request id after each request
            next_id: First request id
        """
        allocator = IDAllocator(start=next_id, auto_increment=auto_increment)
        self.state = ClientState(endpoint, allocator)
        self.builder = RequestBuilder(allocator)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> Self:
        """Create a client from a loaded configuration.

        Args:
            config: Client configuration
            **kwargs: Extra constructor arguments (e.g. ``http_client``)

        Raises:
            RPCWireError(CONFIG_INVALID): If no endpoint is configured
        """
        if not config.endpoint:
            raise create_error("CONFIG_INVALID", detail="endpoint is required")

        client = cls(
            config.endpoint,
            timeout=config.timeout,
            auto_increment=config.ids.auto_increment,
            next_id=config.ids.start,
            **kwargs,
        )
        for name, value in config.headers.items():
            client.set_custom_header(name, value)
        client.set_basic_auth(config.auth.username, config.auth.password)
        return client

    @property
    def endpoint(self) -> str:
        """JSON-RPC endpoint URL."""
        return self.state.endpoint

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_custom_header(self, name: str, value: str) -> None:
        """Add or overwrite a header sent with every request."""
        self.state.set_custom_header(name, value)

    def set_basic_auth(self, username: str, password: str) -> None:
        """Send HTTP basic auth; an empty username or password disables it."""
        self.state.set_basic_auth(username, password)

    def set_auto_increment(self, flag: bool) -> None:
        """Enable or disable request id auto-increment."""
        self.state.set_auto_increment(flag)

    def set_next_id(self, value: int) -> None:
        """Set the id used by the next request."""
        self.state.set_next_id(value)

    # ------------------------------------------------------------------
    # Message construction
    # ------------------------------------------------------------------

    def new_request(self, method: str, *params: Any) -> Request:
        """Build a Request with the next id, e.g. to include in a batch."""
        return self.builder.build_request(method, *params)

    def new_notification(self, method: str, *params: Any) -> Notification:
        """Build a Notification, e.g. to include in a batch."""
        return self.builder.build_notification(method, *params)

    def update_request_id(self, request: Request) -> Request:
        """Give a Request a fresh id before sending it again."""
        return self.builder.update_request_id(request)

    # ------------------------------------------------------------------
    # Encoding and decoding
    # ------------------------------------------------------------------

    def _encode(self, payload: Any, method: str, request_id: int | None = None) -> bytes:
        try:
            return codec.encode(payload)
        except SerializationError as e:
            raise e.with_context(
                method=method,
                request_id=request_id,
                endpoint=self.endpoint,
            ) from e.__cause__

    def _check_batch(self, entries: Sequence[Any]) -> list[BatchEntry]:
        """Validate batch entries before anything is encoded or sent.

        Raises:
            InvalidArgument: If the batch is empty or holds anything other
                than Request and Notification objects
        """
        if not entries:
            raise create_error(
                "INVALID_ARGUMENT",
                detail="A batch needs at least one Request or Notification",
                endpoint=self.endpoint,
            )
        for index, entry in enumerate(entries):
            if not isinstance(entry, (Request, Notification)):
                raise create_error(
                    "INVALID_ARGUMENT",
                    detail=(
                        f"Batch entry {index} must be a Request or Notification, "
                        f"got {type(entry).__name__}: {entry!r}"
                    ),
                    endpoint=self.endpoint,
                )
        return list(entries)

    def _decode_response(self, content: bytes, method: str, request_id: int | None) -> Response:
        try:
            response = Response.model_validate(codec.decode(content))
        except (ValueError, ValidationError) as e:
            logger.warning("Invalid response to %s (id=%s) from %s: %s", method, request_id, self.endpoint, e)
            raise create_error(
                "DECODE_FAILED",
                detail=str(e),
                method=method,
                request_id=request_id,
                endpoint=self.endpoint,
            ) from e

        if response.error is not None:
            logger.debug(
                "Server returned error %s for %s (id=%s): %s",
                response.error.code,
                method,
                request_id,
                response.error.message,
            )
        return response

    def _decode_batch(self, content: bytes, entries: Sequence[BatchEntry]) -> list[Response]:
        # Servers send nothing back for a batch made only of notifications
        if not content.strip() and all(isinstance(e, Notification) for e in entries):
            return []

        try:
            data = codec.decode(content)
            if not isinstance(data, list):
                raise ValueError(f"Expected a JSON array of responses, got {type(data).__name__}")
            responses = _RESPONSE_LIST.validate_python(data)
        except (ValueError, ValidationError) as e:
            logger.warning("Invalid batch response from %s: %s", self.endpoint, e)
            raise create_error(
                "DECODE_FAILED",
                detail=str(e),
                method="batch",
                endpoint=self.endpoint,
            ) from e

        logger.debug("Batch of %d entries returned %d responses", len(entries), len(responses))
        return responses

    @staticmethod
    def _first_error_code(responses: Sequence[Response]) -> int | None:
        for response in responses:
            if response.error is not None:
                return response.error.code
        return None
