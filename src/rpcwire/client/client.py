"""Synchronous JSON-RPC 2.0 client over HTTP."""

import logging
from typing import Any

import httpx

from rpcwire.config.models import DEFAULT_TIMEOUT
from rpcwire.errors import get_error_factory
from rpcwire.protocol.messages import BatchEntry, Response
from rpcwire.telemetry import instrument_rpc_call
from rpcwire.types import CallKind

from .base import ClientBase

logger = logging.getLogger(__name__)


class RPCClient(ClientBase):
    """Sends JSON-RPC requests, notifications and batches with httpx.

    Every operation blocks until the HTTP exchange completes. Timeouts,
    proxies and TLS are properties of the ``httpx.Client`` handle. One client
    may be shared between threads; request ids stay unique.

    Usage:
        with RPCClient("http://localhost:8545/rpc") as client:
            response = client.call("sum", 1, 2)
            if response.is_error:
                ...
            total = response.get_int()
    """

    def __init__(
        self,
        endpoint: str,
        http_client: httpx.Client | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        auto_increment: bool = True,
        next_id: int = 0,
    ):
        """Initialize client.

        Args:
            endpoint: JSON-RPC endpoint URL
            http_client: httpx handle to send with (a default one is created
                and owned by the client when omitted)
            timeout: Timeout in seconds for the default handle
            auto_increment: Advance the request id after each request
            next_id: First request id
        """
        super().__init__(
            endpoint,
            timeout=timeout,
            auto_increment=auto_increment,
            next_id=next_id,
        )
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout)

    @property
    def http_client(self) -> httpx.Client:
        """The httpx handle requests are sent with."""
        return self._http_client

    def set_http_client(self, http_client: httpx.Client) -> None:
        """Replace the httpx handle, e.g. to configure proxies or TLS.

        A handle the client created itself is closed; a caller-supplied one
        stays the caller's to close.
        """
        if self._owns_http_client:
            self._http_client.close()
        self._http_client = http_client
        self._owns_http_client = False

    def close(self) -> None:
        """Close the httpx handle if the client created it."""
        if self._owns_http_client:
            self._http_client.close()

    def __enter__(self) -> "RPCClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _post(self, body: bytes, method: str, request_id: int | None = None) -> httpx.Response:
        """POST one encoded payload.

        Raises:
            TransportError: If the request could not be sent or answered
        """
        try:
            return self._http_client.post(
                self.endpoint,
                content=body,
                headers=self.state.outbound_headers(),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Transport failure calling %s at %s: %s", method, self.endpoint, e)
            raise get_error_factory().from_exception(
                e,
                method=method,
                request_id=request_id,
                endpoint=self.endpoint,
            ) from e

    def call(self, method: str, *params: Any) -> Response:
        """Invoke a remote method and wait for its response.

        A JSON-RPC error from the server is not raised: it comes back in
        ``Response.error``.

        Args:
            method: Remote method name
            *params: Positional parameters (omitted from the wire when empty)

        Returns:
            Decoded Response

        Raises:
            TransportError: If the HTTP exchange failed
            DecodeError: If the reply is not a JSON-RPC response
            SerializationError: If params cannot be encoded as JSON
        """
        request = self.builder.build_request(method, *params)
        with instrument_rpc_call(CallKind.CALL, method, request.id) as outcome:
            body = self._encode(request.to_wire(), method, request.id)
            logger.debug("Calling %s (id=%s) at %s", method, request.id, self.endpoint)
            http_response = self._post(body, method, request.id)
            response = self._decode_response(http_response.content, method, request.id)
            if response.error is not None:
                outcome["error_code"] = response.error.code
        return response

    def notify(self, method: str, *params: Any) -> None:
        """Send a notification. The reply body, if any, is ignored.

        Raises:
            TransportError: If the HTTP exchange failed
            SerializationError: If params cannot be encoded as JSON
        """
        notification = self.builder.build_notification(method, *params)
        with instrument_rpc_call(CallKind.NOTIFICATION, method):
            body = self._encode(notification.to_wire(), method)
            logger.debug("Notifying %s at %s", method, self.endpoint)
            self._post(body, method)

    def batch(self, *entries: BatchEntry) -> list[Response]:
        """Send several requests and notifications in one HTTP exchange.

        Responses are returned in the order the server sent them, which need
        not match the batch; pair them by id (see
        ``rpcwire.protocol.match_responses``). Notifications get no response.

        Args:
            *entries: Request and Notification objects, e.g. from
                ``new_request`` / ``new_notification``

        Returns:
            Decoded responses

        Raises:
            InvalidArgument: If an entry is not a Request or Notification
                (nothing is sent)
            TransportError: If the HTTP exchange failed
            DecodeError: If the reply is not a JSON array of responses
        """
        checked = self._check_batch(entries)
        with instrument_rpc_call(CallKind.BATCH, "batch") as outcome:
            body = self._encode([entry.to_wire() for entry in checked], "batch")
            logger.debug("Sending batch of %d entries to %s", len(checked), self.endpoint)
            http_response = self._post(body, "batch")
            responses = self._decode_batch(http_response.content, checked)
            outcome["error_code"] = self._first_error_code(responses)
        return responses
