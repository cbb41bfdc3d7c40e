"""Asynchronous JSON-RPC 2.0 client over HTTP."""

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


class AsyncRPCClient(ClientBase):
    """Coroutine twin of RPCClient, sending with ``httpx.AsyncClient``.

    Shares id allocation, request building and decoding with RPCClient; only
    the HTTP round trip is awaited.
    """

    def __init__(
        self,
        endpoint: str,
        http_client: httpx.AsyncClient | None = None,
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
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._retired: list[httpx.AsyncClient] = []

    @property
    def http_client(self) -> httpx.AsyncClient:
        """The httpx handle requests are sent with."""
        return self._http_client

    def set_http_client(self, http_client: httpx.AsyncClient) -> None:
        """Replace the httpx handle.

        A handle the client created itself is closed on ``aclose()``.
        """
        if self._owns_http_client:
            self._retired.append(self._http_client)
        self._http_client = http_client
        self._owns_http_client = False

    async def aclose(self) -> None:
        """Close every httpx handle the client created."""
        for retired in self._retired:
            await retired.aclose()
        self._retired.clear()
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "AsyncRPCClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def _post(self, body: bytes, method: str, request_id: int | None = None) -> httpx.Response:
        """POST one encoded payload.

        Raises:
            TransportError: If the request could not be sent or answered
        """
        try:
            return await self._http_client.post(
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

    async def call(self, method: str, *params: Any) -> Response:
        """Invoke a remote method and await its response.

        Raises:
            TransportError: If the HTTP exchange failed
            DecodeError: If the reply is not a JSON-RPC response
            SerializationError: If params cannot be encoded as JSON
        """
        request = self.builder.build_request(method, *params)
        with instrument_rpc_call(CallKind.CALL, method, request.id) as outcome:
            body = self._encode(request.to_wire(), method, request.id)
            logger.debug("Calling %s (id=%s) at %s", method, request.id, self.endpoint)
            http_response = await self._post(body, method, request.id)
            response = self._decode_response(http_response.content, method, request.id)
            if response.error is not None:
                outcome["error_code"] = response.error.code
        return response

    async def notify(self, method: str, *params: Any) -> None:
        """Send a notification. The reply body, if any, is ignored."""
        notification = self.builder.build_notification(method, *params)
        with instrument_rpc_call(CallKind.NOTIFICATION, method):
            body = self._encode(notification.to_wire(), method)
            logger.debug("Notifying %s at %s", method, self.endpoint)
            await self._post(body, method)

    async def batch(self, *entries: BatchEntry) -> list[Response]:
        """Send several requests and notifications in one HTTP exchange.

        Raises:
            InvalidArgument: If an entry is not a Request or Notification
            TransportError: If the HTTP exchange failed
            DecodeError: If the reply is not a JSON array of responses
        """
        checked = self._check_batch(entries)
        with instrument_rpc_call(CallKind.BATCH, "batch") as outcome:
            body = self._encode([entry.to_wire() for entry in checked], "batch")
            logger.debug("Sending batch of %d entries to %s", len(checked), self.endpoint)
            http_response = await self._post(body, "batch")
            responses = self._decode_batch(http_response.content, checked)
            outcome["error_code"] = self._first_error_code(responses)
        return responses
