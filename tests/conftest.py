"""
Pytest configuration and shared fixtures for rpcwire tests.
"""

import json
import sys
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rpcwire.client import AsyncRPCClient, RPCClient  # noqa: E402

ENDPOINT = "http://rpc.test/jsonrpc"


# =============================================================================
# Fake JSON-RPC server
# =============================================================================


class FakeServer:
    """Records every HTTP request and answers with a scripted reply.

    ``reply`` may be bytes, a JSON-serializable object, or a callable taking
    the parsed request body and returning either of those.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.reply: Any = b""
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.reply
        if callable(reply):
            reply = reply(json.loads(request.content))
        if not isinstance(reply, bytes):
            reply = json.dumps(reply).encode()
        return httpx.Response(self.status_code, content=reply)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> Any:
        return json.loads(self.last_request.content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def server() -> FakeServer:
    """Scriptable fake JSON-RPC endpoint."""
    return FakeServer()


@pytest.fixture
def client(server: FakeServer) -> Iterator[RPCClient]:
    """Synchronous client wired to the fake server."""
    http_client = httpx.Client(transport=server.transport())
    rpc_client = RPCClient(ENDPOINT, http_client)
    yield rpc_client
    http_client.close()


@pytest_asyncio.fixture
async def async_client(server: FakeServer) -> AsyncIterator[AsyncRPCClient]:
    """Asynchronous client wired to the fake server."""
    http_client = httpx.AsyncClient(transport=server.transport())
    rpc_client = AsyncRPCClient(ENDPOINT, http_client)
    yield rpc_client
    await http_client.aclose()


@pytest.fixture
def failing_transport() -> Callable[[Exception], httpx.MockTransport]:
    """Build a transport whose every request raises the given exception."""

    def _make(exc: Exception) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        return httpx.MockTransport(handler)

    return _make


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "client: Client round-trip tests")
