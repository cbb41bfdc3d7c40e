"""Unit tests for the asynchronous JSON-RPC client."""

import asyncio

import httpx
import pytest

from rpcwire.client import AsyncRPCClient
from rpcwire.config import ClientConfig, IDConfig
from rpcwire.errors import DecodeError, InvalidArgument, TransportError


def _echo(body):
    if isinstance(body, list):
        return [
            {"jsonrpc": "2.0", "result": entry["method"], "id": entry["id"]}
            for entry in body
            if "id" in entry
        ]
    return {"jsonrpc": "2.0", "result": body.get("params"), "id": body.get("id")}


@pytest.mark.client
class TestAsyncRPCClient:
    """Tests for AsyncRPCClient."""

    @pytest.mark.asyncio
    async def test_call(self, async_client, server):
        """Test a call round trip."""
        server.reply = _echo
        response = await async_client.call("echo", 1, "two")

        assert response.id == 0
        assert response.result == [1, "two"]
        assert server.last_body["method"] == "echo"

    @pytest.mark.asyncio
    async def test_error_is_data(self, async_client, server):
        """Test server errors are returned, not raised."""
        server.reply = {"jsonrpc": "2.0", "error": {"code": -32000, "message": "busy"}, "id": 0}
        response = await async_client.call("m")
        assert response.is_error
        assert response.error.message == "busy"

    @pytest.mark.asyncio
    async def test_notify(self, async_client, server):
        """Test notifications are sent without id and the reply is ignored."""
        server.reply = b"garbage"
        await async_client.notify("tick", 5)
        assert server.last_body == {"jsonrpc": "2.0", "method": "tick", "params": [5]}

    @pytest.mark.asyncio
    async def test_batch(self, async_client, server):
        """Test a batch round trip."""
        server.reply = _echo
        responses = await async_client.batch(
            async_client.new_request("a"),
            async_client.new_notification("n"),
            async_client.new_request("b"),
        )
        assert [(r.id, r.result) for r in responses] == [(0, "a"), (1, "b")]

    @pytest.mark.asyncio
    async def test_batch_rejects_foreign_entry(self, async_client, server):
        """Test invalid entries are refused before sending."""
        with pytest.raises(InvalidArgument):
            await async_client.batch("not a request")
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_decode_error(self, async_client, server):
        """Test malformed replies raise DecodeError."""
        server.reply = b"{"
        with pytest.raises(DecodeError):
            await async_client.call("m")

    @pytest.mark.asyncio
    async def test_concurrent_calls_get_unique_ids(self, async_client, server):
        """Test concurrent calls never share an id."""
        server.reply = _echo
        responses = await asyncio.gather(*(async_client.call("m", i) for i in range(20)))

        assert sorted(r.id for r in responses) == list(range(20))
        for response in responses:
            assert response.result == [response.id]

    @pytest.mark.asyncio
    async def test_transport_failure(self, failing_transport):
        """Test connection errors surface as TransportError."""
        transport = failing_transport(httpx.ConnectError("refused"))
        async with httpx.AsyncClient(transport=transport) as http_client:
            client = AsyncRPCClient("http://rpc.test/jsonrpc", http_client)
            with pytest.raises(TransportError) as exc_info:
                await client.call("m")

        assert exc_info.value.code == "TRANSPORT_FAILED"
        assert exc_info.value.endpoint == "http://rpc.test/jsonrpc"

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_handles(self, server):
        """Test aclose closes the default handle and any it replaced."""
        async with AsyncRPCClient("http://rpc.test/jsonrpc") as client:
            original = client.http_client
            replacement = httpx.AsyncClient(transport=server.transport())
            client.set_http_client(replacement)

        assert original.is_closed
        assert not replacement.is_closed
        await replacement.aclose()

    @pytest.mark.asyncio
    async def test_from_config(self, server):
        """Test the async client is built from a config like the sync one."""
        server.reply = _echo
        config = ClientConfig(endpoint="http://rpc.test/jsonrpc", ids=IDConfig(start=3))
        async with httpx.AsyncClient(transport=server.transport()) as http_client:
            client = AsyncRPCClient.from_config(config, http_client=http_client)
            response = await client.call("m")

        assert isinstance(client, AsyncRPCClient)
        assert response.id == 3
