"""Tests for the WebSocket transport against a local websockets server."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import pytest
from websockets.asyncio.server import ServerConnection, serve

from tcodewave import HandshakeError, NotConnectedError, TeardownError
from tcodewave.transport import WebSocketTransport


async def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll until predicate() is true or the timeout expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate() and loop.time() < deadline:
        await asyncio.sleep(0.01)


def local_url(server: object) -> str:
    port = server.sockets[0].getsockname()[1]  # type: ignore[attr-defined]
    return f"ws://127.0.0.1:{port}"


def collecting_handler(received: list[str]) -> Callable[[ServerConnection], Awaitable[None]]:
    async def handler(websocket: ServerConnection) -> None:
        async for message in websocket:
            received.append(message)  # type: ignore[arg-type]

    return handler


class TestWebSocketTransport:
    """Tests for WebSocketTransport."""

    def test_connect_send_disconnect(self) -> None:
        received: list[str] = []

        async def scenario() -> None:
            async with serve(collecting_handler(received), "127.0.0.1", 0) as server:
                transport = WebSocketTransport(local_url(server))
                await transport.connect()
                assert transport.is_connected() is True

                await transport.send("L05000")
                await transport.send("L09999")
                await wait_for(lambda: len(received) == 2)

                await transport.disconnect()
                assert transport.is_connected() is False

        asyncio.run(scenario())
        assert received == ["L05000", "L09999"]

    def test_double_disconnect_is_safe(self) -> None:
        async def scenario() -> bool:
            async with serve(collecting_handler([]), "127.0.0.1", 0) as server:
                transport = WebSocketTransport(local_url(server))
                await transport.connect()
                await transport.disconnect()
                await transport.disconnect()
                return transport.is_connected()

        assert asyncio.run(scenario()) is False

    def test_remote_close_clears_connection(self) -> None:
        async def close_immediately(websocket: ServerConnection) -> None:
            await websocket.close()

        async def scenario() -> None:
            async with serve(close_immediately, "127.0.0.1", 0) as server:
                transport = WebSocketTransport(local_url(server))
                await transport.connect()
                await wait_for(lambda: not transport.is_connected())

                assert transport.is_connected() is False
                with pytest.raises(NotConnectedError):
                    await transport.send("L05000")
                await transport.disconnect()

        asyncio.run(scenario())

    def test_send_not_connected_raises(self) -> None:
        transport = WebSocketTransport("ws://127.0.0.1:1")

        with pytest.raises(NotConnectedError, match="websocket transport not connected"):
            asyncio.run(transport.send("L05000"))

    def test_connection_refused_is_handshake_error(self) -> None:
        async def scenario() -> None:
            async with serve(collecting_handler([]), "127.0.0.1", 0) as server:
                url = local_url(server)
            # Server is closed now; nothing listens on the port
            transport = WebSocketTransport(url, open_timeout=2.0)
            await transport.connect()

        with pytest.raises(HandshakeError, match="WebSocket connection to ws://127.0.0.1"):
            asyncio.run(scenario())

    def test_invalid_url_is_handshake_error(self) -> None:
        with pytest.raises(HandshakeError):
            asyncio.run(WebSocketTransport("http://not-a-websocket").connect())

    def test_empty_url_is_handshake_error(self) -> None:
        with pytest.raises(HandshakeError, match="URL is required"):
            asyncio.run(WebSocketTransport("").connect())

    def test_disconnect_leaves_no_pending_watcher(self) -> None:
        async def scenario() -> bool:
            async with serve(collecting_handler([]), "127.0.0.1", 0) as server:
                transport = WebSocketTransport(local_url(server))
                await transport.connect()
                watcher = transport._watcher
                assert watcher is not None
                await transport.disconnect()
                return watcher.done()

        assert asyncio.run(scenario()) is True

    def test_close_failure_raises_teardown_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        transport = WebSocketTransport()

        async def broken_close(*args: object, **kwargs: object) -> None:
            raise OSError("socket already torn down")

        async def scenario() -> None:
            async with serve(collecting_handler([]), "127.0.0.1", 0) as server:
                transport.url = local_url(server)
                await transport.connect()
                monkeypatch.setattr(transport._connection, "close", broken_close)
                try:
                    await transport.disconnect()
                finally:
                    monkeypatch.undo()

        with pytest.raises(TeardownError, match="WebSocket close failed") as excinfo:
            asyncio.run(scenario())

        assert isinstance(excinfo.value.__cause__, OSError)
        assert transport.is_connected() is False
