"""WebSocket transport (websockets).

Each command is sent as a single text message to a WebSocket server that
relays it to the actuator. The channel is one-directional: anything the
server sends back is read and discarded so closing frames are still noticed.
"""

from __future__ import annotations

import asyncio
import logging

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI
from websockets.protocol import State

from tcodewave.exceptions import HandshakeError, NotConnectedError, TeardownError
from tcodewave.transport.driver import Transport

logger = logging.getLogger(__name__)

DEFAULT_URL = "ws://localhost:8080"
DEFAULT_OPEN_TIMEOUT = 10.0  # seconds


class WebSocketTransport(Transport):
    """Transport sending commands as WebSocket text messages.

    Sends require the connection to be fully open; a connection that is still
    opening or already closing rejects sends with NotConnectedError. A close
    initiated by the server clears the connection passively.

    Attributes:
        url: Server address, e.g. "ws://192.168.1.20:8080"
        open_timeout: Seconds allowed for the opening handshake

    Examples:
        ```python
        transport = WebSocketTransport("ws://localhost:8080")
        await transport.connect()
        await transport.send("L05000")
        await transport.disconnect()
        ```
    """

    name = "websocket"

    def __init__(self, url: str = DEFAULT_URL, open_timeout: float = DEFAULT_OPEN_TIMEOUT) -> None:
        super().__init__()
        self.url = url
        self.open_timeout = open_timeout
        self._connection: ClientConnection | None = None
        self._watcher: asyncio.Task[None] | None = None

    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.state is State.OPEN

    async def connect(self) -> None:
        if self.is_connected():
            return

        if not self.url:
            raise HandshakeError("WebSocket URL is required")

        try:
            connection = await connect(self.url, open_timeout=self.open_timeout)
        except (InvalidURI, InvalidHandshake, OSError, asyncio.TimeoutError) as exc:
            raise HandshakeError(f"WebSocket connection to {self.url} failed: {exc}") from exc

        self._connection = connection
        self._watcher = asyncio.create_task(
            self._watch_close(connection), name="tcodewave-websocket-watch"
        )
        logger.info("WebSocket connected to %s", self.url)

    async def disconnect(self) -> None:
        connection = self._connection
        watcher = self._watcher
        self._connection = None
        self._watcher = None

        if watcher is not None:
            watcher.cancel()

        try:
            if connection is not None:
                await connection.close()
        except OSError as exc:
            raise TeardownError(f"WebSocket close failed: {exc}") from exc
        finally:
            # No task of this connection outlives disconnect().
            if watcher is not None:
                await asyncio.gather(watcher, return_exceptions=True)

        if connection is not None:
            logger.info("WebSocket disconnected from %s", self.url)

    async def _write(self, payload: bytes, command: str) -> None:
        connection = self._connection
        if connection is None:
            raise NotConnectedError("WebSocket closed before send")
        try:
            await connection.send(command)
        except ConnectionClosed as exc:
            raise NotConnectedError(f"WebSocket closed while sending: {exc}") from exc

    async def _watch_close(self, connection: ClientConnection) -> None:
        """Drain incoming messages until the connection closes, then drop it."""
        try:
            async for _message in connection:
                pass
        except ConnectionClosed as exc:
            logger.info("WebSocket closed with error: %s", exc)
        finally:
            if self._connection is connection:
                self._connection = None
                self._watcher = None
                logger.info("WebSocket closed by remote side")
