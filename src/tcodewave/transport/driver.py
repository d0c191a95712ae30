"""Abstract interface for actuator transports.

This module provides a medium-agnostic abstraction over the channels that can
carry TCode commands to an actuator:

- SerialTransport: USB/UART serial line (pyserial)
- BleTransport: Bluetooth LE GATT characteristic (bleak)
- WebSocketTransport: WebSocket server relaying to the device (websockets)
- DebugSink: in-memory log standing in for a device during development

Design Pattern: Strategy Pattern / Adapter Pattern
- Transport: Abstract interface (medium-agnostic)
- Concrete transports: adapters over each library's connection object

All I/O methods are coroutines and run on a single asyncio event loop. A
transport is either fully connected (send works) or fully absent (send fails
fast with NotConnectedError); no half-open state is visible to callers.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, TypeVar

from tcodewave.exceptions import NotConnectedError

T = TypeVar("T")

#: Interactive chooser: receives the candidates, returns one or None to cancel.
DevicePicker = Callable[[Sequence[T]], Optional[T]]


def first_candidate(candidates: Sequence[T]) -> T | None:
    """Non-interactive picker that selects the first candidate, if any."""
    return candidates[0] if candidates else None


class Transport(ABC):
    """Abstract interface for actuator transports.

    Implementations:

    - **SerialTransport**: opens a serial port at a fixed baud rate
    - **BleTransport**: writes to a fixed GATT characteristic
    - **WebSocketTransport**: sends each command as one text message
    - **DebugSink**: records every operation in a timestamped log

    Examples:
        ```python
        import asyncio
        from tcodewave.transport import DebugSink

        async def demo() -> None:
            sink = DebugSink()
            await sink.connect()
            await sink.send("L05000")
            await sink.disconnect()
            print(sink.logs)

        asyncio.run(demo())
        ```
    """

    #: Short identifier used in log messages.
    name = "transport"

    def __init__(self) -> None:
        self._send_lock = asyncio.Lock()

    @abstractmethod
    async def connect(self) -> None:
        """Perform the medium-specific handshake.

        Returns once the transport can accept sends. Calling connect() on an
        already connected transport does nothing.

        Raises:
            UnsupportedEnvironmentError: The host lacks the required capability
            UserCancelledError: The device picker was dismissed
            HandshakeError: The lower layer failed to connect
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release all held resources and mark the transport not connected.

        Safe to call when already disconnected.

        Raises:
            TeardownError: Releasing a resource failed (the transport is still
                left disconnected)
        """
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Return True iff the transport holds a live, usable channel."""
        pass

    @abstractmethod
    async def _write(self, payload: bytes, command: str) -> None:
        """Write one encoded command to the open channel."""
        pass

    async def send(self, command: str) -> None:
        """Transmit one command.

        Writes are serialized per transport: a second send() waits for the
        previous write to finish. No queuing across disconnects and no
        implicit reconnect.

        Args:
            command: ASCII command string (e.g. "L05000")

        Raises:
            NotConnectedError: If the transport is not connected
            TransportError: If the lower layer fails while writing
        """
        if not self.is_connected():
            raise NotConnectedError(f"{self.name} transport not connected. Call connect() first.")

        async with self._send_lock:
            # The channel may have closed while waiting for the previous write.
            if not self.is_connected():
                raise NotConnectedError(f"{self.name} transport disconnected before send")
            await self._write(command.encode("ascii"), command)
