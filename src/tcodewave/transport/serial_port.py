"""Serial line transport (pyserial).

The port is either given explicitly (a device path such as "/dev/ttyUSB0" or
any pyserial URL such as "loop://") or chosen from the enumerated ports by a
picker callable. Blocking pyserial calls run in a worker thread so the event
loop and the scheduler timer never block on the line.
"""

from __future__ import annotations

import asyncio
import logging

import serial
from serial.tools import list_ports
from serial.tools.list_ports_common import ListPortInfo

from tcodewave.exceptions import (
    HandshakeError,
    NotConnectedError,
    TeardownError,
    TransportError,
    UnsupportedEnvironmentError,
    UserCancelledError,
)
from tcodewave.transport.driver import DevicePicker, Transport, first_candidate

logger = logging.getLogger(__name__)

#: Baud rate expected by the actuator firmware.
DEFAULT_BAUDRATE = 9600

#: Seconds a single write may block before it is reported as failed.
WRITE_TIMEOUT = 1.0


class SerialTransport(Transport):
    """Transport writing commands to a serial port.

    The port is opened with exclusive access, so this transport is the only
    writer while connected. Closing flushes pending output before the port
    is released.

    Attributes:
        port: Explicit port or pyserial URL (None means "ask the picker")
        baudrate: Line speed (default 9600)

    Examples:
        ```python
        # Explicit device
        transport = SerialTransport("/dev/ttyUSB0")

        # Let the user choose among the detected ports
        transport = SerialTransport(picker=my_console_picker)
        await transport.connect()
        await transport.send("L05000")
        await transport.disconnect()
        ```
    """

    name = "serial"

    def __init__(
        self,
        port: str | None = None,
        baudrate: int = DEFAULT_BAUDRATE,
        picker: DevicePicker[ListPortInfo] | None = None,
    ) -> None:
        super().__init__()
        self.port = port
        self.baudrate = baudrate
        self._picker = picker if picker is not None else first_candidate
        self._serial: serial.SerialBase | None = None

    def is_connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    async def connect(self) -> None:
        if self.is_connected():
            return

        port = self.port if self.port is not None else self._pick_port()

        try:
            handle = await asyncio.to_thread(
                serial.serial_for_url,
                port,
                baudrate=self.baudrate,
                write_timeout=WRITE_TIMEOUT,
                exclusive=True,
            )
        except (serial.SerialException, ValueError, OSError) as exc:
            raise HandshakeError(f"Failed to open serial port {port}: {exc}") from exc

        self._serial = handle
        logger.info("Serial connected to %s @ %d baud", port, self.baudrate)

    async def disconnect(self) -> None:
        handle = self._serial
        if handle is None:
            return
        self._serial = None

        # Let an in-flight write finish before the port goes away.
        async with self._send_lock:
            try:
                if handle.is_open:
                    await asyncio.to_thread(handle.flush)
                await asyncio.to_thread(handle.close)
            except (serial.SerialException, OSError) as exc:
                raise TeardownError(f"Failed to close serial port {handle.port}: {exc}") from exc

        logger.info("Serial disconnected from %s", handle.port)

    async def _write(self, payload: bytes, command: str) -> None:
        handle = self._serial
        if handle is None:
            raise NotConnectedError("Serial port closed before write")
        try:
            await asyncio.to_thread(handle.write, payload)
        except (serial.SerialException, OSError) as exc:
            raise TransportError(f"Serial write failed: {exc}") from exc

    def _pick_port(self) -> str:
        """Enumerate local ports and let the picker choose one."""
        candidates = sorted(list_ports.comports(), key=lambda info: info.device)
        if not candidates:
            raise UnsupportedEnvironmentError("No serial ports available on this host")

        choice = self._picker(candidates)
        if choice is None:
            raise UserCancelledError("No serial port selected")
        return choice.device
