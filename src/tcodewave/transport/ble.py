"""Bluetooth LE transport (bleak).

Commands are written to a fixed GATT characteristic of a fixed service that
the actuator firmware exposes. Devices are discovered by scanning for that
service UUID; a picker callable chooses among the advertisers.
"""

from __future__ import annotations

import asyncio
import logging

from bleak import BleakClient, BleakScanner
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError

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

# Actuator GATT layout
SERVICE_UUID = "4fafc201-1fb5-459e-8fcc-c5c9c331914b"
CHARACTERISTIC_UUID = "beb5483e-36e1-4688-b7f5-ea07361b26a8"

DEFAULT_SCAN_TIMEOUT = 5.0  # seconds


class BleTransport(Transport):
    """Transport writing commands to a BLE GATT characteristic.

    A disconnect initiated by the device (out of range, powered off) clears
    the connection through bleak's ``disconnected_callback``, even if
    disconnect() is never called.

    Examples:
        ```python
        transport = BleTransport(picker=my_console_picker)
        await transport.connect()  # scan, pick, connect, resolve characteristic
        await transport.send("L05000")
        await transport.disconnect()
        ```
    """

    name = "ble"

    def __init__(
        self,
        picker: DevicePicker[BLEDevice] | None = None,
        scan_timeout: float = DEFAULT_SCAN_TIMEOUT,
    ) -> None:
        super().__init__()
        self.scan_timeout = scan_timeout
        self._picker = picker if picker is not None else first_candidate
        self._client: BleakClient | None = None
        self._characteristic: BleakGATTCharacteristic | None = None

    def is_connected(self) -> bool:
        return self._client is not None and self._characteristic is not None

    async def connect(self) -> None:
        if self.is_connected():
            return

        device = await self._pick_device()
        client = BleakClient(device, disconnected_callback=self._on_device_disconnected)

        try:
            await client.connect()
            service = client.services.get_service(SERVICE_UUID)
            if service is None:
                raise HandshakeError(f"Service {SERVICE_UUID} not found on {device.address}")
            characteristic = service.get_characteristic(CHARACTERISTIC_UUID)
            if characteristic is None:
                raise HandshakeError(
                    f"Characteristic {CHARACTERISTIC_UUID} not found on {device.address}"
                )
        except HandshakeError:
            await self._abandon(client)
            raise
        except (BleakError, OSError, asyncio.TimeoutError) as exc:
            await self._abandon(client)
            raise HandshakeError(f"BLE connection to {device.address} failed: {exc}") from exc

        self._client = client
        self._characteristic = characteristic
        logger.info("BLE connected to %s (%s)", device.name, device.address)

    async def disconnect(self) -> None:
        client = self._client
        if client is None:
            return
        self._client = None
        self._characteristic = None

        try:
            if client.is_connected:
                await client.disconnect()
        except (BleakError, OSError) as exc:
            raise TeardownError(f"BLE disconnect failed: {exc}") from exc

        logger.info("BLE disconnected")

    async def _write(self, payload: bytes, command: str) -> None:
        client = self._client
        characteristic = self._characteristic
        if client is None or characteristic is None:
            raise NotConnectedError("BLE link dropped before write")
        try:
            await client.write_gatt_char(characteristic, payload, response=True)
        except BleakError as exc:
            raise TransportError(f"BLE write failed: {exc}") from exc

    async def _pick_device(self) -> BLEDevice:
        """Scan for advertisers of the actuator service and let the picker choose."""
        try:
            found = await BleakScanner.discover(
                timeout=self.scan_timeout, service_uuids=[SERVICE_UUID]
            )
        except (BleakError, OSError) as exc:
            raise UnsupportedEnvironmentError(f"Bluetooth LE is not available: {exc}") from exc

        logger.debug("BLE scan found %d device(s)", len(found))
        choice = self._picker(found)
        if choice is None:
            raise UserCancelledError("No BLE device selected")
        return choice

    def _on_device_disconnected(self, client: BleakClient) -> None:
        # Ignore callbacks from clients we already released.
        if client is not self._client:
            return
        self._client = None
        self._characteristic = None
        logger.info("BLE device disconnected")

    @staticmethod
    async def _abandon(client: BleakClient) -> None:
        """Drop a half-connected client so no partial state survives."""
        try:
            await client.disconnect()
        except (BleakError, OSError) as exc:
            logger.debug("Ignoring disconnect error during failed handshake: %s", exc)
