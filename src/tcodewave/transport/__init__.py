"""Actuator transport abstraction layer.

This module provides a medium-agnostic interface for the channels that carry
TCode commands to an actuator, so the scheduler never cares how bytes move.

## Available Transports

### SerialTransport
USB/UART serial line via pyserial. Opens the port at 9600 baud with exclusive
access. Accepts device paths and pyserial URLs ("loop://" for testing).

### BleTransport
Bluetooth LE via bleak. Scans for the actuator service, writes to its command
characteristic, and notices device-initiated disconnects.

### WebSocketTransport
WebSocket relay via websockets. One text message per command.

### DebugSink
No transport at all: records a timestamped log of every operation.

## Quick Start

```python
import asyncio
from tcodewave.transport import DebugSink

async def main() -> None:
    sink = DebugSink()
    await sink.connect()
    await sink.send("L05000")
    await sink.disconnect()
    print("\\n".join(sink.logs))

asyncio.run(main())
```
"""

from tcodewave.transport.ble import CHARACTERISTIC_UUID, SERVICE_UUID, BleTransport
from tcodewave.transport.debug import DebugSink
from tcodewave.transport.driver import DevicePicker, Transport, first_candidate
from tcodewave.transport.factory import create_transport
from tcodewave.transport.serial_port import DEFAULT_BAUDRATE, SerialTransport
from tcodewave.transport.websocket import WebSocketTransport

__all__ = [
    "Transport",
    "DevicePicker",
    "first_candidate",
    "create_transport",
    "SerialTransport",
    "BleTransport",
    "WebSocketTransport",
    "DebugSink",
    "DEFAULT_BAUDRATE",
    "SERVICE_UUID",
    "CHARACTERISTIC_UUID",
]
