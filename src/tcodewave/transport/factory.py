"""Construct the transport selected by PipelineSettings.device_kind."""

from __future__ import annotations

from typing import Any

from tcodewave.settings import DeviceKind, PipelineSettings
from tcodewave.transport.ble import BleTransport
from tcodewave.transport.debug import DebugSink
from tcodewave.transport.driver import DevicePicker, Transport
from tcodewave.transport.serial_port import SerialTransport
from tcodewave.transport.websocket import WebSocketTransport


def create_transport(
    settings: PipelineSettings,
    picker: DevicePicker[Any] | None = None,
    debug_sink: DebugSink | None = None,
) -> Transport:
    """Build a disconnected transport for the configured device kind.

    Args:
        settings: Pipeline settings (device_kind and its addressing fields)
        picker: Interactive chooser for serial ports and BLE devices
        debug_sink: Existing sink to reuse for the debug variant, so its log
            survives reconnects

    Returns:
        A transport that has not been connected yet
    """
    kind = settings.device_kind
    if kind is DeviceKind.SERIAL:
        return SerialTransport(settings.serial_port, settings.serial_baudrate, picker=picker)
    if kind is DeviceKind.WEBSOCKET:
        return WebSocketTransport(settings.websocket_url)
    if kind is DeviceKind.BLE:
        return BleTransport(picker=picker, scan_timeout=settings.ble_scan_timeout)
    if kind is DeviceKind.DEBUG:
        return debug_sink if debug_sink is not None else DebugSink()
    raise ValueError(f"Unsupported device kind: {kind!r}")
