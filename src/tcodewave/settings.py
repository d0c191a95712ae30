"""User-facing pipeline settings.

This module provides PipelineSettings, the validated Pydantic model of every
parameter the control surface exposes: which transport to use, how to reach
it, how often to send, and the waveform shape.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tcodewave.waveform.config import OscillatorConfig


class DeviceKind(str, enum.Enum):
    """Transport variant selected by the user."""

    SERIAL = "serial"
    WEBSOCKET = "websocket"
    BLE = "ble"
    DEBUG = "debug"


#: Settings that pick or address the transport; locked while connected.
DEVICE_FIELDS = frozenset(
    {"device_kind", "websocket_url", "serial_port", "serial_baudrate", "ble_scan_timeout"}
)

#: Settings that shape the transmitted waveform.
WAVEFORM_FIELDS = frozenset(
    {"send_frequency", "base_period", "random_min", "random_max", "amplitude_min", "amplitude_max"}
)


class PipelineSettings(BaseModel):
    """Validated configuration for a Pipeline.

    Settings are immutable; use updated() to derive a changed copy, which is
    validated as a whole.

    Example:
        >>> settings = PipelineSettings(device_kind="debug", send_frequency=100)
        >>> settings.updated(amplitude_min=0.2).amplitude_min
        0.2

    Attributes:
        device_kind: Transport variant (default serial)
        websocket_url: WebSocket server address
        serial_port: Explicit serial port or pyserial URL; None asks the picker
        serial_baudrate: Serial line speed
        ble_scan_timeout: Seconds to scan for BLE devices
        send_frequency: Commands per second, 1-200
        base_period: Baseline half-cycle length in milliseconds
        random_min: Lower bound of the per-sample period jitter in milliseconds
        random_max: Upper bound of the per-sample period jitter in milliseconds
        amplitude_min: Lowest position, 0.0-1.0
        amplitude_max: Highest position, 0.0-1.0
    """

    model_config = ConfigDict(
        # Settings are replaced, never mutated
        frozen=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    # Connection
    device_kind: DeviceKind = DeviceKind.SERIAL
    websocket_url: str = "ws://localhost:8080"
    serial_port: str | None = None
    serial_baudrate: int = Field(default=9600, gt=0)
    ble_scan_timeout: float = Field(default=5.0, gt=0)

    # Waveform
    send_frequency: int = Field(default=50, ge=1, le=200)
    base_period: float = Field(default=0.0, ge=0)
    random_min: float = Field(default=0.0, ge=0, le=5000)
    random_max: float = Field(default=200.0, ge=0, le=5000)
    amplitude_min: float = Field(default=0.0, ge=0.0, le=1.0)
    amplitude_max: float = Field(default=1.0, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_ordering(self) -> PipelineSettings:
        if self.random_min > self.random_max:
            raise ValueError(
                f"random_min must be <= random_max, got {self.random_min} > {self.random_max}"
            )
        if self.amplitude_min > self.amplitude_max:
            raise ValueError(
                f"amplitude_min must be <= amplitude_max, "
                f"got {self.amplitude_min} > {self.amplitude_max}"
            )
        return self

    @classmethod
    def from_json_file(cls, path: str | Path) -> PipelineSettings:
        """Load settings from a JSON file; missing keys keep their defaults."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))

    def updated(self, **changes: Any) -> PipelineSettings:
        """Return a validated copy with the given fields replaced.

        Raises:
            pydantic.ValidationError: If the result is invalid
        """
        return type(self).model_validate({**self.model_dump(), **changes})

    def oscillator_config(self) -> OscillatorConfig:
        return OscillatorConfig(
            base_period=self.base_period,
            jitter_min=self.random_min,
            jitter_max=self.random_max,
            amplitude_min=self.amplitude_min,
            amplitude_max=self.amplitude_max,
        )
