"""tcodewave: TCode Waveform Generator

A Python library that drives a TCode linear actuator with a continuously
generated triangle wave. Each tick samples a jittered oscillator, encodes the
position as a TCode command ("L0" + 0..9999), and sends it over a pluggable
transport.

Key Features:
- Phase-accumulator triangle oscillator with per-sample period jitter
- Configurable amplitude bounds and send rate (1-200 Hz)
- Interchangeable transports: serial (pyserial), Bluetooth LE (bleak),
  WebSocket (websockets), and an in-memory debug sink
- Pydantic-validated settings, asyncio throughout

Quick Start:
    >>> import asyncio
    >>> from tcodewave import Pipeline, PipelineSettings
    >>>
    >>> async def main() -> None:
    ...     settings = PipelineSettings(device_kind="debug", send_frequency=20)
    ...     async with Pipeline(settings) as pipeline:
    ...         await pipeline.connect()
    ...         pipeline.set_running(True)
    ...         await asyncio.sleep(1.0)
    >>>
    >>> asyncio.run(main())
"""

from __future__ import annotations

from .codec import encode_tcode
from .exceptions import (
    HandshakeError,
    NotConnectedError,
    TCodeWaveError,
    TeardownError,
    TransportError,
    UnsupportedEnvironmentError,
    UserCancelledError,
)
from .pipeline import Pipeline
from .scheduler import SchedulerState, TransmissionScheduler
from .settings import DeviceKind, PipelineSettings
from .transport import (
    BleTransport,
    DebugSink,
    SerialTransport,
    Transport,
    WebSocketTransport,
    create_transport,
)
from .waveform import Oscillator, OscillatorConfig

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode_tcode",
    "Oscillator",
    "OscillatorConfig",
    "TransmissionScheduler",
    "SchedulerState",
    "Pipeline",
    "PipelineSettings",
    "DeviceKind",
    # Transports
    "Transport",
    "SerialTransport",
    "BleTransport",
    "WebSocketTransport",
    "DebugSink",
    "create_transport",
    # Exceptions
    "TCodeWaveError",
    "TransportError",
    "UnsupportedEnvironmentError",
    "UserCancelledError",
    "HandshakeError",
    "NotConnectedError",
    "TeardownError",
    # Version
    "__version__",
]
