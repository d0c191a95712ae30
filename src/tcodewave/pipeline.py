"""Pipeline controller: the glue between user intent and the transmitter.

A Pipeline owns one transport and one TransmissionScheduler. Callers express
two intents, "connected" and "running", plus settings changes; the pipeline
arms the scheduler exactly when both intents hold and tears it down when
either goes away.
"""

from __future__ import annotations

import logging
import random
from types import TracebackType
from typing import Any, Callable

from tcodewave.scheduler import TransmissionScheduler
from tcodewave.settings import DEVICE_FIELDS, WAVEFORM_FIELDS, PipelineSettings
from tcodewave.transport.debug import DebugSink
from tcodewave.transport.driver import DevicePicker, Transport
from tcodewave.transport.factory import create_transport

logger = logging.getLogger(__name__)

TransportFactory = Callable[..., Transport]


class Pipeline:
    """Connection and run-state controller for one actuator.

    Examples:
        ```python
        settings = PipelineSettings(device_kind="debug", send_frequency=50)
        async with Pipeline(settings) as pipeline:
            await pipeline.connect()
            pipeline.set_running(True)
            await asyncio.sleep(1.0)
            pipeline.update_settings(amplitude_max=0.5)  # restarts the waveform
            await asyncio.sleep(1.0)
        print(pipeline.debug_logs[-1])
        ```
    """

    def __init__(
        self,
        settings: PipelineSettings | None = None,
        picker: DevicePicker[Any] | None = None,
        transport_factory: TransportFactory = create_transport,
        clock: Callable[[], float] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize a disconnected, stopped pipeline.

        Args:
            settings: Initial settings (default PipelineSettings())
            picker: Interactive chooser for serial ports and BLE devices
            transport_factory: Builds the transport on connect()
            clock: Millisecond clock for the oscillator (testing)
            rng: Random source for the oscillator jitter (testing)
        """
        self._settings = settings if settings is not None else PipelineSettings()
        self._picker = picker
        self._transport_factory = transport_factory
        self._transport: Transport | None = None
        self._run_requested = False
        self._debug_sink = DebugSink()
        self._scheduler = TransmissionScheduler(
            self._settings.oscillator_config(),
            self._settings.send_frequency,
            clock=clock,
            rng=rng,
        )

    @property
    def settings(self) -> PipelineSettings:
        return self._settings

    @property
    def scheduler(self) -> TransmissionScheduler:
        return self._scheduler

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and self._transport.is_connected()

    @property
    def is_running(self) -> bool:
        return self._scheduler.is_running

    @property
    def debug_logs(self) -> list[str]:
        """Records of the debug sink (empty unless the debug device was used)."""
        return self._debug_sink.logs

    def clear_debug_logs(self) -> None:
        self._debug_sink.clear_logs()

    def on_debug_log(self, callback: Callable[[list[str]], None]) -> None:
        """Register an observer called with the full debug log after each change."""
        self._debug_sink.on_log(callback)

    async def connect(self) -> None:
        """Create and connect the configured transport.

        Raises:
            TransportError: Any connect failure, propagated unchanged
        """
        if self.is_connected:
            return
        if self._transport is not None:
            await self._release_stale_transport()

        transport = self._transport_factory(
            self._settings, picker=self._picker, debug_sink=self._debug_sink
        )
        await transport.connect()
        self._transport = transport
        logger.info("Connected via %s", transport.name)
        self._sync()

    async def disconnect(self) -> None:
        """Stop transmitting and release the transport.

        The run intent is cleared, so reconnecting does not resume sending.

        Raises:
            TeardownError: If the transport fails to release its resources
        """
        self._run_requested = False
        self._scheduler.stop()
        await self._scheduler.drain()

        transport = self._transport
        self._transport = None
        if transport is not None:
            await transport.disconnect()
            logger.info("Disconnected from %s", transport.name)

    def set_running(self, running: bool) -> None:
        """Record the run intent; transmission starts only while connected."""
        self._run_requested = running
        self._sync()

    def toggle_running(self) -> bool:
        self.set_running(not self._run_requested)
        return self._run_requested

    def update_settings(self, **changes: Any) -> PipelineSettings:
        """Apply validated settings changes.

        Waveform changes restart an armed scheduler with a fresh oscillator.

        Raises:
            ValueError: If a device setting is changed while connected
            pydantic.ValidationError: If the resulting settings are invalid
        """
        locked = DEVICE_FIELDS.intersection(changes)
        if locked and self.is_connected:
            raise ValueError(f"Cannot change {', '.join(sorted(locked))} while connected")

        new_settings = self._settings.updated(**changes)
        self._settings = new_settings

        if WAVEFORM_FIELDS.intersection(changes):
            self._scheduler.reconfigure(
                config=new_settings.oscillator_config(),
                send_frequency=new_settings.send_frequency,
            )
        return new_settings

    async def close(self) -> None:
        """Tear down the owning context: stop and disconnect."""
        await self.disconnect()

    async def __aenter__(self) -> Pipeline:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _release_stale_transport(self) -> None:
        """Drop a transport whose link went down without disconnect().

        The run intent is kept, so transmission resumes on the next transport.
        """
        transport = self._transport
        self._transport = None
        self._scheduler.stop()
        await self._scheduler.drain()
        if transport is not None:
            logger.info("Releasing dropped %s transport", transport.name)
            await transport.disconnect()

    def _sync(self) -> None:
        """Arm or stop the scheduler to match the current intents."""
        transport = self._transport
        should_run = (
            self._run_requested and transport is not None and transport.is_connected()
        )
        if should_run and transport is not None:
            if not self._scheduler.is_running or self._scheduler.transport is not transport:
                self._scheduler.arm(transport)
        elif self._scheduler.is_running:
            self._scheduler.stop()
