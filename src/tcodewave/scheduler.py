"""Periodic sample → encode → send loop.

TransmissionScheduler ties an Oscillator to a connected Transport. While
armed, an asyncio task fires every ``1000 / send_frequency`` milliseconds,
samples the oscillator, encodes the value, and launches the send without
waiting for it, so a slow transport never delays the timer.

State machine::

    IDLE --arm()--> ARMED --stop()--> IDLE

IDLE is both the initial state and the state after every stop().

reconfigure() while ARMED stops and re-arms with a fresh Oscillator, so the
accumulated phase is discarded on every live parameter change.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import random
from typing import Callable

from tcodewave.codec.encoder import encode_tcode
from tcodewave.transport.driver import Transport
from tcodewave.waveform.config import OscillatorConfig
from tcodewave.waveform.oscillator import Oscillator

logger = logging.getLogger(__name__)

MIN_SEND_FREQUENCY = 1  # Hz
MAX_SEND_FREQUENCY = 200  # Hz


class SchedulerState(str, enum.Enum):
    IDLE = "idle"
    ARMED = "armed"


def _check_frequency(send_frequency: float) -> float:
    if not MIN_SEND_FREQUENCY <= send_frequency <= MAX_SEND_FREQUENCY:
        raise ValueError(
            f"send_frequency must be {MIN_SEND_FREQUENCY}-{MAX_SEND_FREQUENCY} Hz, "
            f"got {send_frequency}"
        )
    return send_frequency


class TransmissionScheduler:
    """Fixed-cadence transmitter of oscillator samples.

    Ticks that find the transport disconnected are skipped silently; losing a
    tick while a disconnect races the timer is expected. Send failures are
    logged and never stop the timer.

    stop() is synchronous: once it returns, no further tick runs and no send
    that had not started yet reaches the transport.

    Attributes:
        state: Current SchedulerState
        ticks: Number of commands launched during the current run

    Examples:
        ```python
        scheduler = TransmissionScheduler(OscillatorConfig(base_period=500), send_frequency=50)
        scheduler.arm(transport)  # inside a running event loop
        await asyncio.sleep(5)
        scheduler.stop()
        ```
    """

    def __init__(
        self,
        config: OscillatorConfig,
        send_frequency: float = 50,
        clock: Callable[[], float] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize an idle scheduler.

        Args:
            config: Oscillator parameters for the next run
            send_frequency: Ticks per second, 1-200
            clock: Millisecond clock handed to each new Oscillator
            rng: Random source handed to each new Oscillator

        Raises:
            ValueError: If send_frequency is out of range
        """
        self._config = config
        self._send_frequency = _check_frequency(send_frequency)
        self._clock = clock
        self._rng = rng

        self.state = SchedulerState.IDLE
        self.ticks = 0

        self._transport: Transport | None = None
        self._oscillator: Oscillator | None = None
        self._timer: asyncio.Task[None] | None = None
        self._run_id = 0
        self._in_flight: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> OscillatorConfig:
        return self._config

    @property
    def send_frequency(self) -> float:
        return self._send_frequency

    @property
    def interval(self) -> float:
        """Tick interval in seconds."""
        return 1.0 / self._send_frequency

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.ARMED

    @property
    def oscillator(self) -> Oscillator | None:
        return self._oscillator

    @property
    def transport(self) -> Transport | None:
        """Transport the current run sends to (None when idle)."""
        return self._transport

    def arm(self, transport: Transport) -> None:
        """Start ticking against the given transport.

        Any pending timer is cancelled first, so at most one timer is active.
        Must be called from a running event loop.

        Raises:
            RuntimeError: If no event loop is running
        """
        loop = asyncio.get_running_loop()
        self._cancel_timer()

        self._run_id += 1
        self._transport = transport
        self._oscillator = Oscillator(self._config, clock=self._clock, rng=self._rng)
        self.ticks = 0
        self._timer = loop.create_task(self._run(self._run_id), name="tcodewave-scheduler")
        self.state = SchedulerState.ARMED
        logger.info("Scheduler armed at %s Hz", self._send_frequency)

    def stop(self) -> None:
        """Cancel the timer and release the oscillator. Safe when not armed."""
        self._cancel_timer()
        # Sends launched but not yet started check the run id and give up.
        self._run_id += 1
        self._transport = None
        self._oscillator = None

        if self.state is SchedulerState.ARMED:
            self.state = SchedulerState.IDLE
            logger.info("Scheduler stopped after %d ticks", self.ticks)

    def reconfigure(
        self, config: OscillatorConfig | None = None, send_frequency: float | None = None
    ) -> None:
        """Replace parameters; an armed scheduler restarts with a new Oscillator.

        Raises:
            ValueError: If send_frequency is out of range
        """
        if send_frequency is not None:
            self._send_frequency = _check_frequency(send_frequency)
        if config is not None:
            self._config = config

        transport = self._transport
        if self.state is SchedulerState.ARMED and transport is not None:
            self.stop()
            self.arm(transport)

    async def drain(self) -> None:
        """Wait for sends that were already writing when the scheduler stopped."""
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def _run(self, run_id: int) -> None:
        loop = asyncio.get_running_loop()
        interval = self.interval
        deadline = loop.time()
        while run_id == self._run_id:
            deadline += interval
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            if run_id != self._run_id:
                return
            self._tick(run_id)
            # Resynchronize instead of bursting after a long stall.
            if loop.time() - deadline > interval:
                deadline = loop.time()

    def _tick(self, run_id: int) -> None:
        transport = self._transport
        oscillator = self._oscillator
        if transport is None or oscillator is None or not transport.is_connected():
            logger.debug("Transport not connected, skipping tick")
            return

        command = encode_tcode(oscillator.sample())
        self.ticks += 1
        task = asyncio.get_running_loop().create_task(self._transmit(transport, command, run_id))
        self._in_flight.add(task)
        task.add_done_callback(self._on_transmitted)

    async def _transmit(self, transport: Transport, command: str, run_id: int) -> None:
        if run_id != self._run_id:
            return
        await transport.send(command)

    def _on_transmitted(self, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Failed to send command: %s", exc)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
