"""Tests for the transmission scheduler."""

from __future__ import annotations

import asyncio
import logging
import re

import pytest

from tcodewave import SchedulerState, TransmissionScheduler, TransportError
from tcodewave.transport import DebugSink
from tcodewave.waveform import OscillatorConfig

COMMAND_PATTERN = re.compile(r"^L0\d{1,4}$")


class FailingSink(DebugSink):
    """Connected transport whose writes always fail."""

    async def _write(self, payload: bytes, command: str) -> None:
        raise TransportError("line noise")


class TestSchedulerConfig:
    """Tests for scheduler construction and validation."""

    def test_initial_state(self) -> None:
        scheduler = TransmissionScheduler(OscillatorConfig())

        assert scheduler.state is SchedulerState.IDLE
        assert scheduler.is_running is False
        assert scheduler.send_frequency == 50
        assert scheduler.oscillator is None

    def test_interval(self) -> None:
        assert TransmissionScheduler(OscillatorConfig(), 50).interval == pytest.approx(0.02)
        assert TransmissionScheduler(OscillatorConfig(), 200).interval == pytest.approx(0.005)
        assert TransmissionScheduler(OscillatorConfig(), 1).interval == pytest.approx(1.0)

    def test_frequency_out_of_range_raises(self) -> None:
        with pytest.raises(ValueError, match="send_frequency must be 1-200 Hz"):
            TransmissionScheduler(OscillatorConfig(), send_frequency=0)

        with pytest.raises(ValueError, match="send_frequency must be 1-200 Hz"):
            TransmissionScheduler(OscillatorConfig(), send_frequency=201)

    def test_reconfigure_out_of_range_raises(self) -> None:
        scheduler = TransmissionScheduler(OscillatorConfig())

        with pytest.raises(ValueError):
            scheduler.reconfigure(send_frequency=500)
        assert scheduler.send_frequency == 50

    def test_arm_requires_running_loop(self) -> None:
        scheduler = TransmissionScheduler(OscillatorConfig())

        with pytest.raises(RuntimeError):
            scheduler.arm(DebugSink())
        assert scheduler.state is SchedulerState.IDLE

    def test_stop_when_idle_is_safe(self) -> None:
        scheduler = TransmissionScheduler(OscillatorConfig())
        scheduler.stop()
        assert scheduler.state is SchedulerState.IDLE


class TestSchedulerRun:
    """Tests for armed scheduler behavior."""

    def test_liveness_at_50_hz(self) -> None:
        """About 50 commands in one second, none after stop()."""
        sink = DebugSink()
        scheduler = TransmissionScheduler(OscillatorConfig(base_period=500), send_frequency=50)

        async def scenario() -> tuple[int, int]:
            await sink.connect()
            scheduler.arm(sink)
            assert scheduler.state is SchedulerState.ARMED

            await asyncio.sleep(1.0)
            scheduler.stop()
            sent_at_stop = len(sink.sent_commands)

            await asyncio.sleep(0.2)
            return sent_at_stop, len(sink.sent_commands)

        sent_at_stop, sent_later = asyncio.run(scenario())

        assert 40 <= sent_at_stop <= 55
        assert sent_later == sent_at_stop
        assert scheduler.state is SchedulerState.IDLE
        assert scheduler.oscillator is None

    def test_commands_are_well_formed(self) -> None:
        sink = DebugSink()
        config = OscillatorConfig(base_period=50, jitter_max=20, amplitude_min=0.25, amplitude_max=0.75)
        scheduler = TransmissionScheduler(config, send_frequency=200)

        async def scenario() -> None:
            await sink.connect()
            scheduler.arm(sink)
            await asyncio.sleep(0.3)
            scheduler.stop()

        asyncio.run(scenario())

        commands = sink.sent_commands
        assert commands
        for command in commands:
            assert COMMAND_PATTERN.match(command)
            assert 2500 <= int(command[2:]) <= 7500

    def test_disconnected_transport_skips_ticks(self) -> None:
        sink = DebugSink()
        scheduler = TransmissionScheduler(OscillatorConfig(), send_frequency=100)

        async def scenario() -> None:
            scheduler.arm(sink)  # never connected
            await asyncio.sleep(0.1)
            assert scheduler.is_running is True
            scheduler.stop()

        asyncio.run(scenario())

        assert scheduler.ticks == 0
        assert sink.logs == []

    def test_ticks_resume_after_reconnect(self) -> None:
        sink = DebugSink()
        scheduler = TransmissionScheduler(OscillatorConfig(), send_frequency=100)

        async def scenario() -> None:
            scheduler.arm(sink)
            await asyncio.sleep(0.05)
            await sink.connect()
            await asyncio.sleep(0.1)
            scheduler.stop()

        asyncio.run(scenario())
        assert len(sink.sent_commands) > 0

    def test_send_failures_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = FailingSink()
        scheduler = TransmissionScheduler(OscillatorConfig(), send_frequency=100)

        async def scenario() -> None:
            await sink.connect()
            scheduler.arm(sink)
            await asyncio.sleep(0.1)
            assert scheduler.is_running is True
            scheduler.stop()
            await scheduler.drain()

        with caplog.at_level(logging.WARNING, logger="tcodewave.scheduler"):
            asyncio.run(scenario())

        assert scheduler.ticks > 0
        assert "Failed to send command: line noise" in caplog.text

    def test_reconfigure_while_armed_rebuilds_oscillator(self) -> None:
        sink = DebugSink()
        scheduler = TransmissionScheduler(OscillatorConfig(), send_frequency=50)
        new_config = OscillatorConfig(amplitude_min=0.5, amplitude_max=0.5)

        async def scenario() -> None:
            await sink.connect()
            scheduler.arm(sink)
            await asyncio.sleep(0.1)
            first = scheduler.oscillator

            scheduler.reconfigure(config=new_config, send_frequency=100)
            assert scheduler.state is SchedulerState.ARMED
            assert scheduler.oscillator is not first
            assert scheduler.oscillator is not None
            assert scheduler.oscillator.phase == 0.0
            sent_before = len(sink.sent_commands)

            await asyncio.sleep(0.1)
            scheduler.stop()
            assert set(sink.sent_commands[sent_before:]) == {"L05000"}

        asyncio.run(scenario())
        assert scheduler.config is new_config
        assert scheduler.send_frequency == 100

    def test_reconfigure_while_idle_does_not_arm(self) -> None:
        scheduler = TransmissionScheduler(OscillatorConfig())
        scheduler.reconfigure(config=OscillatorConfig(amplitude_max=0.5), send_frequency=10)

        assert scheduler.state is SchedulerState.IDLE
        assert scheduler.send_frequency == 10

    def test_rearm_replaces_timer(self) -> None:
        """Arming twice keeps a single timer: the send rate does not double."""
        sink = DebugSink()
        scheduler = TransmissionScheduler(OscillatorConfig(), send_frequency=50)

        async def scenario() -> int:
            await sink.connect()
            scheduler.arm(sink)
            scheduler.arm(sink)
            await asyncio.sleep(0.5)
            scheduler.stop()
            return len(sink.sent_commands)

        assert asyncio.run(scenario()) <= 30

    def test_rearm_after_stop(self) -> None:
        sink = DebugSink()
        scheduler = TransmissionScheduler(OscillatorConfig(), send_frequency=100)

        async def scenario() -> None:
            await sink.connect()
            scheduler.arm(sink)
            await asyncio.sleep(0.05)
            scheduler.stop()
            assert scheduler.state is SchedulerState.IDLE

            scheduler.arm(sink)
            assert scheduler.state is SchedulerState.ARMED
            assert scheduler.ticks == 0
            await asyncio.sleep(0.05)
            scheduler.stop()

        asyncio.run(scenario())
        assert scheduler.state is SchedulerState.IDLE
