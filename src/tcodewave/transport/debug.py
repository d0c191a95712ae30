"""In-memory debug transport.

DebugSink stands in for a physical actuator during development. Instead of
moving bytes it appends a timestamped record of every operation to an
observable log.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from tcodewave.transport.driver import Transport

logger = logging.getLogger(__name__)


class DebugSink(Transport):
    """Transport that logs commands instead of transmitting them.

    Records have the form ``"[HH:MM:SS] <message>"``:

    - ``Debug Device Connected``
    - ``Debug Device Disconnected``
    - ``Send: <command>``

    Attributes:
        logs: Copy of the ordered, append-only record list

    Examples:
        ```python
        sink = DebugSink()
        sink.on_log(lambda records: print(records[-1]))
        await sink.connect()
        await sink.send("L05000")  # prints "[12:00:00] Send: L05000"
        ```
    """

    name = "debug"

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize an empty, disconnected sink.

        Args:
            clock: Wall-clock source for record timestamps (default datetime.now)
        """
        super().__init__()
        self._clock = clock if clock is not None else datetime.now
        self._records: list[str] = []
        self._observers: list[Callable[[list[str]], None]] = []
        self._connected = False

    @property
    def logs(self) -> list[str]:
        return list(self._records)

    @property
    def sent_commands(self) -> list[str]:
        """Commands recorded by send(), in order."""
        marker = "] Send: "
        return [r.split(marker, 1)[1] for r in self._records if marker in r]

    def on_log(self, callback: Callable[[list[str]], None]) -> None:
        """Register an observer called with the full log after every change."""
        self._observers.append(callback)

    def clear_logs(self) -> None:
        self._records = []
        self._notify()

    async def connect(self) -> None:
        if self._connected:
            return
        self._connected = True
        self._record("Debug Device Connected")

    async def disconnect(self) -> None:
        if not self._connected:
            return
        self._connected = False
        self._record("Debug Device Disconnected")

    def is_connected(self) -> bool:
        return self._connected

    async def _write(self, payload: bytes, command: str) -> None:
        self._record(f"Send: {command}")

    def _record(self, message: str) -> None:
        timestamp = self._clock().strftime("%H:%M:%S")
        entry = f"[{timestamp}] {message}"
        self._records.append(entry)
        logger.debug(entry)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.logs
        for callback in self._observers:
            callback(snapshot)
