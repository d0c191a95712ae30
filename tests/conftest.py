"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import random
from datetime import datetime

import pytest


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float = 0.0) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def clock() -> FakeClock:
    """Millisecond clock starting at 0."""
    return FakeClock()


@pytest.fixture
def fixed_rng() -> FixedRandom:
    """Random source that always draws the lower jitter bound."""
    return FixedRandom(0.0)


@pytest.fixture
def wall_clock() -> datetime:
    """Fixed wall-clock time for debug sink timestamps."""
    return datetime(2026, 1, 1, 12, 34, 56)
