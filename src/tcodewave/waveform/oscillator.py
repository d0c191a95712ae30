"""Phase-accumulator triangle-wave oscillator with per-sample period jitter.

The oscillator keeps a phase in [0, 2). Each call to sample() advances the
phase by the elapsed time divided by a freshly jittered period, then folds it
into a symmetric triangle: the output rises linearly over phase [0, 1) and
falls back over [1, 2).
"""

from __future__ import annotations

import random
import time
from dataclasses import replace
from typing import Any, Callable

from tcodewave.waveform.config import OscillatorConfig

#: Length of one full up-and-down cycle in phase units.
PHASE_CYCLE = 2.0


def monotonic_ms() -> float:
    """Return a monotonic timestamp in milliseconds."""
    return time.monotonic() * 1000.0


class Oscillator:
    """Stateful jittered triangle-wave generator.

    Sampling is not idempotent: every call advances the phase by the time
    elapsed since the previous call. Large gaps (e.g. after the host was
    suspended) are applied in full.

    Attributes:
        config: Current oscillator parameters
        phase: Current phase, always in [0, 2)

    Examples:
        ```python
        from tcodewave.waveform import Oscillator, OscillatorConfig

        osc = Oscillator(OscillatorConfig(base_period=1000, jitter_max=100))
        value = osc.sample()  # 0.0 right after construction
        ```
    """

    def __init__(
        self,
        config: OscillatorConfig,
        clock: Callable[[], float] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the oscillator at phase 0.

        Args:
            config: Oscillator parameters
            clock: Monotonic time source in milliseconds (default time.monotonic)
            rng: Random source for the jitter draw (default: a new random.Random)
        """
        self._config = config
        self._clock = clock if clock is not None else monotonic_ms
        self._rng = rng if rng is not None else random.Random()
        self._phase = 0.0
        self._last_sample_time = self._clock()

    @property
    def config(self) -> OscillatorConfig:
        return self._config

    @property
    def phase(self) -> float:
        return self._phase

    def update_config(self, config: OscillatorConfig | None = None, **changes: Any) -> None:
        """Replace oscillator parameters without resetting phase or time.

        The next sample continues from the current phase, so the waveform shape
        changes smoothly.

        Args:
            config: Complete replacement config (optional)
            **changes: Individual OscillatorConfig fields to override

        Raises:
            ValueError: If the merged config is invalid
        """
        base = config if config is not None else self._config
        self._config = replace(base, **changes) if changes else base

    def effective_period(self) -> float:
        """Draw the half-cycle length for one sample, in milliseconds."""
        cfg = self._config
        jitter = self._rng.random() * (cfg.jitter_max - cfg.jitter_min) + cfg.jitter_min
        return cfg.base_period + jitter

    def sample(self) -> float:
        """Advance the phase to now and return the current output value.

        Returns:
            Value in [amplitude_min, amplitude_max]
        """
        now = self._clock()
        delta = now - self._last_sample_time

        period = self.effective_period()
        # A zero-length period has no defined rate; hold the phase.
        if period > 0:
            self._phase = (self._phase + delta / period) % PHASE_CYCLE

        self._last_sample_time = now

        if self._phase < 1.0:
            normalized = self._phase
        else:
            normalized = PHASE_CYCLE - self._phase

        cfg = self._config
        return cfg.amplitude_min + normalized * (cfg.amplitude_max - cfg.amplitude_min)
