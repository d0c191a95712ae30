"""Configuration for the waveform oscillator.

This module provides the immutable OscillatorConfig value object consumed by
Oscillator and TransmissionScheduler.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OscillatorConfig:
    """Parameters of a jittered triangle-wave oscillator.

    Every sample draws a fresh jitter in ``[jitter_min, jitter_max]`` and adds
    it to ``base_period`` to obtain the effective half-cycle length used for
    that sample. The output ramps between ``amplitude_min`` and
    ``amplitude_max``.

    Attributes:
        base_period: Baseline half-cycle length in milliseconds (default 0).
            The full up-and-down cycle takes two effective periods.

        jitter_min: Lower bound of the random jitter in milliseconds (default 0)

        jitter_max: Upper bound of the random jitter in milliseconds (default 200)

        amplitude_min: Lowest output value, 0.0-1.0 (default 0.0)

        amplitude_max: Highest output value, 0.0-1.0 (default 1.0)

    Examples:
        ```python
        from tcodewave.waveform import OscillatorConfig

        # Slow stroke over the full range
        config = OscillatorConfig(base_period=1500, jitter_min=0, jitter_max=300)

        # Short strokes in the upper half
        config = OscillatorConfig(
            base_period=200,
            jitter_min=0,
            jitter_max=50,
            amplitude_min=0.5,
            amplitude_max=1.0,
        )
        ```
    """

    base_period: float = 0.0  # ms
    jitter_min: float = 0.0  # ms
    jitter_max: float = 200.0  # ms

    amplitude_min: float = 0.0
    amplitude_max: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.jitter_min > self.jitter_max:
            raise ValueError(
                f"jitter_min must be <= jitter_max, got {self.jitter_min} > {self.jitter_max}"
            )

        if not 0.0 <= self.amplitude_min <= 1.0:
            raise ValueError(f"amplitude_min must be 0.0-1.0, got {self.amplitude_min}")

        if not 0.0 <= self.amplitude_max <= 1.0:
            raise ValueError(f"amplitude_max must be 0.0-1.0, got {self.amplitude_max}")

        if self.amplitude_min > self.amplitude_max:
            raise ValueError(
                f"amplitude_min must be <= amplitude_max, "
                f"got {self.amplitude_min} > {self.amplitude_max}"
            )
