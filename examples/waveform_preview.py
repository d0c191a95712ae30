#!/usr/bin/env python3
"""Preview the jittered triangle wave without any hardware.

Drives an Oscillator from a simulated clock and renders each sample as a
bar, next to the command it would produce on the wire.
"""

from __future__ import annotations

import random

from tcodewave import Oscillator, OscillatorConfig, encode_tcode

SEND_FREQUENCY = 50
SAMPLES = 60
BAR_WIDTH = 40


class SimulatedClock:
    """Millisecond clock advanced by hand."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def main() -> None:
    """Render one second of waveform."""
    config = OscillatorConfig(base_period=300, jitter_min=0, jitter_max=100, amplitude_min=0.2)
    clock = SimulatedClock()
    oscillator = Oscillator(config, clock=clock, rng=random.Random(7))

    print(f"Base period {config.base_period:.0f} ms, jitter {config.jitter_min:.0f}-"
          f"{config.jitter_max:.0f} ms, stroke {config.amplitude_min:.0%}-{config.amplitude_max:.0%}")
    print()

    for _ in range(SAMPLES):
        clock.now += 1000 / SEND_FREQUENCY
        value = oscillator.sample()
        bar = "#" * round(value * BAR_WIDTH)
        print(f"{clock.now:6.0f} ms  {encode_tcode(value):<7} |{bar}")


if __name__ == "__main__":
    main()
