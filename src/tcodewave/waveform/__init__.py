"""Waveform generation for tcodewave.

This module provides the jittered triangle-wave oscillator and its
configuration object.
"""

from __future__ import annotations

from .config import OscillatorConfig
from .oscillator import PHASE_CYCLE, Oscillator, monotonic_ms

__all__ = [
    "Oscillator",
    "OscillatorConfig",
    "PHASE_CYCLE",
    "monotonic_ms",
]
