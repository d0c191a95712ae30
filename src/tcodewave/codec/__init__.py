"""TCode command codec for tcodewave.

This module provides the encoder that turns a normalized waveform sample into
the ASCII command sent to the actuator.
"""

from __future__ import annotations

from .encoder import MAX_POSITION, POSITION_SCALE, TCODE_PREFIX, encode_tcode

__all__ = [
    "encode_tcode",
    "TCODE_PREFIX",
    "MAX_POSITION",
    "POSITION_SCALE",
]
