"""TCode command encoder.

This module provides encode_tcode(), which converts a normalized position
into the linear-axis command string understood by TCode actuators.
"""

from __future__ import annotations

import math

#: Command prefix: linear axis ("L"), channel 0.
TCODE_PREFIX = "L0"

#: Values at or above 1.0 are clamped to this before scaling.
MAX_POSITION = 0.9999

#: Position resolution (four decimal digits).
POSITION_SCALE = 10000


def encode_tcode(value: float) -> str:
    """Encode a normalized position as a TCode linear-axis command.

    The position is scaled to an integer with ``floor(value * 10000)`` and
    appended to the ``"L0"`` prefix without zero padding, so the command width
    varies with magnitude.

    Only the upper bound is clamped: any ``value >= 1`` becomes ``0.9999``.
    Negative inputs are passed through and yield a negative suffix.

    Args:
        value: Normalized position, expected in [0, 1]

    Returns:
        ASCII command string, no terminator appended

    Raises:
        ValueError: If value is NaN
        OverflowError: If value is negative infinity

    Examples:
        >>> encode_tcode(0.5)
        'L05000'
        >>> encode_tcode(1.2)
        'L09999'
        >>> encode_tcode(0.0)
        'L00'
    """
    if value >= 1:
        value = MAX_POSITION
    scaled = math.floor(value * POSITION_SCALE)
    return f"{TCODE_PREFIX}{scaled}"
