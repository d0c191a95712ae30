"""Exception hierarchy for tcodewave.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from TCodeWaveError for easy catching of any
tcodewave-specific error. Transport failures share the TransportError base
so callers can handle every connect/disconnect/send failure in one place.
"""

from __future__ import annotations


class TCodeWaveError(Exception):
    """Base exception for all tcodewave errors."""

    pass


class TransportError(TCodeWaveError):
    """Base exception for transport connect, disconnect, and send failures."""

    pass


class UnsupportedEnvironmentError(TransportError):
    """Raised when the host lacks the capability a transport needs.

    Examples:
        - No serial ports can be enumerated on this machine
        - No usable Bluetooth adapter (the BLE scanner cannot start)

    The connect attempt is over; pick another transport.
    """

    pass


class UserCancelledError(TransportError):
    """Raised when an interactive device picker is dismissed without a choice.

    This is a normal abort, not a crash.
    """

    pass


class HandshakeError(TransportError):
    """Raised when the lower layer fails while establishing a connection.

    Examples:
        - Serial port cannot be opened (busy, missing, permission denied)
        - GATT service or characteristic lookup fails
        - WebSocket server refuses the connection or the URL is invalid
    """

    pass


class NotConnectedError(TransportError):
    """Raised when send() is called without an open channel."""

    pass


class TeardownError(TransportError):
    """Raised when releasing a transport's resources fails.

    Examples:
        - Flushing or closing an already-broken serial port
        - Closing a BLE client whose adapter went away

    The transport is still marked not connected when this is raised.
    """

    pass
