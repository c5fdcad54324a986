"""Packet encoding exceptions.

These signal programmer or configuration errors and are never retried.
EncodingError also derives from ValueError so plain callers can catch it
the usual way.
"""

from .base import LedFleetError


class EncodingError(LedFleetError, ValueError):
    """Pixel data cannot be encoded into packets."""

    def __init__(self, reason: str, recovery_hint: str | None = None):
        super().__init__(
            user_message=f"Cannot encode frame: {reason}",
            recoverable=False,
            recovery_hint=recovery_hint,
        )
        self.reason = reason


class BufferTooSmallError(EncodingError):
    """The RGB buffer holds fewer pixels than the panel has LEDs."""

    def __init__(self, panel_id: str, expected: int, actual: int):
        """
        Initialize buffer-too-small error.

        Args:
            panel_id: The panel the buffer was meant for
            expected: Required buffer length in bytes
            actual: Supplied buffer length in bytes
        """
        super().__init__(
            f"buffer for panel '{panel_id}' has {actual} bytes, needs {expected}",
        )
        self.panel_id = panel_id
        self.expected = expected
        self.actual = actual
