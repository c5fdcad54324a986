"""Shared helpers for pixel buffers."""

import numpy as np

from ledfleet.exceptions import EncodingError


def as_led_array(rgb: bytes | bytearray | memoryview | np.ndarray) -> np.ndarray:
    """
    View an RGB buffer as an (N, 3) uint8 array without copying.

    Raises:
        EncodingError: If the buffer length is not a multiple of 3
    """
    data = np.frombuffer(rgb, dtype=np.uint8) if not isinstance(rgb, np.ndarray) else rgb
    data = data.reshape(-1)
    if data.dtype != np.uint8:
        raise EncodingError(f"expected uint8 pixel data, got {data.dtype}")
    if data.size % 3:
        raise EncodingError(f"buffer length {data.size} is not a multiple of 3")
    return data.reshape(-1, 3)
