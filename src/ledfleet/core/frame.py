"""Sampling a pixel source into canvas frames."""

import numpy as np

from ledfleet.protocols import PixelSource


def sample_frame(source: PixelSource, width: int, height: int) -> np.ndarray:
    """
    Ask the source for every canvas pixel.

    Colors outside 0-255 are clipped.

    Returns:
        uint8 array of shape (height, width, 3)
    """
    colors = [source.get_pixel_color(x, y) for y in range(height) for x in range(width)]
    frame = np.asarray(colors, dtype=np.int32).reshape(height, width, 3)
    return np.clip(frame, 0, 255).astype(np.uint8)


def apply_brightness(frame: np.ndarray, brightness: float) -> np.ndarray:
    """
    Scale every channel by `brightness`, rounding to the nearest value.

    Args:
        frame: uint8 frame
        brightness: 0.0 (black) to 1.0 (unchanged)

    Returns:
        A new uint8 frame, or `frame` itself when brightness is 1.0
    """
    if not 0.0 <= brightness <= 1.0:
        raise ValueError(f"Brightness must be between 0.0 and 1.0, got {brightness}")
    if brightness == 1.0:
        return frame
    return np.clip(np.rint(frame * brightness), 0, 255).astype(np.uint8)
