"""Pixel source protocol.

A pixel source is the animation behind the canvas: anything that can say
what color a canvas pixel has at the current time.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PixelSource(Protocol):
    """
    Anything that colors the canvas.

    The scheduler calls `init` once, then every tick calls `update` and,
    if it returned True, `get_pixel_color` for every canvas pixel.
    Between two `update` calls `get_pixel_color` must be pure: the same
    pixel always yields the same color.
    """

    def init(self, width: int, height: int) -> None:
        """Prepare for a canvas of the given size."""
        ...

    def update(self, timestamp: float) -> bool:
        """
        Advance to `timestamp` (seconds, monotonic).

        Returns:
            False once the animation has finished, True otherwise
        """
        ...

    def get_pixel_color(self, x: int, y: int) -> tuple[int, int, int]:
        """Get the (r, g, b) color of canvas pixel (x, y), each 0-255."""
        ...
