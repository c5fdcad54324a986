"""Built-in pixel sources for commissioning and testing a fleet."""

import logging
import math

from ledfleet.models import Color, LayoutConfig
from ledfleet.protocols import PixelSource

logger = logging.getLogger(__name__)

BLACK = (0, 0, 0)

# Distinct, easily named colors for telling panels apart
IDENTIFY_PALETTE: tuple[tuple[int, int, int], ...] = (
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 255, 0),
    (0, 255, 255),
    (255, 0, 255),
    (255, 128, 0),
    (255, 255, 255),
)


class SolidColorSource:
    """Every pixel the same color."""

    def __init__(self, color: Color):
        self._rgb = color.to_rgb_tuple()

    def init(self, width: int, height: int) -> None:
        pass

    def update(self, timestamp: float) -> bool:
        return True

    def get_pixel_color(self, x: int, y: int) -> tuple[int, int, int]:
        return self._rgb


class ColorTestSource:
    """
    Static test pattern: a filled circle in the middle of each cell.

    The canvas is cut into square cells (16x16 by default, the size of a
    common panel). Cells are numbered row by row and their circles cycle
    through red, green and blue, so a mis-wired or mis-positioned panel
    shows up as a clipped, shifted or wrongly colored circle.
    """

    COLORS = ((255, 0, 0), (0, 255, 0), (0, 0, 255))

    def __init__(self, cell_size: int = 16, radius: float = 6.0):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = cell_size
        self.radius = radius
        self._cells_per_row = 1

    def init(self, width: int, height: int) -> None:
        self._cells_per_row = max(1, math.ceil(width / self.cell_size))

    def update(self, timestamp: float) -> bool:
        return True

    def get_pixel_color(self, x: int, y: int) -> tuple[int, int, int]:
        cell_x, local_x = divmod(x, self.cell_size)
        cell_y, local_y = divmod(y, self.cell_size)
        center = self.cell_size // 2
        if math.hypot(local_x - center, local_y - center) >= self.radius:
            return BLACK
        cell = cell_y * self._cells_per_row + cell_x
        return self.COLORS[cell % len(self.COLORS)]


class PanelIdentifySource:
    """
    Fills each panel of a layout with its own color.

    Colors follow layout order through IDENTIFY_PALETTE; pixels no panel
    covers stay black. Panel order and colors are logged on init so an
    operator can match what they see to the layout file.
    """

    def __init__(self, layout: LayoutConfig):
        self.layout = layout
        self._panel_colors = [
            (panel, IDENTIFY_PALETTE[i % len(IDENTIFY_PALETTE)])
            for i, panel in enumerate(layout.panels)
        ]

    def init(self, width: int, height: int) -> None:
        for panel, rgb in self._panel_colors:
            logger.info(f"Panel {panel.id} shows {Color(r=rgb[0], g=rgb[1], b=rgb[2]).to_hex()}")

    def update(self, timestamp: float) -> bool:
        return True

    def get_pixel_color(self, x: int, y: int) -> tuple[int, int, int]:
        for panel, rgb in self._panel_colors:
            if panel.contains(x, y):
                return rgb
        return BLACK


class FiniteSource:
    """
    Wraps a source so it finishes after a fixed number of frames.

    Example:
        ```python
        # Show the test pattern for five seconds at 60 fps
        source = FiniteSource(ColorTestSource(), frames=300)
        ```
    """

    def __init__(self, source: PixelSource, frames: int):
        if frames < 0:
            raise ValueError(f"frames must not be negative, got {frames}")
        self.source = source
        self.frames = frames
        self.remaining = frames

    def init(self, width: int, height: int) -> None:
        self.remaining = self.frames
        self.source.init(width, height)

    def update(self, timestamp: float) -> bool:
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return self.source.update(timestamp)

    def get_pixel_color(self, x: int, y: int) -> tuple[int, int, int]:
        return self.source.get_pixel_color(x, y)
