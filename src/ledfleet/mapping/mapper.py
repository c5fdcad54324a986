"""Canvas coordinate to LED index mapping."""

from ledfleet.models import PanelConfig, SerpentineMode, WiringOrder


class CoordinateMapper:
    """
    Maps canvas pixels on one panel to the serial index of the LED behind them.

    The panel's LEDs form a single strip. Its wiring decides the order:

    - row-major: index = y * width + x
    - column-major: index = x * height + y
    - serpentine: lines (rows or columns) run backwards. With the uniform
      policy every line is reversed; with the alternate policy only odd
      lines are.
    - mirror_x: the panel is flipped horizontally before any of the above.

    The start corner is informational and does not change the index.
    """

    def __init__(self, panel: PanelConfig):
        """
        Initialize mapper for one panel.

        Args:
            panel: The panel whose wiring to follow
        """
        self.panel = panel
        self.width = panel.width
        self.height = panel.height
        self._origin_x, self._origin_y = panel.origin

    def contains(self, virtual_x: int, virtual_y: int) -> bool:
        """Check whether a canvas pixel lies on this panel."""
        return self.panel.contains(virtual_x, virtual_y)

    def local_index(self, virtual_x: int, virtual_y: int) -> int:
        """
        Convert a canvas pixel to the panel's LED index.

        Args:
            virtual_x: Canvas column
            virtual_y: Canvas row

        Returns:
            LED index (0 to width*height-1)

        Raises:
            ValueError: If the pixel is not on this panel
        """
        if not self.contains(virtual_x, virtual_y):
            raise ValueError(
                f"Pixel ({virtual_x}, {virtual_y}) is outside panel {self.panel.id}"
            )
        return self.index_for_local(virtual_x - self._origin_x, virtual_y - self._origin_y)

    def index_for_local(self, local_x: int, local_y: int) -> int:
        """
        Convert panel-local coordinates to the LED index.

        Example (4x3 panel, column-major, serpentine, uniform):
            (0, 0) -> 2, (0, 2) -> 0, (1, 0) -> 5
        """
        wiring = self.panel.wiring
        if wiring.mirror_x:
            local_x = self.width - 1 - local_x

        if wiring.order is WiringOrder.ROW_MAJOR:
            if wiring.serpentine and self._line_reversed(local_y):
                local_x = self.width - 1 - local_x
            return local_y * self.width + local_x

        if wiring.serpentine and self._line_reversed(local_x):
            local_y = self.height - 1 - local_y
        return local_x * self.height + local_y

    def _line_reversed(self, line: int) -> bool:
        if self.panel.wiring.serpentine_mode is SerpentineMode.UNIFORM:
            return True
        return line % 2 == 1


def local_index(panel: PanelConfig, virtual_x: int, virtual_y: int) -> int:
    """Shortcut for `CoordinateMapper(panel).local_index(virtual_x, virtual_y)`."""
    return CoordinateMapper(panel).local_index(virtual_x, virtual_y)
