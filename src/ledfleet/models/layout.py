"""Fleet layout model: the panels and the virtual canvas they share."""

import logging
from collections import Counter
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ledfleet.exceptions import LayoutBoundsError
from ledfleet.utils.persistence import PydanticPersistence

from .enums import StartCorner, WiringOrder
from .panel import GridPosition, PanelConfig, PixelSize, WiringConfig

logger = logging.getLogger(__name__)


class LayoutConfig(BaseModel):
    """
    All panels of a fleet and the canvas they are cut from.

    The canvas is `virtual_grid` when given, otherwise the bounding box of
    every panel. Each panel must fit inside the canvas; this is checked
    when the layout is built, so a bad layout never reaches the network.
    """

    model_config = ConfigDict(frozen=True)

    panels: list[PanelConfig] = Field(min_length=1, description="Panels in the fleet")
    virtual_grid: PixelSize | None = Field(
        default=None,
        validation_alias=AliasChoices("virtual_grid", "virtualGrid"),
        description="Explicit canvas size; omit to fit all panels",
    )

    @model_validator(mode="after")
    def validate_panels(self) -> "LayoutConfig":
        duplicates = [pid for pid, n in Counter(p.id for p in self.panels).items() if n > 1]
        if duplicates:
            raise ValueError(f"Duplicate panel ids: {', '.join(sorted(duplicates))}")

        width, height = self.canvas_size
        for panel in self.panels:
            right, bottom = panel.extent
            if right > width or bottom > height:
                raise LayoutBoundsError(panel.id, (right, bottom), (width, height))
        return self

    @property
    def canvas_size(self) -> tuple[int, int]:
        """Canvas (width, height) in pixels."""
        if self.virtual_grid is not None:
            return (self.virtual_grid.width, self.virtual_grid.height)
        return (
            max(p.extent[0] for p in self.panels),
            max(p.extent[1] for p in self.panels),
        )

    @property
    def width(self) -> int:
        return self.canvas_size[0]

    @property
    def height(self) -> int:
        return self.canvas_size[1]

    @property
    def panel_ids(self) -> list[str]:
        return [p.id for p in self.panels]

    def get_panel(self, panel_id: str) -> PanelConfig:
        """
        Look up a panel by id.

        Raises:
            KeyError: If no panel has that id
        """
        for panel in self.panels:
            if panel.id == panel_id:
                return panel
        raise KeyError(panel_id)

    @classmethod
    def load(cls, path: Path) -> "LayoutConfig":
        """
        Load a layout file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the file is not valid JSON
            ConfigValidationError: If a value is invalid
            LayoutBoundsError: If a panel lies outside the canvas
        """
        layout = PydanticPersistence.load_json(path, cls)
        logger.info(
            f"Loaded layout {path}: {len(layout.panels)} panels, "
            f"canvas {layout.width}x{layout.height}"
        )
        return layout

    def save(self, path: Path) -> None:
        PydanticPersistence.save_json(self, path, backup=True)

    @classmethod
    def default(cls) -> "LayoutConfig":
        """Four 16x16 panels in a 2x2 grid, wired column-major serpentine from the bottom left."""
        wiring = WiringConfig(
            start_corner=StartCorner.BOTTOM_LEFT,
            order=WiringOrder.COLUMN_MAJOR,
            serpentine=True,
        )
        hosts = ["192.168.7.113", "192.168.7.226", "192.168.7.181", "192.168.7.167"]
        positions = [(0, 0), (1, 0), (0, 1), (1, 1)]
        panels = [
            PanelConfig(
                id=f"Grid0{i + 1}",
                address=host,
                grid_position=GridPosition(x=x, y=y),
                pixel_size=PixelSize(width=16, height=16),
                wiring=wiring,
            )
            for i, (host, (x, y)) in enumerate(zip(hosts, positions))
        ]
        return cls(panels=panels)
