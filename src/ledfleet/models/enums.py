"""Enumerations for panel layouts and wiring."""

from enum import Enum


class TransportProtocol(str, Enum):
    """UDP protocol used to stream pixels to a panel."""

    ARTNET = "artnet"  # ArtDMX, 170 LEDs per universe, port 6454
    DDP = "ddp"  # Distributed Display Protocol, port 4048

    @property
    def default_port(self) -> int:
        return 6454 if self is TransportProtocol.ARTNET else 4048


class StartCorner(str, Enum):
    """Corner where LED 0 sits. Descriptive only; shown by `layout show`."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class WiringOrder(str, Enum):
    """Direction in which consecutive LEDs run."""

    ROW_MAJOR = "row-major"  # LEDs run along rows
    COLUMN_MAJOR = "column-major"  # LEDs run along columns


class SerpentineMode(str, Enum):
    """Which lines of a serpentine panel run backwards."""

    UNIFORM = "uniform"  # Every line reversed (matches the deployed panels)
    ALTERNATE = "alternate"  # Odd lines reversed, classic zig-zag
