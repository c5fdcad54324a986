"""Data models for panel layouts and settings."""

from .color import Color
from .config import AppConfig
from .enums import SerpentineMode, StartCorner, TransportProtocol, WiringOrder
from .layout import LayoutConfig
from .panel import GridPosition, PanelConfig, PixelOffset, PixelSize, WiringConfig

__all__ = [
    "AppConfig",
    "Color",
    # Layout
    "GridPosition",
    "LayoutConfig",
    "PanelConfig",
    "PixelOffset",
    "PixelSize",
    "WiringConfig",
    # Enums
    "SerpentineMode",
    "StartCorner",
    "TransportProtocol",
    "WiringOrder",
]
