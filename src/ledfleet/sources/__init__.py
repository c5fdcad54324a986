"""Built-in pixel sources."""

from .builtin import (
    IDENTIFY_PALETTE,
    ColorTestSource,
    FiniteSource,
    PanelIdentifySource,
    SolidColorSource,
)
from .registry import create_source, source_names

__all__ = [
    "IDENTIFY_PALETTE",
    "ColorTestSource",
    "FiniteSource",
    "PanelIdentifySource",
    "SolidColorSource",
    "create_source",
    "source_names",
]
