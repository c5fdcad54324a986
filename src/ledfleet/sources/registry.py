"""Name-to-source lookup used by the CLI."""

from collections.abc import Callable

from ledfleet.models import Color, LayoutConfig
from ledfleet.protocols import PixelSource

from .builtin import ColorTestSource, PanelIdentifySource, SolidColorSource

SourceFactory = Callable[[LayoutConfig, Color | None], PixelSource]

_FACTORIES: dict[str, SourceFactory] = {
    "color-test": lambda layout, color: ColorTestSource(),
    "solid": lambda layout, color: SolidColorSource(color or Color(r=255, g=255, b=255)),
    "identify": lambda layout, color: PanelIdentifySource(layout),
}


def source_names() -> list[str]:
    """Names accepted by create_source."""
    return list(_FACTORIES)


def create_source(name: str, layout: LayoutConfig, color: Color | None = None) -> PixelSource:
    """
    Create a built-in pixel source by name.

    Args:
        name: One of source_names()
        layout: Layout the source will be shown on
        color: Color for sources that take one (white if omitted)

    Raises:
        KeyError: If no source has this name
    """
    try:
        factory = _FACTORIES[name]
    except KeyError:
        raise KeyError(f"Unknown source '{name}'. Available: {', '.join(_FACTORIES)}") from None
    return factory(layout, color)
