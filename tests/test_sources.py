"""Tests for the built-in pixel sources."""

import logging

import pytest

from ledfleet.models import Color
from ledfleet.protocols import PixelSource
from ledfleet.sources import (
    ColorTestSource,
    FiniteSource,
    PanelIdentifySource,
    SolidColorSource,
    create_source,
    source_names,
)


@pytest.mark.unit
class TestColorTestSource:
    """One circle per 16x16 cell, cycling red, green, blue."""

    @pytest.fixture
    def source(self):
        source = ColorTestSource()
        source.init(32, 32)
        return source

    @pytest.mark.parametrize(
        "x, y, expected",
        [
            (8, 8, (255, 0, 0)),
            (24, 8, (0, 255, 0)),
            (8, 24, (0, 0, 255)),
            (24, 24, (255, 0, 0)),
        ],
    )
    def test_cell_centers(self, source, x, y, expected):
        assert source.get_pixel_color(x, y) == expected

    def test_corners_are_black(self, source):
        assert source.get_pixel_color(0, 0) == (0, 0, 0)
        assert source.get_pixel_color(31, 31) == (0, 0, 0)

    def test_satisfies_protocol(self, source):
        assert isinstance(source, PixelSource)
        assert source.update(0.0)

    def test_rejects_bad_cell_size(self):
        with pytest.raises(ValueError):
            ColorTestSource(cell_size=0)


@pytest.mark.unit
class TestPanelIdentifySource:
    """Each panel in its own color."""

    def test_colors_follow_layout_order(self, two_panel_layout):
        source = PanelIdentifySource(two_panel_layout)
        source.init(8, 4)

        assert source.get_pixel_color(0, 0) == (255, 0, 0)
        assert source.get_pixel_color(5, 3) == (0, 255, 0)

    def test_uncovered_pixels_are_black(self, two_panel_layout):
        source = PanelIdentifySource(two_panel_layout)
        assert source.get_pixel_color(9, 0) == (0, 0, 0)

    def test_init_logs_panel_colors(self, two_panel_layout, caplog):
        with caplog.at_level(logging.INFO, logger="ledfleet.sources.builtin"):
            PanelIdentifySource(two_panel_layout).init(8, 4)
        assert "Panel A shows #FF0000" in caplog.text
        assert "Panel B shows #00FF00" in caplog.text


@pytest.mark.unit
class TestFiniteSource:
    """Stopping after a number of frames."""

    def test_finishes_after_frames(self):
        source = FiniteSource(SolidColorSource(Color(r=1, g=2, b=3)), frames=2)
        source.init(1, 1)

        assert [source.update(t) for t in range(4)] == [True, True, False, False]
        assert source.get_pixel_color(0, 0) == (1, 2, 3)

    def test_init_resets_count(self):
        source = FiniteSource(SolidColorSource(Color.off()), frames=1)
        source.init(1, 1)
        source.update(0.0)

        source.init(1, 1)

        assert source.update(1.0)

    def test_zero_frames_finishes_immediately(self):
        source = FiniteSource(SolidColorSource(Color.off()), frames=0)
        source.init(1, 1)
        assert not source.update(0.0)

    def test_negative_frames_rejected(self):
        with pytest.raises(ValueError):
            FiniteSource(SolidColorSource(Color.off()), frames=-1)


@pytest.mark.unit
class TestRegistry:
    """create_source by name."""

    def test_names(self):
        assert source_names() == ["color-test", "solid", "identify"]

    def test_solid_defaults_to_white(self, two_panel_layout):
        source = create_source("solid", two_panel_layout)
        assert source.get_pixel_color(0, 0) == (255, 255, 255)

    def test_solid_uses_color(self, two_panel_layout):
        source = create_source("solid", two_panel_layout, Color(r=9, g=8, b=7))
        assert source.get_pixel_color(3, 3) == (9, 8, 7)

    def test_identify_gets_layout(self, two_panel_layout):
        source = create_source("identify", two_panel_layout)
        assert isinstance(source, PanelIdentifySource)
        assert source.layout is two_panel_layout

    def test_unknown_name(self, two_panel_layout):
        with pytest.raises(KeyError, match="color-test"):
            create_source("plasma", two_panel_layout)
