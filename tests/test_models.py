"""Tests for layout, panel, color and config models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ledfleet.exceptions import ConfigValidationError, LayoutBoundsError
from ledfleet.models import (
    AppConfig,
    Color,
    LayoutConfig,
    PixelSize,
    SerpentineMode,
    StartCorner,
    TransportProtocol,
    WiringOrder,
)


@pytest.mark.unit
class TestPanelConfig:
    """PanelConfig parsing and derived values."""

    def test_geometry(self, panel_factory):
        panel = panel_factory(x=2, y=1, width=16, height=8)

        assert panel.origin == (32, 8)
        assert panel.extent == (48, 16)
        assert panel.led_count == 128
        assert panel.contains(32, 8)
        assert panel.contains(47, 15)
        assert not panel.contains(48, 8)

    def test_default_ports(self, panel_factory):
        assert panel_factory(protocol=TransportProtocol.DDP).port == 4048
        assert panel_factory(protocol=TransportProtocol.ARTNET).port == 6454

    def test_explicit_port(self, panel_factory):
        panel = panel_factory(address="wled-1.local:7000")
        assert panel.host == "wled-1.local"
        assert panel.port == 7000

    def test_invalid_port_rejected(self, panel_factory):
        with pytest.raises(ValidationError):
            panel_factory(address="10.0.0.1:99999")

    def test_dmx_start_address_range(self, panel_factory):
        with pytest.raises(ValidationError):
            panel_factory(dmx_start_address=512)

    def test_artnet_dmx_gap_must_fit_universe(self, panel_factory):
        """16x16 fills 170 LEDs per universe, leaving room for a gap of 2 channels."""
        artnet = TransportProtocol.ARTNET
        assert panel_factory(width=16, height=16, protocol=artnet, dmx_start_address=2)

        with pytest.raises(ValidationError, match="needs 520 channels"):
            panel_factory(width=16, height=16, protocol=artnet, dmx_start_address=10)

    def test_small_artnet_panel_allows_larger_gap(self, panel_factory):
        panel = panel_factory(protocol=TransportProtocol.ARTNET, dmx_start_address=400)
        assert panel.dmx_start_address == 400

    def test_dmx_gap_ignored_for_ddp(self, panel_factory):
        panel = panel_factory(width=16, height=16, dmx_start_address=10)
        assert panel.protocol is TransportProtocol.DDP

    def test_artnet_universe_range_overflow(self, panel_factory):
        with pytest.raises(ValidationError, match="universes 32767..32768"):
            panel_factory(width=16, height=16, protocol=TransportProtocol.ARTNET, universe=32767)

    def test_with_overrides_revalidates(self, panel_factory):
        panel = panel_factory(width=16, height=16, protocol=TransportProtocol.ARTNET)
        with pytest.raises(ValidationError):
            panel.with_overrides(dmx_start_address=10)

    def test_with_overrides(self, panel_factory):
        panel = panel_factory(universe=1)

        assert panel.with_overrides() is panel
        changed = panel.with_overrides(pixel_size=PixelSize(width=8, height=2), universe=5)
        assert (changed.width, changed.height, changed.universe) == (8, 2, 5)
        assert changed.id == panel.id

    def test_panels_are_hashable(self, panel_factory):
        assert len({panel_factory(), panel_factory()}) == 1


@pytest.mark.unit
class TestLayoutConfig:
    """LayoutConfig validation and loading."""

    def test_camel_case_file(self, layout_file: Path):
        layout = LayoutConfig.load(layout_file)

        assert layout.canvas_size == (32, 16)
        assert layout.panel_ids == ["Left", "Right"]

        left = layout.get_panel("Left")
        assert left.protocol is TransportProtocol.ARTNET
        assert left.universe == 1
        assert left.wiring.start_corner is StartCorner.BOTTOM_LEFT
        assert left.wiring.order is WiringOrder.COLUMN_MAJOR
        assert left.wiring.serpentine
        assert left.wiring.serpentine_mode is SerpentineMode.UNIFORM

        right = layout.get_panel("Right")
        assert right.protocol is TransportProtocol.DDP
        assert right.port == 4049
        assert right.wiring.mirror_x

    def test_canvas_defaults_to_bounding_box(self, two_panel_layout):
        assert two_panel_layout.canvas_size == (8, 4)

    def test_panel_outside_canvas_rejected(self, layout_data, tmp_path):
        layout_data["virtualGrid"] = {"width": 16, "height": 16}
        path = tmp_path / "layout.json"
        path.write_text(json.dumps(layout_data))

        with pytest.raises(LayoutBoundsError) as exc_info:
            LayoutConfig.load(path)
        assert exc_info.value.panel_id == "Right"

    def test_duplicate_ids_rejected(self, layout_data, tmp_path):
        layout_data["panels"][1]["name"] = "Left"
        path = tmp_path / "layout.json"
        path.write_text(json.dumps(layout_data))

        with pytest.raises(ConfigValidationError) as exc_info:
            LayoutConfig.load(path)
        assert "Duplicate panel ids" in exc_info.value.user_message

    def test_artnet_dmx_overflow_fails_at_load(self, layout_data, tmp_path):
        layout_data["panels"][0]["dmxStartAddress"] = 10
        path = tmp_path / "layout.json"
        path.write_text(json.dumps(layout_data))

        with pytest.raises(ConfigValidationError) as exc_info:
            LayoutConfig.load(path)
        assert exc_info.value.field == "panels.0"
        assert "DMX start address 10" in exc_info.value.user_message

    def test_empty_layout_rejected(self):
        with pytest.raises(ValidationError):
            LayoutConfig(panels=[])

    def test_unknown_panel_raises_key_error(self, two_panel_layout):
        with pytest.raises(KeyError):
            two_panel_layout.get_panel("Z")

    def test_default_layout(self):
        layout = LayoutConfig.default()
        assert layout.canvas_size == (32, 32)
        assert [p.origin for p in layout.panels] == [(0, 0), (16, 0), (0, 16), (16, 16)]
        assert all(p.wiring.order is WiringOrder.COLUMN_MAJOR for p in layout.panels)


@pytest.mark.unit
class TestColor:
    """Color parsing."""

    @pytest.mark.parametrize("text", ["255,128,0", " 255, 128, 0 ", "#FF8000", "#ff8000"])
    def test_parse(self, text):
        assert Color.parse(text).to_rgb_tuple() == (255, 128, 0)

    @pytest.mark.parametrize("text", ["255,128", "#FF80", "red", "256,0,0"])
    def test_parse_rejects(self, text):
        with pytest.raises(ValueError):
            Color.parse(text)

    def test_to_hex(self):
        assert Color(r=1, g=171, b=255).to_hex() == "#01ABFF"
        assert Color.off().to_rgb_tuple() == (0, 0, 0)


@pytest.mark.unit
class TestAppConfig:
    """AppConfig defaults and file location."""

    def test_defaults(self):
        config = AppConfig()
        assert config.fps == 60
        assert config.brightness == 1.0
        assert config.metadata_enabled
        assert config.last_layout is None

    def test_load_or_default_and_save(self, tmp_path: Path):
        path = tmp_path / "config.json"
        assert AppConfig.load_or_default(path) == AppConfig()

        AppConfig(fps=30, last_layout=Path("/tmp/wall.json")).save(path)

        loaded = AppConfig.load_or_default(path)
        assert loaded.fps == 30
        assert loaded.last_layout == Path("/tmp/wall.json")

    def test_rejects_out_of_range_values(self):
        with pytest.raises(ValidationError):
            AppConfig(fps=0)
        with pytest.raises(ValidationError):
            AppConfig(brightness=1.5)
