"""Tests for WLED metadata parsing and the REST client."""

from unittest.mock import MagicMock

import pytest
import requests

from ledfleet.devices import PanelMetadata, WledMetadataClient, find_mismatches, parse_metadata
from ledfleet.exceptions import DeviceConnectionError, MetadataError
from ledfleet.models import TransportProtocol

INFO = {
    "name": "Grid01",
    "ver": "0.14.0",
    "leds": {"count": 256, "matrix": {"w": 16, "h": 16}},
}
CFG = {"if": {"live": {"port": 6454, "dmx": {"uni": 2, "addr": 1}}}}


def response(status=200, body=None):
    mock = MagicMock()
    mock.status_code = status
    mock.json.return_value = body
    return mock


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.mark.unit
class TestParseMetadata:
    """Extracting fields from /json/info and /json/cfg."""

    def test_full_response(self):
        metadata = parse_metadata(INFO, CFG)

        assert metadata.name == "Grid01"
        assert metadata.version == "0.14.0"
        assert metadata.led_count == 256
        assert metadata.pixel_size.width == 16
        assert metadata.universe == 2
        assert metadata.dmx_start_address == 0  # WLED counts channels from 1
        assert metadata.live_port == 6454

    def test_missing_fields_are_none(self):
        metadata = parse_metadata({"leds": {"count": 64}}, {})

        assert metadata.led_count == 64
        assert metadata.pixel_size is None
        assert metadata.universe is None
        assert metadata.dmx_start_address is None

    def test_apply_to_overrides_only_reported_values(self, panel_factory):
        panel = panel_factory(width=16, height=16, universe=7, dmx_start_address=3)

        updated = PanelMetadata(matrix_width=8, matrix_height=8).apply_to(panel)

        assert (updated.width, updated.height) == (8, 8)
        assert updated.universe == 7
        assert updated.dmx_start_address == 3

    def test_apply_to_without_values_keeps_panel(self, panel_factory):
        panel = panel_factory()
        assert PanelMetadata().apply_to(panel) is panel

    def test_apply_to_rejects_dmx_overflow(self, panel_factory):
        panel = panel_factory(width=16, height=16, protocol=TransportProtocol.ARTNET, universe=2)

        with pytest.raises(DeviceConnectionError) as exc_info:
            PanelMetadata(dmx_start_address=10).apply_to(panel)

        assert exc_info.value.panel_id == panel.id
        assert exc_info.value.recoverable
        assert "needs 520 channels" in exc_info.value.reason


@pytest.mark.unit
class TestFindMismatches:
    """Comparing reported and configured panel settings."""

    def test_matching_panel(self, panel_factory):
        panel = panel_factory(
            width=16, height=16, protocol=TransportProtocol.ARTNET, universe=2
        )
        assert find_mismatches(panel, parse_metadata(INFO, CFG)) == []

    def test_reports_each_difference(self, panel_factory):
        panel = panel_factory(
            width=8, height=8, protocol=TransportProtocol.ARTNET, universe=1, dmx_start_address=4
        )

        issues = find_mismatches(panel, parse_metadata(INFO, CFG))

        assert len(issues) == 4
        assert any("256 LEDs but expected 64" in issue for issue in issues)
        assert any("universe 2" in issue for issue in issues)

    def test_dmx_settings_ignored_for_ddp(self, panel_factory):
        panel = panel_factory(width=16, height=16, universe=9)
        assert find_mismatches(panel, parse_metadata(INFO, CFG)) == []

    def test_missing_matrix_is_reported(self, panel_factory):
        issues = find_mismatches(panel_factory(), PanelMetadata(led_count=16))
        assert issues == ["Device does not report a matrix size (it may not be in 2D mode)"]


@pytest.mark.unit
class TestWledMetadataClient:
    """HTTP behavior with a mocked requests session."""

    def test_fetch_reads_info_and_cfg(self, session, panel_factory):
        session.get.side_effect = [response(body=INFO), response(body=CFG)]
        client = WledMetadataClient(session=session)

        metadata = client.fetch(panel_factory(address="10.0.0.5:4048"))

        assert metadata.matrix_width == 16
        urls = [c.args[0] for c in session.get.call_args_list]
        assert urls == ["http://10.0.0.5/json/info", "http://10.0.0.5/json/cfg"]
        assert session.get.call_args.kwargs["timeout"] == (2.0, 3.0)

    def test_timeout_raises_metadata_error(self, session, panel_factory):
        session.get.side_effect = requests.Timeout("read timed out")
        client = WledMetadataClient(session=session)

        with pytest.raises(MetadataError) as exc_info:
            client.get_info(panel_factory())

        assert exc_info.value.panel_id == "A"
        assert exc_info.value.recoverable
        assert "timed out" in exc_info.value.technical_message

    def test_connection_error_raises_metadata_error(self, session, panel_factory):
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(MetadataError):
            WledMetadataClient(session=session).get_config(panel_factory())

    def test_http_error_status(self, session, panel_factory):
        session.get.return_value = response(status=404)
        with pytest.raises(MetadataError, match="metadata"):
            WledMetadataClient(session=session).get_state(panel_factory())

    def test_invalid_json(self, session, panel_factory):
        bad = response()
        bad.json.side_effect = ValueError("Expecting value")
        session.get.return_value = bad

        with pytest.raises(MetadataError) as exc_info:
            WledMetadataClient(session=session).get_info(panel_factory())
        assert "invalid JSON" in exc_info.value.technical_message

    def test_non_object_body(self, session, panel_factory):
        session.get.return_value = response(body=[1, 2, 3])
        with pytest.raises(MetadataError):
            WledMetadataClient(session=session).get_info(panel_factory())

    def test_close_closes_session(self, session):
        WledMetadataClient(session=session).close()
        session.close.assert_called_once()
