"""Panel metadata from the controller's REST API.

Controllers running WLED report their matrix size on `/json/info` and
their Art-Net/DMX input settings on `/json/cfg`. The orchestrator asks
once per connect attempt and lets reported values override the layout
file. Anything the controller does not report keeps the configured value.
"""

import logging
from typing import Any, Protocol, runtime_checkable

import requests
from pydantic import BaseModel, ConfigDict, ValidationError

from ledfleet.exceptions import DeviceConnectionError, MetadataError
from ledfleet.models import PanelConfig, PixelSize, TransportProtocol

logger = logging.getLogger(__name__)


class PanelMetadata(BaseModel):
    """What a controller says about itself. Every field is optional."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    version: str | None = None
    led_count: int | None = None
    matrix_width: int | None = None
    matrix_height: int | None = None
    universe: int | None = None
    dmx_start_address: int | None = None
    live_port: int | None = None

    @property
    def pixel_size(self) -> PixelSize | None:
        if self.matrix_width and self.matrix_height:
            return PixelSize(width=self.matrix_width, height=self.matrix_height)
        return None

    def apply_to(self, panel: PanelConfig) -> PanelConfig:
        """
        Return the panel with reported values in place of configured ones.

        Raises:
            DeviceConnectionError: If the reported values do not make a valid
                panel (e.g. a DMX address that overflows the universe)
        """
        size = self.pixel_size
        if size is not None and size != panel.pixel_size:
            logger.warning(
                f"Panel {panel.id} reports {size.width}x{size.height}, "
                f"layout says {panel.width}x{panel.height}; using reported size"
            )
        try:
            return panel.with_overrides(
                pixel_size=size,
                universe=self.universe,
                dmx_start_address=self.dmx_start_address,
            )
        except ValidationError as e:
            reasons = "; ".join(d.get("msg", "invalid") for d in e.errors())
            raise DeviceConnectionError(
                panel.id,
                panel.address,
                f"reported settings are invalid: {reasons}",
                user_message=f"Panel '{panel.id}' reports settings that cannot be used",
                recovery_hint="Fix the panel's LED or DMX settings in its web interface, then retry.",
            ) from e


@runtime_checkable
class PanelMetadataSource(Protocol):
    """Anything that can describe a panel before it is connected."""

    def fetch(self, panel: PanelConfig) -> PanelMetadata:
        """
        Query the panel.

        Raises:
            MetadataError: If the panel cannot be queried
        """
        ...


class WledMetadataClient:
    """
    Reads panel metadata from WLED's JSON API.

    The client uses a single requests Session so connections to the same
    controller are reused between calls.
    """

    def __init__(
        self,
        connect_timeout: float = 2.0,
        read_timeout: float = 3.0,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            connect_timeout: Seconds to wait for the TCP connection
            read_timeout: Seconds to wait for the response
            session: Optional session to use (a new one is created otherwise)
        """
        self.timeout = (connect_timeout, read_timeout)
        self._session = session or requests.Session()

    def fetch(self, panel: PanelConfig) -> PanelMetadata:
        info = self.get_info(panel)
        cfg = self.get_config(panel)
        metadata = parse_metadata(info, cfg)
        logger.debug(f"Metadata for {panel.id}: {metadata}")
        return metadata

    def get_info(self, panel: PanelConfig) -> dict[str, Any]:
        return self._get_json(panel, "/json/info")

    def get_config(self, panel: PanelConfig) -> dict[str, Any]:
        return self._get_json(panel, "/json/cfg")

    def get_state(self, panel: PanelConfig) -> dict[str, Any]:
        return self._get_json(panel, "/json/state")

    def close(self) -> None:
        self._session.close()

    def _get_json(self, panel: PanelConfig, path: str) -> dict[str, Any]:
        url = f"http://{panel.host}{path}"
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.Timeout as e:
            raise MetadataError(panel.id, url, f"timed out: {e}") from e
        except requests.RequestException as e:
            raise MetadataError(panel.id, url, str(e)) from e

        if response.status_code != 200:
            raise MetadataError(panel.id, url, f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise MetadataError(panel.id, url, f"invalid JSON: {e}") from e
        if not isinstance(body, dict):
            raise MetadataError(panel.id, url, "expected a JSON object")
        return body


def parse_metadata(info: dict[str, Any], cfg: dict[str, Any]) -> PanelMetadata:
    """
    Extract panel metadata from WLED `/json/info` and `/json/cfg` bodies.

    WLED numbers DMX channels from 1; the returned start address counts
    channels to skip, so WLED's `addr` 1 becomes 0.
    """
    leds = info.get("leds") or {}
    matrix = leds.get("matrix") or {}
    live = (cfg.get("if") or {}).get("live") or {}
    dmx = live.get("dmx") or {}

    addr = dmx.get("addr")
    return PanelMetadata(
        name=info.get("name"),
        version=info.get("ver"),
        led_count=leds.get("count"),
        matrix_width=matrix.get("w"),
        matrix_height=matrix.get("h"),
        universe=dmx.get("uni"),
        dmx_start_address=max(addr - 1, 0) if isinstance(addr, int) else None,
        live_port=live.get("port"),
    )


def find_mismatches(panel: PanelConfig, metadata: PanelMetadata) -> list[str]:
    """
    Compare what a controller reports with what the layout expects.

    Returns:
        One human-readable line per mismatch; empty if everything agrees
    """
    issues = []
    if metadata.led_count is None:
        issues.append("Device does not report an LED count")
    elif metadata.led_count != panel.led_count:
        issues.append(f"Device reports {metadata.led_count} LEDs but expected {panel.led_count}")

    if metadata.matrix_width is None or metadata.matrix_height is None:
        issues.append("Device does not report a matrix size (it may not be in 2D mode)")
    elif (metadata.matrix_width, metadata.matrix_height) != (panel.width, panel.height):
        issues.append(
            f"Matrix {metadata.matrix_width}x{metadata.matrix_height} "
            f"does not match expected {panel.width}x{panel.height}"
        )

    if panel.protocol is TransportProtocol.ARTNET:
        if metadata.universe is not None and metadata.universe != panel.universe:
            issues.append(f"Device listens on universe {metadata.universe}, layout uses {panel.universe}")
        if (
            metadata.dmx_start_address is not None
            and metadata.dmx_start_address != panel.dmx_start_address
        ):
            issues.append(
                f"Device DMX start address skips {metadata.dmx_start_address} channels, "
                f"layout skips {panel.dmx_start_address}"
            )
        if metadata.live_port and metadata.live_port != panel.port:
            issues.append(f"Device listens on port {metadata.live_port}, layout sends to {panel.port}")
    return issues
