"""Panel placement and wiring models.

A panel is one physical LED matrix driven by one network controller.
Layout files may use the snake_case field names below or the camelCase
keys used by existing layout files (`name`, `ip`, `position`, `size`,
`offset`, `startCorner`, `reverseX`, ...). Wiring keys may be given flat
on the panel or nested under `wiring`.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ledfleet.wire.artnet import DMX_CHANNELS, LEDS_PER_UNIVERSE, MAX_UNIVERSE, packet_count

from .enums import SerpentineMode, StartCorner, TransportProtocol, WiringOrder

_WIRING_KEYS = {
    "startCorner": "start_corner",
    "start_corner": "start_corner",
    "order": "order",
    "serpentine": "serpentine",
    "serpentineMode": "serpentine_mode",
    "serpentine_mode": "serpentine_mode",
    "mirrorX": "mirror_x",
    "mirror_x": "mirror_x",
    "reverseX": "mirror_x",
}


class GridPosition(BaseModel):
    """Panel position on the canvas, in panel units."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0, description="Column of the panel in the grid")
    y: int = Field(ge=0, description="Row of the panel in the grid")


class PixelSize(BaseModel):
    """Size in pixels."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0, description="Width in pixels")
    height: int = Field(gt=0, description="Height in pixels")


class PixelOffset(BaseModel):
    """Shift applied to the sampled canvas coordinate, not to the placement."""

    model_config = ConfigDict(frozen=True)

    x: int = 0
    y: int = 0


class WiringConfig(BaseModel):
    """How the LED strip snakes through a panel."""

    model_config = ConfigDict(frozen=True)

    start_corner: StartCorner = Field(
        default=StartCorner.TOP_LEFT,
        validation_alias=AliasChoices("start_corner", "startCorner"),
        description="Corner holding LED 0 (informational)",
    )
    order: WiringOrder = Field(default=WiringOrder.ROW_MAJOR, description="Line direction")
    serpentine: bool = Field(
        default=False,
        description=(
            "Lines run backwards per serpentine_mode. Lines are rows for "
            "row-major panels and columns for column-major panels"
        ),
    )
    serpentine_mode: SerpentineMode = Field(
        default=SerpentineMode.UNIFORM,
        validation_alias=AliasChoices("serpentine_mode", "serpentineMode"),
        description="Which lines run backwards when serpentine is set",
    )
    mirror_x: bool = Field(
        default=False,
        validation_alias=AliasChoices("mirror_x", "mirrorX", "reverseX"),
        description="Mirror the panel horizontally before indexing",
    )


class PanelConfig(BaseModel):
    """
    One physical panel: where it sits on the canvas and how to reach it.

    Attributes:
        id: Unique panel name
        address: "host" or "host:port"
        protocol: Art-Net or DDP
        grid_position: Placement in panel units
        pixel_size: Panel size in LEDs
        pixel_offset: Sample offset in pixels
        wiring: LED ordering inside the panel
        universe: First Art-Net universe
        dmx_start_address: Leading DMX channels to skip in every Art-Net packet
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "name"))
    address: str = Field(min_length=1, validation_alias=AliasChoices("address", "ip", "host"))
    protocol: TransportProtocol = Field(default=TransportProtocol.DDP)
    grid_position: GridPosition = Field(
        validation_alias=AliasChoices("grid_position", "gridPosition", "position"),
    )
    pixel_size: PixelSize = Field(
        validation_alias=AliasChoices("pixel_size", "pixelSize", "size"),
    )
    pixel_offset: PixelOffset = Field(
        default_factory=PixelOffset,
        validation_alias=AliasChoices("pixel_offset", "pixelOffset", "offset"),
    )
    wiring: WiringConfig = Field(default_factory=WiringConfig)
    universe: int = Field(default=0, ge=0, le=32767, description="First Art-Net universe")
    dmx_start_address: int = Field(
        default=0,
        ge=0,
        le=511,
        validation_alias=AliasChoices("dmx_start_address", "dmxStartAddress"),
        description="DMX channels to skip before pixel data",
    )

    @model_validator(mode="before")
    @classmethod
    def lift_flat_wiring(cls, data: Any) -> Any:
        """Accept wiring keys written directly on the panel."""
        if not isinstance(data, dict) or "wiring" in data:
            return data

        flat = {key: data[key] for key in _WIRING_KEYS if key in data}
        if not flat:
            return data

        panel = {key: value for key, value in data.items() if key not in flat}
        panel["wiring"] = {_WIRING_KEYS[key]: value for key, value in flat.items()}
        return panel

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Ensure an explicit port, if any, is a valid UDP port."""
        host, sep, port = v.rpartition(":")
        if sep and host:
            if not port.isdigit() or not 0 < int(port) < 65536:
                raise ValueError(f"Invalid port in address {v!r}")
        return v

    @model_validator(mode="after")
    def check_artnet_fits(self) -> "PanelConfig":
        """
        Art-Net panels must fit their packets into 512 DMX channels.

        Every packet repeats the dmx_start_address gap before up to 170
        LEDs, and the universes the panel spans must stay in range.
        """
        if self.protocol is not TransportProtocol.ARTNET:
            return self

        leds = min(LEDS_PER_UNIVERSE, self.led_count)
        channels = self.dmx_start_address + 3 * leds
        if channels > DMX_CHANNELS:
            raise ValueError(
                f"DMX start address {self.dmx_start_address} plus {leds} LEDs per universe "
                f"needs {channels} channels, a universe has {DMX_CHANNELS}"
            )

        last = self.universe + packet_count(self.led_count) - 1
        if last > MAX_UNIVERSE:
            raise ValueError(
                f"Panel spans universes {self.universe}..{last}, the last allowed is {MAX_UNIVERSE}"
            )
        return self

    @property
    def host(self) -> str:
        host, sep, _ = self.address.rpartition(":")
        return host if sep and host else self.address

    @property
    def port(self) -> int:
        """Explicit port from the address, else the protocol default."""
        host, sep, port = self.address.rpartition(":")
        if sep and host:
            return int(port)
        return self.protocol.default_port

    @property
    def width(self) -> int:
        return self.pixel_size.width

    @property
    def height(self) -> int:
        return self.pixel_size.height

    @property
    def led_count(self) -> int:
        return self.pixel_size.width * self.pixel_size.height

    @property
    def origin(self) -> tuple[int, int]:
        """Top-left pixel of the panel on the canvas."""
        return (self.grid_position.x * self.width, self.grid_position.y * self.height)

    @property
    def extent(self) -> tuple[int, int]:
        """Right and bottom pixel edges of the panel, exclusive."""
        x, y = self.origin
        return (x + self.width, y + self.height)

    def contains(self, virtual_x: int, virtual_y: int) -> bool:
        """Check whether a canvas pixel lies on this panel."""
        x0, y0 = self.origin
        x1, y1 = self.extent
        return x0 <= virtual_x < x1 and y0 <= virtual_y < y1

    def with_overrides(
        self,
        pixel_size: PixelSize | None = None,
        universe: int | None = None,
        dmx_start_address: int | None = None,
    ) -> "PanelConfig":
        """
        Return a copy with device-reported values replacing configured ones.

        The copy is validated like a panel read from a layout file.

        Raises:
            ValidationError: If the combined values are not a valid panel
        """
        update: dict[str, Any] = {}
        if pixel_size is not None:
            update["pixel_size"] = pixel_size
        if universe is not None:
            update["universe"] = universe
        if dmx_start_address is not None:
            update["dmx_start_address"] = dmx_start_address
        if not update:
            return self
        return type(self).model_validate({**self.model_dump(), **update})
