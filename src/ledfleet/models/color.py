"""Color model for pixel sources."""

from pydantic import BaseModel, ConfigDict, Field


class Color(BaseModel):
    """8-bit RGB color given on the command line or used by a pixel source.

    Frozen so colors can be used as dict keys and shared between threads.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    @classmethod
    def off(cls) -> "Color":
        """All channels at zero."""
        return cls(r=0, g=0, b=0)

    @classmethod
    def parse(cls, text: str) -> "Color":
        """Parse '#RRGGBB' or 'R,G,B'.

        Raises:
            ValueError: If the text is in neither format
        """
        text = text.strip()
        if text.startswith("#"):
            if len(text) != 7:
                raise ValueError(f"Expected #RRGGBB, got {text!r}")
            return cls(r=int(text[1:3], 16), g=int(text[3:5], 16), b=int(text[5:7], 16))

        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 3:
            raise ValueError(f"Expected R,G,B or #RRGGBB, got {text!r}")
        r, g, b = (int(p) for p in parts)
        return cls(r=r, g=g, b=b)

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """(r, g, b) as used by pixel sources."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to hex string (e.g., '#FF0000')."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"
