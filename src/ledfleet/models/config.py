"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer

from ledfleet.utils.persistence import PydanticPersistence

DEFAULT_CONFIG_DIR = Path.home() / ".ledfleet"


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Rendering
    fps: int = Field(default=60, ge=1, le=240, description="Target frame rate")
    brightness: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Global brightness scale applied to every frame"
    )

    # Network
    send_timeout: float = Field(
        default=0.1, gt=0, description="Upper bound for one UDP send (seconds)"
    )
    connect_workers: int = Field(
        default=8, ge=1, description="Panels connected in parallel"
    )
    retry_interval: float = Field(
        default=10.0,
        ge=0,
        description="Seconds between automatic reconnect attempts while running (0 = off)",
    )

    # Device metadata (WLED JSON API)
    metadata_enabled: bool = Field(
        default=True, description="Ask each panel for its size and DMX settings on connect"
    )
    metadata_connect_timeout: float = Field(default=2.0, gt=0, description="HTTP connect timeout")
    metadata_read_timeout: float = Field(default=3.0, gt=0, description="HTTP read timeout")

    # Session
    last_layout: Path | None = Field(default=None, description="Last layout file used")

    @field_serializer("last_layout")
    def serialize_path(self, path: Path | None) -> str | None:
        """Serialize Path to string."""
        return str(path) if path is not None else None

    @staticmethod
    def default_path() -> Path:
        return DEFAULT_CONFIG_DIR / "config.json"

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.ledfleet/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or cls.default_path(), cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or self.default_path())
