"""Device-related exceptions.

- DeviceError: Base class for per-panel device errors
- DeviceConnectionError: Opening a link to a panel failed
- MetadataError: The panel's REST metadata could not be fetched
- DeviceNotConnectedError: A frame was sent on a disconnected link
- DeviceTransportError: A UDP send failed for one frame
"""

from .base import LedFleetError


class DeviceError(LedFleetError):
    """A single panel link failed."""

    def __init__(self, user_message: str, panel_id: str | None = None, **kwargs):
        """
        Initialize device error.

        Args:
            user_message: User-friendly error message
            panel_id: The panel involved (if applicable)
        """
        super().__init__(user_message, **kwargs)
        self.panel_id = panel_id


class DeviceConnectionError(DeviceError):
    """Connecting to a panel failed. Retrying later may succeed."""

    def __init__(
        self,
        panel_id: str,
        address: str,
        reason: str,
        *,
        user_message: str | None = None,
        technical_message: str | None = None,
        recovery_hint: str | None = None,
    ):
        """
        Initialize connection error.

        Args:
            panel_id: The panel that could not be connected
            address: The configured address (or URL) of the panel
            reason: Low-level failure description
        """
        super().__init__(
            user_message=user_message or f"Could not connect to panel '{panel_id}' at {address}",
            technical_message=technical_message or f"Connect {panel_id} ({address}) failed: {reason}",
            panel_id=panel_id,
            recoverable=True,
            recovery_hint=recovery_hint or (
                "Check that the panel is powered and on the network. "
                "Failed panels can be retried while running."
            ),
        )
        self.address = address
        self.reason = reason


class MetadataError(DeviceConnectionError):
    """The panel's metadata endpoint did not answer usefully."""

    def __init__(self, panel_id: str, url: str, reason: str):
        """
        Initialize metadata error.

        Args:
            panel_id: The panel being queried
            url: The endpoint that failed
            reason: Timeout, HTTP status or parse failure
        """
        super().__init__(
            panel_id,
            url,
            reason,
            user_message=f"Could not read metadata from panel '{panel_id}' ({url})",
            technical_message=f"Metadata {panel_id} {url} failed: {reason}",
            recovery_hint=(
                "Check the panel's web interface is reachable, "
                "or run with --no-metadata to use the layout file only."
            ),
        )
        self.url = url


class DeviceNotConnectedError(DeviceError):
    """A send was attempted on a link that is not connected."""

    def __init__(self, panel_id: str):
        super().__init__(
            user_message=f"Panel '{panel_id}' is not connected",
            panel_id=panel_id,
            recoverable=True,
            recovery_hint="Connect the panel before sending frames.",
        )


class DeviceTransportError(DeviceError):
    """Sending a frame to a connected panel failed at the socket level."""

    def __init__(self, panel_id: str, reason: str):
        """
        Initialize transport error.

        Args:
            panel_id: The panel whose send failed
            reason: Socket error description
        """
        super().__init__(
            user_message=f"Failed to send frame to panel '{panel_id}'",
            technical_message=f"Send to {panel_id} failed: {reason}",
            panel_id=panel_id,
            recoverable=True,
        )
        self.reason = reason
