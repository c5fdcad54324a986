"""Panel links and device metadata."""

from .link import DeviceLink, LinkState, resolve_udp, udp_socket
from .metadata import (
    PanelMetadata,
    PanelMetadataSource,
    WledMetadataClient,
    find_mismatches,
    parse_metadata,
)

__all__ = [
    "DeviceLink",
    "LinkState",
    "PanelMetadata",
    "PanelMetadataSource",
    "WledMetadataClient",
    "find_mismatches",
    "parse_metadata",
    "resolve_udp",
    "udp_socket",
]
