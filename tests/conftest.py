"""Pytest fixtures for tests."""

import json
import socket
from pathlib import Path

import pytest

from ledfleet.devices import DeviceLink
from ledfleet.models import (
    GridPosition,
    LayoutConfig,
    PanelConfig,
    PixelSize,
    TransportProtocol,
)


class FakeSocket:
    """Stands in for a UDP socket and records every datagram."""

    def __init__(self):
        self.sent: list[tuple[bytes, tuple[str, int]]] = []
        self.timeout: float | None = None
        self.closed = False
        self.fail_sends = False

    def settimeout(self, timeout: float) -> None:
        self.timeout = timeout

    def sendto(self, data: bytes, address: tuple[str, int]) -> int:
        if self.fail_sends:
            raise OSError("Network is unreachable")
        self.sent.append((bytes(data), address))
        return len(data)

    def close(self) -> None:
        self.closed = True

    @property
    def packets(self) -> list[bytes]:
        return [data for data, _ in self.sent]


class FakeNetwork:
    """
    Socket factory and resolver for DeviceLink.

    Hosts listed in `unreachable` fail to resolve. Every socket handed
    out is kept, keyed by host, so tests can inspect what was sent.
    """

    def __init__(self):
        self.unreachable: set[str] = set()
        self.sockets: dict[str, list[FakeSocket]] = {}

    def resolve(self, host: str, port: int) -> tuple[str, int]:
        if host in self.unreachable:
            raise socket.gaierror(-2, "Name or service not known")
        return (host, port)

    def link_factory(self, panel: PanelConfig) -> DeviceLink:
        def make_socket() -> FakeSocket:
            sock = FakeSocket()
            self.sockets.setdefault(panel.host, []).append(sock)
            return sock

        return DeviceLink(panel, socket_factory=make_socket, resolver=self.resolve)

    def socket_for(self, host: str) -> FakeSocket:
        """The single socket opened for `host`."""
        sockets = self.sockets.get(host, [])
        assert len(sockets) == 1, f"expected one socket for {host}, got {len(sockets)}"
        return sockets[0]


def make_panel(
    panel_id: str = "A",
    address: str = "10.0.0.1",
    x: int = 0,
    y: int = 0,
    width: int = 4,
    height: int = 4,
    protocol: TransportProtocol = TransportProtocol.DDP,
    **kwargs,
) -> PanelConfig:
    """Build a PanelConfig with short defaults."""
    return PanelConfig(
        id=panel_id,
        address=address,
        protocol=protocol,
        grid_position=GridPosition(x=x, y=y),
        pixel_size=PixelSize(width=width, height=height),
        **kwargs,
    )


@pytest.fixture
def panel_factory():
    """Factory for PanelConfig objects with short defaults."""
    return make_panel


@pytest.fixture
def network():
    """Fake UDP network for DeviceLink."""
    return FakeNetwork()


@pytest.fixture
def fake_socket():
    """A single fake socket."""
    return FakeSocket()


@pytest.fixture
def panel_a():
    """4x4 DDP panel at the canvas origin."""
    return make_panel("A", "10.0.0.1", x=0)


@pytest.fixture
def panel_b():
    """4x4 Art-Net panel right of panel A."""
    return make_panel("B", "10.0.0.2", x=1, protocol=TransportProtocol.ARTNET, universe=3)


@pytest.fixture
def two_panel_layout(panel_a, panel_b):
    """Two 4x4 panels side by side on an 8x4 canvas."""
    return LayoutConfig(panels=[panel_a, panel_b])


@pytest.fixture
def layout_data():
    """A layout file body using the camelCase keys of existing layout files."""
    return {
        "virtualGrid": {"width": 32, "height": 16},
        "panels": [
            {
                "name": "Left",
                "ip": "192.168.7.113",
                "protocol": "artnet",
                "position": {"x": 0, "y": 0},
                "size": {"width": 16, "height": 16},
                "startCorner": "bottom-left",
                "order": "column-major",
                "serpentine": True,
                "universe": 1,
            },
            {
                "name": "Right",
                "ip": "192.168.7.226:4049",
                "position": {"x": 1, "y": 0},
                "size": {"width": 16, "height": 16},
                "wiring": {"order": "row-major", "mirrorX": True},
            },
        ],
    }


@pytest.fixture
def layout_file(tmp_path: Path, layout_data) -> Path:
    """The layout_data body written to a temporary file."""
    path = tmp_path / "layout.json"
    path.write_text(json.dumps(layout_data))
    return path

