"""Tests for DeviceLink using a fake socket."""

import socket

import pytest

from ledfleet.devices import DeviceLink, LinkState
from ledfleet.exceptions import (
    BufferTooSmallError,
    DeviceConnectionError,
    DeviceNotConnectedError,
    DeviceTransportError,
)
from ledfleet.models import TransportProtocol
from ledfleet.wire import parse_artnet_header, parse_ddp_header


def make_link(panel, sock, resolver=None):
    return DeviceLink(
        panel,
        send_timeout=0.05,
        socket_factory=lambda: sock,
        resolver=resolver or (lambda host, port: (host, port)),
    )


@pytest.mark.unit
class TestConnection:
    """Connecting and disconnecting."""

    def test_connect_opens_socket_with_timeout(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        assert link.state is LinkState.DISCONNECTED

        link.connect()

        assert link.is_connected
        assert link.state is LinkState.CONNECTED
        assert fake_socket.timeout == 0.05
        assert link.target == ("10.0.0.1", 4048)

    def test_connect_twice_keeps_one_socket(self, panel_a, fake_socket):
        created = []

        def factory():
            created.append(fake_socket)
            return fake_socket

        link = DeviceLink(panel_a, socket_factory=factory, resolver=lambda h, p: (h, p))
        link.connect()
        link.connect()
        assert len(created) == 1

    def test_unresolvable_host_raises_connection_error(self, panel_a, fake_socket):
        def resolver(host, port):
            raise socket.gaierror(-2, "Name or service not known")

        link = make_link(panel_a, fake_socket, resolver=resolver)
        with pytest.raises(DeviceConnectionError) as exc_info:
            link.connect()

        assert exc_info.value.panel_id == "A"
        assert exc_info.value.recoverable
        assert "cannot resolve host" in exc_info.value.technical_message
        assert not link.is_connected

    def test_explicit_port_is_used(self, panel_factory, fake_socket):
        link = make_link(panel_factory(address="10.0.0.9:5000"), fake_socket)
        link.connect()
        assert link.target == ("10.0.0.9", 5000)

    def test_disconnect_closes_socket(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        link.disconnect()
        assert fake_socket.closed
        assert not link.is_connected
        link.disconnect()  # no-op

    def test_context_manager(self, panel_a, fake_socket):
        with make_link(panel_a, fake_socket) as link:
            assert link.is_connected
        assert fake_socket.closed


@pytest.mark.unit
class TestSending:
    """Sending frames."""

    def test_send_before_connect_raises(self, panel_a, fake_socket):
        with pytest.raises(DeviceNotConnectedError):
            make_link(panel_a, fake_socket).send_frame(bytes(48))

    def test_short_buffer_raises(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        with pytest.raises(BufferTooSmallError) as exc_info:
            link.send_frame(bytes(47))
        assert exc_info.value.expected == 48
        assert fake_socket.sent == []

    def test_extra_bytes_are_ignored(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        link.send_frame(bytes(60))
        assert parse_ddp_header(fake_socket.packets[0]).length == 48

    def test_ddp_sequence_advances_per_frame(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        for _ in range(3):
            link.send_frame(bytes(48))

        sequences = [parse_ddp_header(p).sequence for p in fake_socket.packets]
        assert sequences == [0, 1, 2]
        assert link.sequence == 3
        assert link.frames_sent == 3

    def test_ddp_sequence_wraps(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        for _ in range(257):
            link.send_frame(bytes(48))
        assert link.sequence == 1

    def test_artnet_frames_go_to_consecutive_universes(self, panel_factory, fake_socket):
        panel = panel_factory(width=20, height=10, protocol=TransportProtocol.ARTNET, universe=4)
        link = make_link(panel, fake_socket)
        link.connect()

        assert link.send_frame(bytes(3 * 200)) == 2
        universes = [parse_artnet_header(p).universe for p in fake_socket.packets]
        assert universes == [4, 5]
        assert all(address == ("10.0.0.1", 6454) for _, address in fake_socket.sent)

    def test_send_failure_raises_transport_error_and_stays_connected(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        fake_socket.fail_sends = True

        with pytest.raises(DeviceTransportError):
            link.send_frame(bytes(48))

        assert link.is_connected
        assert link.send_errors == 1
        assert "unreachable" in link.last_error
        assert link.sequence == 0

        fake_socket.fail_sends = False
        link.send_frame(bytes(48))
        assert link.frames_sent == 1

    def test_blackout_sends_zeros(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        link.send_blackout()
        packet = fake_socket.packets[0]
        assert packet[10:] == bytes(48)

    def test_close_blacks_out_then_disconnects(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        link.send_frame(bytes([255]) * 48)

        link.close(blackout=True)

        assert fake_socket.packets[-1][10:] == bytes(48)
        assert fake_socket.closed
        assert not link.is_connected

    def test_close_survives_failed_blackout(self, panel_a, fake_socket):
        link = make_link(panel_a, fake_socket)
        link.connect()
        fake_socket.fail_sends = True

        link.close(blackout=True)

        assert fake_socket.closed
        assert not link.is_connected
