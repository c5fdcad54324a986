"""UDP link to a single panel."""

import logging
import socket
from collections.abc import Callable
from enum import Enum
from threading import Lock

from ledfleet.exceptions import (
    BufferTooSmallError,
    DeviceNotConnectedError,
    DeviceTransportError,
    wrap_connection_error,
)
from ledfleet.models import PanelConfig, TransportProtocol
from ledfleet.wire import encode_artnet, encode_ddp

logger = logging.getLogger(__name__)

SocketFactory = Callable[[], socket.socket]
Resolver = Callable[[str, int], tuple[str, int]]


class LinkState(Enum):
    """Connection state of a DeviceLink."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


def udp_socket() -> socket.socket:
    """Create an IPv4 UDP socket."""
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


def resolve_udp(host: str, port: int) -> tuple[str, int]:
    """
    Resolve a host name to an IPv4 (address, port) pair.

    Raises:
        socket.gaierror: If the name does not resolve
    """
    infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_DGRAM)
    return infos[0][4][:2]


class DeviceLink:
    """
    Owns the UDP socket for one panel and sends whole frames to it.

    A link is either connected (holds exactly one open socket) or
    disconnected (holds none). A failed send raises DeviceTransportError
    for that frame only; the link stays connected and the next frame is
    tried as usual.

    Sends on one link are serialized, so a blackout issued from another
    thread never interleaves with the packets of a frame.

    For DDP panels the link owns the frame sequence number. It advances
    by one (mod 256) after each frame whose packets were all sent.

    Example:
        ```python
        with DeviceLink(panel) as link:
            link.send_frame(rgb)
        ```
    """

    def __init__(
        self,
        panel: PanelConfig,
        send_timeout: float = 0.1,
        socket_factory: SocketFactory | None = None,
        resolver: Resolver | None = None,
    ):
        """
        Initialize a link (not connected yet).

        Args:
            panel: The panel to drive
            send_timeout: Upper bound for one UDP send, in seconds
            socket_factory: Creates the UDP socket (injectable for tests)
            resolver: Resolves (host, port) to an address (injectable for tests)
        """
        self.panel = panel
        self.send_timeout = send_timeout
        self._socket_factory = socket_factory or udp_socket
        self._resolver = resolver or resolve_udp

        self._lock = Lock()
        self._socket: socket.socket | None = None
        self._target: tuple[str, int] | None = None
        self._sequence = 0

        self.frames_sent = 0
        self.packets_sent = 0
        self.send_errors = 0
        self.last_error: str | None = None

    @property
    def panel_id(self) -> str:
        return self.panel.id

    @property
    def state(self) -> LinkState:
        return LinkState.CONNECTED if self._socket is not None else LinkState.DISCONNECTED

    @property
    def is_connected(self) -> bool:
        return self._socket is not None

    @property
    def sequence(self) -> int:
        """Sequence number the next DDP frame will carry."""
        return self._sequence

    @property
    def target(self) -> tuple[str, int] | None:
        """Resolved (address, port), or None while disconnected."""
        return self._target

    def connect(self) -> None:
        """
        Resolve the panel address and open the socket.

        Does nothing if already connected.

        Raises:
            DeviceConnectionError: If the host does not resolve or the socket cannot be opened
        """
        with self._lock:
            if self._socket is not None:
                return

            try:
                target = self._resolver(self.panel.host, self.panel.port)
                sock = self._socket_factory()
            except OSError as e:
                raise wrap_connection_error(e, self.panel.id, self.panel.address) from e

            try:
                sock.settimeout(self.send_timeout)
            except OSError as e:
                sock.close()
                raise wrap_connection_error(e, self.panel.id, self.panel.address) from e

            self._socket = sock
            self._target = target

        logger.info(
            f"Link {self.panel.id} connected: {self.panel.protocol.value} "
            f"to {target[0]}:{target[1]}"
        )

    def disconnect(self) -> None:
        """Close the socket. Does nothing if already disconnected."""
        with self._lock:
            sock = self._detach_locked()
        self._close_socket(sock)

    def send_frame(self, rgb: bytes) -> int:
        """
        Encode and send one frame.

        Args:
            rgb: R G B bytes per LED in LED index order. Bytes beyond
                3 * led_count are ignored.

        Returns:
            Number of packets sent

        Raises:
            DeviceNotConnectedError: If the link is disconnected
            BufferTooSmallError: If rgb holds fewer than led_count pixels
            DeviceTransportError: If a packet could not be sent
        """
        with self._lock:
            return self._send_locked(rgb)

    def send_blackout(self) -> int:
        """Send an all-zero frame. Same errors as send_frame."""
        return self.send_frame(bytes(3 * self.panel.led_count))

    def close(self, blackout: bool = True) -> None:
        """
        Black out the panel, then disconnect.

        Both happen under the send lock, so no frame can reach the panel
        between the blackout and the close. A failed blackout is logged
        and the socket is closed anyway.
        """
        with self._lock:
            if blackout and self._socket is not None:
                try:
                    self._send_locked(bytes(3 * self.panel.led_count))
                except DeviceTransportError as e:
                    logger.warning(f"Blackout of {self.panel.id} failed: {e.technical_message}")
            sock = self._detach_locked()
        self._close_socket(sock)

    def _detach_locked(self) -> socket.socket | None:
        sock, self._socket = self._socket, None
        self._target = None
        return sock

    def _close_socket(self, sock: socket.socket | None) -> None:
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            logger.warning(f"Error closing socket for {self.panel.id}: {e}")
        logger.info(f"Link {self.panel.id} disconnected")

    def _send_locked(self, rgb: bytes) -> int:
        needed = 3 * self.panel.led_count
        if self._socket is None:
            raise DeviceNotConnectedError(self.panel.id)
        if len(rgb) < needed:
            raise BufferTooSmallError(self.panel.id, needed, len(rgb))

        packets = self._encode(rgb[:needed])
        try:
            for packet in packets:
                self._socket.sendto(packet, self._target)
                self.packets_sent += 1
        except OSError as e:
            self.send_errors += 1
            self.last_error = str(e)
            raise DeviceTransportError(self.panel.id, str(e)) from e

        if self.panel.protocol is TransportProtocol.DDP:
            self._sequence = (self._sequence + 1) & 0xFF
        self.frames_sent += 1
        return len(packets)

    def _encode(self, rgb: bytes) -> list[bytes]:
        if self.panel.protocol is TransportProtocol.ARTNET:
            return encode_artnet(rgb, self.panel.universe, self.panel.dmx_start_address)
        return encode_ddp(rgb, self._sequence)

    def __enter__(self) -> "DeviceLink":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    def __repr__(self) -> str:
        return f"DeviceLink({self.panel.id!r}, {self.state.value})"
