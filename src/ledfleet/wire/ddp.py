"""DDP (Distributed Display Protocol) packet encoding.

A frame is split into packets of at most 1440 payload bytes (480 LEDs).
Each packet carries the byte offset of its data in the receiver's frame
buffer. Only the final packet has the push flag, so the receiver latches
the whole frame at once. Pixels are sent in plain R, G, B order.

Header (10 bytes):

    offset  size  field
    0       1     flags (0x40 on the last packet of a frame)
    1       1     sequence number
    2       1     data type (1 = RGB)
    3       1     destination id (1 = default output)
    4       4     byte offset, big-endian
    8       2     payload length in bytes, big-endian
"""

import math
import struct
from typing import NamedTuple

import numpy as np

from ledfleet.exceptions import EncodingError

from ._buffer import as_led_array

DDP_PORT = 4048
FLAG_PUSH = 0x40
DATA_TYPE_RGB = 1
DESTINATION_DEFAULT = 1
MAX_PAYLOAD = 1440
LEDS_PER_PACKET = MAX_PAYLOAD // 3
HEADER_SIZE = 10

_HEADER = struct.Struct(">BBBBIH")


class DdpHeader(NamedTuple):
    """Decoded DDP header fields."""

    flags: int
    sequence: int
    data_type: int
    destination: int
    offset: int
    length: int

    @property
    def push(self) -> bool:
        return bool(self.flags & FLAG_PUSH)


def packet_count(led_count: int) -> int:
    """Number of DDP packets needed for `led_count` LEDs."""
    return math.ceil(3 * led_count / MAX_PAYLOAD)


def encode_ddp(rgb: bytes | bytearray | memoryview | np.ndarray, sequence: int) -> list[bytes]:
    """
    Encode an RGB buffer into the DDP packets of one frame.

    Args:
        rgb: R G B bytes per LED, in LED index order
        sequence: Frame sequence number; reduced mod 256

    Returns:
        Packets in send order; empty list for an empty buffer

    Raises:
        EncodingError: If the buffer length is not a multiple of 3
    """
    payload = as_led_array(rgb).tobytes()
    if not payload:
        return []

    seq = sequence & 0xFF
    n_packets = packet_count(len(payload) // 3)
    packets = []
    for k in range(n_packets):
        offset = k * MAX_PAYLOAD
        chunk = payload[offset:offset + MAX_PAYLOAD]
        flags = FLAG_PUSH if k == n_packets - 1 else 0
        packets.append(
            _HEADER.pack(flags, seq, DATA_TYPE_RGB, DESTINATION_DEFAULT, offset, len(chunk)) + chunk
        )
    return packets


def parse_ddp_header(packet: bytes) -> DdpHeader:
    """
    Decode the header of a DDP packet.

    Raises:
        EncodingError: If the packet is shorter than a header
    """
    if len(packet) < HEADER_SIZE:
        raise EncodingError(f"DDP packet too short: {len(packet)} bytes")
    return DdpHeader(*_HEADER.unpack_from(packet, 0))
