"""Art-Net (ArtDMX) packet encoding.

Each packet carries one DMX universe of at most 512 channels. Pixels are
packed three channels per LED in blue, red, green order, which is what
the receiving firmware expects; 170 LEDs fit one universe. A panel with
more LEDs spills into consecutive universes.

Packet layout:

    offset  size  field
    0       8     "Art-Net\\0"
    8       2     opcode 0x5000, little-endian
    10      2     protocol version 14, big-endian
    12      1     sequence (0 = disabled)
    13      1     physical port (0)
    14      2     universe, little-endian
    16      2     DMX data length, big-endian
    18      n     DMX data
"""

import math
import struct
from typing import NamedTuple

import numpy as np

from ledfleet.exceptions import EncodingError

from ._buffer import as_led_array

ARTNET_PORT = 6454
ARTNET_ID = b"Art-Net\x00"
OP_DMX = 0x5000
PROTOCOL_VERSION = 14
DMX_CHANNELS = 512
LEDS_PER_UNIVERSE = 170
MAX_UNIVERSE = 32767
HEADER_SIZE = 18

_ID_OPCODE = struct.Struct("<8sH")
_VERSION_SEQ_PHYS = struct.Struct(">HBB")
_UNIVERSE = struct.Struct("<H")
_LENGTH = struct.Struct(">H")

# Receiver channel order is B, R, G
_BRG = [2, 0, 1]


class ArtDmxHeader(NamedTuple):
    """Decoded ArtDMX header fields."""

    opcode: int
    protocol_version: int
    sequence: int
    physical: int
    universe: int
    length: int


def packet_count(led_count: int) -> int:
    """Number of ArtDMX packets needed for `led_count` LEDs."""
    return math.ceil(led_count / LEDS_PER_UNIVERSE)


def encode_artnet(
    rgb: bytes | bytearray | memoryview | np.ndarray,
    universe_base: int,
    dmx_start_address: int = 0,
) -> list[bytes]:
    """
    Encode an RGB buffer into ArtDMX packets.

    Args:
        rgb: R G B bytes per LED, in LED index order
        universe_base: Universe of the first packet; packet k uses universe_base + k
        dmx_start_address: Zero channels placed before the pixel data in every packet

    Returns:
        One packet per 170 LEDs; empty list for an empty buffer

    Raises:
        EncodingError: If the buffer is malformed, the universe range overflows,
            or a packet would exceed 512 DMX channels
    """
    leds = as_led_array(rgb)
    if dmx_start_address < 0:
        raise EncodingError(f"DMX start address must not be negative, got {dmx_start_address}")

    count = len(leds)
    if count == 0:
        return []

    n_packets = packet_count(count)
    if universe_base < 0 or universe_base + n_packets - 1 > MAX_UNIVERSE:
        raise EncodingError(
            f"universes {universe_base}..{universe_base + n_packets - 1} "
            f"outside 0..{MAX_UNIVERSE}"
        )

    packets = []
    padding = bytes(dmx_start_address)
    for k in range(n_packets):
        chunk = leds[k * LEDS_PER_UNIVERSE:(k + 1) * LEDS_PER_UNIVERSE]
        length = dmx_start_address + 3 * len(chunk)
        if length > DMX_CHANNELS:
            raise EncodingError(
                f"DMX start address {dmx_start_address} plus {len(chunk)} LEDs "
                f"needs {length} channels, a universe has {DMX_CHANNELS}",
                recovery_hint="Lower dmx_start_address for this panel",
            )

        packets.append(
            _ID_OPCODE.pack(ARTNET_ID, OP_DMX)
            + _VERSION_SEQ_PHYS.pack(PROTOCOL_VERSION, 0, 0)
            + _UNIVERSE.pack(universe_base + k)
            + _LENGTH.pack(length)
            + padding
            + chunk[:, _BRG].tobytes()
        )
    return packets


def parse_artnet_header(packet: bytes) -> ArtDmxHeader:
    """
    Decode the header of an ArtDMX packet.

    Raises:
        EncodingError: If the packet is too short or not Art-Net
    """
    if len(packet) < HEADER_SIZE:
        raise EncodingError(f"ArtDMX packet too short: {len(packet)} bytes")

    ident, opcode = _ID_OPCODE.unpack_from(packet, 0)
    if ident != ARTNET_ID:
        raise EncodingError("not an Art-Net packet")
    version, sequence, physical = _VERSION_SEQ_PHYS.unpack_from(packet, 10)
    (universe,) = _UNIVERSE.unpack_from(packet, 14)
    (length,) = _LENGTH.unpack_from(packet, 16)
    return ArtDmxHeader(opcode, version, sequence, physical, universe, length)
