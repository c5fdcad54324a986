"""Wire encoders for Art-Net and DDP."""

from .artnet import ARTNET_PORT, ArtDmxHeader, encode_artnet, parse_artnet_header
from .ddp import DDP_PORT, DdpHeader, encode_ddp, parse_ddp_header

__all__ = [
    "ARTNET_PORT",
    "ArtDmxHeader",
    "DDP_PORT",
    "DdpHeader",
    "encode_artnet",
    "encode_ddp",
    "parse_artnet_header",
    "parse_ddp_header",
]
