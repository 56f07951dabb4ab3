"""Network layer — wire protocol and TCP transport."""

from netchess.net.protocol import (
    AckMove,
    MovePacket,
    Packet,
    RejMove,
    decode_packet,
    encode_packet,
    read_packet,
    write_packet,
)
from netchess.net.transport import DEFAULT_HOST, Connection, connect, listen

__all__ = [
    "AckMove",
    "Connection",
    "DEFAULT_HOST",
    "MovePacket",
    "Packet",
    "RejMove",
    "connect",
    "decode_packet",
    "encode_packet",
    "listen",
    "read_packet",
    "write_packet",
]
