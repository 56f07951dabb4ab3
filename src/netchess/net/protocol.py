"""Wire protocol — fixed binary packets exchanged between the two peers.

Every packet starts with a one-byte tag:

    tag 0  Move     4 bytes: from.file, from.rank, to.file, to.rank
    tag 1  AckMove  no payload
    tag 2  RejMove  no payload

There is no version field and no length prefix; the tag alone determines
the payload size.
"""

from __future__ import annotations

import logging
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import TypeAlias

from netchess.core.move import Move
from netchess.core.types import BOARD_SIZE, Position
from netchess.errors import ProtocolError

_LOGGER = logging.getLogger(__name__)

_MOVE_PAYLOAD = struct.Struct("4B")


class PacketTag(IntEnum):
    MOVE = 0
    ACK_MOVE = 1
    REJ_MOVE = 2


# ── Packets ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MovePacket:
    """A proposed move, to be answered by exactly one Ack or Rej."""

    from_pos: Position
    to_pos: Position

    @classmethod
    def from_move(cls, move: Move) -> MovePacket:
        return cls(move.from_pos, move.to_pos)

    @property
    def move(self) -> Move:
        return Move(self.from_pos, self.to_pos)


@dataclass(frozen=True, slots=True)
class AckMove:
    """The last proposed move was legal and has been applied by the peer."""


@dataclass(frozen=True, slots=True)
class RejMove:
    """The last proposed move was illegal on the peer's board."""


Packet: TypeAlias = MovePacket | AckMove | RejMove


# ── Byte stream interface ────────────────────────────────────────────────────


class IByteStream(ABC):
    """Blocking, ordered byte stream (a TCP socket in production)."""

    @abstractmethod
    def read_exact(self, size: int) -> bytes:
        """Block until exactly *size* bytes are available and return them."""

    @abstractmethod
    def send_all(self, data: bytes) -> None:
        """Write all of *data*."""

    @abstractmethod
    def close(self) -> None:
        """Release the stream; further reads and writes fail."""


# ── Encoding ─────────────────────────────────────────────────────────────────


def encode_packet(packet: Packet) -> bytes:
    """Serialise *packet* to its wire bytes."""
    if isinstance(packet, MovePacket):
        payload = _MOVE_PAYLOAD.pack(
            packet.from_pos.file,
            packet.from_pos.rank,
            packet.to_pos.file,
            packet.to_pos.rank,
        )
        return bytes([PacketTag.MOVE]) + payload
    if isinstance(packet, AckMove):
        return bytes([PacketTag.ACK_MOVE])
    if isinstance(packet, RejMove):
        return bytes([PacketTag.REJ_MOVE])
    raise TypeError(f"Not a packet: {packet!r}")


def _positions_from_payload(payload: bytes) -> MovePacket:
    ff, fr, tf, tr = _MOVE_PAYLOAD.unpack(payload)
    if max(ff, fr, tf, tr) >= BOARD_SIZE:
        raise ProtocolError(f"Move coordinate out of range: {payload.hex()}")
    return MovePacket(Position(ff, fr), Position(tf, tr))


def _payload_size(tag: int) -> int:
    if tag == PacketTag.MOVE:
        return _MOVE_PAYLOAD.size
    if tag in (PacketTag.ACK_MOVE, PacketTag.REJ_MOVE):
        return 0
    raise ProtocolError(f"Unrecognized packet tag: {tag}")


def _build_packet(tag: int, payload: bytes) -> Packet:
    if tag == PacketTag.MOVE:
        return _positions_from_payload(payload)
    if tag == PacketTag.ACK_MOVE:
        return AckMove()
    return RejMove()


def decode_packet(data: bytes) -> Packet:
    """Parse one complete packet from *data*."""
    if not data:
        raise ProtocolError("Empty packet")
    tag = data[0]
    size = _payload_size(tag)
    if len(data) != 1 + size:
        raise ProtocolError(
            f"Packet with tag {tag} needs {size} payload bytes, got {len(data) - 1}"
        )
    return _build_packet(tag, data[1:])


# ── Stream I/O ───────────────────────────────────────────────────────────────


def write_packet(stream: IByteStream, packet: Packet) -> None:
    """Send *packet* over *stream*."""
    _LOGGER.debug("Sending packet: %s", packet)
    stream.send_all(encode_packet(packet))


def read_packet(stream: IByteStream) -> Packet:
    """Block until one packet has been read from *stream*."""
    tag = stream.read_exact(1)[0]
    size = _payload_size(tag)
    payload = stream.read_exact(size) if size else b""
    packet = _build_packet(tag, payload)
    _LOGGER.debug("Received packet: %s", packet)
    return packet
