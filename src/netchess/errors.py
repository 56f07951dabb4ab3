"""Exception taxonomy shared by the network and session layers."""

from __future__ import annotations


class NetChessError(Exception):
    """Base class for all netchess failures."""


class TransportError(NetChessError, ConnectionError):
    """The byte stream failed: peer disconnected or a socket error occurred.

    Fatal for the session; never retried.
    """


class ProtocolError(NetChessError):
    """The peer sent bytes that do not decode to a known packet."""


class MoveRejectedError(ProtocolError):
    """The peer rejected a move this side had already validated.

    Both boards are expected to agree, so a rejection means they have
    drifted apart.
    """


class InputClosedError(NetChessError):
    """The local input device went away (e.g. the window was closed)."""
