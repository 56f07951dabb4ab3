"""TCP transport — one blocking connection between the two peers."""

from __future__ import annotations

import logging
import socket
from collections.abc import Callable
from types import TracebackType

from netchess.errors import TransportError
from netchess.net.protocol import IByteStream

_LOGGER = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"


class Connection(IByteStream):
    """Blocking byte stream over a connected socket.

    Any socket failure, including an orderly close by the peer while a read
    is pending, surfaces as :class:`~netchess.errors.TransportError`.
    """

    __slots__ = ("_sock", "_peer")

    def __init__(self, sock: socket.socket, peer: str = "") -> None:
        self._sock = sock
        self._peer = peer or _describe_peer(sock)

    @property
    def peer(self) -> str:
        return self._peer

    def read_exact(self, size: int) -> bytes:
        chunks: list[bytes] = []
        remaining = size
        while remaining:
            try:
                chunk = self._sock.recv(remaining)
            except OSError as exc:
                raise TransportError(f"Read from {self._peer} failed: {exc}") from exc
            if not chunk:
                raise TransportError(f"Connection closed by {self._peer}")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def send_all(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise TransportError(f"Write to {self._peer} failed: {exc}") from exc

    def close(self) -> None:
        try:
            self._sock.close()
        except OSError:
            _LOGGER.debug("Ignoring error while closing %s", self._peer, exc_info=True)

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _describe_peer(sock: socket.socket) -> str:
    try:
        host, port = sock.getpeername()[:2]
    except (OSError, ValueError):
        return "peer"
    return f"{host}:{port}"


def listen(
    port: int,
    host: str = DEFAULT_HOST,
    timeout: float | None = None,
    on_ready: Callable[[int], None] | None = None,
) -> Connection:
    """Bind to *host*:*port*, accept exactly one peer and return it.

    *on_ready* is called with the bound port once the socket is listening,
    which lets callers pass ``port=0`` and learn the one the OS picked.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server:
            server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server.bind((host, port))
            server.listen(1)
            server.settimeout(timeout)
            bound_port = server.getsockname()[1]
            _LOGGER.info("Waiting for opponent on %s:%d", host, bound_port)
            if on_ready is not None:
                on_ready(bound_port)
            sock, addr = server.accept()
    except OSError as exc:
        raise TransportError(f"Could not accept on {host}:{port}: {exc}") from exc
    sock.settimeout(timeout)
    conn = Connection(sock, f"{addr[0]}:{addr[1]}")
    _LOGGER.info("Opponent connected from %s", conn.peer)
    return conn


def connect(
    port: int, host: str = DEFAULT_HOST, timeout: float | None = None
) -> Connection:
    """Connect to a listening peer on *host*:*port*."""
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as exc:
        raise TransportError(f"Could not connect to {host}:{port}: {exc}") from exc
    sock.settimeout(timeout)
    conn = Connection(sock, f"{host}:{port}")
    _LOGGER.info("Connected to opponent at %s", conn.peer)
    return conn
