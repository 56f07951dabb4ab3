"""Command-line configuration for one peer process."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from enum import Enum

from netchess import __version__
from netchess.core.enums import Color
from netchess.net.transport import DEFAULT_HOST


class Role(Enum):
    """Which end of the connection this process is."""

    SERVER = "s"  # listens, plays White, moves first
    CLIENT = "c"  # connects, plays Black

    @property
    def color(self) -> Color:
        return Color.WHITE if self is Role.SERVER else Color.BLACK


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
THEME_NAMES = ("Classic", "Stone")


@dataclass(frozen=True, slots=True)
class SessionConfig:
    role: Role
    port: int
    host: str = DEFAULT_HOST
    tile_size: int = 50
    theme: str = "Classic"
    log_level: str = "INFO"

    @property
    def color(self) -> Color:
        return self.role.color

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _port(text: str) -> int:
    try:
        port = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {text!r}") from None
    if not (1 <= port <= 65535):
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netchess",
        description="Play chess against a peer over a direct TCP connection.",
    )
    parser.add_argument(
        "role",
        choices=[r.value for r in Role],
        help="s = listen and play White, c = connect and play Black",
    )
    parser.add_argument("port", type=_port, help="TCP port to listen on / connect to")
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"address to bind or connect to (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--tile-size",
        type=_positive_int,
        default=50,
        help="edge length of one board square in pixels (default: 50)",
    )
    parser.add_argument(
        "--theme",
        choices=THEME_NAMES,
        default="Classic",
        help="board colours (default: Classic)",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default="INFO",
        type=str.upper,
        help="logging verbosity (default: INFO)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: list[str] | None = None) -> SessionConfig:
    """Parse *argv* (``sys.argv[1:]`` when None) into a :class:`SessionConfig`."""
    ns = build_parser().parse_args(argv)
    return SessionConfig(
        role=Role(ns.role),
        port=ns.port,
        host=ns.host,
        tile_size=ns.tile_size,
        theme=ns.theme,
        log_level=ns.log_level,
    )
