"""Board coordinates and square-name helpers.

Coordinates follow the on-screen layout:
    file 0-7  -> a-h (left to right)
    rank 0-7  -> 8-1 (top to bottom)

so Black's back rank is rank index 0 and White's is rank index 7.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

BOARD_SIZE = 8


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable (file, rank) coordinate of a board square."""

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not (0 <= self.file < BOARD_SIZE and 0 <= self.rank < BOARD_SIZE):
            raise ValueError(f"Position out of range: ({self.file}, {self.rank})")

    def offset(self, df: int, dr: int) -> Position | None:
        """Position shifted by (*df*, *dr*), or None when it leaves the board."""
        f = self.file + df
        r = self.rank + dr
        if 0 <= f < BOARD_SIZE and 0 <= r < BOARD_SIZE:
            return Position(f, r)
        return None

    def __str__(self) -> str:
        return square_name(self)


def square_name(pos: Position) -> str:
    """Human-readable name, e.g. Position(4, 6) → 'e2'."""
    return chr(ord("a") + pos.file) + str(BOARD_SIZE - pos.rank)


def parse_square(name: str) -> Position:
    """Parse square name, e.g. 'e4' → Position(4, 4)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return Position(ord(name[0]) - ord("a"), BOARD_SIZE - int(name[1]))


def all_positions() -> Iterator[Position]:
    """Every square, rank-major then file."""
    for rank in range(BOARD_SIZE):
        for file in range(BOARD_SIZE):
            yield Position(file, rank)
