"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from netchess.core.types import Position, parse_square


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable (from, to) pair of board positions."""

    from_pos: Position
    to_pos: Position

    def __str__(self) -> str:
        return f"{self.from_pos}{self.to_pos}"

    @property
    def offset(self) -> tuple[int, int]:
        """(file delta, rank delta) from origin to destination."""
        return (
            self.to_pos.file - self.from_pos.file,
            self.to_pos.rank - self.from_pos.rank,
        )

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse long algebraic text such as ``"e2e4"``."""
        if len(text) != 4:
            raise ValueError(f"Invalid move text: {text!r}")
        return cls(parse_square(text[:2]), parse_square(text[2:]))
