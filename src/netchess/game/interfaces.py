"""Abstract collaborators of the session and the snapshot handed to them.

The session depends on these ABCs, not on a concrete window toolkit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from netchess.core.types import BOARD_SIZE, Position

if TYPE_CHECKING:
    from netchess.core.board import Square
    from netchess.core.board_state import BoardState
    from netchess.core.enums import Color


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Read-only view of the board for drawing.

    ``squares`` is rank-major: ``squares[rank][file]``.
    """

    squares: tuple[tuple[Square, ...], ...]
    side_to_move: Color
    highlight: Position | None = None

    @classmethod
    def from_state(
        cls, state: BoardState, highlight: Position | None = None
    ) -> BoardSnapshot:
        return cls(state.board.rows(), state.side_to_move, highlight)

    def __getitem__(self, pos: Position) -> Square:
        return self.squares[pos.rank][pos.file]


def screen_to_position(x: float, y: float, tile_size: float) -> Position | None:
    """Map a screen coordinate to the board square under it.

    Returns None for coordinates outside the 8x8 extent.
    """
    if x < 0 or y < 0:
        return None
    file = int(x // tile_size)
    rank = int(y // tile_size)
    if file >= BOARD_SIZE or rank >= BOARD_SIZE:
        return None
    return Position(file, rank)


class IRenderer(ABC):
    """Draws board snapshots; nothing it returns is observed."""

    @abstractmethod
    def render(self, snapshot: BoardSnapshot) -> None:
        """Draw *snapshot*."""


class IClickSource(ABC):
    """Blocking source of user clicks in screen coordinates."""

    @property
    @abstractmethod
    def tile_size(self) -> float:
        """Edge length of one board square in screen units."""

    @abstractmethod
    def wait_for_click(self) -> tuple[float, float]:
        """Block until the user clicks and return ``(x, y)``.

        Raises:
            InputClosedError: the input device went away.
        """
