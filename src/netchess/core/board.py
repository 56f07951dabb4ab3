"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeAlias

from netchess.core.enums import Color, PieceType
from netchess.core.piece import Piece
from netchess.core.types import BOARD_SIZE, Position

Square: TypeAlias = Piece | None  # None = empty square

_BACK_RANK = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square grid indexed by :class:`Position`."""

    __slots__ = ("_squares",)

    def __init__(self) -> None:
        self._squares: list[Square] = [None] * (BOARD_SIZE * BOARD_SIZE)

    @staticmethod
    def _index(pos: Position) -> int:
        return pos.rank * BOARD_SIZE + pos.file

    # -- Element access -----------------------------------------------------

    def __getitem__(self, pos: Position) -> Square:
        return self._squares[self._index(pos)]

    def __setitem__(self, pos: Position, piece: Square) -> None:
        self._squares[self._index(pos)] = piece

    def is_empty(self, pos: Position) -> bool:
        return self._squares[self._index(pos)] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Position, Piece]]:
        """Yield (position, piece) for every occupied square, rank-major."""
        for idx, piece in enumerate(self._squares):
            if piece is not None:
                yield Position(idx % BOARD_SIZE, idx // BOARD_SIZE), piece

    def pieces(self, color: Color) -> Iterator[tuple[Position, Piece]]:
        """Occupied squares holding *color*'s pieces."""
        return ((pos, p) for pos, p in self.occupied() if p.color == color)

    def king_square(self, color: Color) -> Position:
        """Return the single king square for *color*."""
        for pos, piece in self.pieces(color):
            if piece.piece_type == PieceType.KING:
                return pos
        raise ValueError(f"No {color.name} king on board")

    def rows(self) -> tuple[tuple[Square, ...], ...]:
        """Read-only 8x8 snapshot, rank-major."""
        return tuple(
            tuple(self._squares[r * BOARD_SIZE : (r + 1) * BOARD_SIZE])
            for r in range(BOARD_SIZE)
        )

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * (BOARD_SIZE * BOARD_SIZE)

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position (Black on top, White at the bottom)."""
        b = cls()
        for f in range(BOARD_SIZE):
            b[Position(f, 1)] = Piece(Color.BLACK, PieceType.PAWN)
            b[Position(f, 6)] = Piece(Color.WHITE, PieceType.PAWN)

        for f, pt in enumerate(_BACK_RANK):
            b[Position(f, 0)] = Piece(Color.BLACK, pt)
            b[Position(f, 7)] = Piece(Color.WHITE, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(BOARD_SIZE):
            row = []
            for file in range(BOARD_SIZE):
                p = self[Position(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{BOARD_SIZE - rank} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
