"""BoardState — board plus side to move, castling rights and en passant."""

from __future__ import annotations

from collections.abc import Iterator

from netchess.core.board import Board, Square
from netchess.core.enums import CastlingRights, Color
from netchess.core.piece import Piece
from netchess.core.types import Position


class BoardState:
    """Complete game state shared by both peers.

    ``en_passant`` is the square of the pawn that has just advanced two
    squares and may be captured on the very next ply.  The square a capturing
    pawn moves *to* is :attr:`en_passant_target`.

    The state is plain data: every mutation goes through
    :meth:`netchess.core.rules.Rules.apply_move`.
    """

    __slots__ = ("board", "side_to_move", "castling", "en_passant")

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Position | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant

    @classmethod
    def initial(cls) -> BoardState:
        return cls()

    # ── Read access ──────────────────────────────────────────────────────

    def __getitem__(self, pos: Position) -> Square:
        return self.board[pos]

    def occupied(self) -> Iterator[tuple[Position, Piece]]:
        """Fresh generator over occupied squares, rank-major then file."""
        return self.board.occupied()

    def has_right(self, right: CastlingRights) -> bool:
        return bool(self.castling & right)

    @property
    def en_passant_target(self) -> Position | None:
        """Square behind the double-advanced pawn, or None."""
        if self.en_passant is None:
            return None
        piece = self.board[self.en_passant]
        if piece is None:
            return None
        # The pawn moved in its own forward direction; the target is behind it.
        return self.en_passant.offset(0, -piece.color.forward)

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> BoardState:
        """Independent scratch copy."""
        return BoardState(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
        )

    def __repr__(self) -> str:
        return (
            f"BoardState(side_to_move={self.side_to_move}, "
            f"castling={self.castling!r}, en_passant={self.en_passant})\n"
            f"{self.board!r}"
        )
