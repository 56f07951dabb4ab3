"""Rules engine: move legality, attack detection, move application, checkmate."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from netchess.core.enums import CastlingRights, Color, PieceType
from netchess.core.move import Move
from netchess.core.piece import Piece
from netchess.core.types import BOARD_SIZE, Position, all_positions

if TYPE_CHECKING:
    from netchess.core.board_state import BoardState


KNIGHT_OFFSETS: frozenset[tuple[int, int]] = frozenset(
    {
        (-2, -1),
        (-2, 1),
        (-1, -2),
        (-1, 2),
        (1, -2),
        (1, 2),
        (2, -1),
        (2, 1),
    }
)

# Corner squares whose rook carries a castling right.
_ROOK_CORNERS: dict[Position, CastlingRights] = {
    Position(0, 7): CastlingRights.WHITE_QUEENSIDE,
    Position(7, 7): CastlingRights.WHITE_KINGSIDE,
    Position(0, 0): CastlingRights.BLACK_QUEENSIDE,
    Position(7, 0): CastlingRights.BLACK_KINGSIDE,
}

_KING_HOME: dict[Color, Position] = {
    Color.WHITE: Position(4, 7),
    Color.BLACK: Position(4, 0),
}

_PROMOTION_RANK: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: BOARD_SIZE - 1}


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


class Rules:
    """Rule checker bound to a single :class:`BoardState`.

    Query methods never leave the state modified; :meth:`apply_move` is the
    only mutating operation and assumes the move was validated first.
    """

    __slots__ = ("_state", "_board")

    def __init__(self, state: BoardState) -> None:
        self._state = state
        self._board = state.board

    # -- Public API ---------------------------------------------------------

    def is_legal_start(self, pos: Position) -> bool:
        """Does *pos* hold a piece of the side to move?"""
        piece = self._board[pos]
        return piece is not None and piece.color == self._state.side_to_move

    def is_legal(self, from_pos: Position, to_pos: Position) -> bool:
        """Full legality check for moving the piece on *from_pos* to *to_pos*."""
        if not self.is_legal_start(from_pos) or from_pos == to_pos:
            return False
        piece = self._board[from_pos]
        assert piece is not None
        target = self._board[to_pos]
        if target is not None and target.color == piece.color:
            return False
        if not self._matches_geometry(piece, from_pos, to_pos):
            return False
        return not self._leaves_king_attacked(piece.color, from_pos, to_pos)

    def is_square_attacked(self, pos: Position, by_color: Color) -> bool:
        """Is *pos* attacked by any piece of *by_color*?

        Pawns attack their forward diagonals whether or not the square is
        occupied; castling never counts as an attack.
        """
        for from_pos, piece in self._board.pieces(by_color):
            if from_pos != pos and self._attacks(piece, from_pos, pos):
                return True
        return False

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def apply_move(self, from_pos: Position, to_pos: Position) -> None:
        """Play a move already known to be legal."""
        state = self._state
        board = self._board
        piece = board[from_pos]
        if piece is None:
            raise ValueError(f"No piece on {from_pos}")

        df = to_pos.file - from_pos.file
        dr = to_pos.rank - from_pos.rank
        prior_en_passant = state.en_passant
        state.en_passant = None

        if piece.piece_type == PieceType.KING:
            if abs(df) == 2 and dr == 0:
                # Castling: the rook lands on the square the king passed over.
                rook_from = Position(7 if df > 0 else 0, from_pos.rank)
                rook_to = Position(from_pos.file + _sign(df), from_pos.rank)
                board[rook_to] = board[rook_from]
                board[rook_from] = None
            state.castling &= ~CastlingRights.both(piece.color)

        for corner in (from_pos, to_pos):
            right = _ROOK_CORNERS.get(corner)
            if right is not None:
                state.castling &= ~right

        placed = piece.after_move()
        if piece.piece_type == PieceType.PAWN:
            if abs(dr) == 2:
                state.en_passant = to_pos
            elif df != 0 and board.is_empty(to_pos) and prior_en_passant is not None:
                board[prior_en_passant] = None
            if to_pos.rank == _PROMOTION_RANK[piece.color]:
                placed = Piece(piece.color, PieceType.QUEEN)

        board[to_pos] = placed
        board[from_pos] = None
        state.side_to_move = state.side_to_move.opposite

    def is_checkmate(self, color: Color) -> bool:
        """Is *color* mated?

        A side can only be mated on its own turn: it must be in check and
        have no legal escape.
        """
        if color != self._state.side_to_move:
            return False
        if not self.is_in_check(color):
            return False
        return not self.has_legal_move(color)

    def has_legal_move(self, color: Color) -> bool:
        """Does *color* have at least one legal move?

        Moves are enumerated as if it were *color*'s turn, stopping at the
        first one found.  The real side to move is always restored.
        """
        saved = self._state.side_to_move
        self._state.side_to_move = color
        try:
            return next(self._iter_legal_moves(), None) is not None
        finally:
            self._state.side_to_move = saved

    def legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return list(self._iter_legal_moves())

    # -- Geometry (private) -------------------------------------------------

    def _iter_legal_moves(self) -> Iterator[Move]:
        color = self._state.side_to_move
        for from_pos, _ in list(self._board.pieces(color)):
            for to_pos in all_positions():
                if self.is_legal(from_pos, to_pos):
                    yield Move(from_pos, to_pos)

    def _matches_geometry(
        self, piece: Piece, from_pos: Position, to_pos: Position
    ) -> bool:
        df = to_pos.file - from_pos.file
        dr = to_pos.rank - from_pos.rank
        ptype = piece.piece_type

        if ptype == PieceType.PAWN:
            return self._pawn_move_ok(piece, from_pos, to_pos)
        if ptype == PieceType.KING and abs(df) == 2 and dr == 0:
            return self._castling_ok(piece.color, from_pos, to_pos)
        return self._attacks(piece, from_pos, to_pos)

    def _attacks(self, piece: Piece, from_pos: Position, to_pos: Position) -> bool:
        """Raw attack geometry of *piece* (pawn diagonals count when empty)."""
        df = to_pos.file - from_pos.file
        dr = to_pos.rank - from_pos.rank
        ptype = piece.piece_type

        if ptype == PieceType.KNIGHT:
            return (df, dr) in KNIGHT_OFFSETS
        if ptype == PieceType.KING:
            return max(abs(df), abs(dr)) == 1
        if ptype == PieceType.ROOK:
            return self._rook_path_ok(from_pos, to_pos)
        if ptype == PieceType.BISHOP:
            return self._bishop_path_ok(from_pos, to_pos)
        if ptype == PieceType.QUEEN:
            return self._rook_path_ok(from_pos, to_pos) or self._bishop_path_ok(
                from_pos, to_pos
            )
        return abs(df) == 1 and dr == piece.color.forward

    def _rook_path_ok(self, from_pos: Position, to_pos: Position) -> bool:
        if (from_pos.file == to_pos.file) == (from_pos.rank == to_pos.rank):
            return False
        return self._path_clear(from_pos, to_pos)

    def _bishop_path_ok(self, from_pos: Position, to_pos: Position) -> bool:
        df = to_pos.file - from_pos.file
        dr = to_pos.rank - from_pos.rank
        if df == 0 or abs(df) != abs(dr):
            return False
        return self._path_clear(from_pos, to_pos)

    def _path_clear(self, from_pos: Position, to_pos: Position) -> bool:
        """Are all squares strictly between the two positions empty?"""
        step_f = _sign(to_pos.file - from_pos.file)
        step_r = _sign(to_pos.rank - from_pos.rank)
        f = from_pos.file + step_f
        r = from_pos.rank + step_r
        while (f, r) != (to_pos.file, to_pos.rank):
            if not self._board.is_empty(Position(f, r)):
                return False
            f += step_f
            r += step_r
        return True

    def _pawn_move_ok(self, piece: Piece, from_pos: Position, to_pos: Position) -> bool:
        board = self._board
        df = to_pos.file - from_pos.file
        dr = to_pos.rank - from_pos.rank
        forward = piece.color.forward

        if abs(df) == 1 and dr == forward:
            target = board[to_pos]
            if target is not None:
                return target.color != piece.color
            # En passant: the pawn beside us must be the one that just
            # advanced two squares.
            beside = Position(to_pos.file, from_pos.rank)
            if beside != self._state.en_passant:
                return False
            return board[beside] == Piece(piece.color.opposite, PieceType.PAWN, True)

        if df != 0 or not board.is_empty(to_pos):
            return False
        if dr == forward:
            return True
        if dr == 2 * forward and not piece.moved:
            return board.is_empty(Position(from_pos.file, from_pos.rank + forward))
        return False

    def _castling_ok(self, color: Color, king_sq: Position, to_pos: Position) -> bool:
        if king_sq != _KING_HOME[color]:
            return False
        direction = _sign(to_pos.file - king_sq.file)
        rook_sq = Position(7 if direction > 0 else 0, king_sq.rank)
        if not self._state.has_right(_ROOK_CORNERS[rook_sq]):
            return False
        if self._board[rook_sq] != Piece(color, PieceType.ROOK):
            return False
        if not self._path_clear(king_sq, rook_sq):
            return False

        opponent = color.opposite
        transit = Position(king_sq.file + direction, king_sq.rank)
        return not (
            self.is_square_attacked(king_sq, opponent)
            or self.is_square_attacked(transit, opponent)
        )

    # -- Self-check ---------------------------------------------------------

    def _leaves_king_attacked(
        self, color: Color, from_pos: Position, to_pos: Position
    ) -> bool:
        scratch = self._state.copy()
        scratch_rules = Rules(scratch)
        scratch_rules.apply_move(from_pos, to_pos)
        return scratch_rules.is_in_check(color)
