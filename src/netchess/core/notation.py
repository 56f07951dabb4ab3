"""FEN parsing and serialization.

FEN is used for test fixtures and log output; games are never persisted.
The halfmove clock and fullmove number are not tracked, so they are
accepted but ignored on input and written as ``0 1``.
"""

from __future__ import annotations

from netchess.core.board import Board
from netchess.core.board_state import BoardState
from netchess.core.enums import CastlingRights, Color, PieceType
from netchess.core.piece import Piece
from netchess.core.types import BOARD_SIZE, Position, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}

# FEN order: K, Q, k, q
_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}

_SIDE_CHARS: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}


def _parse_row(board: Board, rank: int, text: str, fen: str) -> None:
    file = 0
    for ch in text:
        if ch.isdigit():
            if not (1 <= int(ch) <= BOARD_SIZE):
                raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
            file += int(ch)
            continue
        if file >= BOARD_SIZE:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")
        piece = Piece.from_char(ch)
        if piece.piece_type == PieceType.PAWN:
            # A pawn off its starting rank has already used its double step.
            piece = Piece.from_char(ch, moved=rank != _PAWN_START_RANK[piece.color])
        board[Position(file, rank)] = piece
        file += 1
    if file != BOARD_SIZE:
        raise ValueError(f"Invalid FEN rank width: {fen!r}")


def _parse_castling(text: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if text == "-":
        return castling
    if len(set(text)) != len(text):
        raise ValueError(f"Invalid FEN castling field: {text!r}")
    for ch in text:
        try:
            castling |= _CASTLING_CHARS[ch]
        except KeyError:
            raise ValueError(f"Invalid FEN castling field: {text!r}") from None
    return castling


def _parse_en_passant(text: str, board: Board, side: Color) -> Position | None:
    """Convert the FEN target square into the square of the pawn to capture."""
    if text == "-":
        return None
    target = parse_square(text)
    mover = side.opposite
    if target.rank not in (2, 5):
        raise ValueError(f"Invalid FEN en-passant square: {text!r}")
    if target.rank != (2 if side == Color.WHITE else 5):
        raise ValueError(f"Invalid FEN en-passant square for side-to-move: {text!r}")
    # The target sits right behind the pawn that just advanced two squares.
    pawn_square = Position(target.file, target.rank + mover.forward)
    if board[pawn_square] != Piece(mover, PieceType.PAWN, moved=True):
        raise ValueError(f"Invalid FEN en-passant square (no pawn): {text!r}")
    return pawn_square


def state_from_fen(fen: str) -> BoardState:
    """Parse a FEN string into a :class:`BoardState`.

    Raises:
        ValueError: the string is not a well-formed FEN record.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")
    placement, side_part, castling_part, ep_part = parts[:4]

    rows = placement.split("/")
    if len(rows) != BOARD_SIZE:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    # The first FEN row is rank index 0, Black's back rank.
    for rank, text in enumerate(rows):
        _parse_row(board, rank, text, fen)

    side = _SIDE_CHARS.get(side_part)
    if side is None:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    return BoardState(
        board,
        side,
        _parse_castling(castling_part),
        _parse_en_passant(ep_part, board, side),
    )


def _row_text(row: tuple[Piece | None, ...]) -> str:
    out: list[str] = []
    gap = 0
    for piece in row:
        if piece is None:
            gap += 1
            continue
        if gap:
            out.append(str(gap))
            gap = 0
        out.append(str(piece))
    if gap:
        out.append(str(gap))
    return "".join(out)


def state_to_fen(state: BoardState) -> str:
    """Serialise a :class:`BoardState` to FEN."""
    placement = "/".join(_row_text(row) for row in state.board.rows())
    side = "w" if state.side_to_move == Color.WHITE else "b"
    castling = "".join(
        ch for ch, right in _CASTLING_CHARS.items() if state.has_right(right)
    )
    target = state.en_passant_target
    ep = square_name(target) if target is not None else "-"
    return f"{placement} {side} {castling or '-'} {ep} 0 1"
