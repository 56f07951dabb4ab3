"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from netchess.core import BoardState, Rules, parse_square

    state = BoardState.initial()
    rules = Rules(state)
    e2, e4 = parse_square("e2"), parse_square("e4")
    if rules.is_legal(e2, e4):
        rules.apply_move(e2, e4)
"""

from netchess.core.board import Board, Square
from netchess.core.board_state import BoardState
from netchess.core.enums import CastlingRights, Color, PieceType
from netchess.core.move import Move
from netchess.core.notation import STARTING_FEN, state_from_fen, state_to_fen
from netchess.core.piece import Piece
from netchess.core.rules import Rules
from netchess.core.types import Position, all_positions, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "PieceType",
    # Types / helpers
    "Position",
    "Square",
    "all_positions",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "BoardState",
    "Move",
    "Piece",
    "Rules",
    # Notation
    "STARTING_FEN",
    "state_from_fen",
    "state_to_fen",
]
