"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from netchess.core.enums import Color, PieceType

# Indexed by PieceType - 1.
_FEN_LETTERS = "pnbrqk"
_GLYPHS: dict[Color, str] = {
    Color.WHITE: "♙♘♗♖♕♔",
    Color.BLACK: "♟♞♝♜♛♚",
}


@dataclass(frozen=True, slots=True)
class Piece:
    """A coloured chess piece.

    ``moved`` is only meaningful for pawns, where it gates the two-square
    advance.  Other piece types keep it False.
    """

    color: Color
    piece_type: PieceType
    moved: bool = False

    def __str__(self) -> str:
        """FEN letter: uppercase for White, lowercase for Black."""
        letter = _FEN_LETTERS[self.piece_type - 1]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str, moved: bool = False) -> Piece:
        """Build a piece from its FEN letter, e.g. ``'n'`` is a black knight."""
        index = _FEN_LETTERS.find(char.lower()) if len(char) == 1 else -1
        if index < 0:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        ptype = PieceType(index + 1)
        return cls(color, ptype, moved and ptype == PieceType.PAWN)

    @property
    def symbol(self) -> str:
        """Unicode glyph used by the board window."""
        return _GLYPHS[self.color][self.piece_type - 1]

    def after_move(self) -> Piece:
        """The piece as it stands on its destination square."""
        if self.piece_type == PieceType.PAWN and not self.moved:
            return replace(self, moved=True)
        return self
