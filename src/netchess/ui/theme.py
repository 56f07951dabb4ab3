"""Visual theme constants for the board window."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtGui import QColor


@dataclass(frozen=True)
class BoardTheme:
    """Colour scheme for the chessboard."""

    light_square: QColor
    dark_square: QColor
    highlight_from: QColor  # selected piece origin
    glyph: QColor  # piece symbols

    @classmethod
    def default(cls) -> BoardTheme:
        return cls(
            light_square=QColor(240, 217, 181),  # tan
            dark_square=QColor(181, 136, 99),  # brown
            highlight_from=QColor(255, 255, 0, 100),  # yellow transparent
            glyph=QColor(20, 20, 20),
        )

    @classmethod
    def stone(cls) -> BoardTheme:
        return cls(
            light_square=QColor(180, 175, 165),
            dark_square=QColor(145, 140, 125),
            highlight_from=QColor(180, 80, 80),
            glyph=QColor(10, 10, 10),
        )


# Keys match netchess.config.THEME_NAMES.
THEMES: dict[str, BoardTheme] = {
    "Classic": BoardTheme.default(),
    "Stone": BoardTheme.stone(),
}
