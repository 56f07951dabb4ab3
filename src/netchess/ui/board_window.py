"""Board window — a QWidget that paints snapshots and reports clicks.

The session is blocking, so there is no long-running Qt event loop.
:class:`QtFrontend` pumps events while drawing and runs a nested
``QEventLoop`` while it waits for a click.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QEventLoop, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QCloseEvent, QFont, QMouseEvent, QPainter, QPaintEvent
from PyQt6.QtWidgets import QApplication, QWidget

from netchess.core.enums import Color
from netchess.core.types import BOARD_SIZE, Position
from netchess.errors import InputClosedError
from netchess.game.interfaces import BoardSnapshot, IClickSource, IRenderer
from netchess.ui.theme import BoardTheme

_LOGGER = logging.getLogger(__name__)


class BoardWidget(QWidget):
    """Fixed-size 8x8 board.

    Signals:
        clicked(float, float): Left button released at widget coordinates.
        closed(): The window was closed.
    """

    clicked = pyqtSignal(float, float)
    closed = pyqtSignal()

    def __init__(
        self,
        tile_size: int = 50,
        theme: BoardTheme | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._tile = tile_size
        self._theme = theme or BoardTheme.default()
        self._snapshot: BoardSnapshot | None = None
        self._font = QFont()
        self._font.setPixelSize(int(tile_size * 0.8))
        self.setFixedSize(BOARD_SIZE * tile_size, BOARD_SIZE * tile_size)

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def tile_size(self) -> int:
        return self._tile

    @property
    def snapshot(self) -> BoardSnapshot | None:
        return self._snapshot

    def set_snapshot(self, snapshot: BoardSnapshot) -> None:
        self._snapshot = snapshot
        self.update()

    # ── Painting ─────────────────────────────────────────────────────────

    def _tile_rect(self, pos: Position) -> QRectF:
        t = self._tile
        return QRectF(pos.file * t, pos.rank * t, t, t)

    def paintEvent(self, event: QPaintEvent | None) -> None:
        painter = QPainter(self)
        try:
            for rank in range(BOARD_SIZE):
                for file in range(BOARD_SIZE):
                    is_light = (file + rank) % 2 == 0
                    color = (
                        self._theme.light_square if is_light else self._theme.dark_square
                    )
                    painter.fillRect(self._tile_rect(Position(file, rank)), color)

            snapshot = self._snapshot
            if snapshot is None:
                return
            if snapshot.highlight is not None:
                painter.fillRect(
                    self._tile_rect(snapshot.highlight), self._theme.highlight_from
                )

            painter.setFont(self._font)
            painter.setPen(self._theme.glyph)
            for rank, row in enumerate(snapshot.squares):
                for file, piece in enumerate(row):
                    if piece is None:
                        continue
                    painter.drawText(
                        self._tile_rect(Position(file, rank)),
                        int(Qt.AlignmentFlag.AlignCenter),
                        piece.symbol,
                    )
        finally:
            painter.end()

    # ── Input ────────────────────────────────────────────────────────────

    def mouseReleaseEvent(self, event: QMouseEvent | None) -> None:
        if event is not None and event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.clicked.emit(pos.x(), pos.y())
        super().mouseReleaseEvent(event)

    def closeEvent(self, event: QCloseEvent | None) -> None:
        self.closed.emit()
        super().closeEvent(event)


class QtFrontend(IRenderer, IClickSource):
    """Renderer and click source backed by a :class:`BoardWidget`."""

    def __init__(self, widget: BoardWidget, color: Color) -> None:
        self._widget = widget
        self._color = color
        self._closed = False
        widget.closed.connect(self._on_closed)

    @property
    def widget(self) -> BoardWidget:
        return self._widget

    @property
    def tile_size(self) -> float:
        return float(self._widget.tile_size)

    def render(self, snapshot: BoardSnapshot) -> None:
        turn = "your move" if snapshot.side_to_move == self._color else "waiting"
        self._widget.setWindowTitle(f"netchess - {self._color} ({turn})")
        self._widget.set_snapshot(snapshot)
        QApplication.processEvents()

    def wait_for_click(self) -> tuple[float, float]:
        if self._closed:
            raise InputClosedError("Board window closed")

        loop = QEventLoop()
        clicks: list[tuple[float, float]] = []

        def _on_click(x: float, y: float) -> None:
            clicks.append((x, y))
            loop.quit()

        self._widget.clicked.connect(_on_click)
        self._widget.closed.connect(loop.quit)
        try:
            loop.exec()
        finally:
            self._widget.clicked.disconnect(_on_click)
            self._widget.closed.disconnect(loop.quit)

        if not clicks:
            raise InputClosedError("Board window closed")
        return clicks[0]

    def _on_closed(self) -> None:
        _LOGGER.info("Board window closed")
        self._closed = True
