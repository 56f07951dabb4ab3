"""Application entry point: ``netchess {s,c} PORT``."""

from __future__ import annotations

import logging
import sys

from netchess.config import Role, SessionConfig, parse_args
from netchess.core.board_state import BoardState
from netchess.errors import InputClosedError, TransportError
from netchess.game.session import Session, SessionOutcome, run_session
from netchess.net.transport import Connection, connect, listen

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_TRANSPORT = 1
EXIT_PROTOCOL = 3
EXIT_WINDOW_CLOSED = 4

_OUTCOME_EXIT_CODES: dict[SessionOutcome, int] = {
    SessionOutcome.CHECKMATE_WIN: EXIT_OK,
    SessionOutcome.CHECKMATE_LOSS: EXIT_OK,
    SessionOutcome.PROTOCOL_ERROR: EXIT_PROTOCOL,
    SessionOutcome.DESYNC: EXIT_PROTOCOL,
}

_OUTCOME_TITLES: dict[SessionOutcome, str] = {
    SessionOutcome.CHECKMATE_WIN: "checkmate, you win",
    SessionOutcome.CHECKMATE_LOSS: "checkmate, you lose",
    SessionOutcome.PROTOCOL_ERROR: "connection closed (protocol error)",
    SessionOutcome.DESYNC: "connection closed (boards out of sync)",
}


def _configure_logging(config: SessionConfig) -> None:
    logging.basicConfig(
        level=config.log_level_value,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def open_connection(config: SessionConfig) -> Connection:
    """Listen (server) or connect (client) according to *config*."""
    if config.role is Role.SERVER:
        return listen(config.port, config.host)
    return connect(config.port, config.host)


def play(config: SessionConfig) -> int:
    """Open the board window, connect to the peer and play one game."""
    from PyQt6.QtWidgets import QApplication

    from netchess.ui.board_window import BoardWidget, QtFrontend
    from netchess.ui.theme import THEMES

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("netchess")

    widget = BoardWidget(config.tile_size, THEMES[config.theme])
    frontend = QtFrontend(widget, config.color)
    widget.show()
    app.processEvents()

    try:
        with open_connection(config) as conn:
            session = Session(
                board_state=BoardState.initial(),
                stream=conn,
                color=config.color,
                renderer=frontend,
                clicks=frontend,
            )
            outcome = run_session(session)
    except TransportError:
        _LOGGER.exception("Connection failed")
        return EXIT_TRANSPORT
    except InputClosedError:
        _LOGGER.info("Window closed, leaving the game")
        return EXIT_WINDOW_CLOSED

    _LOGGER.info("Game over: %s", outcome.name)
    if widget.isVisible():
        # Leave the final position on screen until the player closes it.
        widget.setWindowTitle(f"netchess - {_OUTCOME_TITLES[outcome]}")
        app.exec()
    return _OUTCOME_EXIT_CODES[outcome]


def main(argv: list[str] | None = None) -> int:
    """Console-script entry point."""
    config = parse_args(argv)
    _configure_logging(config)
    _LOGGER.info(
        "Starting as %s (%s) on %s:%d",
        config.role.name.lower(),
        config.color,
        config.host,
        config.port,
    )
    return play(config)


if __name__ == "__main__":
    sys.exit(main())
