"""Session state machine — turn-taking between the two peers.

Three states form a closed union::

    MyMove ──pick legal move──▶ AwaitAck ──AckMove──▶ OtherMove
       ▲                                                  │
       └──────────── peer's legal Move (we Ack) ──────────┘

:func:`step` performs exactly one transition on an explicitly owned
:class:`Session`; :func:`run_session` loops it until the game ends or the
link breaks.  The protocol is half-duplex: every Move is answered by exactly
one AckMove or RejMove before the next Move is sent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import TypeAlias

from netchess.core.board_state import BoardState
from netchess.core.enums import Color
from netchess.core.move import Move
from netchess.core.rules import Rules
from netchess.core.types import Position
from netchess.errors import MoveRejectedError, ProtocolError
from netchess.game.interfaces import (
    BoardSnapshot,
    IClickSource,
    IRenderer,
    screen_to_position,
)
from netchess.net.protocol import (
    AckMove,
    IByteStream,
    MovePacket,
    RejMove,
    read_packet,
    write_packet,
)

_LOGGER = logging.getLogger(__name__)


# ── States ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MyMove:
    """Local player picks a move."""


@dataclass(frozen=True, slots=True)
class AwaitAck:
    """``move`` has been chosen; it is sent and the peer's verdict awaited."""

    move: Move


@dataclass(frozen=True, slots=True)
class OtherMove:
    """Waiting for the peer to propose a move."""


SessionState: TypeAlias = MyMove | AwaitAck | OtherMove


class SessionOutcome(IntEnum):
    """Why :func:`run_session` returned."""

    CHECKMATE_WIN = auto()
    CHECKMATE_LOSS = auto()
    PROTOCOL_ERROR = auto()  # undecodable packet from the peer
    DESYNC = auto()  # peer rejected a move we had validated


def initial_state(color: Color) -> SessionState:
    """White (the listener) moves first; Black starts by waiting."""
    return MyMove() if color == Color.WHITE else OtherMove()


# ── Events ───────────────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, Color], None]  # move, mover
StateCallback = Callable[[SessionState], None]
GameOverCallback = Callable[[SessionOutcome], None]


@dataclass
class SessionEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_state_changed: list[StateCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)

    def emit_move(self, move: Move, mover: Color) -> None:
        for cb in self.on_move:
            cb(move, mover)

    def emit_state(self, state: SessionState) -> None:
        for cb in self.on_state_changed:
            cb(state)

    def emit_game_over(self, outcome: SessionOutcome) -> None:
        for cb in self.on_game_over:
            cb(outcome)


# ── Session ──────────────────────────────────────────────────────────────────


@dataclass
class Session:
    """Everything one running state machine owns.

    Only the active state touches it, so it is passed along explicitly from
    transition to transition and never shared.
    """

    board_state: BoardState
    stream: IByteStream
    color: Color
    renderer: IRenderer
    clicks: IClickSource
    events: SessionEvents = field(default_factory=SessionEvents)

    @property
    def rules(self) -> Rules:
        return Rules(self.board_state)

    def draw(self, highlight: Position | None = None) -> None:
        self.renderer.render(BoardSnapshot.from_state(self.board_state, highlight))

    def apply(self, move: Move) -> None:
        """Play a validated move on the local board and announce it."""
        mover = self.board_state.side_to_move
        self.rules.apply_move(move.from_pos, move.to_pos)
        _LOGGER.info("%s plays %s", mover, move)
        self.events.emit_move(move, mover)


# ── Transitions ──────────────────────────────────────────────────────────────


def step(state: SessionState, session: Session) -> tuple[SessionState, Session]:
    """Perform one state transition."""
    if isinstance(state, MyMove):
        return _my_move(session), session
    if isinstance(state, AwaitAck):
        return _await_ack(state, session), session
    if isinstance(state, OtherMove):
        return _other_move(session), session
    raise TypeError(f"Unknown session state: {state!r}")


def _pick_square(session: Session) -> Position:
    """Block until the user clicks on the board."""
    while True:
        x, y = session.clicks.wait_for_click()
        pos = screen_to_position(x, y, session.clicks.tile_size)
        if pos is not None:
            return pos
        _LOGGER.debug("Ignoring click outside the board at (%.1f, %.1f)", x, y)


def _my_move(session: Session) -> SessionState:
    session.draw()
    rules = session.rules
    while True:
        from_pos = _pick_square(session)
        if not rules.is_legal_start(from_pos):
            continue
        session.draw(highlight=from_pos)
        to_pos = _pick_square(session)
        session.draw()
        if rules.is_legal(from_pos, to_pos):
            return AwaitAck(Move(from_pos, to_pos))
        _LOGGER.debug("Illegal local pick %s%s", from_pos, to_pos)


def _await_ack(state: AwaitAck, session: Session) -> SessionState:
    write_packet(session.stream, MovePacket.from_move(state.move))
    while True:
        session.draw()
        packet = read_packet(session.stream)
        if isinstance(packet, AckMove):
            session.apply(state.move)
            session.draw()
            return OtherMove()
        if isinstance(packet, RejMove):
            raise MoveRejectedError(f"Peer rejected {state.move}")
        # Stray packets are tolerated here rather than treated as errors.
        _LOGGER.warning("Discarding %s while awaiting acknowledgement", packet)


def _other_move(session: Session) -> SessionState:
    while True:
        session.draw()
        packet = read_packet(session.stream)
        if isinstance(packet, MovePacket):
            break
        _LOGGER.warning("Discarding %s while waiting for a move", packet)

    move = packet.move
    if not session.rules.is_legal(move.from_pos, move.to_pos):
        _LOGGER.warning("Rejecting illegal move %s from peer", move)
        write_packet(session.stream, RejMove())
        return OtherMove()

    session.apply(move)
    write_packet(session.stream, AckMove())
    session.draw()
    return MyMove()


# ── Runner ───────────────────────────────────────────────────────────────────


def _move_applied(before: SessionState, after: SessionState) -> bool:
    return isinstance(after, (MyMove, OtherMove)) and type(after) is not type(before)


def run_session(
    session: Session,
    state: SessionState | None = None,
    *,
    stop_on_checkmate: bool = True,
) -> SessionOutcome:
    """Drive the state machine until the game ends.

    After every applied move both peers independently test the side to move
    for checkmate (when *stop_on_checkmate* is set); nothing extra crosses
    the wire.  Protocol failures close the stream and are reported as an
    outcome; transport failures propagate.
    """
    if state is None:
        state = initial_state(session.color)
    _LOGGER.info("Session started as %s", session.color)
    session.draw()

    try:
        while True:
            before = state
            state, session = step(state, session)
            _LOGGER.debug("Session state: %s -> %s", before, state)
            session.events.emit_state(state)

            if stop_on_checkmate and _move_applied(before, state):
                to_move = session.board_state.side_to_move
                if session.rules.is_checkmate(to_move):
                    outcome = (
                        SessionOutcome.CHECKMATE_LOSS
                        if to_move == session.color
                        else SessionOutcome.CHECKMATE_WIN
                    )
                    _LOGGER.info("Checkmate: %s is mated", to_move)
                    session.events.emit_game_over(outcome)
                    return outcome
    except MoveRejectedError:
        _LOGGER.exception("Boards out of sync, closing connection")
        outcome = SessionOutcome.DESYNC
    except ProtocolError:
        _LOGGER.exception("Protocol error, closing connection")
        outcome = SessionOutcome.PROTOCOL_ERROR

    session.stream.close()
    session.events.emit_game_over(outcome)
    return outcome
