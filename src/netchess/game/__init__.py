"""Game layer — the session state machine and its collaborators.

Quick start::

    from netchess.game import Session, run_session

    session = Session(BoardState.initial(), conn, Color.WHITE, renderer, clicks)
    outcome = run_session(session)
"""

from netchess.game.interfaces import (
    BoardSnapshot,
    IClickSource,
    IRenderer,
    screen_to_position,
)
from netchess.game.session import (
    AwaitAck,
    MyMove,
    OtherMove,
    Session,
    SessionEvents,
    SessionOutcome,
    SessionState,
    initial_state,
    run_session,
    step,
)

__all__ = [
    # Interfaces
    "BoardSnapshot",
    "IClickSource",
    "IRenderer",
    "screen_to_position",
    # States
    "AwaitAck",
    "MyMove",
    "OtherMove",
    "SessionState",
    "initial_state",
    # Concrete
    "Session",
    "SessionEvents",
    "SessionOutcome",
    "run_session",
    "step",
]
