"""
Session Module - Suspend/resume execution of turn routines.

A session wraps one turn routine (a generator of game rules):
- Created by running the routine to its first suspension
- Offers exactly one pending event at a time
- Resumed with exactly one input per event
- Cancelled (or dropped) with deterministic cleanup

Sessions are independent: there is no shared registry and no threading.
"""

from .exchange import PendingEvent, Done, Step
from .routine import Game, TurnRoutine, RoutineFactory, ensure_routine
from .session import Session, SessionState, TERMINAL_STATES, create
from .driver import Trace, drive, replay

__all__ = [
    "PendingEvent",
    "Done",
    "Step",
    "Game",
    "TurnRoutine",
    "RoutineFactory",
    "ensure_routine",
    "Session",
    "SessionState",
    "TERMINAL_STATES",
    "create",
    "Trace",
    "drive",
    "replay",
]
