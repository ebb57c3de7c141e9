"""
Posturn - Turn-based game rules as resumable routines.

Game rules are written as one sequential generator that suspends whenever
it needs the player, and a session hands each suspension to an external
driver (terminal, HTTP, bot). The package provides:
- Sessions with strict one-event/one-input pairing
- Deterministic cleanup when a game is abandoned
- Headless drivers for bots and replays
- Example games and HTTP/CLI drivers built on top
"""

from .errors import ProtocolError, AlreadyCompleted, NotSuspended, AlreadyStarted
from .session import (
    PendingEvent,
    Done,
    Game,
    Session,
    SessionState,
    create,
    drive,
    replay,
)

__version__ = "0.2.0"

__all__ = [
    "ProtocolError",
    "AlreadyCompleted",
    "NotSuspended",
    "AlreadyStarted",
    "PendingEvent",
    "Done",
    "Game",
    "Session",
    "SessionState",
    "create",
    "drive",
    "replay",
]
