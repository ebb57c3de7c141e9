"""
Protocol errors - Contract violations by the driver of a session.

These are programming errors, never game conditions. A routine that wants
to report an invalid move does so with an ordinary event or outcome value.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session.session import SessionState


class ProtocolError(Exception):
    """Base class for suspend/resume protocol violations."""


class AlreadyCompleted(ProtocolError):
    """resume() was called on a session whose routine has finished."""

    def __init__(self, message: str = "Session has already completed"):
        super().__init__(message)


class NotSuspended(ProtocolError):
    """
    The session is not waiting at a suspension point.

    Raised for reentrant calls made while the routine is running, and for
    calls on a session that was cancelled or whose routine failed.
    """

    def __init__(self, state: SessionState, message: str | None = None):
        self.state = state
        super().__init__(message or f"Session is not suspended (state: {state.value})")


class AlreadyStarted(ProtocolError):
    """A Game instance was handed to a second session."""

    def __init__(self, message: str = "Game has already been started"):
        super().__init__(message)
