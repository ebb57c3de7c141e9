"""
Session - Hosts one turn routine and hands control back and forth.

LIFECYCLE:
1. Construction runs the routine up to its first suspension (or to the end)
2. The driver reads current() and answers with resume(input)
3. Step 2 repeats until the routine returns its outcome
4. cancel() (or dropping the session) unwinds a suspended routine and runs
   its pending cleanup before returning

PROTOCOL RULES:
- At most one pending event at a time
- Exactly one input is accepted per pending event
- COMPLETED, CANCELLED and FAILED are terminal
- Nothing may re-enter the session while the routine is running

Everything runs synchronously on the caller's thread.
"""

from __future__ import annotations
from enum import Enum
import functools
import logging
from typing import Any, Callable, Generic, TypeVar
import uuid

from ..errors import AlreadyCompleted, NotSuspended
from .exchange import Done, PendingEvent, Step
from .routine import Game, RoutineFactory, ensure_routine

logger = logging.getLogger(__name__)

E = TypeVar("E")
I = TypeVar("I")
R = TypeVar("R")

EventHook = Callable[[Any], None]


class SessionState(Enum):
    """Where the hosted routine currently is."""
    NOT_STARTED = "not_started"
    RUNNING = "running"  # Routine code is executing
    SUSPENDED = "suspended"  # Waiting for an input
    COMPLETED = "completed"  # Routine returned an outcome
    CANCELLED = "cancelled"  # Abandoned by the driver
    FAILED = "failed"  # Routine raised


TERMINAL_STATES = frozenset({
    SessionState.COMPLETED,
    SessionState.CANCELLED,
    SessionState.FAILED,
})


class Session(Generic[E, I, R]):
    """
    Drives one turn routine.

    Usage:
        session = Session(play_round)

        while isinstance(step := session.current(), PendingEvent):
            show(step.event)
            session.resume(ask_player())

        print(step.outcome)

    Args:
        factory: Zero-argument callable returning the routine generator
        on_event: Optional hook called with every event before it is
            handed to the driver. Runs while the session is RUNNING.
        session_id: Label used in logs; a uuid4 is generated if omitted
    """

    def __init__(
        self,
        factory: RoutineFactory[E, I, R],
        *,
        on_event: EventHook | None = None,
        session_id: str | None = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self._state = SessionState.NOT_STARTED
        self._step: Step | None = None
        self._on_event = on_event
        self._turns = 0
        self._routine = ensure_routine(factory())

        logger.debug("Session %s created", self.session_id)
        self._advance(None)

    @classmethod
    def for_game(cls, game: Game[E, I, R], **kwargs: Any) -> Session[E, I, R]:
        """Host a Game instance, wiring its handle_event hook."""
        return cls(game.start, on_event=game.handle_event, **kwargs)

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def turns(self) -> int:
        """Number of events emitted so far."""
        return self._turns

    @property
    def is_suspended(self) -> bool:
        return self._state == SessionState.SUSPENDED

    @property
    def is_done(self) -> bool:
        return self._state == SessionState.COMPLETED

    @property
    def pending(self) -> E | None:
        """The pending event, or None when not suspended."""
        if isinstance(self._step, PendingEvent):
            return self._step.event
        return None

    @property
    def outcome(self) -> R:
        """
        The outcome of a completed session.

        Raises ValueError if the session has not completed.
        """
        if not isinstance(self._step, Done):
            raise ValueError(
                f"Session {self.session_id} has no outcome (state: {self._state.value})"
            )
        return self._step.outcome

    def current(self) -> Step:
        """
        Return the pending event or the final outcome without advancing.

        Raises NotSuspended while the routine is running, after cancel(),
        or after the routine failed.
        """
        if self._state not in (SessionState.SUSPENDED, SessionState.COMPLETED):
            raise NotSuspended(self._state)
        return self._step

    # =========================================================================
    # Control
    # =========================================================================

    def resume(self, value: I) -> Step:
        """
        Answer the pending event and run to the next suspension or the end.

        Raises:
            AlreadyCompleted: The routine has already returned
            NotSuspended: No event is pending (reentrant call, cancelled or
                failed session)
        """
        if self._state == SessionState.COMPLETED:
            raise AlreadyCompleted(f"Session {self.session_id} has already completed")
        if self._state != SessionState.SUSPENDED:
            raise NotSuspended(self._state)
        return self._advance(value)

    def cancel(self) -> bool:
        """
        Abandon the routine at its current suspension point.

        Runs the routine's pending cleanup before returning. Returns True if
        the session was cancelled, False if it had already reached a
        terminal state.
        """
        if self._state in TERMINAL_STATES:
            return False
        if self._state == SessionState.RUNNING:
            raise NotSuspended(self._state, "Cannot cancel a session from inside its routine")

        self._state = SessionState.RUNNING
        try:
            self._routine.close()
        finally:
            self._state = SessionState.CANCELLED
            self._step = None
            logger.debug("Session %s cancelled after %d turn(s)", self.session_id, self._turns)
        return True

    def _advance(self, value: Any) -> Step:
        """Send a value into the routine and record where it stops."""
        self._state = SessionState.RUNNING
        self._step = None

        try:
            event = self._routine.send(value)
        except StopIteration as stop:
            self._step = Done(stop.value)
            self._state = SessionState.COMPLETED
            logger.debug("Session %s completed after %d turn(s)", self.session_id, self._turns)
            return self._step
        except BaseException:
            self._state = SessionState.FAILED
            logger.debug("Session %s routine raised", self.session_id, exc_info=True)
            raise

        self._turns += 1
        if self._on_event is not None:
            try:
                self._on_event(event)
            except BaseException:
                self._state = SessionState.FAILED
                logger.debug("Session %s event hook raised", self.session_id, exc_info=True)
                self._routine.close()
                raise

        self._step = PendingEvent(event)
        self._state = SessionState.SUSPENDED
        logger.debug("Session %s suspended (turn %d)", self.session_id, self._turns)
        return self._step

    # =========================================================================
    # Context manager
    # =========================================================================

    def __enter__(self) -> Session[E, I, R]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()

    def __repr__(self) -> str:
        return f"<Session {self.session_id} {self._state.value} turns={self._turns}>"


def create(
    factory: Callable[..., Any],
    *args: Any,
    on_event: EventHook | None = None,
    session_id: str | None = None,
    **kwargs: Any,
) -> Session:
    """
    Create a session, binding any arguments the routine factory needs.

    on_event and session_id go to the Session; everything else is passed
    to the factory.
    """
    if args or kwargs:
        factory = functools.partial(factory, *args, **kwargs)
    return Session(factory, on_event=on_event, session_id=session_id)
