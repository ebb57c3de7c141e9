"""
Drivers - Minimal loops that run a session to completion.

A real driver (terminal UI, HTTP service) inspects each event, renders it,
and collects an input. These helpers cover the two headless cases:
- drive(): ask a decision function for every input
- replay(): feed a fixed input sequence and record the trace
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Generic, Iterable, TypeVar

from .exchange import Done, PendingEvent
from .routine import RoutineFactory
from .session import Session

logger = logging.getLogger(__name__)

E = TypeVar("E")
I = TypeVar("I")
R = TypeVar("R")


@dataclass
class Trace(Generic[E, R]):
    """
    Everything a driver observed from one session.

    Two sessions over the same routine fed the same inputs must produce
    equal traces.
    """
    events: list[E] = field(default_factory=list)
    outcome: R | None = None
    completed: bool = False


def drive(session: Session[E, I, R], decide: Callable[[E], I]) -> R:
    """
    Resume the session with decide(event) until it completes.

    Returns the outcome. Protocol errors and routine exceptions propagate.
    """
    step = session.current()
    while isinstance(step, PendingEvent):
        step = session.resume(decide(step.event))
    return step.outcome


def replay(
    factory: RoutineFactory[E, I, R],
    inputs: Iterable[I],
    *,
    on_event: Callable[[Any], None] | None = None,
) -> Trace[E, R]:
    """
    Run a fresh session over a fixed sequence of inputs.

    Stops when the inputs run out or the routine completes. Supplying more
    inputs than the routine accepts raises AlreadyCompleted.
    """
    trace: Trace[E, R] = Trace()
    session = Session(factory, on_event=on_event)

    try:
        step = session.current()
        for value in inputs:
            if isinstance(step, PendingEvent):
                trace.events.append(step.event)
            step = session.resume(value)

        if isinstance(step, PendingEvent):
            trace.events.append(step.event)
        elif isinstance(step, Done):
            trace.outcome = step.outcome
            trace.completed = True
    finally:
        session.cancel()

    logger.debug(
        "Replayed %d event(s), completed=%s", len(trace.events), trace.completed
    )
    return trace
