"""
Turn Routines - Game rules written as one sequential generator.

A routine is a generator:
- `yield event` suspends and offers the event to the driver
- the value sent back in is the player's input for that point
- `return outcome` ends the game

Example:

    def play_round():
        first = yield ChoiceRequest(Player.A)
        second = yield ChoiceRequest(Player.B)
        return RoundOutcome.decide(first, second)

Resources acquired with `with` or `try/finally` are released when the
routine finishes or when its session is cancelled.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import inspect
from typing import Any, Callable, Generator, Generic, TypeVar

from ..errors import AlreadyStarted

E = TypeVar("E")
I = TypeVar("I")
R = TypeVar("R")

TurnRoutine = Generator[E, I, R]
RoutineFactory = Callable[[], Generator[E, I, R]]


def ensure_routine(routine: Any) -> Generator:
    """Check that a factory produced a generator."""
    if not inspect.isgenerator(routine):
        raise TypeError(
            f"Routine factory must return a generator, got {type(routine).__name__}"
        )
    return routine


class Game(ABC, Generic[E, I, R]):
    """
    Object-style routine: board state on the instance, rules in play().

    Subclasses implement play() as a generator over their own attributes
    and may override handle_event() to react to each event before the
    driver sees it. An instance can be played by one session only.
    """

    _started: bool = False

    @abstractmethod
    def play(self) -> TurnRoutine[E, I, R]:
        """Run the game. Yield events, receive inputs, return the outcome."""

    def handle_event(self, event: E) -> None:
        """Called for every event the game emits, before it is handed off."""

    def start(self) -> TurnRoutine[E, I, R]:
        """Create the routine for this game. Fails if already started."""
        if self._started:
            raise AlreadyStarted(f"{type(self).__name__} has already been started")
        self._started = True
        return ensure_routine(self.play())

    @property
    def started(self) -> bool:
        return self._started
