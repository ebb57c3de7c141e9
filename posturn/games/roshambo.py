"""
Rock-Paper-Scissors - The smallest useful turn routine.

Two flavours:
- play_round(): asks player A, then player B, then names the winner
- RoShamBo: choices are fixed up front; the routine counts down
  ("Ro!", "Sham!", "Bo!") and announces the result
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging

from ..session import Game, TurnRoutine

logger = logging.getLogger(__name__)


class Choice(Enum):
    """A hand shape."""
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"

    @property
    def label(self) -> str:
        return self.name.title()

    def beats(self, other: Choice) -> bool:
        return _BEATS[self] is other


_BEATS = {
    Choice.ROCK: Choice.SCISSORS,
    Choice.PAPER: Choice.ROCK,
    Choice.SCISSORS: Choice.PAPER,
}


class Player(Enum):
    A = "a"
    B = "b"


@dataclass(frozen=True)
class ChoiceRequest:
    """Event: the given player must pick a Choice."""
    player: Player


@dataclass(frozen=True)
class RoundOutcome:
    """Who won the round. winner is None on a tie."""
    winner: Player | None = None

    @property
    def is_tie(self) -> bool:
        return self.winner is None

    @classmethod
    def decide(cls, first: Choice, second: Choice) -> RoundOutcome:
        if first.beats(second):
            return cls(winner=Player.A)
        if second.beats(first):
            return cls(winner=Player.B)
        return cls()


def play_round() -> TurnRoutine[ChoiceRequest, Choice, RoundOutcome]:
    """Ask A, then B, then compare."""
    first = yield ChoiceRequest(Player.A)
    second = yield ChoiceRequest(Player.B)
    return RoundOutcome.decide(first, second)


class Result(Enum):
    """Outcome of a RoShamBo game, relative to player 1."""
    TIE = "tie"
    WIN = "win"
    LOSS = "loss"


class RoShamBo(Game[str, None, Result]):
    """
    Countdown variant with both choices known up front.

    Every yield is a message to show; the driver resumes with None. The
    game keeps its own copy of everything it announced.
    """

    def __init__(self, player_1: Choice, player_2: Choice):
        self.player_1 = player_1
        self.player_2 = player_2
        self.announced: list[str] = []

    def play(self) -> TurnRoutine[str, None, Result]:
        yield "Ro!"
        yield "Sham!"
        yield "Bo!"

        p1, p2 = self.player_1, self.player_2
        if p1.beats(p2):
            result = Result.WIN
            yield f"{p1.label} beats {p2.label}."
        elif p2.beats(p1):
            result = Result.LOSS
            yield f"{p2.label} beats {p1.label}."
        else:
            result = Result.TIE
            yield f"{p1.label} ties with {p2.label}."

        return result

    def handle_event(self, event: str) -> None:
        self.announced.append(event)
        logger.debug("RoShamBo: %s", event)
