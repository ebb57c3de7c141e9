"""
Pytest fixtures for Posturn tests.
"""

from contextlib import contextmanager

import pytest

from ..api.service import APIService
from ..games.roshambo import Choice
from ..games.tictactoe import TicTacToe


class TrackedResource:
    """A scoped resource that counts acquisitions and releases."""

    def __init__(self, name: str = "resource"):
        self.name = name
        self.acquired = 0
        self.released = 0

    @property
    def held(self) -> bool:
        return self.acquired > self.released

    @contextmanager
    def hold(self):
        self.acquired += 1
        try:
            yield self
        finally:
            self.released += 1


@pytest.fixture
def resource() -> TrackedResource:
    """A fresh resource tracker."""
    return TrackedResource()


@pytest.fixture
def counter_routine():
    """
    Factory for a routine that yields 1, 2, 3... adding each input to a
    running total, and returns the total once it receives None.
    """
    def make(start: int = 0):
        def routine():
            total = start
            turn = 0
            while True:
                turn += 1
                value = yield turn
                if value is None:
                    return total
                total += value
        return routine
    return make


@pytest.fixture
def guarded_routine(resource):
    """
    A routine that acquires the resource before its first suspension and
    holds it across two suspension points.
    """
    log: list[str] = []

    def routine():
        log.append("before")
        with resource.hold():
            log.append("acquired")
            first = yield "first"
            log.append(f"got {first}")
            second = yield "second"
            log.append(f"got {second}")
        log.append("after")
        return (first, second)

    routine.log = log
    return routine


@pytest.fixture
def rock_scissors() -> list[Choice]:
    """Inputs for a round player A wins."""
    return [Choice.ROCK, Choice.SCISSORS]


@pytest.fixture
def tictactoe() -> TicTacToe:
    return TicTacToe()


@pytest.fixture
def service() -> APIService:
    """A fresh API service with the bundled games."""
    return APIService()
