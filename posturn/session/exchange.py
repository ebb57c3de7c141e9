"""
Exchange Types - What a session hands to its driver.

At any moment a live session offers exactly one of:
- PendingEvent: the routine is suspended and waits for one input
- Done: the routine returned its outcome
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

E = TypeVar("E")
I = TypeVar("I")
R = TypeVar("R")


@dataclass(frozen=True)
class PendingEvent(Generic[E]):
    """The event offered at the current suspension point."""
    event: E


@dataclass(frozen=True)
class Done(Generic[R]):
    """The final outcome of a completed routine."""
    outcome: R


Step = Union[PendingEvent[E], Done[R]]
