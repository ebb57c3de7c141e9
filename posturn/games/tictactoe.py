"""
Tic-Tac-Toe - A persistent turn loop with in-game error reporting.

X moves first. Each turn the routine yields a TurnPrompt and receives the
Pos the current player wants to claim. Claiming an occupied tile is not a
protocol error: the same player is simply prompted again with
invalid_move set.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from ..session import Game, TurnRoutine

BOARD_SIZE = 3


class Mark(Enum):
    """A player, and the piece they place."""
    X = "X"  # Moves first
    O = "O"

    def next(self) -> Mark:
        return Mark.O if self is Mark.X else Mark.X


class InvalidMove(ValueError):
    """A position off the board, or a tile that is already taken."""


@dataclass(frozen=True)
class Pos:
    """A tile on the board. Always in range."""
    col: int
    row: int

    def __post_init__(self):
        if not (0 <= self.col < BOARD_SIZE and 0 <= self.row < BOARD_SIZE):
            raise InvalidMove(f"Position ({self.col}, {self.row}) is off the board")

    @property
    def index(self) -> int:
        """Row-major index into the board."""
        return self.row * BOARD_SIZE + self.col

    def flip_row(self) -> Pos:
        return Pos(self.col, BOARD_SIZE - self.row - 1)


class LineKind(Enum):
    ROW = "row"
    COL = "col"
    DIAGONAL = "diagonal"


@dataclass(frozen=True)
class Line:
    """
    A straight line across the board.

    For rows and columns `offset` is the row/column number. For diagonals
    `offset` 1 means the diagonal starting at (0, 2) instead of (0, 0).
    """
    kind: LineKind
    offset: int = 0

    @classmethod
    def row(cls, row: int) -> Line:
        return cls(LineKind.ROW, row)

    @classmethod
    def col(cls, col: int) -> Line:
        return cls(LineKind.COL, col)

    @classmethod
    def diagonal(cls, flipped: bool = False) -> Line:
        return cls(LineKind.DIAGONAL, int(flipped))

    def contains(self, pos: Pos) -> bool:
        if self.kind == LineKind.ROW:
            return pos.row == self.offset
        if self.kind == LineKind.COL:
            return pos.col == self.offset
        flipped = pos.flip_row() if self.offset else pos
        return flipped.col == flipped.row

    def __iter__(self) -> Iterator[Pos]:
        for i in range(BOARD_SIZE):
            if self.kind == LineKind.ROW:
                yield Pos(i, self.offset)
            elif self.kind == LineKind.COL:
                yield Pos(self.offset, i)
            elif self.offset:
                yield Pos(i, i).flip_row()
            else:
                yield Pos(i, i)


ALL_LINES: tuple[Line, ...] = (
    *(line for i in range(BOARD_SIZE) for line in (Line.row(i), Line.col(i))),
    Line.diagonal(),
    Line.diagonal(flipped=True),
)

Board = tuple[Mark | None, ...]


@dataclass(frozen=True)
class TurnPrompt:
    """Event: `player` must pick a tile. The board is a snapshot."""
    player: Mark
    board: Board
    invalid_move: bool = False


@dataclass(frozen=True)
class Outcome:
    """End of game: a winner and their line, or a cat's game."""
    winner: Mark | None = None
    line: Line | None = None

    @property
    def is_cats_game(self) -> bool:
        return self.winner is None

    @classmethod
    def cats_game(cls) -> Outcome:
        return cls()

    @classmethod
    def win(cls, mark: Mark, line: Line) -> Outcome:
        return cls(winner=mark, line=line)


class TicTacToe(Game[TurnPrompt, Pos, Outcome]):
    """Board state plus the turn loop that plays on it."""

    def __init__(self):
        self.current_player = Mark.X
        self.board: list[Mark | None] = [None] * (BOARD_SIZE * BOARD_SIZE)
        self.outcome: Outcome | None = None

    def tile(self, pos: Pos) -> Mark | None:
        return self.board[pos.index]

    def take_turn(self, pos: Pos) -> None:
        """Claim a tile for the current player and pass the turn."""
        if self.board[pos.index] is not None:
            raise InvalidMove(f"Tile ({pos.col}, {pos.row}) is already taken")
        self.board[pos.index] = self.current_player
        self.current_player = self.current_player.next()

    def check_line(self, line: Line) -> Mark | None:
        """Return the mark owning every tile of the line, if any."""
        owners = {self.tile(pos) for pos in line}
        if len(owners) == 1:
            return owners.pop()
        return None

    def check_outcome(self) -> Outcome | None:
        """A win, a cat's game, or None while the game goes on."""
        for line in ALL_LINES:
            owner = self.check_line(line)
            if owner is not None:
                return Outcome.win(owner, line)

        if all(tile is not None for tile in self.board):
            return Outcome.cats_game()
        return None

    def play(self) -> TurnRoutine[TurnPrompt, Pos, Outcome]:
        invalid_move = False

        while True:
            pos = yield TurnPrompt(
                player=self.current_player,
                board=tuple(self.board),
                invalid_move=invalid_move,
            )

            try:
                self.take_turn(pos)
            except InvalidMove:
                invalid_move = True
                continue
            invalid_move = False

            outcome = self.check_outcome()
            if outcome is not None:
                self.outcome = outcome
                return outcome
