"""
Game Registry - What the HTTP driver knows about each game.

A session only deals in Python objects. To serve it over JSON, each game
provides:
- a factory that starts a new session
- a pydantic model validating the resume payload, and a converter to the
  routine's input type
- encoders for its events and outcome
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from ..session import Session
from ..games.roshambo import Choice, ChoiceRequest, RoundOutcome, play_round
from ..games.tictactoe import (
    BOARD_SIZE,
    Outcome,
    Pos,
    TicTacToe,
    TurnPrompt,
)


@dataclass(frozen=True)
class GameDefinition:
    """Everything needed to host one game over the API."""
    name: str
    title: str
    start: Callable[[], Session]
    input_model: type[BaseModel]
    to_input: Callable[[Any], Any]
    encode_event: Callable[[Any], dict[str, Any]]
    encode_outcome: Callable[[Any], dict[str, Any]]
    description: str = ""

    def parse_input(self, payload: dict[str, Any]) -> Any:
        """
        Validate a JSON payload and convert it to the routine's input.

        Raises pydantic.ValidationError (or ValueError from the converter)
        on bad input.
        """
        model = self.input_model.model_validate(payload)
        return self.to_input(model)


# =============================================================================
# Rock-Paper-Scissors
# =============================================================================

class ChoiceInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    choice: Choice = Field(..., description="rock, paper or scissors")


def _encode_choice_request(event: ChoiceRequest) -> dict[str, Any]:
    return {"type": "choice_request", "player": event.player.value}


def _encode_round_outcome(outcome: RoundOutcome) -> dict[str, Any]:
    return {
        "winner": outcome.winner.value if outcome.winner else None,
        "tie": outcome.is_tie,
    }


ROSHAMBO = GameDefinition(
    name="roshambo",
    title="Rock-Paper-Scissors",
    description="Player A picks, then player B picks, then the winner is named.",
    start=lambda: Session(play_round),
    input_model=ChoiceInput,
    to_input=lambda model: model.choice,
    encode_event=_encode_choice_request,
    encode_outcome=_encode_round_outcome,
)


# =============================================================================
# Tic-Tac-Toe
# =============================================================================

class MoveInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    col: int = Field(..., ge=0, lt=BOARD_SIZE, description="Column, 0-based")
    row: int = Field(..., ge=0, lt=BOARD_SIZE, description="Row, 0-based")


def _encode_turn_prompt(event: TurnPrompt) -> dict[str, Any]:
    rows = [
        [tile.value if tile else None for tile in event.board[r * BOARD_SIZE:(r + 1) * BOARD_SIZE]]
        for r in range(BOARD_SIZE)
    ]
    return {
        "type": "turn_prompt",
        "player": event.player.value,
        "board": rows,
        "invalid_move": event.invalid_move,
    }


def _encode_tictactoe_outcome(outcome: Outcome) -> dict[str, Any]:
    line = None
    if outcome.line is not None:
        line = {"kind": outcome.line.kind.value, "offset": outcome.line.offset}
    return {
        "winner": outcome.winner.value if outcome.winner else None,
        "line": line,
        "cats_game": outcome.is_cats_game,
    }


TICTACTOE = GameDefinition(
    name="tictactoe",
    title="Tic-Tac-Toe",
    description="X moves first. Claiming a taken tile re-prompts the same player.",
    start=lambda: Session.for_game(TicTacToe()),
    input_model=MoveInput,
    to_input=lambda model: Pos(model.col, model.row),
    encode_event=_encode_turn_prompt,
    encode_outcome=_encode_tictactoe_outcome,
)


GAMES: dict[str, GameDefinition] = {
    ROSHAMBO.name: ROSHAMBO,
    TICTACTOE.name: TICTACTOE,
}
