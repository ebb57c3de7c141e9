"""
Posturn CLI - Play the bundled games in a terminal.

Usage:
    posturn games                  List the bundled games
    posturn play tictactoe         Two players, one keyboard
    posturn play roshambo          Rock-paper-scissors for two

Type `q` at any prompt to abandon the game.
"""

import argparse
import logging
import os
import sys
from typing import Callable

from .session import PendingEvent, Session
from .games.roshambo import Choice, play_round
from .games.tictactoe import BOARD_SIZE, InvalidMove, Pos, TicTacToe, TurnPrompt

logger = logging.getLogger(__name__)

POSTURN_LOG_LEVEL = os.getenv("POSTURN_LOG_LEVEL", "WARNING")

QUIT_WORDS = {"q", "quit", "exit"}

Reader = Callable[[str], str]
Writer = Callable[[str], None]


class QuitGame(Exception):
    """The player asked to leave."""


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Posturn - Turn-based games as resumable routines",
        prog="posturn",
    )
    parser.add_argument(
        "--log-level",
        default=POSTURN_LOG_LEVEL,
        help="Logging level (default: $POSTURN_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("games", help="List the bundled games")

    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("game", choices=sorted(DRIVERS), help="Game to play")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "games":
        return cmd_games(args)
    elif args.command == "play":
        return cmd_play(args)

    parser.print_help()
    return 1


def cmd_games(args, write: Writer = print) -> int:
    """List the bundled games."""
    for name in sorted(DRIVERS):
        write(f"{name:<10} {DRIVERS[name][1]}")
    return 0


def cmd_play(args, read: Reader = input, write: Writer = print) -> int:
    """Run the text driver for one game."""
    driver, _ = DRIVERS[args.game]
    logger.debug("Starting text driver for %s", args.game)
    try:
        driver(read, write)
    except (QuitGame, EOFError):
        write("Game abandoned.")
    return 0


def _ask(read: Reader, prompt: str) -> str:
    answer = read(prompt).strip()
    if answer.lower() in QUIT_WORDS:
        raise QuitGame()
    return answer


# =============================================================================
# Tic-Tac-Toe
# =============================================================================

def render_board(board) -> str:
    """Draw a board snapshot as text, row 0 on top."""
    rows = []
    for r in range(BOARD_SIZE):
        tiles = board[r * BOARD_SIZE:(r + 1) * BOARD_SIZE]
        rows.append(" " + " | ".join(t.value if t else "." for t in tiles))
    return ("\n" + "---+" * (BOARD_SIZE - 1) + "---\n").join(rows)


def parse_move(text: str) -> Pos:
    """Parse "col row" or "col,row". Raises InvalidMove on bad text."""
    parts = text.replace(",", " ").split()
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise InvalidMove(f"Expected two numbers, got {text!r}")
    return Pos(int(parts[0]), int(parts[1]))


def play_tictactoe(read: Reader = input, write: Writer = print):
    """Text driver: render each prompt, read a move, resume."""
    with Session.for_game(TicTacToe()) as session:
        step = session.current()
        while isinstance(step, PendingEvent):
            prompt: TurnPrompt = step.event
            write(render_board(prompt.board))
            if prompt.invalid_move:
                write("That tile is taken.")

            while True:
                try:
                    pos = parse_move(_ask(read, f"{prompt.player.value} to move (col row): "))
                    break
                except InvalidMove as e:
                    write(str(e))

            step = session.resume(pos)

        outcome = step.outcome
        write(render_board(_final_board(prompt, pos)))
        if outcome.is_cats_game:
            write("Cat's game!")
        else:
            write(f"{outcome.winner.value} wins!")
        return outcome


def _final_board(last_prompt: TurnPrompt, last_move: Pos):
    """The final board: the last snapshot plus the winning move."""
    board = list(last_prompt.board)
    board[last_move.index] = last_prompt.player
    return tuple(board)


# =============================================================================
# Rock-Paper-Scissors
# =============================================================================

def play_roshambo(read: Reader = input, write: Writer = print):
    """Text driver: ask each player in turn, then announce."""
    options = "/".join(c.value for c in Choice)
    with Session(play_round) as session:
        step = session.current()
        while isinstance(step, PendingEvent):
            player = step.event.player
            while True:
                answer = _ask(read, f"Player {player.name}, choose ({options}): ").lower()
                try:
                    choice = Choice(answer)
                    break
                except ValueError:
                    write(f"Unknown choice: {answer}")
            step = session.resume(choice)

        outcome = step.outcome
        if outcome.is_tie:
            write("It's a tie.")
        else:
            write(f"Player {outcome.winner.name} wins!")
        return outcome


DRIVERS = {
    "tictactoe": (play_tictactoe, "Tic-Tac-Toe for two players"),
    "roshambo": (play_roshambo, "Rock-paper-scissors for two players"),
}


if __name__ == "__main__":
    sys.exit(main())
