"""Command-line driver: load a rules file and a map, then play from standard input."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence, TextIO

from naval.engine.game import GuessState, NavalGame
from naval.engine.instrumented_game import InstrumentedNavalGame
from naval.engine.lines import LineReader
from naval.engine.loader import load_game
from naval.errors import BadGuess, NavalError, ParamsMissing
from naval.telemetry import init_telemetry

logger = logging.getLogger(__name__)

PROMPT = "(x,y)>"


def format_board(game: NavalGame) -> str:
    """Render the board one character per cell, one line per row."""
    return "\n".join(game.grid.rows())


def play_game(game: NavalGame, reader: LineReader, out: TextIO) -> None:
    """Run the guess loop until the fleet is sunk; exhausted input raises :class:`BadGuess`."""
    while True:
        print(format_board(game), file=out)
        out.write(PROMPT)
        out.flush()
        report = game.take_turn(reader)
        if report.state is GuessState.EXHAUSTED:
            raise BadGuess("Input ended before the game was over.")
        for message in report.messages:
            print(message, file=out)
        if report.terminal:
            return


def run(rules_path: str, map_path: str, stdin: TextIO, stdout: TextIO) -> int:
    game = load_game(rules_path, map_path, game_cls=InstrumentedNavalGame)
    try:
        play_game(game, LineReader(stdin), stdout)
    finally:
        game.close()
    return 0


def report_error(error: NavalError, out: TextIO) -> int:
    """Print the one-line message for ``error`` and return its exit code."""
    logger.info(
        "naval_error",
        extra={"error": type(error).__name__, "exit_code": error.exit_code, "detail": error.detail},
    )
    print(error.message, file=out)
    return error.exit_code


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="naval",
        description="Sink a hidden fleet by guessing coordinates.",
    )
    parser.add_argument("rules", nargs="?", help="Rules file (board size and ship lengths).")
    parser.add_argument("map", nargs="?", help="Map file (one 'x y direction' line per ship).")
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def main(
    argv: Sequence[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    if argv is None:
        argv = sys.argv[1:]
    # Every argument is a path, even one starting with a dash.
    args = _build_parser().parse_args(["--", *argv])
    if hasattr(stdin, "reconfigure"):
        stdin.reconfigure(errors="replace")
    init_telemetry()
    try:
        if args.rules is None or args.map is None:
            raise ParamsMissing()
        return run(args.rules, args.map, stdin, stdout)
    except NavalError as error:
        return report_error(error, stdout)


if __name__ == "__main__":
    sys.exit(main())
