"""Tests for the guess state machine."""

import io

import pytest

from naval.engine.game import GamePhase, GuessState, NavalGame
from naval.engine.grid import GuessResult
from naval.engine.lines import LineReader
from naval.engine.rules import Rules
from naval.engine.ship import Coordinate, Direction, Ship


def _game() -> NavalGame:
    rules = Rules(width=3, height=2, ship_lengths=(2,))
    fleet = (Ship(0, 2, Coordinate(0, 0), Direction.EAST),)
    return NavalGame.build(rules, fleet)


def _reader(text: str) -> LineReader:
    return LineReader(io.StringIO(text))


@pytest.mark.parametrize(
    ("line", "state"),
    [
        ("1 1\n", GuessState.VALID),
        ("  2   0  \n", GuessState.VALID),
        ("1\n", GuessState.MALFORMED),
        ("1 1 1\n", GuessState.MALFORMED),
        ("a b\n", GuessState.MALFORMED),
        ("-1 0\n", GuessState.MALFORMED),
        ("\n", GuessState.MALFORMED),
        ("", GuessState.EXHAUSTED),
    ],
)
def test_read_guess_classifies_lines(line: str, state: GuessState) -> None:
    assert _game().read_guess(_reader(line)).state is state


def test_overlong_guess_is_flushed_then_loop_continues() -> None:
    game = _game()
    reader = _reader("1" * 40 + "\n0 0\n")
    assert game.read_guess(reader).state is GuessState.MALFORMED
    guess = game.read_guess(reader)
    assert guess.state is GuessState.VALID
    assert guess.coord == Coordinate(0, 0)


def test_overlong_guess_at_end_of_input_is_exhausted() -> None:
    assert _game().read_guess(_reader("1" * 40)).state is GuessState.EXHAUSTED


def test_take_turn_reports_malformed_as_bad_guess() -> None:
    game = _game()
    report = game.take_turn(_reader("oops\n"))
    assert report.state is GuessState.MALFORMED
    assert report.messages == ("Bad guess",)
    assert not report.terminal
    assert game.guesses == 0


def test_take_turn_reports_exhaustion_as_terminal() -> None:
    game = _game()
    report = game.take_turn(_reader(""))
    assert report.state is GuessState.EXHAUSTED
    assert report.terminal
    assert game.phase is GamePhase.IN_PROGRESS


def test_out_of_bounds_guess_is_bad_guess_and_play_continues() -> None:
    game = _game()
    report = game.take_turn(_reader("7 7\n"))
    assert report.outcome is not None
    assert report.outcome.result is GuessResult.BAD_GUESS
    assert report.messages == ("Bad guess",)
    assert game.phase is GamePhase.IN_PROGRESS
    assert game.get_state().board == ("...", "...")


def test_full_game_reaches_finished_phase() -> None:
    game = _game()
    reader = _reader("2 1\n0 0\n0 0\n1 0\n")

    assert game.take_turn(reader).messages == ("Miss",)
    assert game.take_turn(reader).messages == ("Hit",)
    assert game.take_turn(reader).messages == ("Miss",)
    final = game.take_turn(reader)
    assert final.messages == ("Hit", "Ship sunk", "Game over")
    assert final.terminal

    state = game.get_state()
    assert state.phase is GamePhase.FINISHED
    assert state.guesses == 4
    assert state.hits == 2
    assert state.misses == 2
    assert state.sunk_ships == (0,)
    assert state.board == ("**.", "../")

    with pytest.raises(RuntimeError):
        game.take_turn(reader)
