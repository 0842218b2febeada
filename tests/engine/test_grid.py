"""Tests for ship placement and guess evaluation on the solution grid."""

import pytest

from naval.engine.grid import Cell, CellState, GuessResult, SolutionGrid
from naval.engine.ship import Coordinate, Direction, Ship
from naval.errors import MapOverlap


def _fleet() -> list[Ship]:
    return [
        Ship(0, 2, Coordinate(0, 0), Direction.EAST),
        Ship(1, 1, Coordinate(3, 2), Direction.NORTH),
    ]


def test_new_grid_is_empty() -> None:
    grid = SolutionGrid(4, 3)
    assert grid.count(CellState.EMPTY) == 12
    assert grid.rows() == ["....", "....", "...."]


def test_place_marks_ship_cells_intact() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())
    assert grid.cell(Coordinate(0, 0)) == Cell.intact(0)
    assert grid.cell(Coordinate(1, 0)) == Cell.intact(0)
    assert grid.cell(Coordinate(3, 2)) == Cell.intact(1)
    assert grid.count(CellState.INTACT) == 3
    assert grid.cells_of(0) == [Coordinate(0, 0), Coordinate(1, 0)]


def test_ship_cells_are_hidden_when_rendered() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())
    assert grid.rows() == ["....", "....", "...."]


def test_overlap_raises_and_first_ship_keeps_the_cell() -> None:
    fleet = [
        Ship(0, 3, Coordinate(0, 1), Direction.EAST),
        Ship(1, 3, Coordinate(1, 0), Direction.SOUTH),
    ]
    with pytest.raises(MapOverlap):
        SolutionGrid.place(3, 3, fleet)

    grid = SolutionGrid(3, 3)
    grid.place_ship(fleet[0])
    with pytest.raises(MapOverlap):
        grid.place_ship(fleet[1])
    assert grid.cell(Coordinate(1, 1)) == Cell.intact(0)


def test_overlap_is_blamed_on_the_later_ship_whatever_the_input_order() -> None:
    fleet = [
        Ship(1, 2, Coordinate(0, 0), Direction.SOUTH),
        Ship(0, 2, Coordinate(0, 0), Direction.EAST),
    ]
    with pytest.raises(MapOverlap, match="Ship 1"):
        SolutionGrid.place(3, 3, fleet)


def test_cell_access_outside_the_grid_is_impossible() -> None:
    grid = SolutionGrid(2, 2)
    with pytest.raises(IndexError):
        grid.cell(Coordinate(2, 0))
    with pytest.raises(IndexError):
        grid.cell(Coordinate(0, -1))
    with pytest.raises(IndexError):
        grid.place_ship(Ship(0, 3, Coordinate(0, 0), Direction.EAST))


def test_miss_marks_cell_and_repeats_stay_missed() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())
    outcome = grid.evaluate_guess(Coordinate(2, 1))
    assert outcome.result is GuessResult.MISS
    assert outcome.messages() == ["Miss"]
    assert grid.cell(Coordinate(2, 1)).state is CellState.MISSED

    again = grid.evaluate_guess(Coordinate(2, 1))
    assert again.result is GuessResult.MISS
    assert grid.rows()[1] == "../."


def test_out_of_bounds_guess_changes_nothing() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())
    before = grid.rows()
    outcome = grid.evaluate_guess(Coordinate(4, 0))
    assert outcome.result is GuessResult.BAD_GUESS
    assert outcome.messages() == ["Bad guess"]
    assert grid.rows() == before


def test_hit_sink_and_game_over() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())

    first = grid.evaluate_guess(Coordinate(0, 0))
    assert first.result is GuessResult.HIT
    assert first.sunk_ship is None
    assert first.messages() == ["Hit"]
    assert not grid.is_sunk(0)

    second = grid.evaluate_guess(Coordinate(1, 0))
    assert second.sunk_ship == 0
    assert second.messages() == ["Hit", "Ship sunk"]
    assert grid.is_sunk(0)
    assert not grid.is_game_over()

    last = grid.evaluate_guess(Coordinate(3, 2))
    assert last.messages() == ["Hit", "Ship sunk", "Game over"]
    assert grid.is_game_over()
    assert grid.rows() == ["**..", "....", "...*"]


def test_repeat_hit_is_reported_as_miss_without_changes() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())
    grid.evaluate_guess(Coordinate(0, 0))

    repeat = grid.evaluate_guess(Coordinate(0, 0))
    assert repeat.result is GuessResult.MISS
    assert repeat.sunk_ship is None
    assert grid.cell(Coordinate(0, 0)) == Cell.hit(0)
    assert not grid.is_sunk(0)


def test_repeat_hit_on_sunk_ship_does_not_resink() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())
    sunk = grid.evaluate_guess(Coordinate(3, 2))
    assert sunk.sunk_ship == 1

    repeat = grid.evaluate_guess(Coordinate(3, 2))
    assert repeat.result is GuessResult.MISS
    assert not repeat.game_over


def test_game_over_iff_every_ship_cell_hit() -> None:
    grid = SolutionGrid.place(4, 3, _fleet())
    for coord in [Coordinate(x, y) for y in range(3) for x in range(4)]:
        assert grid.is_game_over() is (grid.count(CellState.INTACT) == 0)
        grid.evaluate_guess(coord)
    assert grid.is_game_over()
    assert grid.count(CellState.HIT) == 3
    assert grid.count(CellState.MISSED) == 9
