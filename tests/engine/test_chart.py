"""Tests for map file decoding and bounds checks."""

import io

import pytest

from naval.engine.chart import parse_map
from naval.engine.lines import LineReader
from naval.engine.rules import Rules
from naval.engine.ship import Coordinate, Direction
from naval.errors import MapInvalid, MapOutOfBounds


def _parse(text: str, rules: Rules):
    return parse_map(LineReader(io.StringIO(text)), rules)


def test_parse_map_assigns_ids_and_lengths_in_order() -> None:
    rules = Rules(width=5, height=5, ship_lengths=(3, 2))
    fleet = _parse("0 0 E\n4 4 N\n", rules)
    assert [ship.ship_id for ship in fleet] == [0, 1]
    assert fleet[0].length == 3 and fleet[1].length == 2
    assert fleet[0].anchor == Coordinate(0, 0)
    assert fleet[1].direction is Direction.NORTH


def test_extra_map_lines_are_ignored() -> None:
    rules = Rules(width=3, height=1, ship_lengths=(1,))
    fleet = _parse("0 0 E\ngarbage\n", rules)
    assert len(fleet) == 1


@pytest.mark.parametrize(
    "text",
    [
        "",
        "0 0\n",
        "0 0 Q\n",
        "0 0 e\n",
        "0 0 EE\n",
        "0 0 E extra\n",
        "x 0 E\n",
        "-1 0 E\n",
        "0 0 E" + " " * 30 + "\n",
    ],
)
def test_malformed_lines_are_invalid(text: str) -> None:
    rules = Rules(width=5, height=5, ship_lengths=(1,))
    with pytest.raises(MapInvalid):
        _parse(text, rules)


def test_premature_end_is_invalid() -> None:
    rules = Rules(width=5, height=5, ship_lengths=(1, 1))
    with pytest.raises(MapInvalid):
        _parse("0 0 E\n", rules)


@pytest.mark.parametrize(
    ("line", "length"),
    [
        ("3 0 E", 3),
        ("0 2 W", 2),
        ("0 1 N", 3),
        ("3 3 S", 3),
        ("5 0 N", 1),
        ("0 5 E", 1),
    ],
)
def test_ship_leaving_the_board_is_out_of_bounds(line: str, length: int) -> None:
    rules = Rules(width=5, height=5, ship_lengths=(length,))
    with pytest.raises(MapOutOfBounds):
        _parse(line + "\n", rules)


def test_ship_touching_every_edge_fits() -> None:
    rules = Rules(width=4, height=3, ship_lengths=(4, 3, 4, 3))
    fleet = _parse("0 0 E\n3 0 S\n3 2 W\n0 2 N\n", rules)
    assert len(fleet) == 4


def test_anchor_x_is_checked_against_width_only() -> None:
    # A 3x1 board: x = 2 is beyond the height but inside the width.
    rules = Rules(width=3, height=1, ship_lengths=(1,))
    fleet = _parse("2 0 E\n", rules)
    assert fleet[0].anchor == Coordinate(2, 0)


def test_anchor_y_is_checked_against_height() -> None:
    # An east-bound ship never moves in y, so only the anchor check catches this.
    rules = Rules(width=3, height=3, ship_lengths=(1,))
    with pytest.raises(MapOutOfBounds):
        _parse("0 5 E\n", rules)


def test_anchor_on_the_far_edge_is_out_of_bounds() -> None:
    rules = Rules(width=3, height=3, ship_lengths=(1,))
    with pytest.raises(MapOutOfBounds):
        _parse("3 0 N\n", rules)


def test_out_of_bounds_is_reported_before_later_syntax_errors() -> None:
    rules = Rules(width=3, height=3, ship_lengths=(3, 1))
    with pytest.raises(MapOutOfBounds):
        _parse("2 2 E\nnonsense\n", rules)


def test_syntax_error_is_reported_before_later_bounds_errors() -> None:
    rules = Rules(width=3, height=3, ship_lengths=(1, 3))
    with pytest.raises(MapInvalid):
        _parse("0 0\n2 2 E\n", rules)
