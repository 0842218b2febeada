"""Map file decoding: anchors and headings for each ship of the fleet."""

from __future__ import annotations

import logging

from naval.errors import MapInvalid, MapOutOfBounds
from naval.telemetry import get_tracer

from .lines import LineOverflowError, LineReader, read_uints
from .rules import Rules
from .ship import Coordinate, Direction, Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("naval.engine.chart")

Fleet = tuple[Ship, ...]


def parse_map(reader: LineReader, rules: Rules) -> Fleet:
    """Decode one ``x y D`` line per ship and check each ship stays on the board.

    Lines are handled in order, so an out-of-bounds ship is reported even if
    a later line is malformed.
    """
    with tracer.start_as_current_span("map.parse") as span:
        span.set_attribute("fleet.size", rules.num_ships)
        fleet: list[Ship] = []
        for ship_id, length in enumerate(rules.ship_lengths):
            anchor, direction = _read_placement(reader, ship_id)
            ship = Ship(ship_id=ship_id, length=length, anchor=anchor, direction=direction)
            check_bounds(ship, rules)
            fleet.append(ship)
        logger.info("map_parsed", extra={"ships": len(fleet)})
        return tuple(fleet)


def check_bounds(ship: Ship, rules: Rules) -> None:
    """Raise :class:`MapOutOfBounds` unless the whole ship lies on the board."""
    anchor = ship.anchor
    if not (0 <= anchor.x < rules.width and 0 <= anchor.y < rules.height):
        logger.info(
            "anchor_out_of_bounds",
            extra={"ship_id": ship.ship_id, "x": anchor.x, "y": anchor.y},
        )
        raise MapOutOfBounds(f"Ship {ship.ship_id} is anchored off the board.")
    if not ship.fits_within(rules.width, rules.height):
        end = ship.extent()
        logger.info(
            "body_out_of_bounds",
            extra={"ship_id": ship.ship_id, "x": end.x, "y": end.y},
        )
        raise MapOutOfBounds(f"Ship {ship.ship_id} extends off the board.")


def _read_placement(reader: LineReader, ship_id: int) -> tuple[Coordinate, Direction]:
    try:
        line = reader.next_line()
    except LineOverflowError as exc:
        raise MapInvalid(str(exc)) from exc
    if line is None:
        raise MapInvalid(f"Map file ended before ship {ship_id}.")

    fields = line.split()
    if len(fields) != 3:
        raise MapInvalid(f"Ship {ship_id}: expected 'x y direction'.")
    try:
        x, y = read_uints(" ".join(fields[:2]), 2)
        direction = Direction.parse(fields[2])
    except ValueError as exc:
        raise MapInvalid(f"Ship {ship_id}: {exc}") from exc
    return Coordinate(x, y), direction
