"""Coordinate, direction and ship models for the naval engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate; ``x`` grows east, ``y`` grows south."""

    x: int
    y: int

    def step(self, direction: Direction, distance: int = 1) -> Coordinate:
        """Return the coordinate ``distance`` cells away along ``direction``."""
        dx, dy = direction.delta
        return Coordinate(self.x + dx * distance, self.y + dy * distance)


class Direction(Enum):
    """Headings a ship may extend along from its anchor."""

    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def delta(self) -> tuple[int, int]:
        """Unit vector of the heading as ``(dx, dy)``."""
        return _DELTAS[self]

    @classmethod
    def parse(cls, text: str) -> Direction:
        """Decode a single heading letter; anything else is a ``ValueError``."""
        try:
            return cls(text)
        except ValueError as exc:
            raise ValueError(f"Direction must be one of N, S, E, W, got {text!r}.") from exc


_DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}


@dataclass(frozen=True)
class Ship:
    """A ship of the fleet, identified by its position in the rules file."""

    ship_id: int
    length: int
    anchor: Coordinate
    direction: Direction

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError("Ship length must be positive.")

    def coordinates(self) -> list[Coordinate]:
        """Return the ordered cells occupied by this ship, anchor first."""
        return [self.anchor.step(self.direction, offset) for offset in range(self.length)]

    def extent(self) -> Coordinate:
        """Return the furthest cell from the anchor."""
        return self.anchor.step(self.direction, self.length - 1)

    def fits_within(self, width: int, height: int) -> bool:
        """Check that both ends, and so every cell, lie on a ``width`` x ``height`` board."""
        return all(
            0 <= end.x < width and 0 <= end.y < height for end in (self.anchor, self.extent())
        )
