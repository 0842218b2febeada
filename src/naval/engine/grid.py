"""Solution grid: ship placement and guess evaluation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from naval.errors import MapOverlap
from naval.telemetry import get_meter, get_tracer

from .ship import Coordinate, Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("naval.engine.grid")
meter = get_meter("naval.engine.grid")

PLACEMENT_COUNTER = meter.create_counter(
    "naval_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

GUESS_COUNTER = meter.create_counter(
    "naval_engine_guesses",
    unit="1",
    description="Guesses evaluated against the solution grid",
)


class CellState(Enum):
    """What a solution cell currently holds."""

    EMPTY = "empty"
    INTACT = "intact"
    HIT = "hit"
    MISSED = "missed"


@dataclass(frozen=True)
class Cell:
    """A solution cell; ``ship_id`` is set for ``INTACT`` and ``HIT`` cells only."""

    state: CellState = CellState.EMPTY
    ship_id: int | None = None

    @classmethod
    def intact(cls, ship_id: int) -> Cell:
        return cls(CellState.INTACT, ship_id)

    @classmethod
    def hit(cls, ship_id: int) -> Cell:
        return cls(CellState.HIT, ship_id)

    @property
    def has_ship(self) -> bool:
        return self.ship_id is not None


EMPTY = Cell()
MISSED = Cell(CellState.MISSED)

GLYPHS = {
    CellState.EMPTY: ".",
    CellState.INTACT: ".",
    CellState.MISSED: "/",
    CellState.HIT: "*",
}


class GuessResult(Enum):
    """Primary outcome of evaluating one guess."""

    BAD_GUESS = "bad_guess"
    MISS = "miss"
    HIT = "hit"


@dataclass(frozen=True)
class GuessOutcome:
    result: GuessResult
    sunk_ship: int | None = None
    game_over: bool = False

    def messages(self) -> list[str]:
        """Lines reported to the player, in order."""
        if self.result is GuessResult.BAD_GUESS:
            return ["Bad guess"]
        if self.result is GuessResult.MISS:
            return ["Miss"]
        lines = ["Hit"]
        if self.sunk_ship is not None:
            lines.append("Ship sunk")
        if self.game_over:
            lines.append("Game over")
        return lines


class SolutionGrid:
    """Owns the ``width`` x ``height`` solution cells in a flat, row-major buffer.

    Sunk and game-over status are recomputed by scanning the buffer on every
    query rather than tracked per ship. That is O(width * height), which is
    fine for boards of a few hundred cells.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid dimensions must be positive.")
        self.width = width
        self.height = height
        self._cells: list[Cell] = [EMPTY] * (width * height)

    @classmethod
    def place(cls, width: int, height: int, fleet: Iterable[Ship]) -> SolutionGrid:
        """Build a grid holding every ship, or raise :class:`MapOverlap`."""
        grid = cls(width, height)
        with tracer.start_as_current_span("grid.place") as span:
            for ship in sorted(fleet, key=lambda candidate: candidate.ship_id):
                grid.place_ship(ship)
            span.set_attribute("grid.ship_cells", grid.count(CellState.INTACT))
        return grid

    def place_ship(self, ship: Ship) -> None:
        """Mark every cell of ``ship`` as intact; any occupied cell is an overlap."""
        coords = ship.coordinates()
        for coord in coords:
            if not self.contains(coord):
                PLACEMENT_COUNTER.add(1, attributes={"result": "out_of_bounds"})
                raise IndexError(f"Ship {ship.ship_id} leaves the grid at {coord}.")
            if self.cell(coord).state is not CellState.EMPTY:
                PLACEMENT_COUNTER.add(1, attributes={"result": "overlap"})
                logger.info(
                    "ship_overlap",
                    extra={
                        "ship_id": ship.ship_id,
                        "x": coord.x,
                        "y": coord.y,
                        "owner_id": self.cell(coord).ship_id,
                    },
                )
                raise MapOverlap(f"Ship {ship.ship_id} overlaps at ({coord.x}, {coord.y}).")
            self._set(coord, Cell.intact(ship.ship_id))
        PLACEMENT_COUNTER.add(1, attributes={"result": "success"})
        logger.debug(
            "ship_placed",
            extra={
                "ship_id": ship.ship_id,
                "length": ship.length,
                "direction": ship.direction.value,
                "x": ship.anchor.x,
                "y": ship.anchor.y,
            },
        )

    def contains(self, coord: Coordinate) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def cell(self, coord: Coordinate) -> Cell:
        return self._cells[self._index(coord)]

    def evaluate_guess(self, coord: Coordinate) -> GuessOutcome:
        """Apply a guess to the grid and report what it struck."""
        with tracer.start_as_current_span("grid.evaluate_guess") as span:
            span.set_attribute("guess.x", coord.x)
            span.set_attribute("guess.y", coord.y)
            outcome = self._evaluate(coord)
            span.set_attribute("guess.outcome", outcome.result.value)
            GUESS_COUNTER.add(1, attributes={"outcome": outcome.result.value})
            logger.info(
                f"guess_{outcome.result.value}",
                extra={
                    "x": coord.x,
                    "y": coord.y,
                    "sunk_ship": outcome.sunk_ship,
                    "game_over": outcome.game_over,
                },
            )
            return outcome

    def _evaluate(self, coord: Coordinate) -> GuessOutcome:
        if not self.contains(coord):
            return GuessOutcome(GuessResult.BAD_GUESS)
        current = self.cell(coord)
        if current.state in (CellState.EMPTY, CellState.MISSED):
            self._set(coord, MISSED)
            return GuessOutcome(GuessResult.MISS)
        if current.state is CellState.HIT:
            # Re-striking a hit cell changes nothing and counts as a miss.
            return GuessOutcome(GuessResult.MISS)

        ship_id = current.ship_id
        self._set(coord, Cell.hit(ship_id))
        sunk = ship_id if self.is_sunk(ship_id) else None
        return GuessOutcome(GuessResult.HIT, sunk_ship=sunk, game_over=self.is_game_over())

    def is_sunk(self, ship_id: int) -> bool:
        """True once no cell of ``ship_id`` is still intact."""
        return not any(
            cell.state is CellState.INTACT and cell.ship_id == ship_id for cell in self._cells
        )

    def is_game_over(self) -> bool:
        """True once every ship cell on the board has been hit."""
        return all(cell.state is not CellState.INTACT for cell in self._cells)

    def cells_of(self, ship_id: int) -> list[Coordinate]:
        """Coordinates that belong to ``ship_id``, hit or not."""
        return [coord for coord, cell in self.items() if cell.ship_id == ship_id]

    def count(self, state: CellState) -> int:
        return sum(1 for cell in self._cells if cell.state is state)

    def items(self) -> Iterator[tuple[Coordinate, Cell]]:
        """Iterate ``(coordinate, cell)`` pairs row by row."""
        for index, cell in enumerate(self._cells):
            yield Coordinate(index % self.width, index // self.width), cell

    def glyph(self, coord: Coordinate) -> str:
        """Display character for a cell; intact ship cells look empty."""
        return GLYPHS[self.cell(coord).state]

    def rows(self) -> list[str]:
        """The board as text, one string per ``y``."""
        return [
            "".join(self.glyph(Coordinate(x, y)) for x in range(self.width))
            for y in range(self.height)
        ]

    def _index(self, coord: Coordinate) -> int:
        if not self.contains(coord):
            raise IndexError(f"{coord} is outside a {self.width}x{self.height} grid.")
        return coord.y * self.width + coord.x

    def _set(self, coord: Coordinate, cell: Cell) -> None:
        self._cells[self._index(coord)] = cell
