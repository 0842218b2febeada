"""Rules file decoding: board dimensions and the ordered fleet of ship lengths."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from naval.errors import RulesInvalid
from naval.telemetry import get_tracer

from .lines import LineOverflowError, LineReader, read_uints

logger = logging.getLogger(__name__)
tracer = get_tracer("naval.engine.rules")

MAX_SHIPS = 15
STANDARD_RULES_NAME = "standard.rules"
# Upper bound on width * height.
MAX_BOARD_CELLS = 1_000_000
DEFAULT_RULES = "8 8\n6\n5\n5\n4\n3\n2\n1\n"


@dataclass(frozen=True)
class Rules:
    """Board size and ship lengths in fleet order."""

    width: int
    height: int
    ship_lengths: tuple[int, ...]

    @property
    def num_ships(self) -> int:
        return len(self.ship_lengths)

    @property
    def cell_count(self) -> int:
        return self.width * self.height


def parse_rules(reader: LineReader) -> Rules:
    """Decode a rules file, raising :class:`RulesInvalid` on the first defect."""
    with tracer.start_as_current_span("rules.parse") as span:
        width, height = _read_fields(reader, 2, "dimensions")
        if width <= 0 or height <= 0:
            raise RulesInvalid("Board dimensions must be positive.")
        if width * height > MAX_BOARD_CELLS:
            raise RulesInvalid(f"Board is larger than {MAX_BOARD_CELLS} cells.")

        (num_ships,) = _read_fields(reader, 1, "ship count")
        if not 1 <= num_ships <= MAX_SHIPS:
            raise RulesInvalid(f"Ship count must be between 1 and {MAX_SHIPS}.")

        lengths: list[int] = []
        for index in range(num_ships):
            (length,) = _read_fields(reader, 1, f"length of ship {index}")
            if length < 1:
                raise RulesInvalid(f"Ship {index} must have a positive length.")
            lengths.append(length)

        rules = Rules(width=width, height=height, ship_lengths=tuple(lengths))
        span.set_attribute("board.width", width)
        span.set_attribute("board.height", height)
        span.set_attribute("fleet.size", num_ships)
        logger.info(
            "rules_parsed",
            extra={"width": width, "height": height, "ship_lengths": list(lengths)},
        )
        return rules


def _read_fields(reader: LineReader, count: int, what: str) -> tuple[int, ...]:
    try:
        line = reader.next_line()
        if line is None:
            raise RulesInvalid(f"Rules file ended before the {what}.")
        return read_uints(line, count)
    except LineOverflowError as exc:
        raise RulesInvalid(str(exc)) from exc
    except ValueError as exc:
        logger.info("rules_line_invalid", extra={"line_number": reader.line_number})
        raise RulesInvalid(f"Bad {what}: {exc}") from exc


def write_default_rules(path: str | Path) -> Path:
    """Create a rules file with the standard 8x8 fleet and return its path."""
    target = Path(path)
    target.write_text(DEFAULT_RULES, encoding="utf-8")
    logger.info("default_rules_written", extra={"path": str(target)})
    return target
