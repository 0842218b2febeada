"""Opens the rules and map files and assembles a ready-to-play game."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import TextIO

from naval.errors import MapMissing, RulesMissing
from naval.telemetry import get_tracer

from .chart import parse_map
from .game import NavalGame
from .lines import LineReader
from .rules import STANDARD_RULES_NAME, parse_rules, write_default_rules

logger = logging.getLogger(__name__)
tracer = get_tracer("naval.engine.loader")


def open_rules(path: str | Path) -> TextIO:
    """Open the rules file, writing the standard fleet first if it is the missing default."""
    rules_path = Path(path)
    try:
        return rules_path.open(encoding="utf-8", errors="replace")
    except OSError as exc:
        if rules_path.name != STANDARD_RULES_NAME or rules_path.exists():
            raise RulesMissing(str(exc)) from exc
    try:
        write_default_rules(rules_path)
        return rules_path.open(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise RulesMissing(str(exc)) from exc


def open_map(path: str | Path) -> TextIO:
    try:
        return Path(path).open(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise MapMissing(str(exc)) from exc


def load_game(
    rules_path: str | Path,
    map_path: str | Path,
    game_cls: type[NavalGame] = NavalGame,
) -> NavalGame:
    """Parse both files and place the fleet.

    Both files are opened before either is parsed, so a missing map is
    reported ahead of any rules error. They are closed once parsing ends.
    """
    with tracer.start_as_current_span("loader.load_game") as span:
        span.set_attribute("rules.path", str(rules_path))
        span.set_attribute("map.path", str(map_path))
        with ExitStack() as stack:
            rules_file = stack.enter_context(open_rules(rules_path))
            map_file = stack.enter_context(open_map(map_path))
            rules = parse_rules(LineReader(rules_file))
            fleet = parse_map(LineReader(map_file), rules)
        game = game_cls.build(rules, fleet)
        logger.info(
            "game_loaded",
            extra={"width": rules.width, "height": rules.height, "ships": rules.num_ships},
        )
        return game
