"""Single-player game controller driving guesses against the solution grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from naval.telemetry import get_meter, get_tracer

from .chart import Fleet
from .grid import GuessOutcome, GuessResult, SolutionGrid
from .lines import LineOverflowError, LineReader, read_uints
from .rules import Rules
from .ship import Coordinate

logger = logging.getLogger(__name__)
tracer = get_tracer("naval.engine.game")
meter = get_meter("naval.engine.game")

TURN_COUNTER = meter.create_counter(
    "naval_engine_turns",
    unit="1",
    description="Guess lines consumed by NavalGame, by classification",
)

BAD_GUESS_MESSAGE = "Bad guess"


class GamePhase(Enum):
    """High-level lifecycle of a game."""

    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class GuessState(Enum):
    """Classification of one line of player input."""

    AWAITING = "awaiting"
    VALID = "valid"
    MALFORMED = "malformed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class GuessInput:
    state: GuessState
    coord: Coordinate | None = None


@dataclass(frozen=True)
class TurnReport:
    """What one turn consumed and what to tell the player."""

    state: GuessState
    outcome: GuessOutcome | None = None
    messages: tuple[str, ...] = ()

    @property
    def terminal(self) -> bool:
        return self.state is GuessState.EXHAUSTED or bool(self.outcome and self.outcome.game_over)


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the current game."""

    phase: GamePhase
    guesses: int
    hits: int
    misses: int
    sunk_ships: tuple[int, ...]
    board: tuple[str, ...] = field(default_factory=tuple)


class NavalGame:
    """Owns the solution grid and applies the player's guesses to it."""

    def __init__(self, rules: Rules, fleet: Fleet, grid: SolutionGrid) -> None:
        self.rules = rules
        self.fleet = fleet
        self.grid = grid
        self.phase: GamePhase = GamePhase.IN_PROGRESS
        self.guesses = 0
        self.hits = 0
        self.misses = 0
        self.state: GuessState = GuessState.AWAITING

    @classmethod
    def build(cls, rules: Rules, fleet: Fleet) -> NavalGame:
        """Place ``fleet`` on a fresh grid; overlaps raise ``MapOverlap``."""
        grid = SolutionGrid.place(rules.width, rules.height, fleet)
        return cls(rules, fleet, grid)

    def read_guess(self, reader: LineReader) -> GuessInput:
        """Classify the next line of input as a guess."""
        try:
            line = reader.next_line()
        except LineOverflowError:
            if not reader.discard_rest():
                return GuessInput(GuessState.EXHAUSTED)
            return GuessInput(GuessState.MALFORMED)
        if line is None:
            return GuessInput(GuessState.EXHAUSTED)
        try:
            x, y = read_uints(line, 2)
        except ValueError:
            return GuessInput(GuessState.MALFORMED)
        return GuessInput(GuessState.VALID, Coordinate(x, y))

    def take_turn(self, reader: LineReader) -> TurnReport:
        """Consume one guess line and apply it.

        Running out of input is returned as an ``EXHAUSTED`` report; deciding
        what that means for the process is left to the caller.
        """
        if self.phase is not GamePhase.IN_PROGRESS:
            raise RuntimeError("Game is not in progress.")
        self.state = GuessState.AWAITING
        with tracer.start_as_current_span("game.take_turn") as span:
            guess = self.read_guess(reader)
            self.state = guess.state
            span.set_attribute("guess.state", guess.state.value)
            TURN_COUNTER.add(1, attributes={"state": guess.state.value})

            if guess.state is GuessState.EXHAUSTED:
                logger.info("guess_input_exhausted", extra={"guesses": self.guesses})
                return TurnReport(guess.state)
            if guess.state is GuessState.MALFORMED:
                logger.info("guess_malformed", extra={"line_number": reader.line_number})
                return TurnReport(guess.state, messages=(BAD_GUESS_MESSAGE,))

            return self.guess(guess.coord)

    def guess(self, coord: Coordinate) -> TurnReport:
        """Apply a well-formed guess to the grid."""
        outcome = self.grid.evaluate_guess(coord)
        self.guesses += 1
        if outcome.result is GuessResult.HIT:
            self.hits += 1
        elif outcome.result is GuessResult.MISS:
            self.misses += 1
        if outcome.game_over:
            self.phase = GamePhase.FINISHED
            logger.info("game_finished", extra={"guesses": self.guesses, "hits": self.hits})
        return TurnReport(GuessState.VALID, outcome, tuple(outcome.messages()))

    def close(self) -> None:
        """Release per-game resources; the plain game holds none."""

    def sunk_ships(self) -> tuple[int, ...]:
        return tuple(ship.ship_id for ship in self.fleet if self.grid.is_sunk(ship.ship_id))

    def get_state(self) -> GameState:
        """Return an immutable view of the game."""
        return GameState(
            phase=self.phase,
            guesses=self.guesses,
            hits=self.hits,
            misses=self.misses,
            sunk_ships=self.sunk_ships(),
            board=tuple(self.grid.rows()),
        )
