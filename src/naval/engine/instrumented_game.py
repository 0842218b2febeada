"""Naval game with per-game spans, metrics and log lines."""

from __future__ import annotations

import time

from naval.engine.chart import Fleet
from naval.engine.game import GamePhase, GuessState, NavalGame, TurnReport
from naval.engine.grid import GuessResult, SolutionGrid
from naval.engine.lines import LineReader
from naval.engine.rules import Rules
from naval.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedNavalGame(NavalGame):
    """Wraps NavalGame with tracing, metrics, and logging."""

    def __init__(self, rules: Rules, fleet: Fleet, grid: SolutionGrid) -> None:
        super().__init__(rules, fleet, grid)
        self._logger = get_logger("naval.engine")
        self._tracer = get_tracer("naval.engine")
        self._game_span_cm = None
        self._game_span = None
        self._game_start_time: float | None = None
        self._start_game_span()

    def take_turn(self, reader: LineReader) -> TurnReport:
        with self._tracer.start_as_current_span("naval.engine.take_turn") as span:
            span.set_attribute("turn", self.guesses + 1)
            report = super().take_turn(reader)
            span.set_attribute("guess_state", report.state.value)

            record_game_metric("naval_guess_lines_total", 1, {"state": report.state.value})
            if report.outcome is not None:
                result = report.outcome.result
                span.set_attribute("guess_result", result.value)
                span.set_attribute("sunk", report.outcome.sunk_ship is not None)
                record_game_metric(
                    "naval_guesses_by_result_total", 1, {"result": result.value}
                )
                if result is GuessResult.HIT and report.outcome.sunk_ship is not None:
                    record_game_metric("naval_ships_sunk_total", 1)

            if report.state is GuessState.EXHAUSTED:
                span.set_attribute("exhausted", True)
                self._finish_game(completed=False)
            elif self.phase is GamePhase.FINISHED:
                self._finish_game(completed=True)
            return report

    def close(self) -> None:
        """End the game span without recording a result."""
        self._close_game_span()

    def _start_game_span(self) -> None:
        self._game_start_time = time.perf_counter()
        self._game_span_cm = self._tracer.start_as_current_span("naval.engine.game")
        self._game_span = self._game_span_cm.__enter__()
        self._game_span.set_attribute("board.width", self.rules.width)
        self._game_span.set_attribute("board.height", self.rules.height)
        self._game_span.set_attribute("fleet.size", self.rules.num_ships)

    def _finish_game(self, completed: bool) -> None:
        duration = (time.perf_counter() - self._game_start_time) if self._game_start_time else 0.0
        outcome = "completed" if completed else "abandoned"

        record_game_metric("naval_game_finished_total", 1, {"outcome": outcome})
        record_game_metric("naval_game_duration_seconds", duration, {"outcome": outcome})

        with self._tracer.start_as_current_span("naval.engine.game_complete") as span:
            span.set_attribute("outcome", outcome)
            span.set_attribute("guesses", self.guesses)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("outcome", outcome)
            self._game_span.set_attribute("guesses", self.guesses)

        self._logger.info(
            "Game %s. guesses=%d hits=%d misses=%d duration_s=%.3f",
            outcome,
            self.guesses,
            self.hits,
            self.misses,
            duration,
        )
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None
