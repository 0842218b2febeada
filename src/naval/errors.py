"""Failure classification for the naval game.

Every fatal condition is a :class:`NavalError` subclass carrying the process
exit code and the one-line message shown to the player. Raising one never
prints anything; :mod:`naval.cli` is the only place that renders them.
"""

from __future__ import annotations


class NavalError(Exception):
    """Base class for fatal configuration, placement and input errors."""

    exit_code: int = 1
    message: str = "Error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail


class ParamsMissing(NavalError):
    exit_code = 10
    message = "usage: naval rules map"


class RulesMissing(NavalError):
    exit_code = 20
    message = "Missing rules file"


class MapMissing(NavalError):
    exit_code = 30
    message = "Missing map file"


class RulesInvalid(NavalError):
    exit_code = 40
    message = "Error in rules file"


class MapOverlap(NavalError):
    exit_code = 50
    message = "Overlap in map file"


class MapOutOfBounds(NavalError):
    exit_code = 51
    message = "Out of bounds in map file"


class MapInvalid(NavalError):
    exit_code = 52
    message = "Error in map file"


class BadGuess(NavalError):
    """Player input ran out before every ship was sunk."""

    exit_code = 60
    message = "Bad guess"
