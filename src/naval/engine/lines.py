"""Bounded line reading shared by the rules, map and guess parsers."""

from __future__ import annotations

import logging
from typing import TextIO

logger = logging.getLogger(__name__)

# A line holds at most 20 characters plus its line break.
MAX_LINE_LENGTH = 21
# Largest value a parsed field may take (signed 32-bit maximum).
MAX_FIELD_VALUE = 2**31 - 1


class LineOverflowError(ValueError):
    """Raised when a line does not end within ``MAX_LINE_LENGTH`` characters."""


class LineReader:
    """Reads newline-terminated lines of bounded length from a text stream."""

    def __init__(self, stream: TextIO, limit: int = MAX_LINE_LENGTH) -> None:
        self._stream = stream
        self._limit = limit
        self.line_number = 0

    def next_line(self) -> str | None:
        """Return the next line without its terminator, or ``None`` at end of input.

        A final line missing its line break is still returned. ``limit``
        characters without a line break raise :class:`LineOverflowError`;
        the rest of that line is left unread (see :meth:`discard_rest`).
        """
        raw = self._stream.readline(self._limit)
        if raw == "":
            return None
        self.line_number += 1
        if raw.endswith("\n"):
            return raw[:-1].rstrip("\r")
        if len(raw) >= self._limit:
            logger.debug(
                "line_overflow", extra={"line_number": self.line_number, "limit": self._limit}
            )
            raise LineOverflowError(f"Line {self.line_number} exceeds {self._limit - 1} characters.")
        return raw

    def discard_rest(self) -> bool:
        """Skip to the end of the current line.

        Returns ``False`` if the input ended before a line break was found.
        """
        while True:
            chunk = self._stream.readline(self._limit)
            if chunk == "":
                return False
            if chunk.endswith("\n"):
                return True


def read_uints(text: str, count: int) -> tuple[int, ...]:
    """Parse exactly ``count`` whitespace-separated non-negative integers."""
    fields = text.split()
    if len(fields) != count:
        raise ValueError(f"Expected {count} values, found {len(fields)}.")
    return tuple(_read_uint(field) for field in fields)


def _read_uint(field: str) -> int:
    if not (field.isascii() and field.isdigit()):
        raise ValueError(f"Not a non-negative integer: {field!r}.")
    value = int(field)
    if value > MAX_FIELD_VALUE:
        raise ValueError(f"Value out of range: {field}.")
    return value
