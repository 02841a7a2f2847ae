"""Map rune offsets inside a UTF-8 body to 1-based line numbers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LineRange:
    start: int
    end: int

    @property
    def fragment(self) -> str:
        if self.end > self.start:
            return f"L{self.start}-L{self.end}"
        return f"L{self.start}"


def line_number(data: bytes, rune_offset: int, *, start: bool) -> int:
    """Return the line holding ``rune_offset``.

    A range start is attributed to the rune that follows it, so an offset on
    the first character of a line yields that line. A range end is attributed
    to the rune that precedes it, so an end sitting just after a newline stays
    on the line that newline terminates.

    Each invalid UTF-8 byte counts as one rune, as it does in acme.
    """

    line = 1
    offset = 0
    for rune in data.decode("utf-8", errors="surrogateescape"):
        if start and offset >= rune_offset:
            return line
        offset += 1
        if not start and offset >= rune_offset:
            return line
        if rune == "\n":
            line += 1
    if line > 1:
        # There is no line after the final newline.
        line -= 1
    return line


def map_selection(data: bytes, q0: int, q1: int) -> LineRange:
    start = line_number(data, q0, start=True)
    end = line_number(data, q1, start=False)
    # An empty selection just after a newline ends on the previous line.
    return LineRange(start=start, end=max(start, end))


__all__ = ["LineRange", "line_number", "map_selection"]
