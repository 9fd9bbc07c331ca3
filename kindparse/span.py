"""Source ranges used by the lexer, parser and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Range:
    """A half-open byte range ``[start, end)`` inside one syntax context."""

    start: int
    end: int
    ctx: int = 0

    def mix(self, other: Range) -> Range:
        """Return the smallest range covering both ranges, in this range's context."""
        return Range(min(self.start, other.start), max(self.end, other.end), self.ctx)