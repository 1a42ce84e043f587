"""Source text representation and span tracking for diagnostics."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A half-open ``[start, end)`` character range within the source text."""

    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        """True if a caret at ``offset`` sits inside or on the edge of the span."""
        return self.start <= offset <= self.end

    def covers(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end

    def union(self, other: Span) -> Span:
        return Span(min(self.start, other.start), max(self.end, other.end))


class SourceText:
    """Expression text with line access for diagnostics.

    Lines and columns are 0-indexed here; the renderer adds one when
    printing locations for humans.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.lines = text.split("\n")
        self._line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(i + 1)

    def line_at(self, n: int) -> str:
        """Return the 0-indexed line, or empty string if out of range."""
        if 0 <= n < len(self.lines):
            return self.lines[n]
        return ""

    def position(self, offset: int) -> tuple[int, int]:
        """Map a character offset to a ``(line, column)`` pair."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]

    def offset(self, line: int, column: int) -> int:
        """Map a ``(line, column)`` pair back to a character offset, clamped."""
        if line < 0:
            return 0
        if line >= len(self._line_starts):
            return len(self.text)
        start = self._line_starts[line]
        return start + max(0, min(column, len(self.lines[line])))

    def span_text(self, span: Span) -> str:
        """Extract the text covered by a span."""
        return self.text[span.start:span.end]
