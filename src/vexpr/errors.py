"""Advisory parser diagnostics and their caret-style rendering."""

from __future__ import annotations

from dataclasses import dataclass

from vexpr.source import SourceText, Span

# Diagnostic codes
UNCLOSED_GROUP = "E100"
UNCLOSED_VECTOR = "E101"
UNCLOSED_MATRIX = "E102"
UNEXPECTED_TOKEN = "E103"
TRAILING_INPUT = "E104"

# ANSI color codes
_YELLOW = "\033[1;33m"
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_CYAN = "\033[1;36m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal parse notice anchored at a source span.

    ``str(diagnostic)`` gives the plain ``"<message> at <offset>"`` form
    returned alongside every parse tree.
    """

    code: str
    message: str
    span: Span
    notes: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.message} at {self.span.start}"


class DiagnosticRenderer:
    """Renders diagnostics against their source text with carets."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic, source: SourceText) -> str:
        lines: list[str] = []

        # Header: E101: message
        lines.append(
            f"{self._c(_YELLOW)}{diag.code}{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        line_no, col = source.position(diag.span.start)
        lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {line_no + 1}:{col + 1}")
        gutter = f"{line_no + 1:>4}"
        lines.append(f"  {self._c(_BLUE)}     |{self._c(_RESET)}")
        lines.append(
            f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source.line_at(line_no)}"
        )

        # Carets stop at the end of the first line; zero-width spans get one.
        end_line, end_col = source.position(diag.span.end)
        if end_line != line_no:
            end_col = len(source.line_at(line_no))
        caret_len = max(1, end_col - col)
        lines.append(
            f"  {self._c(_BLUE)}     |{self._c(_RESET)} "
            f"{' ' * col}{self._c(_YELLOW)}{'^' * caret_len}{self._c(_RESET)}"
        )

        for note in diag.notes:
            lines.append(f"  {self._c(_CYAN)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)
