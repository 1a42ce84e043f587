"""AST-walking pretty-printer for vexpr expressions.

Prints a tree back to canonical source syntax using isinstance dispatch.
Placeholders print as a glyph, so the output of a half-typed expression
is readable but does not necessarily parse back to the same tree.
"""

from __future__ import annotations

import math
from decimal import Decimal

from vexpr.ast_nodes import (
    BinaryExpression,
    Expr,
    Group,
    Identifier,
    MatrixLiteral,
    NumberLiteral,
    Placeholder,
    VectorLiteral,
)

# Operator precedence table (higher binds tighter)
_PRECEDENCE: dict[str, int] = {
    "+": 1, "-": 1,
    "*": 2, "·": 2, "×": 2,
}


class ExprFormatter:
    """Format an expression tree to canonical source text."""

    def __init__(self, *, placeholder: str = "□", precision: int | None = None) -> None:
        self.placeholder = placeholder
        self.precision = precision

    # ── Public API ─────────────────────────────────────────────

    def format(self, expr: Expr) -> str:
        if isinstance(expr, NumberLiteral):
            return self.format_number(expr.value)
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, Placeholder):
            return self.placeholder
        if isinstance(expr, Group):
            return f"({self.format(expr.expr)})"
        if isinstance(expr, VectorLiteral):
            return "<" + ", ".join(self.format(e) for e in expr.elements) + ">"
        if isinstance(expr, MatrixLiteral):
            rows = (", ".join(self.format(c) for c in row) for row in expr.rows)
            return "[" + "; ".join(rows) + "]"
        if isinstance(expr, BinaryExpression):
            return self._format_binary(expr)
        return str(expr)

    def format_number(self, value: float) -> str:
        if math.isnan(value) or math.isinf(value):
            return str(value)
        if self.precision is not None:
            value = round(value, self.precision)
        if value == int(value) and abs(value) < 1e16:
            return str(int(value))
        # Positional notation only; the lexer has no exponent syntax.
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    # ── Operators ──────────────────────────────────────────────

    def _format_binary(self, expr: BinaryExpression) -> str:
        prec = _PRECEDENCE[expr.op]
        left = self.format(expr.left)
        right = self.format(expr.right)
        # Left-associative: a same-tier right operand needs parentheses.
        if isinstance(expr.left, BinaryExpression) and _PRECEDENCE[expr.left.op] < prec:
            left = f"({left})"
        if isinstance(expr.right, BinaryExpression) and _PRECEDENCE[expr.right.op] <= prec:
            right = f"({right})"
        return f"{left} {expr.op} {right}"
