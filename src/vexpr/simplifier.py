"""Structural simplifier for vexpr expressions.

Rewrites a parsed tree bottom-up toward numeric, vector and matrix normal
form. Each node is rebuilt with ``dataclasses.replace`` (the AST is
frozen); children are simplified first and a node's own rule only looks
at the simplified children. The rewrite is pure and idempotent.

Shape mismatches are not errors: a node whose operands do not fit any
rule is rebuilt over its simplified operands and left for display.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from dataclasses import replace

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
from vexpr.source import Span

_ARITHMETIC: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "·": operator.mul,  # between two numbers the dot is plain multiplication
}


def dimensions(matrix: MatrixLiteral) -> tuple[int, int] | None:
    """Return ``(rows, cols)``, or None when the rows are ragged."""
    if not matrix.rows:
        return 0, 0
    cols = len(matrix.rows[0])
    if any(len(row) != cols for row in matrix.rows):
        return None
    return len(matrix.rows), cols


def _span_of(a: Expr, b: Expr) -> Span:
    return a.span.union(b.span)


def _binary(op: str, a: Expr, b: Expr) -> BinaryExpression:
    return BinaryExpression(op, a, b, _span_of(a, b))  # type: ignore[arg-type]


def _sum(terms: Sequence[Expr], span: Span) -> Expr:
    """Left-nested sum of the terms; an empty sum is the number zero."""
    if not terms:
        return NumberLiteral(0.0, span)
    acc = terms[0]
    for term in terms[1:]:
        acc = _binary("+", acc, term)
    return acc


class Simplifier:
    """Bottom-up linear-algebra rewrite engine."""

    def simplify(self, expr: Expr) -> Expr:
        if isinstance(expr, Group):
            # Parentheses are display-only and do not survive simplification.
            return self.simplify(expr.expr)
        if isinstance(expr, (NumberLiteral, Identifier, Placeholder)):
            return expr
        if isinstance(expr, VectorLiteral):
            return replace(expr, elements=tuple(self.simplify(e) for e in expr.elements))
        if isinstance(expr, MatrixLiteral):
            return replace(
                expr,
                rows=tuple(tuple(self.simplify(c) for c in row) for row in expr.rows),
            )
        if isinstance(expr, BinaryExpression):
            return self._simplify_binary(expr)
        return expr

    # ── Binary rules, in priority order ──────────────────────────

    def _simplify_binary(self, node: BinaryExpression) -> Expr:
        left = self.simplify(node.left)
        right = self.simplify(node.right)
        unreduced = replace(node, left=left, right=right)
        op = node.op

        # Partially built expressions keep their shape.
        if isinstance(left, Placeholder) or isinstance(right, Placeholder):
            return unreduced

        if isinstance(left, NumberLiteral) and isinstance(right, NumberLiteral):
            if op in _ARITHMETIC:
                return NumberLiteral(_ARITHMETIC[op](left.value, right.value), _span_of(left, right))
            return unreduced

        if op in ("+", "-") and isinstance(left, VectorLiteral) and isinstance(right, VectorLiteral):
            if len(left.elements) != len(right.elements):
                return unreduced
            return VectorLiteral(
                tuple(self._combine(op, a, b) for a, b in zip(left.elements, right.elements)),
                _span_of(left, right),
            )

        if op == "*":
            result = self._multiply(left, right)
            if result is not None:
                return result

        if op in ("+", "-", "*"):
            result = self._matrix_cellwise(op, left, right)
            if result is not None:
                return result

        if op == "·" and isinstance(left, VectorLiteral) and isinstance(right, VectorLiteral):
            if len(left.elements) != len(right.elements):
                return unreduced
            return self._dot(left.elements, right.elements, _span_of(left, right))

        if op == "×" and isinstance(left, VectorLiteral) and isinstance(right, VectorLiteral):
            if len(left.elements) != 3 or len(right.elements) != 3:
                return unreduced
            return self._cross(left, right)

        return unreduced

    def _combine(self, op: str, a: Expr, b: Expr) -> Expr:
        return self._simplify_binary(_binary(op, a, b))

    # ── Products ─────────────────────────────────────────────────

    def _multiply(self, left: Expr, right: Expr) -> Expr | None:
        span = _span_of(left, right)

        if isinstance(left, NumberLiteral) and isinstance(right, VectorLiteral):
            return VectorLiteral(tuple(self._combine("*", left, e) for e in right.elements), span)
        if isinstance(left, VectorLiteral) and isinstance(right, NumberLiteral):
            return VectorLiteral(tuple(self._combine("*", e, right) for e in left.elements), span)

        if isinstance(left, MatrixLiteral) and isinstance(right, VectorLiteral):
            dims = dimensions(left)
            if dims is None or dims[1] != len(right.elements):
                return None
            return VectorLiteral(
                tuple(self._dot(row, right.elements, span) for row in left.rows),
                span,
            )

        if isinstance(left, MatrixLiteral) and isinstance(right, MatrixLiteral):
            dims_a = dimensions(left)
            dims_b = dimensions(right)
            if dims_a is None or dims_b is None or dims_a[1] != dims_b[0]:
                return None
            columns = [tuple(row[c] for row in right.rows) for c in range(dims_b[1])]
            return MatrixLiteral(
                tuple(
                    tuple(self._dot(row, column, span) for column in columns)
                    for row in left.rows
                ),
                span,
            )

        return None

    def _dot(self, a: Sequence[Expr], b: Sequence[Expr], span: Span) -> Expr:
        """Inner product built as a sum of products, then simplified."""
        terms = [_binary("*", x, y) for x, y in zip(a, b)]
        return self.simplify(_sum(terms, span))

    def _cross(self, left: VectorLiteral, right: VectorLiteral) -> VectorLiteral:
        a1, a2, a3 = left.elements
        b1, b2, b3 = right.elements
        components = (
            _binary("-", _binary("*", a2, b3), _binary("*", a3, b2)),
            _binary("-", _binary("*", a3, b1), _binary("*", a1, b3)),
            _binary("-", _binary("*", a1, b2), _binary("*", a2, b1)),
        )
        return VectorLiteral(
            tuple(self.simplify(c) for c in components),
            _span_of(left, right),
        )

    # ── Matrix cellwise ──────────────────────────────────────────

    def _matrix_cellwise(self, op: str, left: Expr, right: Expr) -> Expr | None:
        """Scalar-with-matrix for ``+ - *`` and same-shape matrix ``+ -``.

        Operand order is kept per cell, so ``k - M`` has cells ``k - m``.
        """
        span = _span_of(left, right)

        if isinstance(left, NumberLiteral) and isinstance(right, MatrixLiteral):
            return MatrixLiteral(
                tuple(tuple(self._combine(op, left, c) for c in row) for row in right.rows),
                span,
            )
        if isinstance(left, MatrixLiteral) and isinstance(right, NumberLiteral):
            return MatrixLiteral(
                tuple(tuple(self._combine(op, c, right) for c in row) for row in left.rows),
                span,
            )

        if op in ("+", "-") and isinstance(left, MatrixLiteral) and isinstance(right, MatrixLiteral):
            same_shape = len(left.rows) == len(right.rows) and all(
                len(a) == len(b) for a, b in zip(left.rows, right.rows)
            )
            if not same_shape:
                return None
            return MatrixLiteral(
                tuple(
                    tuple(self._combine(op, a, b) for a, b in zip(row_a, row_b))
                    for row_a, row_b in zip(left.rows, right.rows)
                ),
                span,
            )

        return None


_SIMPLIFIER = Simplifier()


def simplify(expr: Expr) -> Expr:
    """Simplify a tree; pure, total and idempotent."""
    return _SIMPLIFIER.simplify(expr)
