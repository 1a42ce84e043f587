"""AST node definitions for vexpr expressions."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal, Union

from vexpr.source import Span

PlaceholderKind = Literal["expression", "vector", "matrix", "row", "element"]
Operator = Literal["+", "-", "*", "·", "×"]

PLACEHOLDER_KINDS: tuple[str, ...] = ("expression", "vector", "matrix", "row", "element")
OPERATORS: tuple[str, ...] = ("+", "-", "*", "·", "×")


# ── Leaves ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class NumberLiteral:
    value: float
    span: Span


@dataclass(frozen=True)
class Identifier:
    name: str
    span: Span


@dataclass(frozen=True)
class Placeholder:
    """A slot the grammar expects content in; may be zero-width."""

    expected: PlaceholderKind
    span: Span


# ── Containers ───────────────────────────────────────────────────


@dataclass(frozen=True)
class VectorLiteral:
    elements: tuple[Expr, ...]
    span: Span


@dataclass(frozen=True)
class MatrixLiteral:
    rows: tuple[tuple[Expr, ...], ...]  # ragged rows are representable
    span: Span


@dataclass(frozen=True)
class BinaryExpression:
    op: Operator
    left: Expr
    right: Expr
    span: Span


@dataclass(frozen=True)
class Group:
    expr: Expr
    span: Span


Expr = Union[
    NumberLiteral,
    Identifier,
    Placeholder,
    VectorLiteral,
    MatrixLiteral,
    BinaryExpression,
    Group,
]


# ── Traversal ────────────────────────────────────────────────────


def children(expr: Expr) -> tuple[Expr, ...]:
    """Direct sub-expressions of a node, in source order."""
    if isinstance(expr, VectorLiteral):
        return expr.elements
    if isinstance(expr, MatrixLiteral):
        return tuple(cell for row in expr.rows for cell in row)
    if isinstance(expr, BinaryExpression):
        return (expr.left, expr.right)
    if isinstance(expr, Group):
        return (expr.expr,)
    return ()


def walk(expr: Expr) -> Iterator[Expr]:
    """Pre-order iteration over every node of the tree."""
    stack = [expr]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(children(node)))


def placeholders(expr: Expr) -> list[Placeholder]:
    """All placeholder leaves in source order."""
    return [node for node in walk(expr) if isinstance(node, Placeholder)]


def node_at(expr: Expr, offset: int) -> Expr | None:
    """Return the innermost node whose span contains a caret at ``offset``.

    A caret sitting right after a node still belongs to it, so both span
    edges match. When the caret touches two siblings the narrower one
    wins, and ties go to the later sibling.
    """
    if not expr.span.contains(offset):
        return None
    found: Expr | None = None
    for child in children(expr):
        hit = node_at(child, offset)
        if hit is not None and (found is None or _narrower(hit, found)):
            found = hit
    return found if found is not None else expr


def _narrower(a: Expr, b: Expr) -> bool:
    return len(a.span) <= len(b.span)
