"""Shared test helpers for the vexpr test suite."""

from __future__ import annotations

from vexpr.ast_nodes import (
    BinaryExpression,
    Expr,
    Group,
    Identifier,
    MatrixLiteral,
    NumberLiteral,
    Placeholder,
    VectorLiteral,
    children,
    walk,
)
from vexpr.lexer import tokenize
from vexpr.parser import ParseResult, parse
from vexpr.simplifier import simplify


def parse_text(source: str) -> ParseResult:
    """Tokenize and parse source."""
    return parse(tokenize(source))


def simplified(source: str) -> Expr:
    """Tokenize, parse and simplify source."""
    return simplify(parse_text(source).tree)


def shape(expr: Expr) -> object:
    """Strip spans so trees compare by structure alone.

    Numbers become floats, identifiers their names, placeholders
    ``("□", expected)``, vectors ``("vec", [...])``, matrices
    ``("mat", [[...]])``, groups ``("group", inner)`` and binary
    expressions ``(op, left, right)``.
    """
    if isinstance(expr, NumberLiteral):
        return expr.value
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, Placeholder):
        return ("□", expr.expected)
    if isinstance(expr, VectorLiteral):
        return ("vec", [shape(e) for e in expr.elements])
    if isinstance(expr, MatrixLiteral):
        return ("mat", [[shape(c) for c in row] for row in expr.rows])
    if isinstance(expr, Group):
        return ("group", shape(expr.expr))
    if isinstance(expr, BinaryExpression):
        return (expr.op, shape(expr.left), shape(expr.right))
    raise AssertionError(f"not an expression: {expr!r}")


def assert_spans_nested(tree: Expr) -> None:
    """Every span is well-formed and covers the spans of its children."""
    for node in walk(tree):
        assert node.span.start <= node.span.end, node
        for child in children(node):
            assert node.span.covers(child.span), (node, child)


SLOT = ("□", "element")
HOLE = ("□", "expression")

# Inputs covering finished, half-typed and garbage text.
SAMPLES = [
    "",
    " ",
    "1",
    "2+3",
    "1+2*3",
    "(1+2)*3",
    "a+b*c",
    "2+",
    "2*",
    "(1+)",
    "(1+2",
    "<1,",
    "<1,2>",
    "<1,2",
    "<1,,3>",
    "<,2>",
    "<>",
    "<1,2>+<3,4>",
    "<1,2>+<1,2,3>",
    "<1,0,0>×<0,1,0>",
    "<a,b,c>×<x,y,z>",
    "<1,2,3>·<4,5,6>",
    "[1;",
    "[;",
    "[]",
    "[1,2;3,4]",
    "[1,2;3]",
    "[1,2;3,4]*<1,1>",
    "[1,2;3,4]*[5,6;7,8]",
    "[a,b;c,d]*<x,y>",
    "2*[1,2;3,4]",
    "1-[1,2]",
    "[1,2]+[3,4]",
    "2*<a,1>",
    "<1,>+<1,2>",
    "((a))",
    "<(1+1),3>",
    ")",
    "1 2",
    "1+*2",
    "<<<",
    ">>>",
    "[[[",
    "]]]",
    "(((",
    ")))",
    ",;,;",
    "<1,[2;3>,)",
    "[1,<2,3]",
    "×·.*+-",
    "$%^&",
    "<1 2, 3 4>",
    "(<1,2)",
    "[1,2>",
]
