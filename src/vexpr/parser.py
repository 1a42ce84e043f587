"""Parser for vexpr expressions.

Transforms a token stream into an AST by recursive descent over two
precedence tiers. The parser never fails: wherever an operand or a
closing delimiter is missing it synthesizes a ``Placeholder`` node and,
for missing delimiters, records an advisory diagnostic. Every keystroke
therefore yields a complete, navigable tree.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from vexpr.ast_nodes import (
    BinaryExpression,
    Expr,
    Group,
    Identifier,
    MatrixLiteral,
    NumberLiteral,
    Placeholder,
    PlaceholderKind,
    VectorLiteral,
)
from vexpr.errors import (
    TRAILING_INPUT,
    UNCLOSED_GROUP,
    UNCLOSED_MATRIX,
    UNCLOSED_VECTOR,
    UNEXPECTED_TOKEN,
    Diagnostic,
)
from vexpr.source import Span
from vexpr.tokens import (
    ADDITIVE_OPERATORS,
    MULTIPLICATIVE_OPERATORS,
    OPERAND_TERMINATORS,
    Token,
    TokenKind,
)

# Delimiters that end a literal they do not belong to.
_VECTOR_STOPS = frozenset({TokenKind.SEMICOLON, TokenKind.RBRACKET, TokenKind.RPAREN})
_MATRIX_STOPS = frozenset({TokenKind.RANGLE, TokenKind.RPAREN})


@dataclass(frozen=True)
class ParseResult:
    """The root expression plus advisory diagnostics, in source order.

    ``diagnostics`` holds the plain ``"<message> at <offset>"`` strings;
    ``details`` holds the same notices with codes and spans for renderers.
    """

    tree: Expr
    diagnostics: list[str] = field(default_factory=list)
    details: list[Diagnostic] = field(default_factory=list)


class Parser:
    """Parses a list of tokens into a vexpr AST."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind != TokenKind.EOF:
            end = self.tokens[-1].end if self.tokens else 0
            self.tokens.append(Token(TokenKind.EOF, "", end, end))
        self.pos = 0
        self.diagnostics: list[Diagnostic] = []

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        # EOF is never consumed.
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _error(self, code: str, message: str, span: Span, *notes: str) -> None:
        self.diagnostics.append(Diagnostic(code, message, span, notes))

    def _placeholder(self, expected: PlaceholderKind, start: int, end: int | None = None) -> Placeholder:
        return Placeholder(expected, Span(start, start if end is None else end))

    # ── Top level ────────────────────────────────────────────────

    def parse(self) -> ParseResult:
        """Parse the whole token stream into exactly one root expression."""
        tree = self._parse_expression()

        if not self._at(TokenKind.EOF):
            tok = self._current()
            last = self.tokens[-2]
            self._error(
                TRAILING_INPUT,
                f"Unexpected trailing input {tok.value!r}",
                Span(tok.start, last.end),
                "only the first expression is kept",
            )

        return ParseResult(
            tree=tree,
            diagnostics=[str(d) for d in self.diagnostics],
            details=list(self.diagnostics),
        )

    # ── Expressions ──────────────────────────────────────────────

    def _parse_expression(self) -> Expr:
        return self._parse_add_sub()

    def _parse_add_sub(self) -> Expr:
        left = self._parse_mul()
        while self._current().kind in ADDITIVE_OPERATORS:
            op_tok = self._advance()
            right = self._parse_operand(self._parse_mul)
            left = BinaryExpression(
                ADDITIVE_OPERATORS[op_tok.kind], left, right,
                Span(left.span.start, right.span.end),
            )
        return left

    def _parse_mul(self) -> Expr:
        left = self._parse_primary()
        while self._current().kind in MULTIPLICATIVE_OPERATORS:
            op_tok = self._advance()
            right = self._parse_operand(self._parse_primary)
            left = BinaryExpression(
                MULTIPLICATIVE_OPERATORS[op_tok.kind], left, right,
                Span(left.span.start, right.span.end),
            )
        return left

    def _parse_operand(self, parse: Callable[[], Expr]) -> Expr:
        """Parse the right-hand side of an operator.

        An operand cut off by EOF or a closing delimiter becomes a
        zero-width placeholder at the insertion point; the delimiter is
        left for the enclosing rule.
        """
        tok = self._current()
        if tok.kind in OPERAND_TERMINATORS:
            return self._placeholder("expression", tok.start)
        return parse()

    def _parse_primary(self) -> Expr:
        tok = self._current()

        if tok.kind == TokenKind.NUMBER:
            self._advance()
            return NumberLiteral(float(tok.value), tok.span)

        if tok.kind == TokenKind.IDENTIFIER:
            self._advance()
            return Identifier(tok.value, tok.span)

        if tok.kind == TokenKind.LPAREN:
            return self._parse_group()

        if tok.kind == TokenKind.LANGLE:
            return self._parse_vector()

        if tok.kind == TokenKind.LBRACKET:
            return self._parse_matrix()

        # Anything else stands in for the missing expression. Consuming the
        # token guarantees forward progress.
        if tok.kind == TokenKind.EOF:
            return self._placeholder("expression", tok.start)
        self._advance()
        self._error(
            UNEXPECTED_TOKEN,
            f"Unexpected {tok.value!r}; expected an expression",
            tok.span,
        )
        return self._placeholder("expression", tok.start, tok.end)

    def _parse_group(self) -> Group:
        lparen = self._advance()
        expr = self._parse_expression()
        if self._at(TokenKind.RPAREN):
            end = self._advance().end
        else:
            end = self._current().start
            self._error(UNCLOSED_GROUP, 'Unclosed group; missing ")"', Span(end, end))
        return Group(expr, Span(lparen.start, end))

    # ── Literals ─────────────────────────────────────────────────

    def _parse_vector(self) -> VectorLiteral:
        langle = self._advance()
        elements: list[Expr] = []
        pending: int | None = None

        while not self._at(TokenKind.EOF):
            tok = self._current()
            if tok.kind == TokenKind.RANGLE or tok.kind in _VECTOR_STOPS:
                break
            if tok.kind == TokenKind.COMMA:
                pending = self._open_slot(elements)
                continue
            self._fill_slot(elements, pending, self._parse_expression())
            pending = None

        if self._at(TokenKind.RANGLE):
            end = self._advance().end
        else:
            end = self._current().start
            self._error(UNCLOSED_VECTOR, 'Unclosed vector; missing ">"', Span(end, end))
        return VectorLiteral(tuple(elements), Span(langle.start, end))

    def _parse_matrix(self) -> MatrixLiteral:
        lbracket = self._advance()
        rows: list[tuple[Expr, ...]] = []
        row: list[Expr] = []
        pending: int | None = None

        while not self._at(TokenKind.EOF):
            tok = self._current()
            if tok.kind == TokenKind.RBRACKET or tok.kind in _MATRIX_STOPS:
                break
            if tok.kind == TokenKind.SEMICOLON:
                semi = self._advance()
                if not row:
                    row.append(self._placeholder("element", semi.start))
                rows.append(tuple(row))
                # The next row starts with one slot, awaiting its first cell.
                row = [self._placeholder("element", semi.start, semi.end)]
                pending = 0
                continue
            if tok.kind == TokenKind.COMMA:
                pending = self._open_slot(row)
                continue
            self._fill_slot(row, pending, self._parse_expression())
            pending = None

        if not row:
            row.append(self._placeholder("element", self._current().start))
        rows.append(tuple(row))

        if self._at(TokenKind.RBRACKET):
            end = self._advance().end
        else:
            end = self._current().start
            self._error(UNCLOSED_MATRIX, 'Unclosed matrix; missing "]"', Span(end, end))
        return MatrixLiteral(tuple(rows), Span(lbracket.start, end))

    # ── Slots ────────────────────────────────────────────────────

    def _open_slot(self, items: list[Expr]) -> int:
        """Consume a comma and append a pending placeholder for the next slot.

        Returns the index of the pending slot.
        """
        comma = self._advance()
        items.append(self._placeholder("element", comma.start, comma.end))
        return len(items) - 1

    def _fill_slot(self, items: list[Expr], pending: int | None, expr: Expr) -> None:
        """Overwrite the pending slot with ``expr``, or append it."""
        if pending is not None:
            items[pending] = expr
        else:
            items.append(expr)


def parse(tokens: Sequence[Token]) -> ParseResult:
    """Parse tokens into one root expression and its diagnostics."""
    return Parser(tokens).parse()
