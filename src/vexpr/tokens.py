"""Token kinds and token representation for the vexpr lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from vexpr.source import Span


class TokenKind(Enum):
    # Literals
    NUMBER = auto()
    IDENTIFIER = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    DOT = auto()  # '.' or '·'
    CROSS = auto()  # '×'

    # Delimiters
    LANGLE = auto()
    RANGLE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LPAREN = auto()
    RPAREN = auto()

    # Separators
    COMMA = auto()
    SEMICOLON = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    start: int
    end: int

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)


SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "<": TokenKind.LANGLE,
    ">": TokenKind.RANGLE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ".": TokenKind.DOT,
    "·": TokenKind.DOT,
    "×": TokenKind.CROSS,
}

# Tokens that end an operand position; a missing operand before one of
# these becomes a placeholder instead of consuming the token.
OPERAND_TERMINATORS: frozenset[TokenKind] = frozenset({
    TokenKind.EOF,
    TokenKind.RANGLE,
    TokenKind.RBRACKET,
    TokenKind.RPAREN,
})

ADDITIVE_OPERATORS: dict[TokenKind, str] = {
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
}

MULTIPLICATIVE_OPERATORS: dict[TokenKind, str] = {
    TokenKind.STAR: "*",
    TokenKind.DOT: "·",
    TokenKind.CROSS: "×",
}
