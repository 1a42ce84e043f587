"""Lexer for vexpr expressions.

Produces a stream of tokens with character offsets. The lexer is total:
whitespace and unrecognized characters are skipped without a diagnostic,
so a half-typed expression never blocks the pipeline.
"""

from __future__ import annotations

from vexpr.tokens import SINGLE_CHAR_TOKENS, Token, TokenKind


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_alpha(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_alnum(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)


class Lexer:
    """Tokenizes vexpr source text."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.tokens: list[Token] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch.isspace():
                self.pos += 1
            elif _is_digit(ch) or (ch == "." and _is_digit(self._peek(1))):
                self._lex_number()
            elif _is_alpha(ch):
                self._lex_identifier()
            elif ch in SINGLE_CHAR_TOKENS:
                self._emit(SINGLE_CHAR_TOKENS[ch], ch, self.pos)
                self.pos += 1
            else:
                # Unknown character: skip it, no token and no diagnostic.
                self.pos += 1

        end = len(self.source)
        self.tokens.append(Token(TokenKind.EOF, "", end, end))
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return "\0"

    def _emit(self, kind: TokenKind, value: str, start: int) -> Token:
        tok = Token(kind, value, start, start + len(value))
        self.tokens.append(tok)
        return tok

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> None:
        start = self.pos
        saw_dot = False
        if self.source[self.pos] == ".":
            saw_dot = True
            self.pos += 1
        while _is_digit(self._peek()):
            self.pos += 1
        # At most one decimal point; "5." is a complete number.
        if not saw_dot and self._peek() == ".":
            self.pos += 1
            while _is_digit(self._peek()):
                self.pos += 1
        self._emit(TokenKind.NUMBER, self.source[start:self.pos], start)

    # ── Identifiers ──────────────────────────────────────────────

    def _lex_identifier(self) -> None:
        start = self.pos
        while _is_alnum(self._peek()):
            self.pos += 1
        self._emit(TokenKind.IDENTIFIER, self.source[start:self.pos], start)


def tokenize(text: str) -> list[Token]:
    """Convert raw text into tokens terminated by a single EOF token."""
    return Lexer(text).lex()
