"""Pygments lexer for vexpr expressions."""

from pygments.lexer import RegexLexer
from pygments.token import (
    Error,
    Name,
    Number,
    Operator,
    Punctuation,
    Text,
)


class VexprLexer(RegexLexer):
    """Pygments lexer for vexpr linear-algebra expressions."""

    name = "vexpr"
    aliases = ["vexpr"]
    filenames = ["*.vx"]
    mimetypes = ["text/x-vexpr"]

    tokens = {
        "root": [
            # Whitespace
            (r"\s+", Text),
            # Numbers: "5", "5.", ".5", "5.25"
            (r"[0-9]+\.[0-9]*|\.[0-9]+", Number.Float),
            (r"[0-9]+", Number.Integer),
            # Identifiers
            (r"[A-Za-z_][A-Za-z0-9_]*", Name.Variable),
            # Operators
            (r"[+\-*×·.]", Operator),
            # Vector and matrix delimiters, separators
            (r"[<>\[\]()]", Punctuation),
            (r"[,;]", Punctuation),
            # Placeholder glyph in printed output
            (r"□", Name.Builtin),
            # Anything else is skipped by the real lexer
            (r".", Error),
        ],
    }
