"""vexpr: an error-tolerant parser and simplifier for linear-algebra expressions."""

from vexpr.lexer import tokenize
from vexpr.parser import ParseResult, parse
from vexpr.simplifier import simplify

__version__ = "0.1.0"

__all__ = ["ParseResult", "__version__", "parse", "simplify", "tokenize"]
