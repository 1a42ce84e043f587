"""vexpr command line interface."""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

import click
from pygments import highlight
from pygments.formatters import TerminalFormatter

from vexpr import __version__
from vexpr.config import VexprConfig, discover_config
from vexpr.errors import DiagnosticRenderer
from vexpr.formatter import ExprFormatter
from vexpr.highlight import VexprLexer
from vexpr.lexer import tokenize
from vexpr.parser import ParseResult, parse
from vexpr.simplifier import simplify
from vexpr.source import SourceText


@dataclass
class _Options:
    config: VexprConfig
    color: bool

    def formatter(self) -> ExprFormatter:
        return ExprFormatter(
            placeholder=self.config.display.placeholder,
            precision=self.config.display.precision,
        )

    def renderer(self) -> DiagnosticRenderer:
        return DiagnosticRenderer(color=self.color)

    def paint(self, text: str) -> str:
        if not self.color:
            return text
        return highlight(text, VexprLexer(), TerminalFormatter()).rstrip("\n")


def _read_expr(expr: str) -> str:
    """Return the expression argument, reading stdin for ``-``."""
    if expr == "-":
        return sys.stdin.read().rstrip("\n")
    return expr


def _report(opts: _Options, result: ParseResult, source: SourceText) -> None:
    renderer = opts.renderer()
    for diag in result.details:
        click.echo(renderer.render(diag, source), err=True)


@click.group()
@click.version_option(__version__, prog_name="vexpr")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors.")
@click.pass_context
def main(ctx: click.Context, no_color: bool) -> None:
    """Parse and simplify linear-algebra expressions."""
    try:
        config = discover_config()
    except tomllib.TOMLDecodeError as e:
        click.echo(f"error: invalid vexpr.toml: {e}", err=True)
        raise SystemExit(1)
    ctx.obj = _Options(config=config, color=config.diagnostics.color and not no_color)


@main.command()
@click.argument("expr")
def tokens(expr: str) -> None:
    """Print the tokens of an expression, one per line."""
    for tok in tokenize(_read_expr(expr)):
        click.echo(f"{tok.kind.name:<10} {tok.value!r:<8} {tok.start}..{tok.end}")


@main.command(name="parse")
@click.argument("expr")
@click.pass_obj
def parse_cmd(opts: _Options, expr: str) -> None:
    """View the AST of an expression, with spans."""
    text = _read_expr(expr)
    result = parse(tokenize(text))
    _dump_ast(result.tree, 0)
    _report(opts, result, SourceText(text))


@main.command(name="simplify")
@click.argument("expr")
@click.pass_obj
def simplify_cmd(opts: _Options, expr: str) -> None:
    """Simplify an expression and print the result."""
    text = _read_expr(expr)
    result = parse(tokenize(text))
    _report(opts, result, SourceText(text))
    click.echo(opts.paint(opts.formatter().format(simplify(result.tree))))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def check(opts: _Options, file: str) -> None:
    """Parse every non-blank line of FILE as one expression."""
    lines = Path(file).read_text().splitlines()
    renderer = opts.renderer()
    had_notices = False
    checked = 0

    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        checked += 1
        result = parse(tokenize(line))
        for diag in result.details:
            had_notices = True
            click.echo(f"{file}:{lineno}", err=True)
            click.echo(renderer.render(diag, SourceText(line)), err=True)

    if had_notices:
        raise SystemExit(1)
    click.echo(f"checked {checked} expression(s) in {file}: no notices")


@main.command()
def lsp() -> None:
    """Start the vexpr language server."""
    from vexpr.lsp import main as lsp_main

    lsp_main()


def _dump_ast(node: object, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        fields = node.__dataclass_fields__  # type: ignore[union-attr]
        span = getattr(node, "span", None)
        click.echo(f"{indent}{name} [{span}]")
        for field_name in fields:
            if field_name == "span":
                continue
            value = getattr(node, field_name)
            if isinstance(value, tuple):
                if value:
                    click.echo(f"{indent}  {field_name}:")
                    for item in value:
                        _dump_ast(item, depth + 2)
                else:
                    click.echo(f"{indent}  {field_name}: ()")
            elif hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_ast(value, depth + 2)
            else:
                click.echo(f"{indent}  {field_name}: {value!r}")
    elif isinstance(node, tuple):
        # A matrix row
        click.echo(f"{indent}row")
        for item in node:
            _dump_ast(item, depth + 1)
    else:
        click.echo(f"{indent}{name}: {node!r}")
