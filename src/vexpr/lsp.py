"""vexpr Language Server, pygls-based LSP for expression documents.

Each line of a document is one expression. Provides advisory
diagnostics, hover with the simplified value, and formatting via stdio
transport.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer
from pygls.workspace import PositionCodec

from vexpr import __version__
from vexpr.ast_nodes import (
    BinaryExpression,
    Expr,
    Group,
    Identifier,
    MatrixLiteral,
    NumberLiteral,
    Placeholder,
    VectorLiteral,
    node_at,
    placeholders,
)
from vexpr.errors import Diagnostic
from vexpr.formatter import ExprFormatter
from vexpr.lexer import tokenize
from vexpr.parser import ParseResult, parse
from vexpr.simplifier import simplify
from vexpr.source import Span

logger = logging.getLogger(__name__)

# Node class → hover label
_NODE_LABELS: dict[type, str] = {
    NumberLiteral: "number",
    Identifier: "identifier",
    VectorLiteral: "vector",
    MatrixLiteral: "matrix",
    BinaryExpression: "operation",
    Group: "group",
}

# ── Conversion helpers ────────────────────────────────────────────

# Spans count code points; clients count UTF-16 units unless they
# negotiate another encoding.
_DEFAULT_CODEC = PositionCodec()


def span_to_range(
    line: int,
    span: Span,
    lines: Sequence[str] = (),
    codec: PositionCodec = _DEFAULT_CODEC,
) -> lsp.Range:
    """Convert a span within one line to an LSP Range.

    With the document ``lines`` the columns are converted to the client's
    position encoding; without them they stay code-point offsets.
    """
    rng = lsp.Range(
        start=lsp.Position(line=line, character=span.start),
        end=lsp.Position(line=line, character=span.end),
    )
    if not lines:
        return rng
    return codec.range_to_client_units(list(lines), rng)


def _to_lsp_diag(
    line: int, d: Diagnostic, lines: Sequence[str], codec: PositionCodec,
) -> lsp.Diagnostic:
    """Convert a parse notice to an LSP Diagnostic.

    Notices never block anything, so they are reported as information.
    """
    return lsp.Diagnostic(
        range=span_to_range(line, d.span, lines, codec),
        severity=lsp.DiagnosticSeverity.Information,
        source="vexpr",
        code=d.code,
        message=f"[{d.code}] {d.message}",
    )


# ── Per-document state ────────────────────────────────────────────


@dataclass
class LineState:
    """Analysis results for a single expression line."""

    text: str
    result: ParseResult
    simplified: Expr


@dataclass
class DocumentState:
    """Cached analysis results for a single open document."""

    source: str = ""
    lines: dict[int, LineState] = field(default_factory=dict)
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    codec: PositionCodec = field(default_factory=PositionCodec)

    @property
    def source_lines(self) -> list[str]:
        return self.source.split("\n")


# ── Server ────────────────────────────────────────────────────────

server = LanguageServer(
    "vexpr-lsp", __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)
_state: dict[str, DocumentState] = {}
_formatter = ExprFormatter()


def _analyze(uri: str, source: str, codec: PositionCodec = _DEFAULT_CODEC) -> DocumentState:
    """Run tokenize → parse → simplify on every line, cache results."""
    ds = DocumentState(source=source, codec=codec)
    source_lines = ds.source_lines

    for lineno, text in enumerate(source_lines):
        if not text.strip():
            continue
        result = parse(tokenize(text))
        ds.lines[lineno] = LineState(text=text, result=result, simplified=simplify(result.tree))
        ds.diagnostics.extend(
            _to_lsp_diag(lineno, d, source_lines, codec) for d in result.details
        )

    logger.debug(
        "analyzed %s: %d expression(s), %d notice(s)",
        uri, len(ds.lines), len(ds.diagnostics),
    )
    _state[uri] = ds
    return ds


def _hover_text(ls: LineState, character: int) -> str:
    """Markdown describing the node under the cursor and the line's value.

    ``character`` is a code-point offset into the line.
    """
    parts: list[str] = []
    node = node_at(ls.result.tree, character)
    if isinstance(node, Placeholder):
        parts.append(f"**empty {node.expected} slot** `{_formatter.format(node)}`")
    elif node is not None:
        label = _NODE_LABELS.get(type(node), "expression")
        parts.append(f"**{label}** `{_formatter.format(node)}`")
    parts.append(f"= `{_formatter.format(ls.simplified)}`")
    return "\n\n".join(parts)


def _format_line(ls: LineState) -> str | None:
    """Canonical text for a line, or None when it should not be rewritten.

    Lines with notices or empty slots are left alone, since their printed
    form would not reproduce what the user typed.
    """
    if ls.result.details or placeholders(ls.result.tree):
        return None
    formatted = _formatter.format(ls.result.tree)
    leading = ls.text[: len(ls.text) - len(ls.text.lstrip())]
    formatted = leading + formatted
    return formatted if formatted != ls.text else None


# ── LSP Feature Handlers ─────────────────────────────────────────


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
    uri = params.text_document.uri
    ds = _analyze(uri, params.text_document.text, server.workspace.position_codec)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
    uri = params.text_document.uri
    # Full sync: take last content change
    source = params.content_changes[-1].text if params.content_changes else ""
    ds = _analyze(uri, source, server.workspace.position_codec)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
    _state.pop(params.text_document.uri, None)


@server.feature(lsp.TEXT_DOCUMENT_HOVER)
def hover(params: lsp.HoverParams) -> lsp.Hover | None:
    ds = _state.get(params.text_document.uri)
    if ds is None:
        return None
    ls = ds.lines.get(params.position.line)
    if ls is None:
        return None
    position = ds.codec.position_from_client_units(ds.source_lines, params.position)
    return lsp.Hover(contents=lsp.MarkupContent(
        kind=lsp.MarkupKind.Markdown,
        value=_hover_text(ls, position.character),
    ))


@server.feature(lsp.TEXT_DOCUMENT_FORMATTING)
def formatting(params: lsp.DocumentFormattingParams) -> list[lsp.TextEdit] | None:
    ds = _state.get(params.text_document.uri)
    if ds is None:
        return None

    edits: list[lsp.TextEdit] = []
    for lineno, ls in sorted(ds.lines.items()):
        new_text = _format_line(ls)
        if new_text is None:
            continue
        edits.append(lsp.TextEdit(
            range=span_to_range(lineno, Span(0, len(ls.text)), ds.source_lines, ds.codec),
            new_text=new_text,
        ))
    return edits or None


# ── Entry point ──────────────────────────────────────────────────


def main() -> None:
    """Start the vexpr language server on stdio."""
    logging.basicConfig(level=logging.INFO)
    server.start_io()
