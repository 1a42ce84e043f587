"""Tests for the vexpr CLI, config, error rendering and highlighting."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from pygments.token import Error, Name, Number, Operator

from vexpr.cli import main
from vexpr.config import VexprConfig, discover_config, find_config, load_config
from vexpr.errors import UNCLOSED_VECTOR, Diagnostic, DiagnosticRenderer
from vexpr.highlight import VexprLexer
from vexpr.source import SourceText, Span


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tmp_project(tmp_path):
    """A directory holding a vexpr.toml and a file of expressions."""
    (tmp_path / "vexpr.toml").write_text(
        '[display]\nplaceholder = "?"\nprecision = 2\n'
        "[diagnostics]\ncolor = false\n"
    )
    (tmp_path / "exprs.vx").write_text("1+2\n\n<1,2>·<3,4>\n")
    return tmp_path


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("tokens", "parse", "simplify", "check", "lsp"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_tokens(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["tokens", "1+x"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].split() == ["NUMBER", "'1'", "0..1"]
        assert lines[1].split() == ["PLUS", "'+'", "1..2"]
        assert lines[-1].split() == ["EOF", "''", "3..3"]

    def test_parse_dump(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["--no-color", "parse", "[1;"])
        assert result.exit_code == 0
        assert "MatrixLiteral [0..3]" in result.output
        assert "row" in result.output
        assert "expected: 'element'" in result.output
        assert "E102: Unclosed matrix" in result.output

    def test_simplify(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["--no-color", "simplify", "[1,2;3,4]*<1,1>"])
        assert result.exit_code == 0
        assert result.output.strip() == "<3, 7>"

    def test_simplify_rounds_by_default(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["--no-color", "simplify", "0.1+0.2"])
        assert result.output.strip() == "0.3"

    def test_simplify_incomplete_reports_notice(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["--no-color", "simplify", "<1,2"])
        assert result.exit_code == 0
        assert "E101" in result.output
        assert result.output.splitlines()[-1] == "<1, 2>"

    def test_simplify_from_stdin(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["--no-color", "simplify", "-"], input="<1,2>+<3,4>\n")
        assert result.exit_code == 0
        assert result.output.strip() == "<4, 6>"

    def test_check_clean_file(self, runner, tmp_project):
        result = runner.invoke(main, ["check", str(tmp_project / "exprs.vx")])
        assert result.exit_code == 0
        assert "checked 2 expression(s)" in result.output

    def test_check_reports_notices(self, runner, tmp_path):
        path = tmp_path / "bad.vx"
        path.write_text("1+2\n<1,\n")
        with runner.isolated_filesystem(temp_dir=tmp_path):
            result = runner.invoke(main, ["--no-color", "check", str(path)])
        assert result.exit_code == 1
        assert f"{path}:2" in result.output
        assert "E101" in result.output

    def test_check_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["check", str(tmp_path / "nope.vx")])
        assert result.exit_code != 0

    def test_lsp_help(self, runner):
        result = runner.invoke(main, ["lsp", "--help"])
        assert result.exit_code == 0

    def test_config_placeholder_and_precision(self, runner, tmp_project, monkeypatch):
        monkeypatch.chdir(tmp_project)
        result = runner.invoke(main, ["simplify", "<0.123+0, >"])
        assert result.exit_code == 0
        assert result.output.strip() == "<0.12, ?>"

    def test_invalid_config(self, runner, tmp_path):
        with runner.isolated_filesystem(temp_dir=tmp_path):
            Path("vexpr.toml").write_text("[display\n")
            result = runner.invoke(main, ["simplify", "1"])
        assert result.exit_code == 1
        assert "invalid vexpr.toml" in result.output


# --- Config tests ---


class TestConfig:
    def test_load_config(self, tmp_project):
        config = load_config(tmp_project / "vexpr.toml")
        assert config.display.placeholder == "?"
        assert config.display.precision == 2
        assert config.diagnostics.color is False

    def test_load_config_defaults(self, tmp_path):
        toml = tmp_path / "vexpr.toml"
        toml.write_text("[display]\n")
        config = load_config(toml)
        assert config.display.placeholder == "□"
        assert config.display.precision == 12
        assert config.diagnostics.color is True

    def test_find_config(self, tmp_project):
        sub = tmp_project / "nested"
        sub.mkdir()
        assert find_config(sub) == tmp_project / "vexpr.toml"

    def test_find_config_from_file(self, tmp_project):
        assert find_config(tmp_project / "exprs.vx") == tmp_project / "vexpr.toml"

    def test_find_config_not_found(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        with pytest.raises(FileNotFoundError, match="No vexpr.toml found"):
            find_config(empty)

    def test_discover_config_defaults(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        assert discover_config(empty) == VexprConfig()


# --- Error rendering tests ---


class TestDiagnostics:
    def test_str_form(self):
        diag = Diagnostic(UNCLOSED_VECTOR, 'Unclosed vector; missing ">"', Span(4, 4))
        assert str(diag) == 'Unclosed vector; missing ">" at 4'

    def test_render_plain(self):
        diag = Diagnostic(
            UNCLOSED_VECTOR,
            'Unclosed vector; missing ">"',
            Span(4, 4),
            notes=("vector opened here",),
        )
        output = DiagnosticRenderer(color=False).render(diag, SourceText("<1,2"))
        assert output.splitlines() == [
            'E101: Unclosed vector; missing ">"',
            "  --> 1:5",
            "       |",
            "     1 | <1,2",
            "       |     ^",
            "  = note: vector opened here",
        ]

    def test_render_wide_span(self):
        diag = Diagnostic("E104", "Unexpected trailing input", Span(2, 5))
        output = DiagnosticRenderer(color=False).render(diag, SourceText("1 2 3"))
        assert output.splitlines()[-1] == "       |   ^^^"

    def test_render_color(self):
        diag = Diagnostic("E103", "Unexpected ')'", Span(0, 1))
        output = DiagnosticRenderer(color=True).render(diag, SourceText(")"))
        assert "\033[" in output
        assert "E103" in output


# --- Highlighting tests ---


class TestHighlight:
    def _tokens(self, text):
        return [(tok, value) for tok, value in VexprLexer().get_tokens(text) if value.strip()]

    def test_expression(self):
        assert self._tokens("2.5*x") == [
            (Number.Float, "2.5"),
            (Operator, "*"),
            (Name.Variable, "x"),
        ]

    def test_placeholder_glyph(self):
        assert (Name.Builtin, "□") in self._tokens("<1, □>")

    def test_unknown_character(self):
        assert (Error, "$") in self._tokens("1 $ 2")
