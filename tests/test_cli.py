"""
Tests for carbon-parser - Command-Line Interface
================================================

These tests run the click commands in-process with CliRunner and check
output and exit codes.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from carbon_parser import __version__
from carbon_parser.cli.errors import ExitCode
from carbon_parser.cli.main import main


HELLO = """\
// Entry point
fn main() -> i32 {
    return 0;
}
"""


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    monkeypatch.delenv("CARBON_PARSER_MAX_DEPTH", raising=False)
    monkeypatch.delenv("CARBON_PARSER_FILENAME", raising=False)
    return CliRunner()


@pytest.fixture
def hello_file(tmp_path) -> Path:
    path = tmp_path / "hello.carbon"
    path.write_text(HELLO, encoding="utf-8")
    return path


# =============================================================================
# Parse Command
# =============================================================================

class TestParseCommand:
    """Tests for `carbon-parser parse`."""

    def test_success(self, runner, hello_file):
        result = runner.invoke(main, ["parse", str(hello_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert f"Parsing file: {hello_file}" in result.output
        assert f"Size: {len(HELLO.encode('utf-8'))} bytes" in result.output
        assert "Parsing successful!" in result.output
        assert "Parse tree:" not in result.output

    def test_size_counts_bytes(self, runner, tmp_path):
        path = tmp_path / "utf8.carbon"
        path.write_text("// héllo\n", encoding="utf-8")
        result = runner.invoke(main, ["parse", str(path)])
        assert result.exit_code == 0
        assert "Size: 10 bytes" in result.output

    def test_verbose_prints_tree(self, runner, hello_file):
        result = runner.invoke(main, ["parse", "--verbose", str(hello_file)])
        assert result.exit_code == 0
        assert "Parse tree:" in result.output
        assert "=" * 60 in result.output
        assert "function_decl: fn main() -> i32 { return 0; }" in result.output
        assert "\n    return_stmt: return 0;" in result.output

    def test_rule_option(self, runner, tmp_path):
        path = tmp_path / "expr.txt"
        path.write_text("1 + 2 * 3\n", encoding="utf-8")
        result = runner.invoke(main, ["parse", "-v", "--rule", "expression", str(path)])
        assert result.exit_code == 0
        assert "  additive: 1 + 2 * 3" in result.output

    def test_verbose_long_operator_chain(self, runner, tmp_path):
        """A 2000-term sum prints its whole tree."""
        path = tmp_path / "chain.txt"
        path.write_text(" + ".join(["1"] * 2000) + "\n", encoding="utf-8")
        result = runner.invoke(main, ["parse", "-v", "-r", "expression", str(path)])
        assert result.exit_code == 0
        assert result.exception is None
        assert "Parsing successful!" in result.output
        assert "  additive: 1 + 1 + 1" in result.output
        assert result.output.count("integer: 1") == 2000

    def test_invalid_rule_choice(self, runner, hello_file):
        result = runner.invoke(main, ["parse", "--rule", "block", str(hello_file)])
        assert result.exit_code == 2

    def test_syntax_error(self, runner, tmp_path):
        path = tmp_path / "broken.carbon"
        path.write_text("fn main( { }\n", encoding="utf-8")
        result = runner.invoke(main, ["parse", str(path)])
        assert result.exit_code == ExitCode.SYNTAX_ERROR
        assert "Parse error:" in result.output
        assert f"{path}:1:10: error: expected identifier or ')', found '{{'" in result.output
        assert "Parsing successful!" not in result.output

    def test_max_depth_option(self, runner, tmp_path):
        path = tmp_path / "deep.txt"
        path.write_text("((((1))))", encoding="utf-8")
        result = runner.invoke(main, ["parse", "-r", "expression", "--max-depth", "2", str(path)])
        assert result.exit_code == ExitCode.SYNTAX_ERROR
        assert "maximum depth of 2" in result.output

    def test_max_depth_from_env(self, runner, tmp_path, monkeypatch):
        path = tmp_path / "deep.txt"
        path.write_text("((1))", encoding="utf-8")
        monkeypatch.setenv("CARBON_PARSER_MAX_DEPTH", "1")
        result = runner.invoke(main, ["parse", "-r", "expression", str(path)])
        assert result.exit_code == ExitCode.SYNTAX_ERROR

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["parse", str(tmp_path / "missing.carbon")])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Error:" in result.output

    def test_directory_argument(self, runner, tmp_path):
        result = runner.invoke(main, ["parse", str(tmp_path)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_invalid_utf8(self, runner, tmp_path):
        path = tmp_path / "latin1.carbon"
        path.write_bytes(b"// caf\xe9\n")
        result = runner.invoke(main, ["parse", str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "not valid UTF-8" in result.output

    def test_debug_flag(self, runner, hello_file):
        result = runner.invoke(main, ["parse", "--debug", str(hello_file)])
        assert result.exit_code == 0
        assert "Parsing successful!" in result.output


# =============================================================================
# Tokens Command
# =============================================================================

class TestTokensCommand:
    """Tests for `carbon-parser tokens`."""

    def test_tokens(self, runner, tmp_path):
        path = tmp_path / "v.carbon"
        path.write_text("var x: i32;", encoding="utf-8")
        result = runner.invoke(main, ["tokens", str(path)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 5
        assert "KEYWORD" in lines[0] and "'var'" in lines[0]
        assert "0..3" in lines[0]
        assert "WHITESPACE" not in result.output

    def test_tokens_with_trivia(self, runner, hello_file):
        result = runner.invoke(main, ["tokens", "--trivia", str(hello_file)])
        assert result.exit_code == 0
        assert "COMMENT" in result.output
        assert "WHITESPACE" in result.output

    def test_tokens_show_errors(self, runner, tmp_path):
        path = tmp_path / "bad.carbon"
        path.write_text("x @ y", encoding="utf-8")
        result = runner.invoke(main, ["tokens", str(path)])
        assert result.exit_code == 0
        assert "ERROR" in result.output

    def test_tokens_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["tokens", str(tmp_path / "none.carbon")])
        assert result.exit_code == ExitCode.INVALID_ARGS


# =============================================================================
# Authors and Version
# =============================================================================

class TestInfoCommands:
    """Tests for `authors` and `--version`."""

    def test_authors(self, runner):
        result = runner.invoke(main, ["authors"])
        assert result.exit_code == 0
        assert f"Carbon Parser v{__version__}" in result.output
        assert "Author:" in result.output
        assert "Carbon programming language" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("parse", "tokens", "authors"):
            assert command in result.output
