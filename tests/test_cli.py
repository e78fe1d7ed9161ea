"""Tests for the CLI module: arg parsing, exit codes, output formats, end-to-end."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from lexdfa.cli import (
    CliOptions,
    analyze_file,
    build_parser,
    main,
    render_output,
    render_table,
)
from lexdfa.lexer import analyze_code


def _options(input_file: Path, **overrides) -> CliOptions:
    values = dict(
        input_file=input_file,
        output_file=None,
        format="table",
        whitespace=True,
        stats=False,
        trace=False,
        watch=False,
        debug=False,
    )
    values.update(overrides)
    return CliOptions(**values)


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["prog.js"])
        assert ns.input == "prog.js"
        assert ns.output is None
        assert ns.format is None
        assert ns.whitespace is None
        assert ns.stats is None
        assert ns.trace is None

    def test_output_and_format(self) -> None:
        ns = build_parser().parse_args(["prog.js", "-o", "out.json", "-f", "json"])
        assert ns.output == "out.json"
        assert ns.format == "json"

    def test_bad_format_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["prog.js", "-f", "xml"])

    def test_flags(self) -> None:
        ns = build_parser().parse_args(
            ["prog.js", "--no-whitespace", "--stats", "--trace", "--watch", "--debug"]
        )
        assert ns.whitespace is False
        assert ns.stats is True
        assert ns.trace is True
        assert ns.watch is True
        assert ns.debug is True


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "ok.js"
        src.write_text("var x = 5;\n")
        assert main([str(src)]) == 0
        assert capsys.readouterr().err == ""

    def test_lexical_errors_return_1(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "bad.js"
        src.write_text("var x = @;\n")
        assert main([str(src)]) == 1
        err = capsys.readouterr().err
        assert "error: Invalid character: '@'" in err
        assert f"{src}:1:9" in err

    def test_missing_file_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "missing.js")]) == 2
        assert capsys.readouterr().err.startswith("error:")

    def test_bad_config_returns_2(self, tmp_path: Path) -> None:
        (tmp_path / "lexdfa.toml").write_text('[output]\nformat = "xml"\n')
        src = tmp_path / "ok.js"
        src.write_text("x")
        assert main([str(src)]) == 2

    def test_watch_needs_file(self, capsys) -> None:
        assert main(["-", "--watch"]) == 2


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestOutput:
    def test_table_to_stdout(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "t.js"
        src.write_text("let a")
        assert main([str(src)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["Index", "Lexeme", "Type", "Category", "Line", "Column"]
        assert lines[1].split() == ["0", "'let'", "KEYWORD", "Keyword", "1", "1"]
        assert len(lines) == 4

    def test_json_to_file(self, tmp_path: Path) -> None:
        src = tmp_path / "t.js"
        src.write_text("a = 1;")
        out = tmp_path / "tokens.json"
        assert main([str(src), "-f", "json", "-o", str(out)]) == 0
        data = json.loads(out.read_text())
        assert [d["lexeme"] for d in data] == ["a", " ", "=", " ", "1", ";"]

    def test_csv_without_whitespace(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "t.js"
        src.write_text("a = 1;")
        assert main([str(src), "-f", "csv", "--no-whitespace"]) == 0
        rows = capsys.readouterr().out.splitlines()
        assert rows[0] == "Index,Lexeme,Token Type,Category,Line,Column"
        assert [r.split(",")[1] for r in rows[1:]] == ["a", "=", "1", ";"]

    def test_stdin(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("x @"))
        assert main(["-", "-f", "json"]) == 1
        captured = capsys.readouterr()
        assert "<stdin>:1:3" in captured.err
        assert json.loads(captured.out)[0]["lexeme"] == "x"

    def test_output_still_written_on_errors(self, tmp_path: Path) -> None:
        src = tmp_path / "t.js"
        src.write_text('s = "open')
        out = tmp_path / "out.json"
        assert main([str(src), "-f", "json", "-o", str(out)]) == 1
        data = json.loads(out.read_text())
        assert data[-1]["type"] == "ERROR"

    def test_render_table_escapes_newlines(self) -> None:
        text = render_table(analyze_code("a\nb").tokens)
        assert "'\\n'" in text

    def test_render_output_filters_whitespace(self, tmp_path: Path) -> None:
        result = analyze_code("a b")
        opts = _options(tmp_path / "x.js", format="json", whitespace=False)
        assert [d["lexeme"] for d in json.loads(render_output(result, opts))] == ["a", "b"]


# ---------------------------------------------------------------------------
# Diagnostics dumps
# ---------------------------------------------------------------------------


class TestDumps:
    def test_stats(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "t.js"
        src.write_text("a = 1;\nb")
        assert main([str(src), "--stats"]) == 0
        err = capsys.readouterr().err
        assert "8 tokens, 0 errors" in err
        assert "2 lines" in err
        assert "Identifier: 2" in err

    def test_trace(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "t.js"
        src.write_text("a1")
        assert main([str(src), "--trace"]) == 0
        err = capsys.readouterr().err
        assert "START --'a'--> IN_IDENTIFIER" in err
        assert "final state IN_IDENTIFIER: accepted" in err

    def test_debug_dumps_model(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "t.js"
        src.write_text("a")
        assert main([str(src), "--debug"]) == 0
        err = capsys.readouterr().err
        assert "States" in err
        assert "START --//--> IN_COMMENT" in err


class TestAnalyzeFile:
    def test_basic(self, tmp_path: Path) -> None:
        src = tmp_path / "simple.js"
        src.write_text("return 0;")
        source, result = analyze_file(_options(src))
        assert source == "return 0;"
        assert result.success
        assert result.tokens[0].lexeme == "return"
