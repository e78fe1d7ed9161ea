"""Command-line interface for lexdfa."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lexdfa.export import format_count, token_statistics, tokens_to_csv, tokens_to_json, truncate_lexeme
from lexdfa.lexer import LexicalAnalysisResult, analyze_code
from lexdfa.tokens import Token, TokenType

FORMATS = ("table", "json", "csv")
STDIN = "-"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    format: str
    whitespace: bool
    stats: bool
    trace: bool
    watch: bool
    debug: bool

    @property
    def reads_stdin(self) -> bool:
        return str(self.input_file) == STDIN


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lexdfa",
        description="Tokenize source code with a DFA-based lexical analyzer",
    )
    p.add_argument("input", help="Input source file ('-' for stdin)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: table)",
    )
    p.add_argument(
        "--no-whitespace",
        dest="whitespace",
        action="store_false",
        default=None,
        help="Omit WHITESPACE tokens from the output",
    )
    p.add_argument(
        "--stats",
        action="store_true",
        default=None,
        help="Print token statistics to stderr",
    )
    p.add_argument(
        "--trace",
        action="store_true",
        default=None,
        help="Print the DFA simulation trace to stderr",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover lexdfa.toml)",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-analyze")
    p.add_argument("--debug", action="store_true", help="Dump the DFA model to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "lexdfa.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_bool(section: Any, key: str, default: bool) -> bool:
    if not isinstance(section, dict) or key not in section:
        return default
    value = section[key]
    if not isinstance(value, bool):
        raise argparse.ArgumentTypeError(f"config value '{key}' must be true or false")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = Path(".") if args.input == STDIN else input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, input_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    cfg_output = config.get("output")
    cfg_trace = config.get("trace")

    fmt = "table"
    if isinstance(cfg_output, dict) and "format" in cfg_output:
        fmt = cfg_output["format"]
        if fmt not in FORMATS:
            raise argparse.ArgumentTypeError(
                f"invalid output format in config: {fmt!r} (expected one of {', '.join(FORMATS)})"
            )
    if args.format is not None:
        fmt = args.format

    whitespace = _config_bool(cfg_output, "whitespace", True)
    if args.whitespace is not None:
        whitespace = args.whitespace

    stats = _config_bool(cfg_output, "stats", False)
    if args.stats is not None:
        stats = args.stats

    trace = _config_bool(cfg_trace, "enabled", False)
    if args.trace is not None:
        trace = args.trace

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        format=fmt,
        whitespace=whitespace,
        stats=stats,
        trace=trace,
        watch=args.watch,
        debug=args.debug,
    )


def render_table(tokens: list[Token]) -> str:
    """Render tokens as an aligned plain-text table."""
    rows = [("Index", "Lexeme", "Type", "Category", "Line", "Column")]
    for t in tokens:
        rows.append(
            (
                str(t.index),
                repr(truncate_lexeme(t.lexeme)),
                t.type.value,
                t.category.value,
                str(t.line),
                str(t.column),
            )
        )
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    lines = ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip() for row in rows]
    return "\n".join(lines) + "\n"


def render_output(result: LexicalAnalysisResult, options: CliOptions) -> str:
    tokens = result.tokens
    if not options.whitespace:
        tokens = [t for t in tokens if t.type != TokenType.WHITESPACE]

    if options.format == "json":
        return tokens_to_json(tokens) + "\n"
    if options.format == "csv":
        return tokens_to_csv(tokens)
    return render_table(tokens)


def read_source(options: CliOptions) -> str:
    if options.reads_stdin:
        return sys.stdin.read()
    return options.input_file.read_text(encoding="utf-8")


def analyze_file(options: CliOptions) -> tuple[str, LexicalAnalysisResult]:
    """Read the input, analyze it, and emit the requested stderr dumps."""
    from lexdfa.debug import dump_dfa, dump_trace
    from lexdfa.dfa import LEXER_DFA
    from lexdfa.simulator import simulate_input

    source = read_source(options)
    result = analyze_code(source)

    if options.debug:
        dump_dfa(LEXER_DFA, file=sys.stderr)
    if options.trace:
        dump_trace(simulate_input(source), file=sys.stderr)
    if options.stats:
        _print_stats(result)

    return source, result


def _print_stats(result: LexicalAnalysisResult) -> None:
    stats = token_statistics(result.tokens)
    print(
        f"{format_count(stats.total, 'token')}, "
        f"{format_count(len(result.errors), 'error')}, "
        f"{stats.unique_lexemes} unique lexemes, "
        f"{format_count(stats.lines_processed, 'line')}",
        file=sys.stderr,
    )
    for name, count in sorted(stats.by_category.items()):
        print(f"  {name}: {count}", file=sys.stderr)


def report_errors(source: str, result: LexicalAnalysisResult, filename: str) -> None:
    for err in result.errors:
        print(err.format(source, filename), file=sys.stderr)


def write_output(text: str, options: CliOptions) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def _display_name(options: CliOptions) -> str:
    return "<stdin>" if options.reads_stdin else str(options.input_file)


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-analyze on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    source, result = analyze_file(options)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
                else:
                    report_errors(source, result, _display_name(options))
                    write_output(render_output(result, options), options)
                    sys.stdout.flush()
                    print(
                        f"Analyzed {options.input_file}: "
                        f"{format_count(len(result.errors), 'error')}",
                        file=sys.stderr,
                    )
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        if options.reads_stdin:
            print("error: --watch needs an input file", file=sys.stderr)
            return 2
        watch_loop(options)
        return 0

    try:
        source, result = analyze_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    report_errors(source, result, _display_name(options))
    write_output(render_output(result, options), options)

    return 0 if result.success else 1
