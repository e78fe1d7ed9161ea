"""CSV/JSON export and summary statistics for token lists."""

from __future__ import annotations

import csv
import io
import json
from collections import Counter
from dataclasses import dataclass
from typing import Any

from lexdfa.tokens import Token

CSV_HEADERS = ["Index", "Lexeme", "Token Type", "Category", "Line", "Column"]


@dataclass(frozen=True, slots=True)
class TokenStatistics:
    total: int
    by_category: dict[str, int]
    by_type: dict[str, int]
    unique_lexemes: int
    lines_processed: int


def token_to_dict(token: Token) -> dict[str, Any]:
    return {
        "index": token.index,
        "lexeme": token.lexeme,
        "type": token.type.value,
        "category": token.category.value,
        "line": token.line,
        "column": token.column,
    }


def tokens_to_json(tokens: list[Token]) -> str:
    """Serialize tokens as a JSON array of objects, indented by two spaces."""
    return json.dumps([token_to_dict(t) for t in tokens], indent=2, ensure_ascii=False)


def tokens_to_csv(tokens: list[Token]) -> str:
    """Serialize tokens as CSV with a header row; lexemes are quoted as needed."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for t in tokens:
        writer.writerow([t.index, t.lexeme, t.type.value, t.category.value, t.line, t.column])
    return buf.getvalue()


def token_statistics(tokens: list[Token]) -> TokenStatistics:
    by_category = Counter(t.category.value for t in tokens)
    by_type = Counter(t.type.value for t in tokens)
    return TokenStatistics(
        total=len(tokens),
        by_category=dict(by_category),
        by_type=dict(by_type),
        unique_lexemes=len({t.lexeme for t in tokens}),
        lines_processed=max((t.line for t in tokens), default=0),
    )


def format_count(count: int, noun: str) -> str:
    """Return e.g. '1 token' or '3 tokens'."""
    return f"{count} {noun}{'' if count == 1 else 's'}"


def truncate_lexeme(lexeme: str, max_length: int = 50) -> str:
    """Shorten a lexeme for display, marking the cut with '...'."""
    if len(lexeme) <= max_length:
        return lexeme
    return lexeme[: max_length - 3] + "..."
