"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from lexdfa.lexer import analyze_code
from lexdfa.tokens import Token, TokenType

SAMPLE_ARITHMETIC = """// Simple arithmetic program
function calculateSum(a, b) {
  var result = a + b;
  return result;
}

let x = 10;
let y = 20.5;
let sum = calculateSum(x, y);
"""

SAMPLE_CONTROL_FLOW = """// Conditional and loops
if (x > 10) {
  for (int i = 0; i < x; i++) {
    result += i * 2;
  }
} else {
  while (y >= 0) {
    y--;
  }
}
"""

SAMPLE_STRINGS = """// String and operators example
const name = "John Doe";
let age = 25;
let isActive = true;

if (age >= 18 && isActive) {
  var message = "Welcome, " + name;
}

// Multiple operators
let calc = (10 + 20) * 3 / 2 - 5;
let comparison = (x == y) || (x != z);
"""

SAMPLE_WITH_ERRORS = """// Code with errors
var num = 123abc;  // Invalid: number followed by letters
let str = "unclosed string
let invalid = @#$;  // Invalid characters
"""

SAMPLES = [SAMPLE_ARITHMETIC, SAMPLE_CONTROL_FLOW, SAMPLE_STRINGS, SAMPLE_WITH_ERRORS]


@pytest.fixture
def lex():
    """Return a helper that analyzes source and returns all tokens."""

    def _lex(source: str) -> list[Token]:
        return analyze_code(source).tokens

    return _lex


@pytest.fixture
def lex_significant():
    """Return a helper that analyzes source and drops WHITESPACE tokens."""

    def _lex(source: str) -> list[Token]:
        return [t for t in analyze_code(source).tokens if t.type != TokenType.WHITESPACE]

    return _lex


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_lexemes(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token lexemes match the expected list."""
    actual = [t.lexeme for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def find_tokens(tokens: list[Token], tt: TokenType) -> list[Token]:
    """Return all tokens of the given type."""
    return [t for t in tokens if t.type == tt]


def merge_runs(types: list[TokenType]) -> list[TokenType]:
    """Collapse adjacent equal token types into one entry."""
    merged: list[TokenType] = []
    for tt in types:
        if not merged or merged[-1] != tt:
            merged.append(tt)
    return merged
