"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"  # [0-9]+
    FLOAT = "FLOAT"  # [0-9]+\.[0-9]+
    STRING = "STRING"  # "..." or '...', delimiters included
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    COMMENT = "COMMENT"  # // to end of line
    WHITESPACE = "WHITESPACE"
    ERROR = "ERROR"  # unterminated string


class TokenCategory(Enum):
    KEYWORD = "Keyword"
    IDENTIFIER = "Identifier"
    LITERAL = "Literal"
    OPERATOR = "Operator"
    PUNCTUATION = "Punctuation"
    COMMENT = "Comment"
    WHITESPACE = "Whitespace"
    ERROR = "Error"


_CATEGORIES: dict[TokenType, TokenCategory] = {
    TokenType.KEYWORD: TokenCategory.KEYWORD,
    TokenType.IDENTIFIER: TokenCategory.IDENTIFIER,
    TokenType.NUMBER: TokenCategory.LITERAL,
    TokenType.FLOAT: TokenCategory.LITERAL,
    TokenType.STRING: TokenCategory.LITERAL,
    TokenType.OPERATOR: TokenCategory.OPERATOR,
    TokenType.PUNCTUATION: TokenCategory.PUNCTUATION,
    TokenType.COMMENT: TokenCategory.COMMENT,
    TokenType.WHITESPACE: TokenCategory.WHITESPACE,
    TokenType.ERROR: TokenCategory.ERROR,
}


def category_of(tt: TokenType) -> TokenCategory:
    """Return the coarse category a token type belongs to."""
    return _CATEGORIES[tt]


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token: exact source text plus 1-based start position."""

    index: int
    lexeme: str
    type: TokenType
    line: int
    column: int

    @property
    def category(self) -> TokenCategory:
        return _CATEGORIES[self.type]


KEYWORDS = frozenset(
    [
        "if",
        "else",
        "while",
        "for",
        "return",
        "function",
        "var",
        "let",
        "const",
        "int",
        "float",
        "string",
        "boolean",
        "true",
        "false",
        "null",
        "undefined",
        "class",
        "this",
        "new",
        "void",
        "break",
        "continue",
        "switch",
        "case",
        "default",
        "do",
        "try",
        "catch",
        "finally",
        "throw",
        "import",
        "export",
        "from",
        "as",
    ]
)

OPERATOR_CHARS = frozenset("+-*/%=<>!&|^~")

MULTI_CHAR_OPERATORS = frozenset(
    [
        "==",
        "!=",
        "<=",
        ">=",
        "&&",
        "||",
        "++",
        "--",
        "+=",
        "-=",
        "*=",
        "/=",
        "%=",
        "<<",
        ">>",
        "===",
        "!==",
    ]
)

PUNCTUATION_CHARS = frozenset("(){}[];,.:?")

_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_DIGITS = frozenset("0123456789")


def is_letter(ch: str) -> bool:
    """Return True if ch may start an identifier: [a-zA-Z_]."""
    return ch in _LETTERS


def is_digit(ch: str) -> bool:
    return ch in _DIGITS


def is_ident_part(ch: str) -> bool:
    """Return True if ch may continue an identifier: [a-zA-Z0-9_]."""
    return ch in _LETTERS or ch in _DIGITS


def is_whitespace(ch: str) -> bool:
    return ch.isspace()


def is_operator_char(ch: str) -> bool:
    return ch in OPERATOR_CHARS


def is_punctuation(ch: str) -> bool:
    return ch in PUNCTUATION_CHARS


def is_quote(ch: str) -> bool:
    return ch == '"' or ch == "'"


def is_other(ch: str) -> bool:
    """Return True if no token category can start with ch."""
    return not (
        is_whitespace(ch)
        or is_letter(ch)
        or is_digit(ch)
        or is_quote(ch)
        or is_operator_char(ch)
        or is_punctuation(ch)
    )
