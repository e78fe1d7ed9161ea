"""Maximal-munch scanner: converts source text into tokens and lexical errors."""

from __future__ import annotations

from dataclasses import dataclass

from lexdfa.errors import LexicalError
from lexdfa.tokens import (
    KEYWORDS,
    MULTI_CHAR_OPERATORS,
    Token,
    TokenType,
    is_digit,
    is_ident_part,
    is_letter,
    is_operator_char,
    is_punctuation,
    is_quote,
    is_whitespace,
)


@dataclass(frozen=True, slots=True)
class LexicalAnalysisResult:
    """Tokens and errors from one analysis run."""

    tokens: list[Token]
    errors: list[LexicalError]

    @property
    def success(self) -> bool:
        return not self.errors


class _Scanner:
    """Cursor and output lists for a single pass over one source string."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []
        self._errors: list[LexicalError] = []

    def run(self) -> LexicalAnalysisResult:
        while self._pos < len(self._source):
            self._scan_token()
        return LexicalAnalysisResult(self._tokens, self._errors)

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, lexeme: str, line: int, column: int) -> None:
        self._tokens.append(Token(len(self._tokens), lexeme, tt, line, column))

    def _error(self, message: str, lexeme: str | None, line: int, column: int) -> None:
        self._errors.append(LexicalError(message, lexeme, line, column))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        line, column = self._line, self._col
        ch = self._peek()

        if is_whitespace(ch):
            self._scan_whitespace(line, column)
            return

        if ch == "/" and self._peek(1) == "/":
            self._scan_comment(line, column)
            return

        if is_quote(ch):
            self._scan_string(line, column)
            return

        if is_digit(ch):
            self._scan_number(line, column)
            return

        if is_letter(ch):
            self._scan_identifier(line, column)
            return

        if is_operator_char(ch):
            self._scan_operator(line, column)
            return

        if is_punctuation(ch):
            self._advance()
            self._emit(TokenType.PUNCTUATION, ch, line, column)
            return

        # Anything else is reported and skipped; no token is emitted
        self._advance()
        self._error(f"Invalid character: '{ch}'", ch, line, column)

    # ------------------------------------------------------------------
    # Token categories
    # ------------------------------------------------------------------

    def _scan_whitespace(self, line: int, column: int) -> None:
        chars = []
        while not self._at_end() and is_whitespace(self._peek()):
            chars.append(self._advance())
        self._emit(TokenType.WHITESPACE, "".join(chars), line, column)

    def _scan_comment(self, line: int, column: int) -> None:
        chars = [self._advance(), self._advance()]  # //
        while not self._at_end() and self._peek() != "\n":
            chars.append(self._advance())
        self._emit(TokenType.COMMENT, "".join(chars), line, column)

    def _scan_string(self, line: int, column: int) -> None:
        quote = self._advance()
        chars = [quote]
        while not self._at_end():
            ch = self._advance()
            chars.append(ch)
            if ch == quote:
                self._emit(TokenType.STRING, "".join(chars), line, column)
                return
            if ch == "\\" and not self._at_end():
                # Escapes are kept verbatim, never interpreted
                chars.append(self._advance())

        text = "".join(chars)
        self._error("Unterminated string literal", text, line, column)
        self._emit(TokenType.ERROR, text, line, column)

    def _scan_number(self, line: int, column: int) -> None:
        chars = []
        tt = TokenType.NUMBER
        while not self._at_end() and is_digit(self._peek()):
            chars.append(self._advance())

        # A trailing '.' without a digit after it is left for punctuation
        if self._peek() == "." and is_digit(self._peek(1)):
            tt = TokenType.FLOAT
            chars.append(self._advance())
            while not self._at_end() and is_digit(self._peek()):
                chars.append(self._advance())

        self._emit(tt, "".join(chars), line, column)

    def _scan_identifier(self, line: int, column: int) -> None:
        chars = []
        while not self._at_end() and is_ident_part(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        tt = TokenType.KEYWORD if text in KEYWORDS else TokenType.IDENTIFIER
        self._emit(tt, text, line, column)

    def _scan_operator(self, line: int, column: int) -> None:
        text = self._advance()
        if not self._at_end() and text + self._peek() in MULTI_CHAR_OPERATORS:
            text += self._advance()
            if not self._at_end() and text + self._peek() in MULTI_CHAR_OPERATORS:
                text += self._advance()
        self._emit(TokenType.OPERATOR, text, line, column)


class LexicalAnalyzer:
    """Tokenize source text into Token objects and LexicalError records.

    The analyzer holds no per-call state, so one instance may be shared
    freely, including across threads.
    """

    def analyze(self, source: str) -> LexicalAnalysisResult:
        """Tokenize the full source; errors are collected, never raised."""
        return _Scanner(source).run()


def analyze_code(source: str) -> LexicalAnalysisResult:
    """Convenience function: analyze source text and return the result."""
    return LexicalAnalyzer().analyze(source)
