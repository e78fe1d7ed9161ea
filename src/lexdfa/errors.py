"""Error records with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LexicalError:
    """A non-fatal scanning failure at a 1-based source position.

    ``lexeme`` is the offending text: the invalid character itself, or the
    partial literal consumed before input ran out.
    """

    message: str
    lexeme: str | None
    line: int
    column: int

    def format(self, source: str, filename: str = "<input>") -> str:
        lines = source.split("\n")
        line_idx = self.line - 1
        col = self.column

        # Lines split on "\n" only, as the scanner counts them
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\r")
        else:
            source_line = ""

        # Underline the lexeme, clipped to the end of its first line
        first_line = (self.lexeme or "").split("\n", 1)[0]
        underline_len = max(1, min(len(first_line), len(source_line) - col + 1))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class DFAModelError(ValueError):
    """Raised when a DFA model violates its structural invariants."""
