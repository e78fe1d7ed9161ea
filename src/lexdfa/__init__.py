"""DFA-based lexical analyzer with a step-by-step automaton simulator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lexdfa.lexer import LexicalAnalysisResult

__version__ = "0.1.0"


def analyze_code(source: str) -> LexicalAnalysisResult:
    """Tokenize source text, collecting lexical errors alongside the tokens."""
    from lexdfa.lexer import analyze_code as _analyze

    return _analyze(source)
