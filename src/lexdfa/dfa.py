"""Declarative DFA describing the token grammar.

The model is pure data: states, guarded transitions, and lookups over them.
It performs no scanning itself. Each transition is guarded by a CharClass,
a named predicate built from the classifiers in ``lexdfa.tokens``.
Predicates see the whole input and return how many characters they
consume (0 for no match), so lookahead guards such as the ``//`` comment
start or a ``.`` followed by a digit sit in the same table as the
single-character classes.

Transitions out of a state never overlap, with one deliberate exception:
from START, ``//`` matches both the comment-start guard and the operator
guard. Consumers resolve it by preferring the guard that consumes more.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from lexdfa.errors import DFAModelError
from lexdfa.tokens import (
    TokenType,
    is_digit,
    is_ident_part,
    is_letter,
    is_operator_char,
    is_other,
    is_punctuation,
    is_whitespace,
)


class StateId(Enum):
    START = "START"
    IN_IDENTIFIER = "IN_IDENTIFIER"
    IN_NUMBER = "IN_NUMBER"
    IN_FLOAT = "IN_FLOAT"
    IN_STRING_DOUBLE = "IN_STRING_DOUBLE"
    IN_STRING_SINGLE = "IN_STRING_SINGLE"
    STRING_ESCAPE_DOUBLE = "STRING_ESCAPE_DOUBLE"
    STRING_ESCAPE_SINGLE = "STRING_ESCAPE_SINGLE"
    STRING_END = "STRING_END"
    IN_OPERATOR = "IN_OPERATOR"
    IN_COMMENT = "IN_COMMENT"
    WHITESPACE = "WHITESPACE"
    PUNCTUATION = "PUNCTUATION"
    ERROR = "ERROR"


class StateKind(Enum):
    START = "start"
    NORMAL = "normal"
    ACCEPT = "accept"
    ERROR = "error"


class CharClass(Enum):
    """Transition guards; the value is the label shown for the edge."""

    LETTER = "[a-zA-Z_]"
    DIGIT = "[0-9]"
    IDENT_PART = "[a-zA-Z0-9_]"
    DOUBLE_QUOTE = '"'
    SINGLE_QUOTE = "'"
    BACKSLASH = "\\"
    STRING_DOUBLE_BODY = '[^"\\\\]'
    STRING_SINGLE_BODY = "[^'\\\\]"
    ANY = "."
    COMMENT_START = "//"
    OPERATOR = "[+\\-*/%=<>!&|^~]"
    OPERATOR_CONTINUE = "[+\\-*/%=<>!&|^~](?!/)"
    COMMENT_BODY = "[^\\n]"
    WHITESPACE = "\\s"
    PUNCTUATION = "[(){}\\[\\];,.:?]"
    DECIMAL_POINT = "\\.(?=[0-9])"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value

    def match(self, text: str, index: int) -> int:
        """Return how many characters of text[index:] this guard consumes."""
        if index >= len(text):
            return 0
        return _MATCHERS[self](text, index)


def _single(pred: Callable[[str], bool]) -> Callable[[str, int], int]:
    return lambda text, i: 1 if pred(text[i]) else 0


def _starts_comment(text: str, i: int) -> bool:
    return text.startswith("//", i)


_MATCHERS: dict[CharClass, Callable[[str, int], int]] = {
    CharClass.LETTER: _single(is_letter),
    CharClass.DIGIT: _single(is_digit),
    CharClass.IDENT_PART: _single(is_ident_part),
    CharClass.DOUBLE_QUOTE: _single(lambda ch: ch == '"'),
    CharClass.SINGLE_QUOTE: _single(lambda ch: ch == "'"),
    CharClass.BACKSLASH: _single(lambda ch: ch == "\\"),
    CharClass.STRING_DOUBLE_BODY: _single(lambda ch: ch not in '"\\'),
    CharClass.STRING_SINGLE_BODY: _single(lambda ch: ch not in "'\\"),
    CharClass.ANY: lambda text, i: 1,
    CharClass.COMMENT_START: lambda text, i: 2 if _starts_comment(text, i) else 0,
    CharClass.OPERATOR: _single(is_operator_char),
    CharClass.OPERATOR_CONTINUE: lambda text, i: (
        1 if is_operator_char(text[i]) and not _starts_comment(text, i) else 0
    ),
    CharClass.COMMENT_BODY: _single(lambda ch: ch != "\n"),
    CharClass.WHITESPACE: _single(is_whitespace),
    CharClass.PUNCTUATION: _single(is_punctuation),
    CharClass.DECIMAL_POINT: lambda text, i: (
        1 if text[i] == "." and i + 1 < len(text) and is_digit(text[i + 1]) else 0
    ),
    CharClass.OTHER: _single(is_other),
}


@dataclass(frozen=True, slots=True)
class State:
    """A node of the DFA."""

    id: StateId
    kind: StateKind
    label: str
    short_label: str
    description: str
    regex: str
    token_type: TokenType | None = None


@dataclass(frozen=True, slots=True)
class Transition:
    """A directed edge guarded by a character class."""

    id: str
    source: StateId
    target: StateId
    input: CharClass
    description: str

    @property
    def self_loop(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class DFAModel:
    """Immutable DFA: states, transitions, start state and accepting set."""

    states: tuple[State, ...]
    transitions: tuple[Transition, ...]
    start_state_id: StateId
    accepting_state_ids: frozenset[StateId]

    def __post_init__(self) -> None:
        by_id = {s.id: s for s in self.states}
        if len(by_id) != len(self.states):
            raise DFAModelError("duplicate state id")

        starts = [s.id for s in self.states if s.kind == StateKind.START]
        if starts != [self.start_state_id]:
            raise DFAModelError(f"expected exactly one start state {self.start_state_id.value}")

        errors = [s.id for s in self.states if s.kind == StateKind.ERROR]
        if len(errors) != 1:
            raise DFAModelError(f"expected exactly one error state, got {len(errors)}")

        accepting = {s.id for s in self.states if s.kind == StateKind.ACCEPT}
        if accepting != self.accepting_state_ids:
            raise DFAModelError("accepting set does not match accept-kind states")
        for s in self.states:
            if s.kind == StateKind.ACCEPT and s.token_type is None:
                raise DFAModelError(f"accepting state {s.id.value} emits no token type")

        if len({t.id for t in self.transitions}) != len(self.transitions):
            raise DFAModelError("duplicate transition id")
        for t in self.transitions:
            if t.source not in by_id or t.target not in by_id:
                raise DFAModelError(f"transition {t.id} references an unknown state")

        # Lookup tables; object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "_by_id", by_id)
        object.__setattr__(self, "_error_id", errors[0])

    @property
    def error_state_id(self) -> StateId:
        return self._error_id  # type: ignore[attr-defined]

    def get_state(self, state_id: StateId) -> State | None:
        return self._by_id.get(state_id)  # type: ignore[attr-defined]

    def transitions_from(self, state_id: StateId) -> list[Transition]:
        return [t for t in self.transitions if t.source == state_id]

    def transitions_to(self, state_id: StateId) -> list[Transition]:
        return [t for t in self.transitions if t.target == state_id]

    def find_transition(
        self,
        source: StateId,
        target: StateId,
        input: CharClass | str | None = None,
    ) -> Transition | None:
        """Find the edge source -> target, optionally by guard or guard label."""
        for t in self.transitions:
            if t.source != source or t.target != target:
                continue
            if input is None or t.input == input or t.input.label == input:
                return t
        return None

    def is_accepting(self, state_id: StateId) -> bool:
        return state_id in self.accepting_state_ids

    def is_start(self, state_id: StateId) -> bool:
        return state_id == self.start_state_id


def _state(
    sid: StateId,
    kind: StateKind,
    short_label: str,
    description: str,
    regex: str,
    token_type: TokenType | None = None,
) -> State:
    return State(sid, kind, sid.value, short_label, description, regex, token_type)


def _edge(
    source: StateId,
    target: StateId,
    guard: CharClass,
    description: str,
    edge_id: str | None = None,
) -> Transition:
    if edge_id is None:
        edge_id = f"{source.value.lower()}-{guard.name.lower()}"
    return Transition(edge_id, source, target, guard, description)


def create_lexer_dfa() -> DFAModel:
    """Build the DFA for the token grammar."""
    S = StateId
    K = StateKind
    C = CharClass

    states = (
        _state(S.START, K.START, "q0", "Initial state; the next character picks the token type", "ε"),
        _state(
            S.IN_IDENTIFIER,
            K.ACCEPT,
            "q1",
            "Identifier or keyword; reserved words are told apart on emission",
            "[a-zA-Z_][a-zA-Z0-9_]*",
            TokenType.IDENTIFIER,
        ),
        _state(S.IN_NUMBER, K.ACCEPT, "q2", "Integer", "[0-9]+", TokenType.NUMBER),
        _state(S.IN_FLOAT, K.ACCEPT, "q3", "Float with fractional part", "[0-9]+\\.[0-9]+", TokenType.FLOAT),
        _state(S.IN_STRING_DOUBLE, K.NORMAL, "q4", "Inside a double-quoted string", '"([^"\\\\]|\\\\.)*'),
        _state(S.IN_STRING_SINGLE, K.NORMAL, "q5", "Inside a single-quoted string", "'([^'\\\\]|\\\\.)*"),
        _state(S.STRING_ESCAPE_DOUBLE, K.NORMAL, "q6", "After a backslash in a double-quoted string", '"...\\\\'),
        _state(S.STRING_ESCAPE_SINGLE, K.NORMAL, "q7", "After a backslash in a single-quoted string", "'...\\\\"),
        _state(
            S.STRING_END,
            K.ACCEPT,
            "q8",
            "Closing delimiter read; string literal complete",
            "([\"'])([^\\\\]|\\\\.)*?\\1",
            TokenType.STRING,
        ),
        _state(S.IN_OPERATOR, K.ACCEPT, "q9", "Operator characters", "[+\\-*/%=<>!&|^~]+", TokenType.OPERATOR),
        _state(S.IN_COMMENT, K.ACCEPT, "q10", "Line comment up to the newline", "//[^\\n]*", TokenType.COMMENT),
        _state(S.WHITESPACE, K.ACCEPT, "q11", "Spaces, tabs and newlines", "\\s+", TokenType.WHITESPACE),
        _state(
            S.PUNCTUATION,
            K.ACCEPT,
            "q12",
            "Single punctuation character",
            "[(){}\\[\\];,.:?]",
            TokenType.PUNCTUATION,
        ),
        _state(S.ERROR, K.ERROR, "qe", "Invalid character", "[^a-zA-Z0-9_\\s+\\-*/%=<>!&|^~\"'(){}\\[\\];,.:?]"),
    )

    transitions = (
        # From START
        _edge(S.START, S.IN_IDENTIFIER, C.LETTER, "Letter or underscore starts an identifier"),
        _edge(S.START, S.IN_NUMBER, C.DIGIT, "Digit starts a number"),
        _edge(S.START, S.IN_STRING_DOUBLE, C.DOUBLE_QUOTE, "Double quote opens a string"),
        _edge(S.START, S.IN_STRING_SINGLE, C.SINGLE_QUOTE, "Single quote opens a string"),
        _edge(S.START, S.IN_COMMENT, C.COMMENT_START, "Double slash starts a comment"),
        _edge(S.START, S.IN_OPERATOR, C.OPERATOR, "Operator character"),
        _edge(S.START, S.WHITESPACE, C.WHITESPACE, "Whitespace character"),
        _edge(S.START, S.PUNCTUATION, C.PUNCTUATION, "Punctuation character"),
        _edge(S.START, S.ERROR, C.OTHER, "Character no token can start with"),
        # Self-loops
        _edge(S.IN_IDENTIFIER, S.IN_IDENTIFIER, C.IDENT_PART, "Continue identifier"),
        _edge(S.IN_NUMBER, S.IN_NUMBER, C.DIGIT, "Continue integer digits"),
        _edge(S.IN_FLOAT, S.IN_FLOAT, C.DIGIT, "Continue fractional digits"),
        _edge(S.IN_STRING_DOUBLE, S.IN_STRING_DOUBLE, C.STRING_DOUBLE_BODY, "Continue string content"),
        _edge(S.IN_STRING_SINGLE, S.IN_STRING_SINGLE, C.STRING_SINGLE_BODY, "Continue string content"),
        _edge(S.IN_OPERATOR, S.IN_OPERATOR, C.OPERATOR_CONTINUE, "Multi-character operator"),
        _edge(S.IN_COMMENT, S.IN_COMMENT, C.COMMENT_BODY, "Continue comment"),
        _edge(S.WHITESPACE, S.WHITESPACE, C.WHITESPACE, "Continue whitespace"),
        # Strings
        _edge(S.IN_STRING_DOUBLE, S.STRING_ESCAPE_DOUBLE, C.BACKSLASH, "Backslash escapes the next character"),
        _edge(S.STRING_ESCAPE_DOUBLE, S.IN_STRING_DOUBLE, C.ANY, "Escaped character kept verbatim"),
        _edge(S.IN_STRING_DOUBLE, S.STRING_END, C.DOUBLE_QUOTE, "Closing double quote"),
        _edge(S.IN_STRING_SINGLE, S.STRING_ESCAPE_SINGLE, C.BACKSLASH, "Backslash escapes the next character"),
        _edge(S.STRING_ESCAPE_SINGLE, S.IN_STRING_SINGLE, C.ANY, "Escaped character kept verbatim"),
        _edge(S.IN_STRING_SINGLE, S.STRING_END, C.SINGLE_QUOTE, "Closing single quote"),
        # Numbers
        _edge(S.IN_NUMBER, S.IN_FLOAT, C.DECIMAL_POINT, "Decimal point followed by a digit starts a float"),
    )

    return DFAModel(
        states=states,
        transitions=transitions,
        start_state_id=S.START,
        accepting_state_ids=frozenset(s.id for s in states if s.kind == K.ACCEPT),
    )


LEXER_DFA = create_lexer_dfa()
