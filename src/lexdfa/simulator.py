"""Step-by-step DFA replay for tracing and teaching.

Each call to ``DFASimulator.step`` performs exactly one transition of the
model and records it. Unlike the scanner, the simulator never folds a run
of characters into one step; a token boundary shows up as a step that
leaves the previous state through START.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from lexdfa.dfa import LEXER_DFA, DFAModel, StateId, StateKind, Transition
from lexdfa.tokens import KEYWORDS, TokenType


@dataclass(frozen=True, slots=True)
class SimulationStep:
    """One recorded transition.

    ``input_index`` is the cursor after the step and ``current_char`` the
    character under it ("" at end of input). ``token_boundary`` is True
    when the step closed the previous token and restarted from START.
    """

    step_number: int
    from_state: StateId | None
    state: StateId
    input_index: int
    consumed: str
    current_char: str
    transition: Transition | None
    is_accepting: bool
    error: str | None
    token_start: int
    token_type: TokenType | None
    token_boundary: bool = False


@dataclass(frozen=True, slots=True)
class RecognizedToken:
    """A token closed by the simulator, with 0-based end-exclusive indices."""

    lexeme: str
    type: TokenType
    start_index: int
    end_index: int
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class SimulationResult:
    input: str
    steps: tuple[SimulationStep, ...]
    accepted: bool
    final_state: StateId
    errors: tuple[str, ...]
    tokens_found: tuple[RecognizedToken, ...]


class DFASimulator:
    """Replay a DFAModel over an input string one transition at a time."""

    def __init__(self, model: DFAModel = LEXER_DFA) -> None:
        self._model = model
        self._input = ""
        self._line_starts = [0]
        self._steps: list[SimulationStep] = []
        self._current_step_index = 0
        self._errors: list[str] = []
        self._tokens: list[RecognizedToken] = []

    @property
    def model(self) -> DFAModel:
        return self._model

    @property
    def input(self) -> str:
        return self._input

    def initialize(self, input: str) -> None:
        """Reset everything and record step 0 for *input*."""
        self._input = input
        self._line_starts = [0] + [i + 1 for i, ch in enumerate(input) if ch == "\n"]
        self.reset()
        self._record_initial_step()

    def reset(self) -> None:
        """Forget all steps, errors and tokens; keep the configured input."""
        self._steps = []
        self._current_step_index = 0
        self._errors = []
        self._tokens = []

    def step(self) -> bool:
        """Perform one transition. Returns True while input remains."""
        if not self._steps:
            self._record_initial_step()

        last = self._steps[-1]
        index = last.input_index
        if index >= len(self._input):
            return False

        state = last.state
        token_start = last.token_start
        boundary = False
        match = self._find_next(state, index)

        if match is None and state != self._model.start_state_id:
            # Current token cannot grow: close it and re-dispatch from START
            self._close_token(last)
            boundary = True
            token_start = index
            match = self._find_next(self._model.start_state_id, index)

        if match is None:
            ch = self._input[index]
            self._errors.append(f"Invalid character '{ch}' at position {index}")
            self._append(
                from_state=state,
                state=self._model.error_state_id,
                consumed=ch,
                transition=None,
                error=f"Cannot transition from {state.value} with '{ch}'",
                token_start=token_start,
                boundary=boundary,
            )
        else:
            transition, count = match
            consumed = self._input[index : index + count]
            error = None
            if transition.target == self._model.error_state_id:
                error = f"Invalid character: '{consumed}'"
                self._errors.append(f"Invalid character '{consumed}' at position {index}")
            self._append(
                from_state=state,
                state=transition.target,
                consumed=consumed,
                transition=transition,
                error=error,
                token_start=token_start,
                boundary=boundary,
            )

        latest = self._steps[-1]
        if latest.input_index >= len(self._input):
            self._close_token(latest)
            return False
        return True

    def run_all(self) -> SimulationResult:
        """Restart on the configured input and step until it is exhausted."""
        self.initialize(self._input)
        while self.step():
            pass
        return self.get_result()

    def get_result(self) -> SimulationResult:
        last = self._steps[-1] if self._steps else None
        final_state = last.state if last is not None else self._model.start_state_id
        return SimulationResult(
            input=self._input,
            steps=tuple(self._steps),
            accepted=last is not None and self._model.is_accepting(last.state),
            final_state=final_state,
            errors=tuple(self._errors),
            tokens_found=tuple(self._tokens),
        )

    def get_steps(self) -> tuple[SimulationStep, ...]:
        return tuple(self._steps)

    def get_current_step(self) -> SimulationStep | None:
        if not self._steps:
            return None
        return self._steps[self._current_step_index]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record_initial_step(self) -> None:
        start = self._model.start_state_id
        self._steps.append(
            SimulationStep(
                step_number=0,
                from_state=None,
                state=start,
                input_index=0,
                consumed="",
                current_char=self._input[:1],
                transition=None,
                is_accepting=self._model.is_accepting(start),
                error=None,
                token_start=0,
                token_type=None,
            )
        )
        self._current_step_index = 0

    def _find_next(self, state: StateId, index: int) -> tuple[Transition, int] | None:
        """Pick the matching transition that consumes the most characters."""
        best: tuple[Transition, int] | None = None
        for t in self._model.transitions_from(state):
            count = t.input.match(self._input, index)
            if count and (best is None or count > best[1]):
                best = (t, count)
        return best

    def _append(
        self,
        *,
        from_state: StateId,
        state: StateId,
        consumed: str,
        transition: Transition | None,
        error: str | None,
        token_start: int,
        boundary: bool,
    ) -> None:
        new_index = self._steps[-1].input_index + len(consumed)
        target = self._model.get_state(state)
        self._steps.append(
            SimulationStep(
                step_number=len(self._steps),
                from_state=from_state,
                state=state,
                input_index=new_index,
                consumed=consumed,
                current_char=self._input[new_index : new_index + 1],
                transition=transition,
                is_accepting=self._model.is_accepting(state),
                error=error,
                token_start=token_start,
                token_type=target.token_type if target is not None else None,
                token_boundary=boundary,
            )
        )
        self._current_step_index = len(self._steps) - 1

    def _close_token(self, step: SimulationStep) -> None:
        """Record the token that ends at *step*, if its state yields one."""
        start, end = step.token_start, step.input_index
        if end <= start:
            return
        state = self._model.get_state(step.state)
        if state is None:
            return

        lexeme = self._input[start:end]
        if state.kind == StateKind.ACCEPT and state.token_type is not None:
            tt = state.token_type
            if tt == TokenType.IDENTIFIER and lexeme in KEYWORDS:
                tt = TokenType.KEYWORD
        elif state.kind == StateKind.NORMAL:
            # Only string states are non-accepting, so input ran out mid-literal
            tt = TokenType.ERROR
            self._errors.append(f"Unterminated string literal at position {start}")
        else:
            return

        line, column = self._position_at(start)
        self._tokens.append(RecognizedToken(lexeme, tt, start, end, line, column))

    def _position_at(self, index: int) -> tuple[int, int]:
        line_idx = bisect_right(self._line_starts, index) - 1
        return line_idx + 1, index - self._line_starts[line_idx] + 1


def simulate_input(input: str, model: DFAModel = LEXER_DFA) -> SimulationResult:
    """Convenience function: run the simulator over *input* to completion."""
    simulator = DFASimulator(model)
    simulator.initialize(input)
    return simulator.run_all()
