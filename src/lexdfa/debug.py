"""--debug / --trace dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from lexdfa.dfa import DFAModel
from lexdfa.export import truncate_lexeme
from lexdfa.lexer import LexicalAnalysisResult
from lexdfa.simulator import SimulationResult


def dump_tokens(result: LexicalAnalysisResult, *, file: TextIO = sys.stderr) -> None:
    """Print one line per token, then one line per error, to *file*."""
    for tok in result.tokens:
        file.write(
            f"{tok.index:>4} {tok.line}:{tok.column} "
            f"{tok.type.value:<12} {truncate_lexeme(tok.lexeme)!r}\n"
        )
    for err in result.errors:
        file.write(f"   ! {err.line}:{err.column} {err.message}\n")


def dump_trace(result: SimulationResult, *, file: TextIO = sys.stderr) -> None:
    """Print the simulator's step history to *file*."""
    for step in result.steps:
        if step.from_state is None:
            file.write(f"{step.step_number:>4} {step.state.value}\n")
            continue
        via = "START" if step.token_boundary else step.from_state.value
        line = f"{step.step_number:>4} {via} --{step.consumed!r}--> {step.state.value}"
        if step.is_accepting:
            line += " (accept)"
        if step.error:
            line += f"  ! {step.error}"
        file.write(line + "\n")
    verdict = "accepted" if result.accepted else "rejected"
    file.write(f"final state {result.final_state.value}: {verdict}\n")


def dump_dfa(model: DFAModel, *, file: TextIO = sys.stderr) -> None:
    """Print states and transitions of *model* to *file*."""
    file.write("States\n")
    for state in model.states:
        marker = ""
        if model.is_start(state.id):
            marker = " [start]"
        elif model.is_accepting(state.id):
            marker = f" [accept {state.token_type.value}]" if state.token_type else " [accept]"
        elif state.id == model.error_state_id:
            marker = " [error]"
        file.write(f"  {state.short_label:<4} {state.id.value}{marker}\n")
    file.write("Transitions\n")
    for t in model.transitions:
        loop = " (loop)" if t.self_loop else ""
        file.write(f"  {t.source.value} --{t.input.label}--> {t.target.value}{loop}\n")
