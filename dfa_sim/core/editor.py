"""
Edit operations for the DFA simulator.

Every edit is `(DFA, Edit) -> DFA`: the input snapshot is never touched,
a candidate is built, validated, and returned only if it is clean.
"""

from typing import Annotated, Iterable, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
import structlog

from .models import DFA, Identifier, Transition
from .schemas import Violation
from .validator import validate_dfa

log = structlog.get_logger()


class EditError(ValueError):
    """Raised when an edit is blocked. Carries the violation when there is one."""

    def __init__(self, message: str, violation: Optional[Violation] = None):
        super().__init__(message)
        self.violation = violation


class AddState(BaseModel):
    op: Literal["add_state"] = "add_state"
    state: Identifier


class RemoveState(BaseModel):
    op: Literal["remove_state"] = "remove_state"
    state: Identifier


class AddSymbol(BaseModel):
    op: Literal["add_symbol"] = "add_symbol"
    symbol: Identifier


class RemoveSymbol(BaseModel):
    op: Literal["remove_symbol"] = "remove_symbol"
    symbol: Identifier


class AddTransition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    op: Literal["add_transition"] = "add_transition"
    from_state: Identifier = Field(..., alias="from")
    symbol: Identifier
    to_state: Identifier = Field(..., alias="to")


class RemoveTransition(BaseModel):
    op: Literal["remove_transition"] = "remove_transition"
    index: int


class ToggleAccepting(BaseModel):
    op: Literal["toggle_accepting"] = "toggle_accepting"
    state: Identifier


Edit = Annotated[
    Union[AddState, RemoveState, AddSymbol, RemoveSymbol, AddTransition, RemoveTransition, ToggleAccepting],
    Field(discriminator="op"),
]


def _candidate(dfa: DFA, edit) -> DFA:
    if isinstance(edit, AddState):
        if edit.state in dfa.states:
            raise EditError(f"State '{edit.state}' already exists")
        return dfa.model_copy(update={"states": dfa.states + (edit.state,)})

    if isinstance(edit, RemoveState):
        if edit.state == dfa.initial_state:
            raise EditError("Cannot remove the initial state")
        return dfa.model_copy(update={
            "states": tuple(s for s in dfa.states if s != edit.state),
            "accepting_states": tuple(s for s in dfa.accepting_states if s != edit.state),
            "transitions": tuple(
                t for t in dfa.transitions
                if t.from_state != edit.state and t.to_state != edit.state
            ),
        })

    if isinstance(edit, AddSymbol):
        if edit.symbol in dfa.alphabet:
            raise EditError(f"Symbol '{edit.symbol}' already exists in the alphabet")
        return dfa.model_copy(update={"alphabet": dfa.alphabet + (edit.symbol,)})

    if isinstance(edit, RemoveSymbol):
        return dfa.model_copy(update={
            "alphabet": tuple(s for s in dfa.alphabet if s != edit.symbol),
            "transitions": tuple(t for t in dfa.transitions if t.symbol != edit.symbol),
        })

    if isinstance(edit, AddTransition):
        if dfa.next_state(edit.from_state, edit.symbol) is not None:
            raise EditError(
                f"Transition from '{edit.from_state}' with symbol '{edit.symbol}' already exists"
            )
        transition = Transition(from_state=edit.from_state, symbol=edit.symbol, to_state=edit.to_state)
        return dfa.model_copy(update={"transitions": dfa.transitions + (transition,)})

    if isinstance(edit, RemoveTransition):
        if not 0 <= edit.index < len(dfa.transitions):
            raise EditError(f"No transition at index {edit.index}")
        kept = dfa.transitions[:edit.index] + dfa.transitions[edit.index + 1:]
        return dfa.model_copy(update={"transitions": kept})

    if isinstance(edit, ToggleAccepting):
        if dfa.is_accepting(edit.state):
            accepting = tuple(s for s in dfa.accepting_states if s != edit.state)
        else:
            accepting = dfa.accepting_states + (edit.state,)
        return dfa.model_copy(update={"accepting_states": accepting})

    raise EditError(f"Unsupported edit: {type(edit).__name__}")


def apply_edit(dfa: DFA, edit) -> DFA:
    """Return a new DFA with `edit` applied, or raise EditError."""
    candidate = _candidate(dfa, edit)

    violations = validate_dfa(candidate)
    if violations:
        log.info("edit_blocked", op=edit.op, reason=violations[0].message)
        raise EditError(violations[0].message, violation=violations[0])

    log.debug("edit_applied", op=edit.op)
    return candidate


def apply_edits(dfa: DFA, edits: Iterable) -> DFA:
    """Apply edits in order; the first blocked edit aborts the whole sequence."""
    for edit in edits:
        dfa = apply_edit(dfa, edit)
    return dfa
