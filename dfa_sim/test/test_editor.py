import pytest
from pydantic import TypeAdapter, ValidationError
from dfa_sim.core import (
    AddState,
    AddSymbol,
    AddTransition,
    Edit,
    EditError,
    RemoveState,
    RemoveSymbol,
    RemoveTransition,
    ToggleAccepting,
    ViolationKind,
    apply_edit,
    apply_edits,
)


# --- States ---
def test_add_state_appends(canonical_dfa):
    edited = apply_edit(canonical_dfa, AddState(state="s2"))
    assert edited.states == ("s0", "s1", "s2")
    assert canonical_dfa.states == ("s0", "s1")


def test_add_existing_state_blocked(canonical_dfa):
    with pytest.raises(EditError, match="State 's1' already exists"):
        apply_edit(canonical_dfa, AddState(state="s1"))


def test_remove_state_cascades(canonical_dfa):
    edited = apply_edit(canonical_dfa, RemoveState(state="s1"))
    assert edited.states == ("s0",)
    assert edited.accepting_states == ()
    assert edited.transitions == ()


def test_remove_initial_state_blocked(canonical_dfa):
    with pytest.raises(EditError, match="Cannot remove the initial state"):
        apply_edit(canonical_dfa, RemoveState(state="s0"))


# --- Symbols ---
def test_add_symbol(canonical_dfa):
    assert apply_edit(canonical_dfa, AddSymbol(symbol="c")).alphabet == ("a", "b", "c")


def test_add_existing_symbol_blocked(canonical_dfa):
    with pytest.raises(EditError, match="Symbol 'a' already exists in the alphabet"):
        apply_edit(canonical_dfa, AddSymbol(symbol="a"))


def test_remove_symbol_drops_its_transitions(canonical_dfa):
    edited = apply_edit(canonical_dfa, RemoveSymbol(symbol="b"))
    assert edited.alphabet == ("a",)
    assert [str(t) for t in edited.transitions] == ["s0:a>s1"]


# --- Transitions ---
def test_add_transition(canonical_dfa):
    edited = apply_edit(canonical_dfa, AddTransition(from_state="s0", symbol="b", to_state="s0"))
    assert edited.next_state("s0", "b") == "s0"
    assert len(edited.transitions) == 3


def test_duplicate_transition_blocked(canonical_dfa):
    with pytest.raises(EditError, match="Transition from 's0' with symbol 'a' already exists"):
        apply_edit(canonical_dfa, AddTransition(from_state="s0", symbol="a", to_state="s0"))


def test_transition_to_unknown_state_blocked_by_validation(canonical_dfa):
    with pytest.raises(EditError) as exc_info:
        apply_edit(canonical_dfa, AddTransition(from_state="s0", symbol="b", to_state="s9"))
    assert exc_info.value.violation.kind == ViolationKind.UNKNOWN_TARGET_STATE
    assert str(exc_info.value) == "Transition to state 's9' which is not defined"


def test_transition_with_unknown_symbol_blocked(canonical_dfa):
    with pytest.raises(EditError, match="Transition symbol 'z' is not in the alphabet"):
        apply_edit(canonical_dfa, AddTransition(from_state="s0", symbol="z", to_state="s1"))


def test_remove_transition_by_index(canonical_dfa):
    edited = apply_edit(canonical_dfa, RemoveTransition(index=0))
    assert [str(t) for t in edited.transitions] == ["s1:b>s0"]


@pytest.mark.parametrize("index", [-1, 2, 10])
def test_remove_transition_out_of_range(canonical_dfa, index):
    with pytest.raises(EditError, match=f"No transition at index {index}"):
        apply_edit(canonical_dfa, RemoveTransition(index=index))


# --- Accepting states ---
def test_toggle_accepting_both_ways(canonical_dfa):
    on = apply_edit(canonical_dfa, ToggleAccepting(state="s0"))
    assert on.accepting_states == ("s1", "s0")
    off = apply_edit(on, ToggleAccepting(state="s1"))
    assert off.accepting_states == ("s0",)


def test_toggle_unknown_state_blocked(canonical_dfa):
    with pytest.raises(EditError, match="Accepting state 'nope' is not in the set of states"):
        apply_edit(canonical_dfa, ToggleAccepting(state="nope"))


# --- Sequences and parsing ---
def test_apply_edits_in_order(canonical_dfa):
    edited = apply_edits(canonical_dfa, [
        AddState(state="s2"),
        AddTransition(from_state="s1", symbol="a", to_state="s2"),
        ToggleAccepting(state="s2"),
    ])
    assert edited.next_state("s1", "a") == "s2"
    assert edited.accepting_states == ("s1", "s2")


def test_apply_edits_stops_at_first_blocked(canonical_dfa):
    with pytest.raises(EditError):
        apply_edits(canonical_dfa, [AddState(state="s2"), AddState(state="s2")])
    assert canonical_dfa.states == ("s0", "s1")


def test_edit_payloads_dispatch_on_op(canonical_dfa):
    adapter = TypeAdapter(Edit)
    edit = adapter.validate_python({"op": "add_transition", "from": "s0", "symbol": "b", "to": "s1"})
    assert isinstance(edit, AddTransition)
    assert apply_edit(canonical_dfa, edit).next_state("s0", "b") == "s1"
    assert isinstance(adapter.validate_python({"op": "remove_transition", "index": 1}), RemoveTransition)


@pytest.mark.parametrize("payload", [
    {"op": "add_state", "state": "q-0"},
    {"op": "add_symbol", "symbol": "+"},
    {"op": "add_transition", "from": "s0", "symbol": "b", "to": "s-1"},
])
def test_edits_reject_identifiers_the_text_format_cannot_hold(payload):
    with pytest.raises(ValidationError, match="Invalid identifier"):
        TypeAdapter(Edit).validate_python(payload)
