import pytest

from dfa_sim.core import DFA, Transition, parse_dfa

CANONICAL_TEXT = """Alfabeto Σ = { a, b }

Estados Q = { s0, s1 }

Estado inicial q0 = s0
Estado(s) aceitador(es) F = { s1 }

Transições (formato s:e>s'):
s0:a>s1, s1:b>s0
"""


def make_dfa(alphabet, states, initial, accepting, edges):
    return DFA(
        alphabet=alphabet,
        states=states,
        initial_state=initial,
        accepting_states=accepting,
        transitions=[Transition(from_state=f, symbol=s, to_state=t) for f, s, t in edges],
    )


@pytest.fixture
def canonical_text():
    return CANONICAL_TEXT


@pytest.fixture
def canonical_dfa():
    return parse_dfa(CANONICAL_TEXT)


@pytest.fixture
def ends_with_b():
    # Complete DFA over {a, b} accepting strings that end in 'b'
    return make_dfa(
        ["a", "b"], ["q0", "q1"], "q0", ["q1"],
        [("q0", "a", "q0"), ("q0", "b", "q1"), ("q1", "a", "q0"), ("q1", "b", "q1")],
    )
