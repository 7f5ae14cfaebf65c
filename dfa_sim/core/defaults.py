"""Starting document loaded when no definition is supplied."""

from .models import DFA, Transition

_EDGES = [
    ("s0", "b", "s1"),
    ("s0", "f", "s12"),
    ("s1", "h", "s2"),
    ("s1", "f", "s12"),
    ("s2", "n", "s3"),
    ("s2", "t", "s9"),
    ("s2", "l", "s10"),
    ("s2", "m", "s14"),
    ("s2", "f", "s12"),
    ("s3", "o", "s4"),
    ("s3", "x", "s5"),
    ("s3", "f", "s12"),
    ("s4", "c", "s3"),
    ("s4", "f", "s12"),
    ("s5", "d", "s6"),
    ("s5", "f", "s12"),
    ("s6", "k", "s7"),
    ("s6", "f", "s12"),
    ("s7", "s", "s8"),
    ("s7", "f", "s12"),
    ("s8", "t", "s9"),
    ("s8", "f", "s12"),
    ("s9", "y", "s2"),
    ("s9", "f", "s12"),
    ("s10", "r", "s11"),
    ("s10", "f", "s12"),
    ("s11", "h", "s2"),
    ("s11", "f", "s12"),
    ("s12", "v", "s13"),
    ("s13", "h", "s2"),
    ("s13", "f", "s12"),
    ("s14", "f", "s12"),
]

DEFAULT_DFA = DFA(
    alphabet=["b", "h", "n", "o", "c", "x", "d", "k", "s", "l", "r", "f", "v", "t", "y", "m"],
    states=[f"s{i}" for i in range(15)],
    initial_state="s0",
    accepting_states=["s14"],
    transitions=[Transition(from_state=src, symbol=sym, to_state=dst) for src, sym, dst in _EDGES],
)
