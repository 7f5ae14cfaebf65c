"""
Exporters for the DFA simulator: text definition, JSON and Graphviz DOT.
"""

from typing import Dict, List, Optional

from .models import DFA

TRANSITIONS_HEADER = "Transições (formato s:e>s'):"


def to_text(dfa: DFA) -> str:
    """Render the text definition format read by `parse_dfa`."""
    text = ""
    text += f"Alfabeto Σ = {{ {', '.join(dfa.alphabet)} }}\n\n"
    text += f"Estados Q = {{ {', '.join(dfa.states)} }}\n\n"
    text += f"Estado inicial q0 = {dfa.initial_state}\n"
    text += f"Estado(s) aceitador(es) F = {{ {', '.join(dfa.accepting_states)} }}\n\n"
    text += TRANSITIONS_HEADER + "\n"
    text += ", ".join(str(t) for t in dfa.transitions)
    return text


def to_json(dfa: DFA, indent: Optional[int] = 2) -> str:
    return dfa.to_json(indent=indent)


def to_dot(dfa: DFA) -> str:
    """Graphviz DOT source; parallel edges are merged into one labelled edge."""
    lines = ["digraph DFA {", "  rankdir=LR;", "  node [shape=circle];"]

    # Accept states get double circle
    for state in dfa.accepting_states:
        lines.append(f'  "{state}" [shape=doublecircle];')

    lines.append("  __start__ [shape=point];")
    lines.append(f'  __start__ -> "{dfa.initial_state}";')

    # Group by (source, destination), keeping first-seen order
    grouped: Dict[tuple, List[str]] = {}
    for t in dfa.transitions:
        grouped.setdefault((t.from_state, t.to_state), []).append(t.symbol)
    for (src, dest), symbols in grouped.items():
        lines.append(f'  "{src}" -> "{dest}" [label="{",".join(symbols)}"];')

    lines.append("}")
    return "\n".join(lines)
