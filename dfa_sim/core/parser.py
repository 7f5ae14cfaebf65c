"""
Text Definition Parser for the DFA simulator
Reads the bilingual (Portuguese/English) line-oriented DFA format.

    Alfabeto Σ = { a, b }
    Estados Q = { s0, s1 }
    Estado inicial q0 = s0
    Estado(s) aceitador(es) F = { s1 }
    Transições (formato s:e>s'):
    s0:a>s1, s1:b>s0

Each section is located by its own line predicate, turned into a typed
section record, and only then assembled into a DFA. The assembled DFA is
run through the validator; parsing never returns an invalid automaton.
"""

import re
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, NamedTuple
import structlog

from .models import DFA, IDENTIFIER_RE, Transition
from .validator import validate_dfa

log = structlog.get_logger()


class FormatError(ValueError):
    """Raised when a text definition cannot be turned into a valid DFA."""

    def __init__(self, message: str, line: Optional[str] = None, token: Optional[str] = None):
        super().__init__(message)
        self.line = line
        self.token = token


class SectionKind(str, Enum):
    ALPHABET = "alphabet"
    STATES = "states"
    INITIAL_STATE = "initial_state"
    ACCEPTING_STATES = "accepting_states"
    TRANSITIONS = "transitions"


class ListSection(NamedTuple):
    kind: SectionKind
    line_number: int
    items: List[str]


class AssignmentSection(NamedTuple):
    kind: SectionKind
    line_number: int
    value: str


class TransitionSection(NamedTuple):
    line_number: int
    tokens: List[str]


# Human readable names used in error messages
_LABELS: Dict[SectionKind, str] = {
    SectionKind.ALPHABET: "Alphabet",
    SectionKind.STATES: "States",
    SectionKind.INITIAL_STATE: "Initial state",
    SectionKind.ACCEPTING_STATES: "Accepting states",
    SectionKind.TRANSITIONS: "Transitions",
}

_LIST_LABELS: Dict[SectionKind, str] = {
    SectionKind.ALPHABET: "alphabet",
    SectionKind.STATES: "states",
    SectionKind.ACCEPTING_STATES: "accepting states",
}


class DFAParser:
    """
    Line classifier for the text definition format.
    Keywords are matched by literal prefix or substring, never by a
    general grammar.
    """

    MATCHERS: Dict[SectionKind, Callable[[str], bool]] = {
        SectionKind.ALPHABET: lambda line: line.startswith(("Alfabeto", "Alphabet")),
        SectionKind.STATES: lambda line: line.startswith(("Estados", "States")),
        SectionKind.INITIAL_STATE: lambda line: (
            line.startswith(("Estado inicial", "Initial state")) or "q0 =" in line
        ),
        SectionKind.ACCEPTING_STATES: lambda line: (
            line.startswith(("Estado(s) aceitador(es)", "Accepting states")) or "F =" in line
        ),
        SectionKind.TRANSITIONS: lambda line: line.startswith(("Transições", "Transitions")),
    }

    def __init__(self):
        self._list_re = re.compile(r"\{([^}]*)\}")
        self._assignment_re = re.compile(r"=\s*(\w+)")
        self._inline_transitions_re = re.compile(r"\([^)]*\):\s*(.*)")
        self._transition_re = re.compile(r"(\w+):(\w+)>(\w+)")

    # --- Classification ---

    def locate(self, lines: List[str], kind: SectionKind) -> Tuple[int, str]:
        """Return (index, line) of the first line belonging to `kind`."""
        matcher = self.MATCHERS[kind]
        for index, line in enumerate(lines):
            if matcher(line):
                return index, line
        raise FormatError(f"{_LABELS[kind]} definition not found")

    # --- Section readers ---

    def read_list(self, lines: List[str], kind: SectionKind) -> ListSection:
        index, line = self.locate(lines, kind)
        match = self._list_re.search(line)
        if not match:
            raise FormatError(f"Invalid {_LIST_LABELS[kind]} format: '{line}'", line=line)
        items = [item.strip() for item in match.group(1).split(",")]
        items = [item for item in items if item]
        for item in items:
            if not IDENTIFIER_RE.fullmatch(item):
                raise FormatError(
                    f"Invalid identifier '{item}' in {_LIST_LABELS[kind]}: '{line}'", line=line, token=item
                )
        return ListSection(kind, index + 1, items)

    def read_assignment(self, lines: List[str], kind: SectionKind) -> AssignmentSection:
        index, line = self.locate(lines, kind)
        match = self._assignment_re.search(line)
        if not match:
            raise FormatError(f"Invalid initial state format: '{line}'", line=line)
        return AssignmentSection(kind, index + 1, match.group(1).strip())

    def read_transitions(self, lines: List[str]) -> TransitionSection:
        index, header = self.locate(lines, SectionKind.TRANSITIONS)

        text = ""
        for line in lines[index + 1:]:
            if line:
                text += line + ", "

        # Everything on the header itself: "Transitions (format s:e>s'): s0:a>s1"
        if not text.strip():
            match = self._inline_transitions_re.search(header)
            if match:
                text = match.group(1)

        tokens = [token.strip() for token in text.split(",")]
        return TransitionSection(index + 1, [token for token in tokens if token])

    def read_transition(self, token: str) -> Transition:
        match = self._transition_re.fullmatch(token)
        if not match:
            raise FormatError(f"Invalid transition format: {token}", token=token)
        source, symbol, target = match.groups()
        return Transition(from_state=source, symbol=symbol, to_state=target)

    # --- Entry point ---

    def parse(self, text: str) -> DFA:
        lines = [line.strip() for line in text.split("\n")]

        alphabet = self.read_list(lines, SectionKind.ALPHABET)
        states = self.read_list(lines, SectionKind.STATES)
        initial = self.read_assignment(lines, SectionKind.INITIAL_STATE)
        accepting = self.read_list(lines, SectionKind.ACCEPTING_STATES)
        section = self.read_transitions(lines)
        transitions = [self.read_transition(token) for token in section.tokens]

        dfa = DFA(
            alphabet=alphabet.items,
            states=states.items,
            initial_state=initial.value,
            accepting_states=accepting.items,
            transitions=transitions,
        )

        violations = validate_dfa(dfa)
        if violations:
            log.info("dfa_rejected", reason=violations[0].message, violations=len(violations))
            raise FormatError(violations[0].message)

        log.debug(
            "dfa_parsed",
            states=len(dfa.states),
            symbols=len(dfa.alphabet),
            transitions=len(dfa.transitions),
        )
        return dfa


# Global singleton instance
_parser: Optional[DFAParser] = None


def get_parser() -> DFAParser:
    """Get or create the global DFAParser singleton."""
    global _parser
    if _parser is None:
        _parser = DFAParser()
    return _parser


def parse_dfa(text: str) -> DFA:
    """Convenience function: text definition -> validated DFA."""
    return get_parser().parse(text)
