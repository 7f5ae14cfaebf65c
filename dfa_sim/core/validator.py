from typing import List, Set, Tuple
import structlog

from .models import DFA
from .schemas import Violation, ViolationKind

log = structlog.get_logger()


def _repeated(items: Tuple[str, ...]) -> List[str]:
    seen: Set[str] = set()
    repeated: List[str] = []
    for item in items:
        if item in seen and item not in repeated:
            repeated.append(item)
        seen.add(item)
    return repeated


class DeterministicValidator:
    """
    Structural and determinism checks for a DFA snapshot.
    Pure: never mutates the automaton, only reports.
    """

    def validate(self, dfa: DFA) -> List[Violation]:
        states = set(dfa.states)
        alphabet = set(dfa.alphabet)
        violations: List[Violation] = []

        # 0. Declarations, one report per repeated identifier
        for state in _repeated(dfa.states):
            violations.append(Violation(
                kind=ViolationKind.DUPLICATE_STATE,
                message=f"State '{state}' is declared more than once",
                state=state,
            ))
        for symbol in _repeated(dfa.alphabet):
            violations.append(Violation(
                kind=ViolationKind.DUPLICATE_SYMBOL,
                message=f"Symbol '{symbol}' is declared more than once",
                symbol=symbol,
            ))

        # 1. Initial state
        if dfa.initial_state not in states:
            violations.append(Violation(
                kind=ViolationKind.UNKNOWN_INITIAL_STATE,
                message=f"Initial state '{dfa.initial_state}' is not in the set of states",
                state=dfa.initial_state,
            ))

        # 2. Accepting states
        for state in dfa.accepting_states:
            if state not in states:
                violations.append(Violation(
                    kind=ViolationKind.UNKNOWN_ACCEPTING_STATE,
                    message=f"Accepting state '{state}' is not in the set of states",
                    state=state,
                ))

        # 3 + 4. Transition endpoints and symbols
        for t in dfa.transitions:
            if t.from_state not in states:
                violations.append(Violation(
                    kind=ViolationKind.UNKNOWN_SOURCE_STATE,
                    message=f"Transition from state '{t.from_state}' which is not defined",
                    state=t.from_state,
                ))
            if t.to_state not in states:
                violations.append(Violation(
                    kind=ViolationKind.UNKNOWN_TARGET_STATE,
                    message=f"Transition to state '{t.to_state}' which is not defined",
                    state=t.to_state,
                ))
            if t.symbol not in alphabet:
                violations.append(Violation(
                    kind=ViolationKind.UNKNOWN_SYMBOL,
                    message=f"Transition symbol '{t.symbol}' is not in the alphabet",
                    symbol=t.symbol,
                ))

        # 5. Determinism, one report per duplicated pair
        seen: Set[Tuple[str, str]] = set()
        reported: Set[Tuple[str, str]] = set()
        for t in dfa.transitions:
            key = (t.from_state, t.symbol)
            if key in seen and key not in reported:
                reported.add(key)
                violations.append(Violation(
                    kind=ViolationKind.NONDETERMINISTIC,
                    message=f"Multiple transitions from state '{t.from_state}' with symbol '{t.symbol}'",
                    state=t.from_state,
                    symbol=t.symbol,
                ))
            seen.add(key)

        if violations:
            log.debug("dfa_invalid", violations=len(violations), first=violations[0].message)
        return violations

    def is_valid(self, dfa: DFA) -> bool:
        return not self.validate(dfa)


_validator = DeterministicValidator()


def validate_dfa(dfa: DFA) -> List[Violation]:
    """Convenience function returning every violation (empty = valid)."""
    return _validator.validate(dfa)
