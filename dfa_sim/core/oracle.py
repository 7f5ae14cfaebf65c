"""
String Oracle for the DFA simulator
Produces strings expected to be accepted or rejected by an automaton,
built on a breadth-first shortest-path search between two states.
"""

import random
import string
from collections import deque
from typing import Callable, Deque, List, Optional, Set, Tuple
import structlog

from .models import DFA
from .simulator import simulate

log = structlog.get_logger()

MAX_WALKS = 5
MAX_WALK_LENGTH = 20
INVALID_PREFIX_LENGTH = (1, 5)
LONG_STRING_LENGTH = (15, 25)
SYMBOL_UNIVERSE = string.ascii_lowercase + string.digits
FILLER_SYMBOL = "x"
FILLER_REPEAT = 5
LAST_RESORT = "abcdefghij"


def shortest_path(dfa: DFA, start: str, target: str) -> str:
    """
    Labels of the first-discovered shortest walk from `start` to `target`.

    Returns "" when no path exists, which is also the answer for
    `start == target`; callers that care must check that case first.
    """
    queue: Deque[Tuple[str, List[str]]] = deque([(start, [])])
    visited: Set[str] = {start}

    while queue:
        state, path = queue.popleft()
        if state == target:
            return "".join(path)

        for t in dfa.transitions_from(state):
            if t.to_state not in visited:
                visited.add(t.to_state)
                queue.append((t.to_state, path + [t.symbol]))

    return ""


class StringOracle:
    """
    Randomized generator of accepted / rejected sample strings.

    The only state is the random source, so a seeded `random.Random`
    makes every answer reproducible. All attempts are bounded.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_walks: int = MAX_WALKS,
        max_walk_length: int = MAX_WALK_LENGTH,
    ):
        self.rng = rng or random.Random()
        self.max_walks = max_walks
        self.max_walk_length = max_walk_length

    # --- Accepted strings ---

    def random_walk(self, dfa: DFA) -> Optional[str]:
        """One walk from the initial state; the labels if it ends accepting."""
        current = dfa.initial_state
        path: List[str] = []

        while not dfa.is_accepting(current) and len(path) < self.max_walk_length:
            options = dfa.transitions_from(current)
            if not options:
                break
            chosen = self.rng.choice(options)
            path.append(chosen.symbol)
            current = chosen.to_state

        if dfa.is_accepting(current):
            return "".join(path)
        return None

    def generate_accepted(self, dfa: DFA) -> str:
        if not dfa.accepting_states:
            return ""

        for attempt in range(self.max_walks):
            walk = self.random_walk(dfa)
            if walk is not None:
                log.debug("accepted_string_found", strategy="random_walk", attempt=attempt)
                return walk

        for accepting in dfa.accepting_states:
            path = shortest_path(dfa, dfa.initial_state, accepting)
            if path:
                log.debug("accepted_string_found", strategy="shortest_path", target=accepting)
                return path

        log.info("accepted_string_not_found", accepting=list(dfa.accepting_states))
        return ""

    # --- Rejected strings ---

    def _random_symbols(self, dfa: DFA, length: int) -> List[str]:
        return [self.rng.choice(dfa.alphabet) for _ in range(length)]

    def invalid_symbol_strategy(self, dfa: DFA) -> Optional[str]:
        """A few valid symbols followed by one the alphabet does not know."""
        if not dfa.alphabet:
            return None
        known = set(dfa.alphabet)
        invalid = [c for c in SYMBOL_UNIVERSE if c not in known]
        if not invalid:
            return None

        prefix = self._random_symbols(dfa, self.rng.randint(*INVALID_PREFIX_LENGTH))
        return "".join(prefix) + self.rng.choice(invalid)

    def dead_end_strategy(self, dfa: DFA) -> Optional[str]:
        """Walk to a non-accepting state and get stuck there."""
        candidates = [s for s in dfa.states if not dfa.is_accepting(s)]
        if not candidates:
            return None

        state = self.rng.choice(candidates)
        path = shortest_path(dfa, dfa.initial_state, state)
        if not path and state != dfa.initial_state:
            return None

        outgoing = dfa.transitions_from(state)
        if outgoing:
            defined = {t.symbol for t in outgoing}
            missing = [s for s in dfa.alphabet if s not in defined]
            if not missing:
                return None
            return path + self.rng.choice(missing)

        return path or None

    def long_string_strategy(self, dfa: DFA) -> Optional[str]:
        """Random string longer than most short accepting paths."""
        if not dfa.alphabet:
            return None
        candidate = "".join(self._random_symbols(dfa, self.rng.randint(*LONG_STRING_LENGTH)))
        if simulate(dfa, candidate).accepted:
            return None
        return candidate

    def generate_rejected(self, dfa: DFA) -> str:
        strategies: List[Callable[[DFA], Optional[str]]] = [
            self.invalid_symbol_strategy,
            self.dead_end_strategy,
            self.long_string_strategy,
        ]
        self.rng.shuffle(strategies)

        for strategy in strategies:
            result = strategy(dfa)
            if result:
                log.debug("rejected_string_found", strategy=strategy.__name__)
                return result

        log.info("rejected_string_fallback", alphabet_size=len(dfa.alphabet))
        if dfa.alphabet:
            return FILLER_SYMBOL * FILLER_REPEAT
        return LAST_RESORT


# Global default instance
_oracle = StringOracle()


def generate_accepted(dfa: DFA) -> str:
    """Convenience function using the shared oracle."""
    return _oracle.generate_accepted(dfa)


def generate_rejected(dfa: DFA) -> str:
    """Convenience function using the shared oracle."""
    return _oracle.generate_rejected(dfa)
