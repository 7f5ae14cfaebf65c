import random

import pytest
from conftest import make_dfa
from dfa_sim.core import (
    DEFAULT_DFA,
    StringOracle,
    generate_accepted,
    generate_rejected,
    shortest_path,
    simulate,
)
from dfa_sim.core.oracle import FILLER_SYMBOL, LAST_RESORT, SYMBOL_UNIVERSE

SEEDS = range(25)


def seeded(seed):
    return StringOracle(random.Random(seed))


# --- Shortest path ---
def test_shortest_path_canonical(canonical_dfa):
    assert shortest_path(canonical_dfa, "s0", "s1") == "a"
    assert shortest_path(canonical_dfa, "s1", "s0") == "b"


def test_shortest_path_same_state_is_empty(canonical_dfa):
    assert shortest_path(canonical_dfa, "s0", "s0") == ""


def test_shortest_path_unreachable_is_empty():
    dfa = make_dfa(["a"], ["s0", "s1", "s2"], "s0", [], [("s0", "a", "s1")])
    assert shortest_path(dfa, "s0", "s2") == ""


def test_shortest_path_prefers_fewest_edges():
    dfa = make_dfa(
        ["a", "b", "c"], ["s0", "s1", "s2", "s3"], "s0", ["s3"],
        [("s0", "a", "s1"), ("s1", "a", "s2"), ("s2", "a", "s3"), ("s0", "b", "s3")],
    )
    assert shortest_path(dfa, "s0", "s3") == "b"


def test_shortest_path_ties_follow_transition_order():
    dfa = make_dfa(
        ["a", "b"], ["s0", "s1", "s2", "s3"], "s0", ["s3"],
        [("s0", "b", "s2"), ("s0", "a", "s1"), ("s1", "a", "s3"), ("s2", "b", "s3")],
    )
    assert shortest_path(dfa, "s0", "s3") == "bb"


def test_shortest_path_default_dfa():
    assert shortest_path(DEFAULT_DFA, "s0", "s14") == "bhm"


# --- Accepted strings ---
@pytest.mark.parametrize("seed", SEEDS)
def test_generated_accepted_is_accepted(canonical_dfa, seed):
    value = seeded(seed).generate_accepted(canonical_dfa)
    assert value
    assert simulate(canonical_dfa, value).accepted is True


@pytest.mark.parametrize("seed", SEEDS)
def test_generated_accepted_default_dfa(seed):
    value = seeded(seed).generate_accepted(DEFAULT_DFA)
    assert simulate(DEFAULT_DFA, value).accepted is True


def test_no_accepting_states_gives_empty_string():
    dfa = make_dfa(["a"], ["s0", "s1"], "s0", [], [("s0", "a", "s1")])
    assert generate_accepted(dfa) == ""


def test_unreachable_accepting_state_gives_empty_string():
    dfa = make_dfa(["a"], ["s0", "s1", "s2"], "s0", ["s2"], [("s0", "a", "s1")])
    assert generate_accepted(dfa) == ""


def test_accepting_initial_state_gives_empty_accepted_string():
    dfa = make_dfa(["a"], ["s0"], "s0", ["s0"], [("s0", "a", "s0")])
    assert generate_accepted(dfa) == ""
    assert simulate(dfa, "").accepted is True


def test_falls_back_to_shortest_path_when_walks_miss():
    # Walks wander in a loop of 'a's; only 'b' from s0 reaches s1.
    dfa = make_dfa(
        ["a", "b"], ["s0", "s1", "trap"], "s0", ["s1"],
        [("s0", "a", "trap"), ("trap", "a", "trap"), ("s0", "b", "s1")],
    )
    oracle = StringOracle(random.Random(0), max_walks=0)
    assert oracle.generate_accepted(dfa) == "b"


def test_random_walk_respects_length_cap():
    dfa = make_dfa(["a"], ["s0", "s1"], "s0", ["s1"], [("s0", "a", "s0")])
    oracle = StringOracle(random.Random(1), max_walk_length=3)
    assert oracle.random_walk(dfa) is None


# --- Rejected strings ---
@pytest.mark.parametrize("seed", SEEDS)
def test_generated_rejected_is_rejected(canonical_dfa, seed):
    value = seeded(seed).generate_rejected(canonical_dfa)
    assert value
    assert simulate(canonical_dfa, value).accepted is False


@pytest.mark.parametrize("seed", SEEDS)
def test_generated_rejected_default_dfa(seed):
    value = seeded(seed).generate_rejected(DEFAULT_DFA)
    assert simulate(DEFAULT_DFA, value).accepted is False


@pytest.mark.parametrize("seed", range(10))
def test_invalid_symbol_strategy(canonical_dfa, seed):
    value = seeded(seed).invalid_symbol_strategy(canonical_dfa)
    assert 2 <= len(value) <= 6
    assert all(c in canonical_dfa.alphabet for c in value[:-1])
    assert value[-1] not in canonical_dfa.alphabet
    assert value[-1] in SYMBOL_UNIVERSE


def test_invalid_symbol_strategy_fails_when_universe_covered():
    dfa = make_dfa(list(SYMBOL_UNIVERSE), ["s0"], "s0", [], [])
    assert seeded(0).invalid_symbol_strategy(dfa) is None


@pytest.mark.parametrize("seed", range(10))
def test_dead_end_strategy(canonical_dfa, seed):
    # Only s0 is non-accepting; from s0 every alphabet symbol but 'b' is defined
    value = seeded(seed).dead_end_strategy(canonical_dfa)
    assert value == "b"
    assert simulate(canonical_dfa, value).accepted is False


def test_dead_end_strategy_fails_when_state_is_complete(ends_with_b):
    assert seeded(0).dead_end_strategy(ends_with_b) is None


def test_dead_end_strategy_uses_sink_state():
    dfa = make_dfa(["a"], ["s0", "dead"], "s0", ["s0"], [("s0", "a", "dead")])
    assert seeded(0).dead_end_strategy(dfa) == "a"


def test_long_string_strategy_length(ends_with_b):
    for seed in range(10):
        value = seeded(seed).long_string_strategy(ends_with_b)
        if value is not None:
            assert 15 <= len(value) <= 25
            assert value.endswith("a")


def test_fallback_filler_when_everything_accepts():
    # Every string over the full universe is accepted and every state is accepting
    dfa = make_dfa(
        list(SYMBOL_UNIVERSE), ["s0"], "s0", ["s0"],
        [("s0", c, "s0") for c in SYMBOL_UNIVERSE],
    )
    assert generate_rejected(dfa) == FILLER_SYMBOL * 5


def test_fallback_last_resort_for_empty_alphabet():
    dfa = make_dfa([], ["s0"], "s0", ["s0"], [])
    assert generate_rejected(dfa) == LAST_RESORT


def test_generation_does_not_mutate(canonical_dfa):
    before = canonical_dfa.model_dump()
    generate_accepted(canonical_dfa)
    generate_rejected(canonical_dfa)
    assert canonical_dfa.model_dump() == before


def test_same_seed_same_answers(canonical_dfa):
    assert seeded(42).generate_rejected(canonical_dfa) == seeded(42).generate_rejected(canonical_dfa)
