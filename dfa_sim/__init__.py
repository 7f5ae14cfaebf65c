"""DFA simulator: parse, validate, simulate and probe deterministic finite automata."""

__version__ = "1.0.0"
