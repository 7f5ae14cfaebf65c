"""
Core modules for the DFA simulator.
Centralized exports for all core functionality.
"""

from .models import DFA, Transition

from .schemas import (
    Violation,
    ViolationKind,
    SimulationStep,
    SimulationResult,
    BatchEntry,
    BatchSummary,
    BatchReport,
)

from .parser import (
    DFAParser,
    FormatError,
    SectionKind,
    get_parser,
    parse_dfa,
)

from .validator import DeterministicValidator, validate_dfa

from .simulator import simulate, accepts

from .oracle import (
    StringOracle,
    shortest_path,
    generate_accepted,
    generate_rejected,
)

from .editor import (
    EditError,
    Edit,
    AddState,
    RemoveState,
    AddSymbol,
    RemoveSymbol,
    AddTransition,
    RemoveTransition,
    ToggleAccepting,
    apply_edit,
    apply_edits,
)

from .exporter import to_text, to_json, to_dot

from .batch import parse_inputs, run_batch, to_csv

from .defaults import DEFAULT_DFA

__all__ = [
    # Model
    "DFA",
    "Transition",
    # Schemas
    "Violation",
    "ViolationKind",
    "SimulationStep",
    "SimulationResult",
    "BatchEntry",
    "BatchSummary",
    "BatchReport",
    # Parser
    "DFAParser",
    "FormatError",
    "SectionKind",
    "get_parser",
    "parse_dfa",
    # Validator
    "DeterministicValidator",
    "validate_dfa",
    # Simulator
    "simulate",
    "accepts",
    # Oracle
    "StringOracle",
    "shortest_path",
    "generate_accepted",
    "generate_rejected",
    # Editor
    "EditError",
    "Edit",
    "AddState",
    "RemoveState",
    "AddSymbol",
    "RemoveSymbol",
    "AddTransition",
    "RemoveTransition",
    "ToggleAccepting",
    "apply_edit",
    "apply_edits",
    # Exporter
    "to_text",
    "to_json",
    "to_dot",
    # Batch
    "parse_inputs",
    "run_batch",
    "to_csv",
    # Defaults
    "DEFAULT_DFA",
]
