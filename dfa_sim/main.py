#!/usr/bin/env python3
"""
Command line front end for the DFA simulator.

Usage:
    dfa-sim validate automaton.txt
    dfa-sim simulate automaton.txt abba
    dfa-sim generate automaton.txt [--rejected] [--seed 7]
    dfa-sim path automaton.txt s0 s3
    dfa-sim batch automaton.txt inputs.txt [--output results.csv]
    dfa-sim export automaton.json --format text

FILE is a text definition, a JSON dump when it ends in .json, or '-' for
the built-in default automaton.
"""

import argparse
import os
import random
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from dfa_sim.core import (
    DEFAULT_DFA,
    DFA,
    FormatError,
    StringOracle,
    parse_dfa,
    parse_inputs,
    run_batch,
    shortest_path,
    simulate,
    to_csv,
    to_dot,
    to_json,
    to_text,
    validate_dfa,
)
from dfa_sim.core.batch import export_csv
from dfa_sim.core.logging_config import setup_logging

log = structlog.get_logger()


def load_dfa(source: str) -> DFA:
    """Read and validate an automaton; raises FormatError on any problem."""
    if source == "-":
        return DEFAULT_DFA

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Definition file not found: {source}")
    content = path.read_text(encoding="utf-8-sig")

    if path.suffix.lower() != ".json":
        return parse_dfa(content)

    try:
        dfa = DFA.from_json(content)
    except ValueError as exc:  # JSONDecodeError and pydantic ValidationError
        raise FormatError(f"Invalid JSON definition: {exc}")
    violations = validate_dfa(dfa)
    if violations:
        raise FormatError(violations[0].message)
    return dfa


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
def cmd_validate(args: argparse.Namespace) -> int:
    dfa = load_dfa(args.file)
    print(f"OK: {len(dfa.states)} states, {len(dfa.alphabet)} symbols, {len(dfa.transitions)} transitions")
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    dfa = load_dfa(args.file)
    result = simulate(dfa, args.input)
    for step in result.steps:
        consumed = args.input[:step.position]
        print(f"{step.position:>4}  {step.current_state:<10} {consumed}")
    print("ACCEPTED" if result.accepted else "REJECTED")
    return 0 if result.accepted else 1


def cmd_generate(args: argparse.Namespace) -> int:
    dfa = load_dfa(args.file)
    oracle = StringOracle(random.Random(args.seed))
    value = oracle.generate_rejected(dfa) if args.rejected else oracle.generate_accepted(dfa)
    print(value)
    return 0


def cmd_path(args: argparse.Namespace) -> int:
    dfa = load_dfa(args.file)
    path = shortest_path(dfa, args.start, args.target)
    if not path and args.start != args.target:
        print(f"No path from {args.start} to {args.target}")
        return 1
    print(path)
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    dfa = load_dfa(args.file)
    inputs = parse_inputs(Path(args.inputs).read_text(encoding="utf-8-sig"))
    report = run_batch(dfa, inputs)
    if args.output:
        export_csv(report, args.output)
    else:
        sys.stdout.write(to_csv(report))
    print(f"Acceptance: {report.acceptance_label()}")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    dfa = load_dfa(args.file)
    renderers = {"json": to_json, "text": to_text, "dot": to_dot}
    print(renderers[args.format](dfa))
    return 0


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dfa-sim",
        description="Parse, validate, simulate and probe deterministic finite automata",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: $DFA_SIM_LOG_LEVEL or INFO)")
    parser.add_argument(
        "--log-dir", type=str, default=os.environ.get("DFA_SIM_LOG_DIR", ""),
        help="Directory for rotating log files (default: $DFA_SIM_LOG_DIR, or none)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Check a definition")
    p.add_argument("file")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("simulate", help="Trace one input")
    p.add_argument("file")
    p.add_argument("input")
    p.set_defaults(func=cmd_simulate)

    p = sub.add_parser("generate", help="Generate an accepted (default) or rejected string")
    p.add_argument("file")
    p.add_argument("--rejected", action="store_true", help="Generate a rejected string instead")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output")
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser("path", help="Shortest input leading from one state to another")
    p.add_argument("file")
    p.add_argument("start")
    p.add_argument("target")
    p.set_defaults(func=cmd_path)

    p = sub.add_parser("batch", help="Simulate every line of an inputs file")
    p.add_argument("file")
    p.add_argument("inputs")
    p.add_argument("--output", "-o", type=str, help="Output CSV file for results")
    p.set_defaults(func=cmd_batch)

    p = sub.add_parser("export", help="Render the automaton")
    p.add_argument("file")
    p.add_argument("--format", "-f", choices=["json", "text", "dot"], default="text")
    p.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_dir=args.log_dir, log_level=args.log_level)

    try:
        return args.func(args)
    except FileNotFoundError as exc:
        log.error("input_file_not_found", error=str(exc))
        return 1
    except FormatError as exc:
        log.error("invalid_definition", error=str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
