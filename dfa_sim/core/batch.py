"""
Batch runner for the DFA simulator.
Simulates many inputs against one automaton and exports the results as CSV.
"""

import csv
import io
from typing import Iterable, List

import structlog

from .models import DFA
from .schemas import BatchEntry, BatchReport, BatchSummary
from .simulator import simulate

log = structlog.get_logger()

CSV_FIELDS = ["Input", "Accepted", "Final State", "Steps"]


def parse_inputs(text: str) -> List[str]:
    """One input per line; surrounding whitespace and blank lines are dropped."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def run_batch(dfa: DFA, inputs: Iterable[str]) -> BatchReport:
    entries: List[BatchEntry] = []
    for item in inputs:
        result = simulate(dfa, item)
        entries.append(BatchEntry(
            input=item,
            accepted=result.accepted,
            final_state=result.final_state,
            steps=len(result.steps),
        ))

    accepted = sum(1 for e in entries if e.accepted)
    total = len(entries)
    summary = BatchSummary(
        total=total,
        accepted=accepted,
        rejected=total - accepted,
        acceptance_rate=(accepted / total * 100) if total else 0.0,
    )
    log.info("batch_completed", total=total, accepted=accepted)
    return BatchReport(entries=entries, summary=summary)


def to_csv(report: BatchReport) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    writer.writerows(e.to_dict() for e in report.entries)
    return buffer.getvalue()


def export_csv(report: BatchReport, filepath: str) -> None:
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        f.write(to_csv(report))
    log.info("results_exported", path=filepath, count=len(report.entries))
