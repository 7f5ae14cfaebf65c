"""
Result schemas for the DFA simulator.
Validation violations, simulation traces and batch run reports.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any
from enum import Enum


class ViolationKind(str, Enum):
    """Structural and determinism checks performed by the validator."""
    DUPLICATE_STATE = "DUPLICATE_STATE"
    DUPLICATE_SYMBOL = "DUPLICATE_SYMBOL"
    UNKNOWN_INITIAL_STATE = "UNKNOWN_INITIAL_STATE"
    UNKNOWN_ACCEPTING_STATE = "UNKNOWN_ACCEPTING_STATE"
    UNKNOWN_SOURCE_STATE = "UNKNOWN_SOURCE_STATE"
    UNKNOWN_TARGET_STATE = "UNKNOWN_TARGET_STATE"
    UNKNOWN_SYMBOL = "UNKNOWN_SYMBOL"
    NONDETERMINISTIC = "NONDETERMINISTIC"


class Violation(BaseModel):
    """
    A single failed check. Not an exception: callers decide whether
    the list is fatal (reject an edit) or advisory (display warnings).
    """
    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    message: str
    state: Optional[str] = None
    symbol: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class SimulationStep(BaseModel):
    """State reached after `position` input symbols were consumed."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current_state: str = Field(..., alias="currentState")
    position: int = Field(..., ge=0)


class SimulationResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    steps: List[SimulationStep]
    accepted: bool

    @property
    def final_state(self) -> str:
        return self.steps[-1].current_state

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class BatchEntry(BaseModel):
    """
    Outcome of one input in a batch run.
    """
    input: str
    accepted: bool
    final_state: str
    steps: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for CSV export."""
        return {
            "Input": self.input,
            "Accepted": "true" if self.accepted else "false",
            "Final State": self.final_state,
            "Steps": self.steps,
        }


class BatchSummary(BaseModel):
    """
    Aggregate counts for a batch run.
    """
    total: int = 0
    accepted: int = 0
    rejected: int = 0
    acceptance_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "acceptance_rate": self.acceptance_rate,
        }


class BatchReport(BaseModel):
    entries: List[BatchEntry] = Field(default_factory=list)
    summary: BatchSummary = Field(default_factory=BatchSummary)

    def acceptance_label(self) -> str:
        """Human readable rate, e.g. '66.7% (2/3)'."""
        if self.summary.total == 0:
            return "N/A"
        return f"{self.summary.acceptance_rate:.1f}% ({self.summary.accepted}/{self.summary.total})"
