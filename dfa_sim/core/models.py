from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from typing import Annotated, List, Tuple, Dict, Any, Optional
import json
import re

# Identifiers must survive a trip through the text format
IDENTIFIER_RE = re.compile(r"\w+")


def check_identifier(value: str) -> str:
    if not IDENTIFIER_RE.fullmatch(value):
        raise ValueError(f"Invalid identifier '{value}': use letters, digits or underscores")
    return value


Identifier = Annotated[str, AfterValidator(check_identifier)]


class Transition(BaseModel):
    """A single (from, symbol) -> to mapping."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_state: Identifier = Field(..., alias="from")
    symbol: Identifier
    to_state: Identifier = Field(..., alias="to")

    def __str__(self) -> str:
        return f"{self.from_state}:{self.symbol}>{self.to_state}"


class DFA(BaseModel):
    """
    Immutable snapshot of a deterministic finite automaton.

    Construction only checks the identifier grammar. Structural checks
    (known states, known symbols, determinism) are reported by
    `validate_dfa` so that an editor can build a candidate and inspect it.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    alphabet: Tuple[Identifier, ...] = Field(default=(), description="Ordered input symbols")
    states: Tuple[Identifier, ...] = Field(default=(), description="Ordered state identifiers")
    initial_state: Identifier = Field(..., alias="initialState")
    accepting_states: Tuple[Identifier, ...] = Field(default=(), alias="acceptingStates")
    transitions: Tuple[Transition, ...] = Field(default=())

    # --- Lookups used by the simulator and the oracle ---

    def transitions_from(self, state: str) -> List[Transition]:
        return [t for t in self.transitions if t.from_state == state]

    def next_state(self, state: str, symbol: str) -> Optional[str]:
        for t in self.transitions:
            if t.from_state == state and t.symbol == symbol:
                return t.to_state
        return None

    def is_accepting(self, state: str) -> bool:
        return state in self.accepting_states

    # --- JSON serialization (direct structural dump) ---

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DFA":
        return cls.model_validate(data)

    @classmethod
    def from_json(cls, payload: str) -> "DFA":
        return cls.from_dict(json.loads(payload))
