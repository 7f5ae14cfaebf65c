from typing import List
import structlog

from .models import DFA
from .schemas import SimulationResult, SimulationStep

log = structlog.get_logger()


def simulate(dfa: DFA, input_string: str) -> SimulationResult:
    """
    Run the automaton over `input_string`, one character per step.

    The trace always starts with the initial state at position 0. When a
    character has no transition from the current state the automaton
    stays where it is, one last step is recorded at the following
    position, and the input is rejected. A character outside the alphabet
    is handled the same way.
    """
    current = dfa.initial_state
    steps: List[SimulationStep] = [SimulationStep(current_state=current, position=0)]

    for i, symbol in enumerate(input_string):
        target = dfa.next_state(current, symbol)
        if target is None:
            steps.append(SimulationStep(current_state=current, position=i + 1))
            log.debug("simulation_stuck", state=current, symbol=symbol, position=i)
            return SimulationResult(steps=steps, accepted=False)

        current = target
        steps.append(SimulationStep(current_state=current, position=i + 1))

    return SimulationResult(steps=steps, accepted=dfa.is_accepting(current))


def accepts(dfa: DFA, input_string: str) -> bool:
    return simulate(dfa, input_string).accepted
