from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class Phase(str, Enum):
    INITIALIZATION = "initialization"
    RELAXATION = "relaxation"
    CYCLE_CHECK = "cycle-check"
    COMPLETE = "complete"


class PhaseTransitionError(RuntimeError):
    pass


# Legal moves of the stepper's macro state machine. Initialization may skip
# straight to the cycle check when the graph has no passes to run.
TRANSITIONS: Dict[Phase, FrozenSet[Phase]] = {
    Phase.INITIALIZATION: frozenset({Phase.RELAXATION, Phase.CYCLE_CHECK}),
    Phase.RELAXATION: frozenset({Phase.RELAXATION, Phase.CYCLE_CHECK}),
    Phase.CYCLE_CHECK: frozenset({Phase.COMPLETE}),
    Phase.COMPLETE: frozenset(),
}


def advance(src: Phase, dst: Phase) -> Phase:
    """Return dst if src -> dst is a legal move, else raise PhaseTransitionError."""
    if dst not in TRANSITIONS[src]:
        raise PhaseTransitionError(f"illegal phase transition {src.value} -> {dst.value}")
    return dst


def is_terminal(phase: Phase) -> bool:
    return not TRANSITIONS[phase]
