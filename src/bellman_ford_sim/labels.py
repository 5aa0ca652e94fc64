from __future__ import annotations

from typing import Optional, Tuple

from .graph import INF, Distance
from .phase import Phase
from .stepper import StepSnapshot


INFINITY_MARK = "∞"

NEGATIVE_CYCLE_MESSAGE = "Negative-weight cycle detected! Shortest paths are undefined."
SUCCESS_MESSAGE = "Algorithm complete. No negative cycles found. Shortest paths are valid."


def format_distance(d: Distance) -> str:
    return INFINITY_MARK if d == INF else str(d)


def iteration_label(snap: StepSnapshot) -> str:
    return f"{snap.iteration} / {snap.iteration_bound}"


def step_label(snap: StepSnapshot) -> str:
    if snap.phase is Phase.INITIALIZATION:
        return "Initializing distances..."
    if snap.phase is Phase.RELAXATION:
        return f"Relaxation Pass {snap.iteration + 1}"
    if snap.phase is Phase.CYCLE_CHECK:
        return "Checking for negative cycles..."
    return "Complete"


def status_label(snap: StepSnapshot) -> str:
    if not snap.is_complete:
        return "Running..."
    return "Negative Cycle Detected" if snap.has_negative_cycle else "Algorithm Complete"


def status_message(snap: StepSnapshot) -> Optional[Tuple[str, str]]:
    """(level, text) once the run is complete, else None."""
    if not snap.is_complete:
        return None
    if snap.has_negative_cycle:
        return ("warning", NEGATIVE_CYCLE_MESSAGE)
    return ("success", SUCCESS_MESSAGE)
