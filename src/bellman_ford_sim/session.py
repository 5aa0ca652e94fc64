from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from . import labels
from .graph import GraphModel, Node
from .logger import log_event
from .sample import SAMPLE_GRAPH
from .stepper import BellmanFordStepper, StepSnapshot


@dataclass(frozen=True)
class SessionView:
    snapshot: StepSnapshot
    running: bool
    changed: Tuple[Node, ...]

    @property
    def can_start(self) -> bool:
        return not self.running

    @property
    def can_next(self) -> bool:
        return self.running and not self.snapshot.is_complete

    def to_dict(self) -> Dict[str, Any]:
        snap = self.snapshot
        msg = labels.status_message(snap)
        return {
            **snap.to_dict(),
            "running": self.running,
            "can_start": self.can_start,
            "can_next": self.can_next,
            "changed": list(self.changed),
            "labels": {
                "iteration": labels.iteration_label(snap),
                "step": labels.step_label(snap),
                "status": labels.status_label(snap),
                "distances": {n: labels.format_distance(d) for n, d in snap.distances.items()},
            },
            "message": {"level": msg[0], "text": msg[1]} if msg is not None else None,
        }


class SimulatorSession:
    """Start/next/reset controls around one stepper.

    next() is ignored until start(); start() is ignored while running.
    """

    def __init__(self, graph: GraphModel = SAMPLE_GRAPH, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.stepper = BellmanFordStepper(graph)
        self.running = False
        self._current = self.stepper.initialize()
        self._previous: Optional[StepSnapshot] = None

    @property
    def graph(self) -> GraphModel:
        return self.stepper.graph

    def view(self) -> SessionView:
        return SessionView(self._current, self.running, self._current.changed_nodes(self._previous))

    def _update(self, snap: StepSnapshot) -> SessionView:
        self._previous, self._current = self._current, snap
        return self.view()

    def start(self) -> SessionView:
        if self.running:
            return self.view()
        self._previous = None
        self._current = self.stepper.initialize()
        self.running = True
        log_event("start", session=self.session_id, source=self.graph.source,
                  nodes=len(self.graph.nodes), edges=len(self.graph.edges))
        return self.view()

    def next(self) -> SessionView:
        if not self.running or self._current.is_complete:
            return self._update(self._current)
        view = self._update(self.stepper.step())
        snap = view.snapshot
        log_event("step", session=self.session_id, step=snap.step_count, phase=snap.phase.value,
                  iteration=snap.iteration, edge=snap.active_edge, changed=view.changed)
        if snap.is_complete:
            log_event("complete", session=self.session_id, has_negative_cycle=snap.has_negative_cycle,
                      distances=snap.distances)
        return view

    def reset(self) -> SessionView:
        self.running = False
        self._previous = None
        self._current = self.stepper.reset()
        log_event("reset", session=self.session_id)
        return self.view()
