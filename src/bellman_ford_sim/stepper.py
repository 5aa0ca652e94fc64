from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .graph import INF, Distance, Edge, GraphModel, Node
from .phase import Phase, advance, is_terminal


@dataclass(frozen=True)
class StepSnapshot:
    """Read-only picture of the run after initialize/step/reset.

    `distances` is a private copy; mutating it never touches the run.
    `has_negative_cycle` is only meaningful once the phase is complete.
    """

    phase: Phase
    iteration: int
    iteration_bound: int
    edge_cursor: int
    distances: Dict[Node, Distance]
    active_edge: Optional[Tuple[Node, Node]] = None
    active_edge_index: Optional[int] = None
    has_negative_cycle: bool = False
    step_count: int = 0

    @property
    def is_complete(self) -> bool:
        return self.phase is Phase.COMPLETE

    def changed_nodes(self, previous: Optional["StepSnapshot"]) -> Tuple[Node, ...]:
        """Nodes whose distance differs from `previous`, in display order."""
        if previous is None:
            return ()
        return tuple(n for n, d in self.distances.items() if previous.distances.get(n) != d)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "iteration": self.iteration,
            "iteration_bound": self.iteration_bound,
            "edge_cursor": self.edge_cursor,
            "distances": {n: (None if d == INF else d) for n, d in self.distances.items()},
            "active_edge": list(self.active_edge) if self.active_edge is not None else None,
            "active_edge_index": self.active_edge_index,
            "has_negative_cycle": self.has_negative_cycle,
            "step_count": self.step_count,
        }


@dataclass
class RunState:
    distances: Dict[Node, Distance]
    phase: Phase = Phase.INITIALIZATION
    iteration: int = 0
    edge_cursor: int = 0
    active_edge: Optional[int] = None
    has_negative_cycle: bool = False
    steps: int = 0


def _relaxable(dist: Dict[Node, Distance], e: Edge) -> bool:
    return dist[e.src] != INF and dist[e.src] + e.weight < dist[e.dst]


class BellmanFordStepper:
    """Bellman-Ford as a state machine advanced one unit of work per step().

    A unit is one phase transition, one edge relaxation or one full
    negative-cycle scan. Not thread-safe: a single owner drives it.
    """

    def __init__(self, graph: GraphModel):
        self._graph = graph
        self._state = self._fresh_state()

    @property
    def graph(self) -> GraphModel:
        return self._graph

    @property
    def phase(self) -> Phase:
        return self._state.phase

    def _fresh_state(self) -> RunState:
        source = self._graph.source
        return RunState(distances={n: (0 if n == source else INF) for n in self._graph.nodes})

    def initialize(self, graph: Optional[GraphModel] = None) -> StepSnapshot:
        if graph is not None:
            self._graph = graph
        self._state = self._fresh_state()
        return self.snapshot()

    def reset(self) -> StepSnapshot:
        return self.initialize()

    def snapshot(self) -> StepSnapshot:
        s = self._state
        active = self._graph.edges[s.active_edge] if s.active_edge is not None else None
        return StepSnapshot(
            phase=s.phase,
            iteration=s.iteration,
            iteration_bound=self._graph.iteration_bound,
            edge_cursor=s.edge_cursor,
            distances=dict(s.distances),
            active_edge=active.pair() if active is not None else None,
            active_edge_index=s.active_edge,
            has_negative_cycle=s.has_negative_cycle,
            step_count=s.steps,
        )

    def step(self) -> StepSnapshot:
        s = self._state
        if is_terminal(s.phase):
            return self.snapshot()

        if s.phase is Phase.INITIALIZATION:
            self._enter_relaxation()
        elif s.phase is Phase.RELAXATION:
            self._relax_next_edge()
        elif s.phase is Phase.CYCLE_CHECK:
            self._check_cycles()
        s.steps += 1
        return self.snapshot()

    def _enter_relaxation(self) -> None:
        s = self._state
        s.edge_cursor = 0
        if self._graph.iteration_bound <= 0 or not self._graph.edges:
            # nothing to relax; go straight to the scan
            s.phase = advance(s.phase, Phase.CYCLE_CHECK)
        else:
            s.phase = advance(s.phase, Phase.RELAXATION)

    def _relax_next_edge(self) -> None:
        s = self._state
        edges = self._graph.edges
        e = edges[s.edge_cursor]
        s.active_edge = s.edge_cursor
        if _relaxable(s.distances, e):
            s.distances[e.dst] = s.distances[e.src] + e.weight
        s.edge_cursor += 1
        if s.edge_cursor == len(edges):
            s.iteration += 1
            s.edge_cursor = 0
            if s.iteration >= self._graph.iteration_bound:
                s.phase = advance(s.phase, Phase.CYCLE_CHECK)

    def _check_cycles(self) -> None:
        s = self._state
        s.active_edge = None
        s.has_negative_cycle = any(_relaxable(s.distances, e) for e in self._graph.edges)
        s.phase = advance(s.phase, Phase.COMPLETE)

    def run(self, max_steps: Optional[int] = None) -> Iterator[StepSnapshot]:
        """Yield the snapshot after each step until complete (or max_steps)."""
        taken = 0
        while self._state.phase is not Phase.COMPLETE:
            if max_steps is not None and taken >= max_steps:
                return
            yield self.step()
            taken += 1

    def run_to_completion(self) -> List[StepSnapshot]:
        return list(self.run())


def steps_to_cycle_check(graph: GraphModel) -> int:
    """Step calls from a fresh initialize() until the phase is cycle-check."""
    if graph.iteration_bound <= 0 or not graph.edges:
        return 1
    return 1 + graph.iteration_bound * len(graph.edges)
