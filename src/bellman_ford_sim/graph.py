from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union


Node = str
Distance = Union[int, float]

INF: float = float("inf")


class GraphConfigError(ValueError):
    """Raised when a graph instance is malformed at construction time."""


@dataclass(frozen=True)
class Edge:
    src: Node
    dst: Node
    weight: int

    def pair(self) -> Tuple[Node, Node]:
        return (self.src, self.dst)


@dataclass(frozen=True)
class GraphModel:
    """Immutable directed graph with signed integer edge weights.

    - Nodes: distinct string labels; order is the display/iteration order
      and the first node is the source
    - Edges: (src, dst, weight); order fixes the relaxation order within a
      pass. Self-loops and duplicate edges are allowed.
    """

    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]

    def __post_init__(self) -> None:
        nodes = tuple(self.nodes)
        edges = tuple(self.edges)
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "edges", edges)

        if not nodes:
            raise GraphConfigError("graph must have at least one node")
        if len(set(nodes)) != len(nodes):
            raise GraphConfigError("node labels must be distinct")
        known = set(nodes)
        for i, e in enumerate(edges):
            if not isinstance(e, Edge):
                raise GraphConfigError(f"edge #{i} is not an Edge: {e!r}")
            if e.src not in known or e.dst not in known:
                raise GraphConfigError(f"edge #{i} {e.src}->{e.dst} references an unknown node")
            if isinstance(e.weight, bool) or not isinstance(e.weight, int):
                raise GraphConfigError(f"edge #{i} {e.src}->{e.dst} weight must be an integer")

    @classmethod
    def from_triples(cls, nodes: Iterable[Node], triples: Iterable[Tuple[Node, Node, int]]) -> "GraphModel":
        return cls(tuple(nodes), tuple(Edge(src, dst, w) for src, dst, w in triples))

    @property
    def source(self) -> Node:
        return self.nodes[0]

    @property
    def iteration_bound(self) -> int:
        """Number of relaxation passes, |V| - 1."""
        return len(self.nodes) - 1

    def to_dict(self) -> Dict[str, object]:
        return {
            "nodes": list(self.nodes),
            "source": self.source,
            "edges": [{"src": e.src, "dst": e.dst, "weight": e.weight} for e in self.edges],
        }


def bellman_ford(graph: GraphModel, source: Optional[Node] = None) -> Tuple[Dict[Node, Distance], Dict[Node, Optional[Node]], bool]:
    """Batch Bellman-Ford with predecessor tracking and negative cycle detection.

    Applies the same strict relaxation rule as the stepper, so its distances
    match a stepped run to completion.

    Returns (distance, predecessor, has_negative_cycle_reachable_from_source)
    """
    if source is None:
        source = graph.source
    if source not in graph.nodes:
        raise GraphConfigError(f"source {source!r} not in graph")

    dist: Dict[Node, Distance] = {n: INF for n in graph.nodes}
    pred: Dict[Node, Optional[Node]] = {n: None for n in graph.nodes}
    dist[source] = 0
    edges_list: List[Edge] = list(graph.edges)

    for _ in range(graph.iteration_bound):
        changed = False
        for e in edges_list:
            if dist[e.src] != INF and dist[e.src] + e.weight < dist[e.dst]:
                dist[e.dst] = dist[e.src] + e.weight
                pred[e.dst] = e.src
                changed = True
        if not changed:
            break

    for e in edges_list:
        if dist[e.src] != INF and dist[e.src] + e.weight < dist[e.dst]:
            return dist, pred, True
    return dist, pred, False


def shortest_path(pred: Dict[Node, Optional[Node]], source: Node, target: Node) -> List[Node]:
    """Walk predecessors back from target. Empty when target is unreachable."""
    path: List[Node] = []
    cur: Optional[Node] = target
    visited = set()
    while cur is not None:
        if cur in visited:
            return []
        visited.add(cur)
        path.append(cur)
        cur = pred.get(cur)
    path.reverse()
    if not path or path[0] != source:
        return []
    return path
