from __future__ import annotations

from typing import Dict, Tuple

from .graph import GraphModel, Node


SAMPLE_GRAPH = GraphModel.from_triples(
    ["A", "B", "C", "D", "E"],
    [
        ("A", "B", 4),
        ("A", "C", 2),
        ("B", "C", 1),
        ("B", "D", 5),
        ("C", "D", 8),
        ("C", "E", 10),
        ("D", "B", -4),
        ("E", "D", 2),
    ],
)

# Node positions (x, y) for graphical front ends
SAMPLE_LAYOUT: Dict[Node, Tuple[int, int]] = {
    "A": (80, 150),
    "B": (180, 100),
    "C": (180, 200),
    "D": (300, 150),
    "E": (350, 250),
}
