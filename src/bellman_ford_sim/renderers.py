from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO

from . import labels
from .logger import log_event
from .session import SessionView


class SnapshotRenderer(Protocol):
    """Presentation collaborator that observes a session after each action.

    Implementations only read the view; they never drive the stepper.
    """

    name: str

    def render(self, view: SessionView) -> None:
        ...


@dataclass
class NullRenderer:
    """Discards every view; useful for tests and headless runs."""

    name: str = "null"

    def render(self, view: SessionView) -> None:
        return None


@dataclass
class TextRenderer:
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    name: str = "text"

    def render(self, view: SessionView) -> None:
        snap = view.snapshot
        out = self.stream
        edge = f"{snap.active_edge[0]}->{snap.active_edge[1]}" if snap.active_edge else "-"
        out.write(f"[{snap.step_count:>3}] {labels.step_label(snap)} | iteration {labels.iteration_label(snap)} | edge {edge}\n")
        cells = []
        for node, d in snap.distances.items():
            mark = "*" if node in view.changed else " "
            cells.append(f"{node}={labels.format_distance(d)}{mark}")
        out.write("      " + "  ".join(cells) + "\n")
        msg = labels.status_message(snap)
        if msg is not None:
            out.write(f"      {labels.status_label(snap)}: {msg[1]}\n")
        out.flush()


@dataclass
class JsonRenderer:
    name: str = "json"

    def render(self, view: SessionView) -> None:
        log_event("view", **view.to_dict())


def load_renderer(kind: str, **kwargs: Any) -> SnapshotRenderer:
    kind = kind.lower()
    if kind in ("null", "noop"):
        return NullRenderer()
    if kind == "text":
        return TextRenderer(**kwargs)
    if kind == "json":
        return JsonRenderer()
    raise ValueError(f"Unknown renderer kind: {kind}")
