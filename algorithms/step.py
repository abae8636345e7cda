"""
step.py — Trace Records
=======================
The path engine is a generator that yields Step objects.  A Step is one
discrete decision of the search, recorded once and never changed:

    • VisitStep   – a node was settled (its distance is now final)
    • UpdateStep  – a relaxation improved a neighbour's best distance
    • PathStep    – the reconstructed start → end path (only if reachable)

Design decisions:
  - Steps are frozen dataclasses.  The engine is the only writer; the
    playback controller and renderer are pure readers.
  - Visit / update steps carry a `frontier` snapshot: the priority
    structure's contents at the moment the step was recorded, in extraction
    order.  The UI shows it as-is instead of re-deriving it.
  - `explanation` is the plain-English "why" line the UI shows under the
    canvas.
"""

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from graph.node import NodeId


@dataclass(frozen=True)
class FrontierEntry:
    id:       NodeId
    priority: float

    def to_dict(self) -> dict:
        return {"id": self.id, "priority": self.priority}


Frontier = Tuple[FrontierEntry, ...]


def _queue_text(frontier: Frontier) -> str:
    if not frontier:
        return "The priority queue is now empty."
    items = ", ".join(f"{e.id} ({e.priority})" for e in frontier)
    return f"Queue: {items}."


@dataclass(frozen=True)
class VisitStep:
    node_id:  NodeId
    frontier: Frontier = ()

    kind: ClassVar[str] = "visit"

    @property
    def explanation(self) -> str:
        return (
            f"Settle node {self.node_id}: it has the smallest distance in the queue, "
            f"so that distance is now final. {_queue_text(self.frontier)}"
        )

    def to_dict(self) -> dict:
        return {
            "type":     self.kind,
            "nodeId":   self.node_id,
            "frontier": [e.to_dict() for e in self.frontier],
        }


@dataclass(frozen=True)
class UpdateStep:
    node_id:      NodeId
    from_node_id: NodeId
    new_distance: float
    frontier:     Frontier = ()

    kind: ClassVar[str] = "update"

    @property
    def explanation(self) -> str:
        return (
            f"Relax {self.from_node_id} → {self.node_id}: new best distance "
            f"{self.new_distance}. {_queue_text(self.frontier)}"
        )

    def to_dict(self) -> dict:
        return {
            "type":        self.kind,
            "nodeId":      self.node_id,
            "fromNodeId":  self.from_node_id,
            "newDistance": self.new_distance,
            "frontier":    [e.to_dict() for e in self.frontier],
        }


@dataclass(frozen=True)
class PathStep:
    path: Tuple[NodeId, ...]

    kind: ClassVar[str] = "path"

    @property
    def frontier(self) -> Frontier:
        return ()

    @property
    def explanation(self) -> str:
        return "Shortest path found: " + " → ".join(str(n) for n in self.path)

    def to_dict(self) -> dict:
        return {"type": self.kind, "path": list(self.path)}


Step = Union[VisitStep, UpdateStep, PathStep]
