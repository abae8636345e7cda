"""
edge.py — Graph Edge
====================
One direction of a weighted connection.

Design decisions:
  - `source` and `target` are node ids, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - The graph is undirected by construction: Graph.add_edge stores an
    edge together with its mirror, so every Edge here is one half of a pair.
  - Edges are frozen; a rebuilt graph gets new Edge objects.
"""

from dataclasses import dataclass

from graph.node import NodeId


@dataclass(frozen=True)
class Edge:
    """
    Attributes:
        source : Id of the tail node.
        target : Id of the head node.
        weight : Strictly positive cost.
    """

    source: NodeId
    target: NodeId
    weight: float

    def mirrored(self) -> "Edge":
        return Edge(source=self.target, target=self.source, weight=self.weight)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        return cls(source=data["source"], target=data["target"], weight=data["weight"])

    def __repr__(self) -> str:
        return f"Edge({self.source} ↔ {self.target}, w={self.weight})"
