from typing import Optional, Union

NodeId = Union[int, str]

INF = float("inf")


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Immutable identity (id), mutable position and view state.

    Attributes:
        id       : Unique identifier (int or str, user-supplied).
        x, y     : Canvas coordinates — layout only, the engine never reads them.
        distance : Best-known distance as replayed so far (inf until updated).
        previous : Id of the predecessor recorded by the last applied update.
        visited  : True once a visit step for this node has been applied.

    distance / previous / visited are written only by the PlaybackController
    while it applies trace steps.  The path engine keeps its own maps.
    """

    __slots__ = ("id", "x", "y", "distance", "previous", "visited")

    def __init__(self, node_id: NodeId, x: float = 0.0, y: float = 0.0):
        self.id: NodeId                 = node_id
        self.x: float                   = x
        self.y: float                   = y
        self.distance: float            = INF
        self.previous: Optional[NodeId] = None
        self.visited: bool              = False

    # ------------------------------------------------------------------
    # View-state helpers
    # ------------------------------------------------------------------
    def reset_view_state(self) -> None:
        """Back to the all-∞ / unvisited baseline — called on every (re)start."""
        self.distance = INF
        self.previous = None
        self.visited  = False

    def mark_visited(self) -> None:
        self.visited = True

    def record_update(self, distance: float, previous: NodeId) -> None:
        self.distance = distance
        self.previous = previous

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "x":  self.x,
            "y":  self.y,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        return cls(node_id=data["id"], x=data.get("x", 0.0), y=data.get("y", 0.0))

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return (
            f"Node(id={self.id!r}, dist={self.distance}, prev={self.previous!r}, "
            f"visited={self.visited}, pos=({self.x:.2f},{self.y:.2f}))"
        )

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
