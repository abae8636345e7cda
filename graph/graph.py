"""
graph.py — Graph Container & Builders
=====================================
Single source of truth for the graph.  The path engine reads it, the
playback controller writes view state onto its nodes, and the renderer
draws it.

Responsibilities:
  1. Node / edge insertion with validation    (unique ids, positive weights)
  2. Adjacency queries                        (neighbours)
  3. Start / end selection                    (weak: ids resolved on use)
  4. Builders                                 (edges, matrix, presets, random)
  5. Serialisation round-trip                 (to_dict / from_dict)
  6. Reset helpers                            (wipe view state, keep structure)

Design decisions:
  - Nodes stored in an insertion-ordered dict keyed by id for O(1) lookup.
  - Every undirected edge is stored as a mirrored pair; `_adj[node_id]`
    holds the outgoing half-edges in insertion order, which fixes the
    relaxation order and therefore the exact trace.
  - start / end are stored as ids, never as Node references, so they can
    dangle harmlessly after a rebuild — `start_node` just returns None.
  - Builders validate everything into a fresh Graph before returning it;
    a MalformedInputError never leaves a half-built graph in anyone's hands.
"""

import logging
import math
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from graph.edge import Edge
from graph.errors import MalformedInputError, ValidationError
from graph.node import Node, NodeId
from graph.presets import PRESETS

logger = logging.getLogger(__name__)


def id_sort_key(node_id: NodeId) -> Tuple[int, Any]:
    """Numeric ids sort numerically and before everything else."""
    try:
        return (0, float(node_id))
    except (TypeError, ValueError):
        return (1, str(node_id))


def _as_weight(raw: Any) -> float:
    if isinstance(raw, bool):
        raise MalformedInputError(f"Invalid weight: {raw!r}")
    if isinstance(raw, str):
        text = raw.strip()
        try:
            raw = int(text)
        except ValueError:
            try:
                raw = float(text)
            except ValueError:
                raise MalformedInputError(f"Invalid weight: {text!r}") from None
    if not isinstance(raw, (int, float)) or math.isnan(raw) or math.isinf(raw):
        raise MalformedInputError(f"Invalid weight: {raw!r}")
    if raw <= 0:
        raise MalformedInputError(f"Edge weights must be positive. Found invalid weight: {raw}")
    return raw


class Graph:
    """
    Attributes:
        nodes    : {node_id: Node}
        edges    : [Edge, …] — both halves of every mirrored pair
        start_id : id of the start node, or None
        end_id   : id of the end node, or None
        _adj     : {node_id: [Edge, …]} outgoing half-edges
    """

    def __init__(self):
        self.nodes:    Dict[NodeId, Node]       = {}
        self.edges:    List[Edge]               = []
        self.start_id: Optional[NodeId]         = None
        self.end_id:   Optional[NodeId]         = None
        self._adj:     Dict[NodeId, List[Edge]] = {}

    # ==================================================================
    # NODES
    # ==================================================================
    def add_node(self, node_id: NodeId, x: float = 0.0, y: float = 0.0) -> Node:
        if isinstance(node_id, bool) or not isinstance(node_id, (int, str)):
            raise MalformedInputError(f"Node ids must be integers or strings, got {node_id!r}")
        if node_id in self.nodes:
            raise MalformedInputError(f"Duplicate node id: {node_id!r}")
        node = Node(node_id, x=x, y=y)
        self.nodes[node_id] = node
        self._adj[node_id] = []
        return node

    def get_node(self, node_id: Optional[NodeId]) -> Optional[Node]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def resolve_id(self, raw: Any) -> Optional[NodeId]:
        """
        Map a user-supplied value onto an existing node id.
        HTML selects hand back strings, so "3" resolves to the int id 3.
        """
        if raw is None:
            return None
        try:
            if raw in self.nodes:
                return raw
        except TypeError:
            return None
        for node_id in self.nodes:
            if str(node_id) == str(raw):
                return node_id
        return None

    # ==================================================================
    # EDGES
    # ==================================================================
    def add_edge(self, source: NodeId, target: NodeId, weight: Any) -> Edge:
        """Insert (source, target, w) and its mirror (target, source, w)."""
        for nid in (source, target):
            if not isinstance(nid, (int, str)) or nid not in self.nodes:
                raise MalformedInputError(f"Edge references unknown node: {nid!r}")
        if source == target:
            raise MalformedInputError(f"Self-loop on node {source!r} is not allowed")
        edge = Edge(source=source, target=target, weight=_as_weight(weight))
        mirror = edge.mirrored()
        self.edges.extend((edge, mirror))
        self._adj[source].append(edge)
        self._adj[target].append(mirror)
        return edge

    def neighbours(self, node_id: NodeId) -> List[Tuple[NodeId, float]]:
        """Return [(neighbour_id, weight)] in edge insertion order."""
        return [(e.target, e.weight) for e in self._adj.get(node_id, [])]

    def undirected_edges(self) -> List[Edge]:
        """One Edge per mirrored pair — the half that was inserted first."""
        return self.edges[0::2]

    # ==================================================================
    # START / END  (weak references)
    # ==================================================================
    @property
    def start_node(self) -> Optional[Node]:
        return self.get_node(self.start_id)

    @property
    def end_node(self) -> Optional[Node]:
        return self.get_node(self.end_id)

    def set_start(self, raw: Any) -> NodeId:
        node_id = self.resolve_id(raw)
        if node_id is None:
            raise ValidationError(f"Start node {raw!r} not found in the graph.")
        self.start_id = node_id
        return node_id

    def set_end(self, raw: Any) -> NodeId:
        node_id = self.resolve_id(raw)
        if node_id is None:
            raise ValidationError(f"End node {raw!r} not found in the graph.")
        self.end_id = node_id
        return node_id

    def default_endpoints(self) -> None:
        """start = lowest id, end = highest id (both None on an empty graph)."""
        ids = self.sorted_ids()
        self.start_id = ids[0] if ids else None
        self.end_id   = ids[-1] if ids else None

    # ==================================================================
    # RESET (keep structure, wipe view state)
    # ==================================================================
    def reset_view_state(self) -> None:
        for node in self.nodes.values():
            node.reset_view_state()

    # ==================================================================
    # LAYOUT
    # ==================================================================
    def layout_circle(self, width: float = 800, height: float = 500, margin: float = 60) -> None:
        """Place nodes evenly on a circle, sorted by id, first one at the top."""
        ids = self.sorted_ids()
        n = len(ids)
        if n == 0:
            return
        radius = max(min(width, height) / 2 - margin, 0)
        cx, cy = width / 2, height / 2
        for i, node_id in enumerate(ids):
            angle = (i / n) * 2 * math.pi - math.pi / 2
            node = self.nodes[node_id]
            node.x = round(cx + radius * math.cos(angle), 2)
            node.y = round(cy + radius * math.sin(angle), 2)

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [e.to_dict() for e in self.undirected_edges()],
            "start": self.start_id,
            "end":   self.end_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls()
        try:
            for nd in data.get("nodes", []):
                node = Node.from_dict(nd)
                g.add_node(node.id, x=node.x, y=node.y)
            for ed in data.get("edges", []):
                edge = Edge.from_dict(ed)
                g.add_edge(edge.source, edge.target, edge.weight)
        except (KeyError, TypeError) as exc:
            raise MalformedInputError(f"Malformed graph data: {exc}") from exc
        g.start_id = g.resolve_id(data.get("start"))
        g.end_id   = g.resolve_id(data.get("end"))
        return g

    # ==================================================================
    # BUILDERS (factory class-methods)
    # ==================================================================

    # ---------- Edge list ----------
    @classmethod
    def from_edges(
        cls,
        edges: Iterable[Any],
        nodes: Optional[Iterable[NodeId]] = None,
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> "Graph":
        """
        Build from structured edges: each item is (a, b, weight) or
        {"source", "target", "weight"}.  Node ids come from `nodes` when
        given (isolated nodes allowed), otherwise from the edges themselves.
        """
        parsed: List[Tuple[NodeId, NodeId, Any]] = []
        for item in edges:
            if isinstance(item, dict):
                try:
                    parsed.append((item["source"], item["target"], item["weight"]))
                except KeyError as exc:
                    raise MalformedInputError(f"Invalid edge format: {item!r}") from exc
            elif isinstance(item, (list, tuple)) and len(item) == 3:
                parsed.append((item[0], item[1], item[2]))
            else:
                raise MalformedInputError(f"Invalid edge format: {item!r}")

        if nodes is None:
            node_ids: List[NodeId] = []
            for a, b, _ in parsed:
                for nid in (a, b):
                    if nid not in node_ids:
                        node_ids.append(nid)
        else:
            node_ids = list(nodes)

        g = cls()
        for nid in sorted(node_ids, key=id_sort_key):
            g.add_node(nid)
        for a, b, w in parsed:
            g.add_edge(a, b, w)
        g.layout_circle(canvas_w, canvas_h)
        g.default_endpoints()
        return g

    # ---------- Adjacency matrix ----------
    @classmethod
    def from_matrix(
        cls,
        matrix: Sequence[Sequence[Any]],
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> "Graph":
        """
        Numeric adjacency matrix, nodes 0..n-1.  Only the upper triangle is
        read (the graph is symmetric); a cell > 0 is an edge, 0 is none.
        Negative cells are rejected.
        """
        n = len(matrix)
        for i, row in enumerate(matrix):
            if not isinstance(row, (list, tuple)):
                raise MalformedInputError(f"Matrix row {i} is not a list: {row!r}")
            if len(row) != n:
                raise MalformedInputError(f"Matrix row {i} has {len(row)} cells, expected {n}")

        g = cls()
        for i in range(n):
            g.add_node(i)
        for i in range(n):
            for j in range(n):
                cell = matrix[i][j]
                if isinstance(cell, bool) or not isinstance(cell, (int, float)):
                    raise MalformedInputError(f"Invalid weight at ({i}, {j}): {cell!r}")
                if cell < 0:
                    raise MalformedInputError("Edge weights cannot be negative.")
                if j > i and cell > 0:
                    g.add_edge(i, j, cell)
        g.layout_circle(canvas_w, canvas_h)
        g.default_endpoints()
        return g

    # ---------- Presets ----------
    @classmethod
    def from_preset(cls, name: str, canvas_w: float = 800, canvas_h: float = 500) -> "Graph":
        if name not in PRESETS:
            raise MalformedInputError(f"Unknown preset: {name!r}")
        node_ids, edges = PRESETS[name]
        return cls.from_edges(edges, nodes=node_ids, canvas_w=canvas_w, canvas_h=canvas_h)

    # ---------- Random Graph ----------
    @classmethod
    def generate_random(
        cls,
        num_nodes: int = 6,
        edge_probability: float = 0.4,
        max_weight: int = 20,
        seed: Optional[int] = None,
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> "Graph":
        """
        Erdős–Rényi style random graph.
        Each pair i < j gets an edge with probability `edge_probability`
        and an integer weight in [1, max_weight].  Connectivity is NOT
        forced — unreachable ends are part of the fun.
        """
        if num_nodes < 0:
            raise MalformedInputError(f"num_nodes must be >= 0, got {num_nodes}")
        if max_weight < 1:
            raise MalformedInputError(f"max_weight must be >= 1, got {max_weight}")
        rng = random.Random(seed)

        g = cls()
        for i in range(num_nodes):
            g.add_node(i)
        for i in range(num_nodes):
            for j in range(i + 1, num_nodes):
                if rng.random() < edge_probability:
                    g.add_edge(i, j, rng.randint(1, max_weight))
        g.layout_circle(canvas_w, canvas_h)
        g.default_endpoints()
        logger.debug("generated random graph: %s", g)
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        """Undirected edges — a mirrored pair counts once."""
        return len(self.edges) // 2

    def sorted_ids(self) -> List[NodeId]:
        return sorted(self.nodes, key=id_sort_key)

    def path_cost(self, path: Sequence[NodeId]) -> float:
        """Sum of edge weights along `path` (cheapest edge between each hop)."""
        total = 0
        for a, b in zip(path, path[1:]):
            weights = [w for nbr, w in self.neighbours(a) if nbr == b]
            if not weights:
                raise ValueError(f"No edge between {a!r} and {b!r}")
            total += min(weights)
        return total

    def __repr__(self) -> str:
        return (
            f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, "
            f"start={self.start_id!r}, end={self.end_id!r})"
        )
