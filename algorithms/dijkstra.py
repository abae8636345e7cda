"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
================================================
Generator-based Dijkstra over the lazy Frontier.

Yields a Step at:
  1. Node settled (popped, not stale)         →  VisitStep
  2. Successful relaxation of a neighbour     →  UpdateStep
  3. End reachable, after the loop            →  PathStep

Stale frontier entries (node already settled) are skipped without a step.
The search stops as soon as the end node is settled, so only the path to
the end is guaranteed — not distances to every node.

The graph is never touched: distances and predecessors live in maps local
to the call.  Applying steps to the nodes is the playback controller's job.
"""

import logging
from typing import Dict, Iterator, List, Optional

from algorithms.frontier import Frontier
from algorithms.step import PathStep, Step, UpdateStep, VisitStep
from graph import Graph, INF, NodeId

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(graph: Graph) -> Iterator[Step]:
    start = graph.start_node
    if start is None:
        return
    end = graph.end_node
    end_id = end.id if end is not None else None

    dist:     Dict[NodeId, float]  = {nid: INF for nid in graph.nodes}
    previous: Dict[NodeId, NodeId] = {}
    settled:  set                  = set()
    dist[start.id] = 0

    frontier = Frontier()
    frontier.insert(start.id, 0)

    while not frontier.is_empty():
        node, _ = frontier.extract_min()
        if node in settled:
            continue
        settled.add(node)
        yield VisitStep(node, frontier.snapshot())

        if node == end_id:
            break

        for nbr, weight in graph.neighbours(node):
            if nbr in settled:
                continue
            candidate = dist[node] + weight
            if candidate < dist[nbr]:
                dist[nbr]     = candidate
                previous[nbr] = node
                frontier.insert(nbr, candidate)
                yield UpdateStep(nbr, node, candidate, frontier.snapshot())

    if end_id is None:
        return
    path = _reconstruct(previous, end_id)
    if path[0] == start.id:
        yield PathStep(tuple(path))


def compute_trace(graph: Graph) -> List[Step]:
    """Run the search to completion and return the immutable, ordered trace."""
    trace = list(dijkstra(graph))
    logger.debug(
        "computed trace: %d steps (start=%r, end=%r, path=%s)",
        len(trace), graph.start_id, graph.end_id,
        "yes" if trace and isinstance(trace[-1], PathStep) else "no",
    )
    return trace


# ---------------------------------------------------------------------------
def _reconstruct(previous: Dict[NodeId, NodeId], target: NodeId) -> List[NodeId]:
    path: List[NodeId] = []
    cur: Optional[NodeId] = target
    while cur is not None:
        path.append(cur)
        cur = previous.get(cur)
    path.reverse()
    return path
