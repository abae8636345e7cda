"""
frontier.py — Lazy Min-Priority Frontier
========================================
Pending nodes ordered by best-known distance, built on heapq.

  - Ascending by priority; ties broken by insertion order, so a fixed
    graph always produces the same trace.
  - Lazy deletion: the same node may sit in the heap several times.  There
    is no decrease-key — the consumer skips entries for nodes it has
    already settled.
"""

import heapq
import itertools
from typing import List, Tuple

from algorithms.step import Frontier as FrontierSnapshot, FrontierEntry
from graph.node import NodeId


class Frontier:
    def __init__(self):
        # (priority, insertion_seq, node_id); seq is unique, so ids never get compared
        self._heap:    List[Tuple[float, int, NodeId]] = []
        self._counter = itertools.count()

    def insert(self, node_id: NodeId, priority: float) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), node_id))

    def extract_min(self) -> Tuple[NodeId, float]:
        if not self._heap:
            raise IndexError("extract_min from an empty frontier")
        priority, _, node_id = heapq.heappop(self._heap)
        return node_id, priority

    def is_empty(self) -> bool:
        return not self._heap

    def snapshot(self) -> FrontierSnapshot:
        """Current contents in the order they would be extracted."""
        return tuple(FrontierEntry(node_id, priority) for priority, _, node_id in sorted(self._heap))

    def __len__(self) -> int:
        return len(self._heap)

    def __repr__(self) -> str:
        return f"Frontier({[(e.id, e.priority) for e in self.snapshot()]})"
