"""
Unit tests for the lazy min-priority frontier.
"""

import pytest

from algorithms import Frontier, FrontierEntry


class TestFrontier:
    """Ordering, ties and lazy duplicates."""

    def test_extracts_in_priority_order(self):
        f = Frontier()
        for node, priority in [("c", 5), ("a", 1), ("b", 3)]:
            f.insert(node, priority)
        assert [f.extract_min() for _ in range(3)] == [("a", 1), ("b", 3), ("c", 5)]
        assert f.is_empty()

    def test_ties_broken_by_insertion_order(self):
        f = Frontier()
        f.insert(9, 2)
        f.insert(1, 2)
        f.insert("x", 2)
        assert [f.extract_min()[0] for _ in range(3)] == [9, 1, "x"]

    def test_same_node_may_appear_twice(self):
        f = Frontier()
        f.insert(1, 4)
        f.insert(1, 3)
        assert len(f) == 2
        assert f.snapshot() == (FrontierEntry(1, 3), FrontierEntry(1, 4))

    def test_snapshot_does_not_consume(self):
        f = Frontier()
        f.insert(0, 0)
        f.snapshot()
        assert len(f) == 1

    def test_extract_from_empty_raises(self):
        with pytest.raises(IndexError):
            Frontier().extract_min()
