"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

import pytest

from engine import ManualScheduler, PlaybackController
from graph import Graph


@pytest.fixture
def simple_graph() -> Graph:
    """Triangle 0-1-2 where 0→2→1 (cost 3) beats the direct 0→1 edge (cost 4)."""
    g = Graph.from_preset("simple")
    g.set_start(0)
    g.set_end(1)
    return g


@pytest.fixture
def disconnected_graph() -> Graph:
    """Nodes 0-1 joined, node 2 isolated; start 0, end 2."""
    g = Graph.from_edges([(0, 1, 5)], nodes=[0, 1, 2])
    g.set_start(0)
    g.set_end(2)
    return g


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual-clock scheduler driven by advance()."""
    return ManualScheduler()


@pytest.fixture
def controller(simple_graph, scheduler) -> PlaybackController:
    """Controller over the simple graph, idle, one second per step."""
    ctl = PlaybackController(scheduler=scheduler, delay=1.0)
    ctl.graph = simple_graph
    return ctl


@pytest.fixture
def client():
    """Flask test client with a fresh session registry."""
    import main

    main.app.config["TESTING"] = True
    main._sessions.clear()
    with main.app.test_client() as c:
        yield c
    main._sessions.clear()
