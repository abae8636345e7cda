"""
Tests for the Dijkstra path engine and the traces it records.
"""

import itertools

import pytest

from algorithms import FrontierEntry, PathStep, UpdateStep, VisitStep, compute_trace, dijkstra
from graph import INF, Graph


def brute_force_distances(graph: Graph, source) -> dict:
    """Repeated relaxation until nothing changes; slow but obviously right."""
    dist = {nid: INF for nid in graph.nodes}
    dist[source] = 0
    for _ in range(len(graph.nodes)):
        changed = False
        for edge in graph.edges:
            if dist[edge.source] + edge.weight < dist[edge.target]:
                dist[edge.target] = dist[edge.source] + edge.weight
                changed = True
        if not changed:
            break
    return dist


def fe(node_id, priority):
    return FrontierEntry(node_id, priority)


class TestKnownTraces:
    """Exact traces for small fixed graphs."""

    def test_simple_triangle(self, simple_graph):
        assert compute_trace(simple_graph) == [
            VisitStep(0, ()),
            UpdateStep(1, 0, 4, (fe(1, 4),)),
            UpdateStep(2, 0, 2, (fe(2, 2), fe(1, 4))),
            VisitStep(2, (fe(1, 4),)),
            UpdateStep(1, 2, 3, (fe(1, 3), fe(1, 4))),
            VisitStep(1, (fe(1, 4),)),
            PathStep((0, 2, 1)),
        ]

    def test_unreachable_end_has_no_path(self, disconnected_graph):
        assert compute_trace(disconnected_graph) == [
            VisitStep(0, ()),
            UpdateStep(1, 0, 5, (fe(1, 5),)),
            VisitStep(1, ()),
        ]

    def test_start_equals_end(self, simple_graph):
        simple_graph.set_end(0)
        assert compute_trace(simple_graph) == [VisitStep(0, ()), PathStep((0,))]

    def test_no_start_gives_empty_trace(self, simple_graph):
        simple_graph.start_id = None
        assert compute_trace(simple_graph) == []

    def test_no_end_settles_every_reachable_node(self, simple_graph):
        simple_graph.end_id = None
        trace = compute_trace(simple_graph)
        assert [s.node_id for s in trace if isinstance(s, VisitStep)] == [0, 2, 1]
        assert not any(isinstance(s, PathStep) for s in trace)

    def test_stops_once_end_is_settled(self):
        g = Graph.from_edges([(0, 1, 1), (1, 2, 1), (2, 3, 1)])
        g.set_end(1)
        visits = [s.node_id for s in compute_trace(g) if isinstance(s, VisitStep)]
        assert visits == [0, 1]

    def test_generator_is_lazy(self, simple_graph):
        steps = dijkstra(simple_graph)
        assert next(steps) == VisitStep(0, ())


class TestProperties:
    """Invariants checked over many random graphs."""

    SEEDS = range(25)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_path_cost_matches_brute_force(self, seed):
        g = Graph.generate_random(num_nodes=7, edge_probability=0.35, seed=seed)
        trace = compute_trace(g)
        expected = brute_force_distances(g, g.start_id)[g.end_id]
        paths = [s for s in trace if isinstance(s, PathStep)]
        if expected == INF:
            assert paths == []
        else:
            assert len(paths) == 1 and trace[-1] is paths[0]
            path = paths[0].path
            assert path[0] == g.start_id and path[-1] == g.end_id
            assert g.path_cost(path) == expected

    @pytest.mark.parametrize("seed", SEEDS)
    def test_settlement_is_monotonic_and_unique(self, seed):
        g = Graph.generate_random(num_nodes=8, edge_probability=0.4, seed=seed)
        g.end_id = None
        best = {g.start_id: 0}
        settled = []
        for step in compute_trace(g):
            if isinstance(step, UpdateStep):
                assert step.node_id not in [n for n, _ in settled]
                best[step.node_id] = step.new_distance
            elif isinstance(step, VisitStep):
                settled.append((step.node_id, best[step.node_id]))
        ids = [n for n, _ in settled]
        assert len(ids) == len(set(ids))
        distances = [d for _, d in settled]
        assert distances == sorted(distances)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_updates_strictly_improve(self, seed):
        g = Graph.generate_random(num_nodes=8, edge_probability=0.5, seed=seed)
        best = {}
        for step in compute_trace(g):
            if isinstance(step, UpdateStep):
                assert step.new_distance < best.get(step.node_id, INF)
                best[step.node_id] = step.new_distance

    def test_deterministic(self):
        g = Graph.generate_random(num_nodes=10, edge_probability=0.4, seed=3)
        assert compute_trace(g) == compute_trace(g)

    def test_graph_view_state_untouched(self, simple_graph):
        compute_trace(simple_graph)
        for node in simple_graph.nodes.values():
            assert node.distance == INF
            assert node.previous is None
            assert not node.visited

    def test_every_pair_on_complex_preset(self):
        g = Graph.from_preset("complex")
        for a, b in itertools.permutations(g.sorted_ids(), 2):
            g.set_start(a)
            g.set_end(b)
            path = compute_trace(g)[-1].path
            assert g.path_cost(path) == brute_force_distances(g, a)[b]


class TestStepRecords:
    """Serialised shape and explanation text of steps."""

    def test_to_dict_shapes(self, simple_graph):
        trace = compute_trace(simple_graph)
        assert trace[1].to_dict() == {
            "type": "update",
            "nodeId": 1,
            "fromNodeId": 0,
            "newDistance": 4,
            "frontier": [{"id": 1, "priority": 4}],
        }
        assert trace[-1].to_dict() == {"type": "path", "path": [0, 2, 1]}

    def test_explanations_mention_nodes(self, simple_graph):
        trace = compute_trace(simple_graph)
        assert "node 0" in trace[0].explanation
        assert "0 → 1" in trace[1].explanation
        assert trace[-1].explanation.endswith("0 → 2 → 1")
