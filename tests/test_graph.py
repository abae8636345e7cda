"""
Unit tests for the graph container and its builders.
"""

import math

import pytest

from graph import INF, Graph, MalformedInputError, ValidationError, preset_names


class TestConstruction:
    """Nodes and edges."""

    def test_edges_are_stored_mirrored(self):
        g = Graph()
        g.add_node("a")
        g.add_node("b")
        g.add_edge("a", "b", 3)
        assert g.neighbours("a") == [("b", 3)]
        assert g.neighbours("b") == [("a", 3)]
        assert g.edge_count() == 1
        assert len(g.edges) == 2

    def test_neighbours_keep_insertion_order(self):
        g = Graph.from_edges([(0, 2, 1), (0, 1, 1), (0, 3, 1)])
        assert [n for n, _ in g.neighbours(0)] == [2, 1, 3]

    def test_duplicate_node_rejected(self):
        g = Graph()
        g.add_node(1)
        with pytest.raises(MalformedInputError):
            g.add_node(1)

    def test_unknown_node_rejected(self):
        g = Graph()
        g.add_node(1)
        with pytest.raises(MalformedInputError):
            g.add_edge(1, 2, 5)

    def test_self_loop_rejected(self):
        g = Graph()
        g.add_node(1)
        with pytest.raises(MalformedInputError):
            g.add_edge(1, 1, 5)

    @pytest.mark.parametrize("weight", [0, -3, "abc", None, True, math.nan, math.inf])
    def test_bad_weights_rejected(self, weight):
        g = Graph.from_edges([], nodes=[0, 1])
        with pytest.raises(MalformedInputError):
            g.add_edge(0, 1, weight)

    def test_numeric_string_weight_parsed(self):
        g = Graph.from_edges([], nodes=[0, 1])
        g.add_edge(0, 1, " 7 ")
        assert g.neighbours(0) == [(1, 7)]

    def test_unhashable_node_id_rejected(self):
        with pytest.raises(MalformedInputError):
            Graph.from_edges([[[1], 2, 3]])


class TestEndpoints:
    """Start / end are weak id references."""

    def test_default_endpoints_lowest_and_highest(self):
        g = Graph.from_edges([(5, 2, 1), (2, 9, 1)])
        assert g.start_id == 2
        assert g.end_id == 9

    def test_string_selection_resolves_to_int_id(self, simple_graph):
        simple_graph.set_end("2")
        assert simple_graph.end_id == 2
        assert simple_graph.end_node.id == 2

    def test_unknown_endpoint_raises(self, simple_graph):
        with pytest.raises(ValidationError):
            simple_graph.set_start(42)
        assert simple_graph.start_id == 0

    def test_dangling_endpoint_resolves_to_none(self, simple_graph):
        simple_graph.end_id = 99
        assert simple_graph.end_node is None

    def test_empty_graph_has_no_endpoints(self):
        g = Graph()
        g.default_endpoints()
        assert g.start_node is None
        assert g.end_node is None


class TestBuilders:
    """Preset, matrix, random and dict builders."""

    def test_presets_available(self):
        assert preset_names() == ["simple", "complex", "large"]

    def test_unknown_preset_rejected(self):
        with pytest.raises(MalformedInputError):
            Graph.from_preset("nope")

    def test_from_dict_edges(self):
        g = Graph.from_edges([{"source": "x", "target": "y", "weight": 2}])
        assert g.neighbours("x") == [("y", 2)]

    def test_from_edges_bad_item(self):
        with pytest.raises(MalformedInputError):
            Graph.from_edges([(0, 1)])

    def test_from_matrix_reads_upper_triangle(self):
        g = Graph.from_matrix([[0, 4, 2], [4, 0, 1], [2, 1, 0]])
        assert g.edge_count() == 3
        assert sorted(g.neighbours(0)) == [(1, 4), (2, 2)]

    def test_from_matrix_not_square(self):
        with pytest.raises(MalformedInputError):
            Graph.from_matrix([[0, 1], [1, 0, 3]])

    def test_from_matrix_negative(self):
        with pytest.raises(MalformedInputError):
            Graph.from_matrix([[0, -1], [-1, 0]])

    def test_random_is_seeded(self):
        a = Graph.generate_random(8, 0.5, seed=7)
        b = Graph.generate_random(8, 0.5, seed=7)
        assert a.to_dict() == b.to_dict()
        assert all(1 <= e.weight <= 20 for e in a.edges)

    def test_random_probability_bounds(self):
        assert Graph.generate_random(6, 0.0, seed=1).edge_count() == 0
        assert Graph.generate_random(6, 1.0, seed=1).edge_count() == 15

    def test_dict_round_trip(self, simple_graph):
        clone = Graph.from_dict(simple_graph.to_dict())
        assert clone.to_dict() == simple_graph.to_dict()

    def test_from_dict_missing_key(self):
        with pytest.raises(MalformedInputError):
            Graph.from_dict({"nodes": [{"id": 0}], "edges": [{"source": 0}]})

    def test_layout_first_node_on_top(self):
        g = Graph.from_preset("complex", 800, 500)
        top = g.nodes[0]
        assert top.x == 400
        assert top.y == min(n.y for n in g.nodes.values())


class TestViewState:
    """View-state helpers on nodes."""

    def test_reset_view_state(self, simple_graph):
        node = simple_graph.nodes[1]
        node.record_update(3, 2)
        node.mark_visited()
        simple_graph.reset_view_state()
        assert node.distance == INF
        assert node.previous is None
        assert node.visited is False

    def test_path_cost(self, simple_graph):
        assert simple_graph.path_cost([0, 2, 1]) == 3
        with pytest.raises(ValueError):
            Graph.from_edges([], nodes=[0, 1]).path_cost([0, 1])
