"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge
    from graph import ValidationError, MalformedInputError
"""

from graph.errors  import VisualizerError, ValidationError, MalformedInputError
from graph.node    import Node, NodeId, INF
from graph.edge    import Edge
from graph.graph   import Graph, id_sort_key
from graph.presets import PRESETS, preset_names

__all__ = [
    "Node",     "NodeId",    "INF",
    "Edge",
    "Graph",    "id_sort_key",
    "PRESETS",  "preset_names",
    "VisualizerError", "ValidationError", "MalformedInputError",
]
