"""
presets.py — Built-in Example Graphs
====================================
name → (node ids, undirected edges as (a, b, weight)).
"""

from typing import Dict, List, Tuple

from graph.node import NodeId

Preset = Tuple[List[NodeId], List[Tuple[NodeId, NodeId, float]]]

PRESETS: Dict[str, Preset] = {
    # 0→2→1 (cost 3) beats the direct 0→1 edge (cost 4)
    "simple": (
        [0, 1, 2],
        [(0, 1, 4), (0, 2, 2), (1, 2, 1)],
    ),
    "complex": (
        [0, 1, 2, 3, 4, 5],
        [(0, 1, 7), (0, 2, 9), (1, 3, 15), (2, 5, 2), (3, 4, 6), (4, 5, 9)],
    ),
    "large": (
        list(range(8)),
        [(0, 1, 2), (0, 2, 5), (1, 3, 3), (1, 4, 1), (2, 5, 4), (3, 6, 3), (4, 7, 4), (5, 7, 1)],
    ),
}


def preset_names() -> List[str]:
    return list(PRESETS.keys())
