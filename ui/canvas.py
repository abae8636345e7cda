"""
canvas.py — SVG Graph Renderer
==============================
Pure rendering function: Graph + ViewState → SVG string.

The renderer consumes:
  • graph   – node positions and edges
  • view    – the controller's ViewState snapshot (or None for a static graph)
  • config  – visual config (canvas size, colors, fonts, …)

Design decisions:
  - NO mutation.  The caller passes in everything it needs and gets back a
    string; the playback core never knows this module exists.
  - Each undirected edge is drawn once (the first half of its mirrored pair).
  - Path edges are consecutive pairs of `final_path`; the highlighted edge
    is the one the current update step relaxed.
"""

import math
from typing import Dict, Optional, Set, FrozenSet

from markupsafe import escape

import config as app_config
from algorithms.step import VisitStep
from engine.playback import ViewState
from graph import Edge, Graph, INF, Node


# ---------------------------------------------------------------------------
# Visual Config: palette, dimensions and fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = app_config.CANVAS_WIDTH
    height: int = app_config.CANVAS_HEIGHT
    bg:     str = "#0d1117"

    node_colors: Dict[str, str] = {
        "unvisited": "#1c2128",   # dark grey
        "visited":   "#10b981",   # emerald green, settled
        "current":   "#06b6d4",   # bright teal, settled by the current step
    }

    stroke_colors: Dict[str, str] = {
        "default": "#0ea5e9",     # cyan
        "start":   "#10b981",     # green ring
        "end":     "#f43f5e",     # red ring
    }

    edge_colors: Dict[str, str] = {
        "default": "#30363d",     # medium grey
        "active":  "#0ea5e9",     # edge relaxed by the current step
        "path":    "#f43f5e",     # on the final path
    }

    # node
    node_radius:        int = app_config.NODE_RADIUS
    node_stroke_width:  int = 3
    node_label_color:   str = "#e6edf3"
    node_label_size:    int = 14
    distance_color:     str = "#f59e0b"
    distance_size:      int = 13

    # edge
    edge_width:         int = 2
    edge_width_bold:    int = 4
    edge_weight_color:  str = "#7d8590"
    edge_weight_size:   int = 12
    edge_weight_bg:     str = "#161b22"


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(
    graph: Graph,
    view: Optional[ViewState] = None,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Returns an SVG string.

    Args:
        graph  : The graph to render (positions + edges).
        view   : Current view-state snapshot, or None for a static graph.
        config : Visual config.
    """
    path_edges = _path_edges(view)
    active = frozenset(view.highlighted_edge) if view and view.highlighted_edge else None

    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>',
    ]

    # -- edges first so nodes sit on top --
    for edge in graph.undirected_edges():
        svg_parts.append(_render_edge(graph, edge, path_edges, active, config))

    # -- nodes --
    for node in graph.nodes.values():
        svg_parts.append(_render_node(graph, node, view, config))

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


def _path_edges(view: Optional[ViewState]) -> Set[FrozenSet]:
    if view is None:
        return set()
    path = view.final_path
    return {frozenset((a, b)) for a, b in zip(path, path[1:])}


# ---------------------------------------------------------------------------
# Node Rendering
# ---------------------------------------------------------------------------
def _render_node(graph: Graph, node: Node, view: Optional[ViewState], config: CanvasConfig) -> str:
    fill = config.node_colors["unvisited"]
    distance = INF
    if view is not None and node.id in view.nodes:
        nv = view.nodes[node.id]
        distance = nv.distance
        if nv.visited:
            fill = config.node_colors["visited"]
        if isinstance(view.current_step, VisitStep) and view.current_step.node_id == node.id:
            fill = config.node_colors["current"]

    if node.id == graph.start_id:
        stroke = config.stroke_colors["start"]
    elif node.id == graph.end_id:
        stroke = config.stroke_colors["end"]
    else:
        stroke = config.stroke_colors["default"]

    cx, cy, r = node.x, node.y, config.node_radius
    label = escape(str(node.id))

    parts = [
        f'<g class="node" data-id="{label}">',
        f'  <circle cx="{cx}" cy="{cy}" r="{r}" '
        f'fill="{fill}" stroke="{stroke}" stroke-width="{config.node_stroke_width}"/>',
        f'  <text x="{cx}" y="{cy + 5}" text-anchor="middle" '
        f'font-size="{config.node_label_size}" font-family="sans-serif" '
        f'fill="{config.node_label_color}" font-weight="700">{label}</text>',
    ]
    if distance != INF:
        parts.append(
            f'  <text class="distance" x="{cx}" y="{cy - r - 8}" text-anchor="middle" '
            f'font-size="{config.distance_size}" font-family="sans-serif" '
            f'fill="{config.distance_color}" font-weight="500">{escape(str(distance))}</text>'
        )
    parts.append('</g>')
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Edge Rendering
# ---------------------------------------------------------------------------
def _render_edge(
    graph: Graph,
    edge: Edge,
    path_edges: Set[FrozenSet],
    active: Optional[FrozenSet],
    config: CanvasConfig,
) -> str:
    src_node = graph.get_node(edge.source)
    tgt_node = graph.get_node(edge.target)
    if not src_node or not tgt_node:
        return ""

    key = frozenset((edge.source, edge.target))
    stroke, width, css = config.edge_colors["default"], config.edge_width, "edge"
    if key in path_edges:
        stroke, width, css = config.edge_colors["path"], config.edge_width_bold, "edge path"
    elif key == active:
        stroke, width, css = config.edge_colors["active"], config.edge_width_bold, "edge active"

    x1, y1 = src_node.x, src_node.y
    x2, y2 = tgt_node.x, tgt_node.y
    dx, dy = x2 - x1, y2 - y1
    dist = math.sqrt(dx * dx + dy * dy)
    # unit direction; stacked nodes (e.g. mid-drag) still get a label position
    ux, uy = (dx / dist, dy / dist) if dist > 0.001 else (1.0, 0.0)

    mx, my = (x1 + x2) / 2 - uy * 12, (y1 + y2) / 2 + ux * 12
    return "\n".join([
        f'<g class="{css}" data-source="{escape(str(edge.source))}" data-target="{escape(str(edge.target))}">',
        f'  <line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" stroke="{stroke}" stroke-width="{width}"/>',
        f'  <circle cx="{mx}" cy="{my}" r="12" fill="{config.edge_weight_bg}" opacity="0.9"/>',
        f'  <text x="{mx}" y="{my + 4}" text-anchor="middle" font-size="{config.edge_weight_size}" '
        f'font-family="sans-serif" fill="{config.edge_weight_color}" font-weight="600">{edge.weight}</text>',
        '</g>',
    ])
