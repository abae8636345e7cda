"""
ui/
---
Presentation layer.

    from ui import render_canvas
    from ui import playback_controls, routing_table, frontier_panel, …
"""

from ui.canvas import render_canvas, CanvasConfig

from ui.controls import (
    playback_controls,
    graph_input_panel,
    endpoint_picker,
    routing_table,
    frontier_panel,
    explanation_panel,
)

__all__ = [
    "render_canvas",
    "CanvasConfig",
    "playback_controls",
    "graph_input_panel",
    "endpoint_picker",
    "routing_table",
    "frontier_panel",
    "explanation_panel",
]
