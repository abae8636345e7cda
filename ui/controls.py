"""
controls.py — UI Control Panels
===============================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – start / pause-resume / step back / step / reset / speed
  • graph_input_panel   – preset / random / edges / matrix tabs
  • endpoint_picker     – start & end dropdowns
  • routing_table       – per-node distance / previous / visited
  • frontier_panel      – priority-queue snapshot of the current step
  • explanation_panel   – "why this step happened"

Design:
  - All panels are stateless render functions.
  - State is passed in as arguments (mostly a ViewState snapshot).
  - Output is raw HTML strings; anything user-supplied goes through escape().
"""

from typing import List, Optional

from markupsafe import escape

import config
from algorithms.step import UpdateStep, VisitStep
from engine.playback import PlaybackState, ViewState
from graph import Graph, INF


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(view: ViewState, speed: str = "medium") -> str:
    state = view.state
    running = state in (PlaybackState.PLAYING, PlaybackState.PAUSED)
    pause_label = "▶ Resume" if state is PlaybackState.PAUSED else "⏸ Pause"

    def disabled(flag: bool) -> str:
        return "disabled" if flag else ""

    speed_options = "".join(
        f'<option value="{name}" {"selected" if name == speed else ""}>{name.capitalize()}</option>'
        for name in config.SPEED_PRESETS
    )

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-start" style="display: {'none' if running else 'inline-block'};"
                {disabled(state is PlaybackState.FINISHED)}>▶ Start</button>
        <button id="btn-pause" style="display: {'inline-block' if running else 'none'};">{pause_label}</button>
        <button id="btn-prev" title="Step back"
                {disabled(state in (PlaybackState.PLAYING, PlaybackState.IDLE) or view.current_step_index == 0)}>◀</button>
        <button id="btn-next" title="Step forward"
                {disabled(state in (PlaybackState.PLAYING, PlaybackState.FINISHED))}>▶</button>
        <button id="btn-reset" title="Reset">⟲</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{view.current_step_index}</span> / <span id="total-steps">{view.total_steps}</span>
        <span class="state-badge state-{state.value}">{state.value.upper()}</span>
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">{speed_options}</select>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Graph Input
# ---------------------------------------------------------------------------
def graph_input_panel(preset_names: List[str], active_tab: str = "presets") -> str:
    tabs = ["presets", "random", "edges", "matrix"]
    tab_buttons = "".join(
        f'<button class="tab-btn {"active" if t == active_tab else ""}" data-tab="{t}">{t.capitalize()}</button>'
        for t in tabs
    )
    preset_buttons = "".join(
        f'<button class="preset-btn btn-secondary" data-preset="{escape(name)}">{escape(name.capitalize())}</button>'
        for name in preset_names
    )

    def shown(tab: str) -> str:
        return "block" if tab == active_tab else "none"

    return f"""
    <div class="panel graph-input">
      <h3>🌐 Graph</h3>
      <div class="tabs">{tab_buttons}</div>

      <div class="tab-content" data-tab="presets" style="display: {shown('presets')};">
        {preset_buttons}
      </div>

      <div class="tab-content" data-tab="random" style="display: {shown('random')};">
        <label>Nodes: <input type="number" id="rand-nodes" value="{config.RANDOM_DEFAULT_NODES}"
               min="2" max="{config.RANDOM_MAX_NODES}"></label>
        <label>Edge Prob: <input type="range" id="rand-prob" min="0" max="1" step="0.05"
               value="{config.RANDOM_DEFAULT_PROBABILITY}">
               <span id="rand-prob-val">{config.RANDOM_DEFAULT_PROBABILITY}</span></label>
        <button id="btn-gen-random" class="btn-secondary">Generate Random</button>
      </div>

      <div class="tab-content" data-tab="edges" style="display: {shown('edges')};">
        <p class="hint">JSON list of [from, to, weight] triples.</p>
        <textarea id="edges-json" rows="6">[[0, 1, 4], [0, 2, 2], [1, 2, 1]]</textarea>
        <button id="btn-apply-edges" class="btn-secondary">Apply Edges</button>
      </div>

      <div class="tab-content" data-tab="matrix" style="display: {shown('matrix')};">
        <p class="hint">JSON square matrix; 0 = no edge (max {config.MATRIX_MAX_SIZE}×{config.MATRIX_MAX_SIZE}).</p>
        <textarea id="matrix-json" rows="6">[[0, 4, 2], [4, 0, 1], [2, 1, 0]]</textarea>
        <button id="btn-apply-matrix" class="btn-secondary">Apply Matrix</button>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Start / End Picker
# ---------------------------------------------------------------------------
def endpoint_picker(graph: Graph) -> str:
    start_options, end_options = [], []
    for nid in graph.sorted_ids():
        value = escape(str(nid))
        start_sel = "selected" if nid == graph.start_id else ""
        end_sel = "selected" if nid == graph.end_id else ""
        start_options.append(f'<option value="{value}" {start_sel}>Node {value}</option>')
        end_options.append(f'<option value="{value}" {end_sel}>Node {value}</option>')

    return f"""
    <div class="panel endpoint-picker">
      <h3>🎯 Start & End</h3>
      <label>Start: <select id="start-selector">{''.join(start_options)}</select></label>
      <label>End: <select id="end-selector">{''.join(end_options)}</select></label>
      <p class="hint">{graph.node_count()} nodes · {graph.edge_count()} edges</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Routing Table
# ---------------------------------------------------------------------------
def routing_table(view: ViewState, graph: Optional[Graph] = None) -> str:
    focus = None
    if isinstance(view.current_step, (VisitStep, UpdateStep)):
        focus = view.current_step.node_id

    ids = graph.sorted_ids() if graph is not None else list(view.nodes)
    rows = []
    for nid in ids:
        nv = view.nodes.get(nid)
        if nv is None:
            continue
        dist = "∞" if nv.distance == INF else escape(str(nv.distance))
        prev = "–" if nv.previous is None else escape(str(nv.previous))
        mark = "✔" if nv.visited else "✘"
        css = ' class="focus"' if nid == focus else ""
        rows.append(f"<tr{css}><td>{escape(str(nid))}</td><td>{dist}</td><td>{prev}</td><td>{mark}</td></tr>")

    return f"""
    <table class="routing-table">
      <thead><tr><th>Node</th><th>Distance</th><th>Previous</th><th>Visited</th></tr></thead>
      <tbody>{''.join(rows)}</tbody>
    </table>
    """


# ---------------------------------------------------------------------------
# Frontier (priority queue) Panel
# ---------------------------------------------------------------------------
def frontier_panel(view: ViewState) -> str:
    entries = view.frontier
    if not entries:
        message = "Waiting..." if view.state is PlaybackState.IDLE else "Queue is empty."
        return f'<div class="queue-empty">{message}</div>'
    items = "".join(
        f'<div class="pq-item">Node {escape(str(e.id))} (dist: {escape(str(e.priority))})</div>'
        for e in entries
    )
    return f'<div class="pq-items">{items}</div>'


# ---------------------------------------------------------------------------
# Explanation Panel
# ---------------------------------------------------------------------------
def explanation_panel(view: ViewState) -> str:
    if view.current_step is None:
        text = "▶ Press <strong>Start</strong> or <strong>Step</strong> to watch Dijkstra's algorithm decide."
    else:
        text = str(escape(view.current_step.explanation))
    return f'<div class="explanation-text">{text}</div>'
