"""
main.py — Dijkstra Step Visualizer Flask App
============================================
The web server that puts the playback controller in front of a browser.

Routes:
  GET  /                       – main UI
  GET  /api/state              – current view state (ticks auto-advance)
  POST /api/graph/preset       – load a built-in graph
  POST /api/graph/random       – generate a random graph
  POST /api/graph/edges        – build from a JSON edge list
  POST /api/graph/matrix       – build from a JSON adjacency matrix
  POST /api/endpoints          – choose start / end
  POST /api/run                – start playing
  POST /api/pause              – toggle pause / resume
  POST /api/step/next          – step forward
  POST /api/step/prev          – step backward
  POST /api/reset              – back to idle (optionally full reset)
  POST /api/config/speed       – change the inter-step delay

State management:
  Each browser session owns one PlaybackController, kept in an in-process
  registry keyed by a random id stored in the Flask session cookie.  The
  registry holds at most config.MAX_SESSIONS controllers and drops the
  least recently used one when a new session would exceed that.  The
  controller's ManualScheduler runs on time.monotonic and is ticked by
  every request, so while playing the browser's /api/state polling is what
  makes steps fire.  A per-session lock keeps each controller on one
  logical thread even under a threaded dev server.
"""

import logging
import secrets
import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator

from flask import Flask, Response, jsonify, render_template_string, request, session

import config
from engine import ManualScheduler, PlaybackController
from graph import Graph, MalformedInputError, ValidationError, VisualizerError, preset_names
from ui import (
    render_canvas,
    playback_controls,
    graph_input_panel,
    endpoint_picker,
    routing_table,
    frontier_panel,
    explanation_panel,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = config.SECRET_KEY


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
@dataclass
class UserSession:
    controller: PlaybackController
    speed:      str            = "medium"
    lock:       threading.Lock = field(default_factory=threading.Lock)


_sessions: "OrderedDict[str, UserSession]" = OrderedDict()
_registry_lock = threading.Lock()


def _new_session() -> UserSession:
    controller = PlaybackController(
        scheduler=ManualScheduler(clock=time.monotonic),
        delay=config.SPEED_PRESETS["medium"],
    )
    controller.load_graph(Graph.from_preset(config.DEFAULT_PRESET, config.CANVAS_WIDTH, config.CANVAS_HEIGHT))
    return UserSession(controller=controller)


@contextmanager
def user_session() -> Iterator[UserSession]:
    """Fetch (or create) this browser's session and hold its lock."""
    with _registry_lock:
        sid = session.get("sid")
        if sid is None or sid not in _sessions:
            sid = secrets.token_hex(16)
            session["sid"] = sid
            _sessions[sid] = _new_session()
            logger.info("new session %s…", sid[:8])
            while len(_sessions) > max(1, config.MAX_SESSIONS):
                evicted, _ = _sessions.popitem(last=False)
                logger.info("evicted idle session %s…", evicted[:8])
        _sessions.move_to_end(sid)
        us = _sessions[sid]
    with us.lock:
        us.controller.scheduler.run_due()
        yield us


def payload(us: UserSession, **extra: Any) -> Response:
    """Everything the page needs to redraw after a transition."""
    ctl = us.controller
    view = ctl.view()
    data = {
        "svg":         render_canvas(ctl.graph, view),
        "playback":    playback_controls(view, us.speed),
        "picker":      endpoint_picker(ctl.graph),
        "routing":     routing_table(view, ctl.graph),
        "frontier":    frontier_panel(view),
        "explanation": explanation_panel(view),
        "view":        view.to_dict(),
        "graph":       ctl.graph.to_dict(),
    }
    data.update(extra)
    return jsonify(data)


def request_data() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _number_arg(data: Dict[str, Any], key: str, default, cast, lo, hi):
    raw = data.get(key, default)
    if isinstance(raw, bool):
        raise MalformedInputError(f"'{key}' must be a number, got {raw!r}")
    if cast is int and isinstance(raw, float) and not raw.is_integer():
        raise MalformedInputError(f"'{key}' must be a whole number, got {raw!r}")
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        raise MalformedInputError(f"'{key}' must be a number, got {raw!r}") from None
    if not lo <= value <= hi:
        raise MalformedInputError(f"'{key}' must be between {lo} and {hi}, got {value}")
    return value


@app.errorhandler(VisualizerError)
def handle_visualizer_error(exc: VisualizerError):
    logger.warning("rejected request to %s: %s", request.path, exc)
    return jsonify({"error": str(exc)}), 400


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    with user_session() as us:
        ctl = us.controller
        view = ctl.view()
        return render_template_string(
            INDEX_TEMPLATE,
            svg=render_canvas(ctl.graph, view),
            playback=playback_controls(view, us.speed),
            graph_input=graph_input_panel(preset_names()),
            picker=endpoint_picker(ctl.graph),
            routing=routing_table(view, ctl.graph),
            frontier=frontier_panel(view),
            explanation=explanation_panel(view),
            poll_ms=config.POLL_INTERVAL_MS,
        )


@app.route("/api/state")
def api_state():
    with user_session() as us:
        return payload(us)


# ---------------------------------------------------------------------------
# API: Graph Input
# ---------------------------------------------------------------------------
@app.route("/api/graph/preset", methods=["POST"])
def api_graph_preset():
    name = request_data().get("name", config.DEFAULT_PRESET)
    g = Graph.from_preset(str(name), config.CANVAS_WIDTH, config.CANVAS_HEIGHT)
    with user_session() as us:
        us.controller.load_graph(g)
        return payload(us)


@app.route("/api/graph/random", methods=["POST"])
def api_graph_random():
    data = request_data()
    nodes = _number_arg(data, "nodes", config.RANDOM_DEFAULT_NODES, int, 1, config.RANDOM_MAX_NODES)
    prob = _number_arg(data, "probability", config.RANDOM_DEFAULT_PROBABILITY, float, 0.0, 1.0)
    seed = data.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise MalformedInputError(f"'seed' must be an integer, got {seed!r}")
    g = Graph.generate_random(
        num_nodes=nodes,
        edge_probability=prob,
        max_weight=config.RANDOM_MAX_WEIGHT,
        seed=seed,
        canvas_w=config.CANVAS_WIDTH,
        canvas_h=config.CANVAS_HEIGHT,
    )
    with user_session() as us:
        us.controller.load_graph(g)
        return payload(us)


@app.route("/api/graph/edges", methods=["POST"])
def api_graph_edges():
    data = request_data()
    edges = data.get("edges")
    nodes = data.get("nodes")
    if not isinstance(edges, list):
        raise MalformedInputError("'edges' must be a list of [from, to, weight]")
    if nodes is not None and not isinstance(nodes, list):
        raise MalformedInputError("'nodes' must be a list of node ids")
    g = Graph.from_edges(edges, nodes=nodes, canvas_w=config.CANVAS_WIDTH, canvas_h=config.CANVAS_HEIGHT)

    start, end = data.get("start"), data.get("end")
    for raw in (start, end):
        if raw is not None and g.resolve_id(raw) is None:
            raise ValidationError("Start or End node not found in the list of nodes.")

    with user_session() as us:
        ctl = us.controller
        ctl.load_graph(g)
        if start is not None:
            ctl.select_start(start)
        if end is not None:
            ctl.select_end(end)
        return payload(us)


@app.route("/api/graph/matrix", methods=["POST"])
def api_graph_matrix():
    matrix = request_data().get("matrix")
    if not isinstance(matrix, list) or not matrix:
        raise MalformedInputError("'matrix' must be a non-empty list of rows")
    if len(matrix) > config.MATRIX_MAX_SIZE:
        raise MalformedInputError(f"Matrix larger than {config.MATRIX_MAX_SIZE}×{config.MATRIX_MAX_SIZE}")
    g = Graph.from_matrix(matrix, config.CANVAS_WIDTH, config.CANVAS_HEIGHT)
    with user_session() as us:
        us.controller.load_graph(g)
        return payload(us)


@app.route("/api/endpoints", methods=["POST"])
def api_endpoints():
    data = request_data()
    start, end = data.get("start"), data.get("end")
    with user_session() as us:
        ctl = us.controller
        for label, raw in (("Start", start), ("End", end)):
            if raw is not None and ctl.graph.resolve_id(raw) is None:
                raise ValidationError(f"{label} node {raw!r} not found in the graph.")
        if start is not None:
            ctl.select_start(start)
        if end is not None:
            ctl.select_end(end)
        return payload(us)


# ---------------------------------------------------------------------------
# API: Playback
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    with user_session() as us:
        changed = us.controller.start()
        return payload(us, changed=changed)


@app.route("/api/pause", methods=["POST"])
def api_pause():
    with user_session() as us:
        changed = us.controller.toggle_pause()
        return payload(us, changed=changed)


@app.route("/api/step/next", methods=["POST"])
def api_step_next():
    with user_session() as us:
        changed = us.controller.step_forward()
        return payload(us, changed=changed)


@app.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    with user_session() as us:
        changed = us.controller.step_backward()
        return payload(us, changed=changed)


@app.route("/api/reset", methods=["POST"])
def api_reset():
    full = bool(request_data().get("full", True))
    with user_session() as us:
        us.controller.reset(full_graph_reset=full)
        return payload(us)


@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    data = request_data()
    with user_session() as us:
        if "delay" in data:
            us.controller.set_delay(_number_arg(data, "delay", None, float, 0.0, 60.0))
            us.speed = "custom"
        else:
            speed = data.get("speed", "medium")
            if speed not in config.SPEED_PRESETS:
                raise MalformedInputError(f"Unknown speed: {speed!r}")
            us.controller.set_speed(speed)
            us.speed = speed
        return jsonify({"speed": us.speed, "delay": us.controller.delay})


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Dijkstra Step Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
      --accent-emerald: #10b981;
      --accent-amber: #f59e0b;
      --accent-rose: #f43f5e;
    }
    body {
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }
    #sidebar {
      width: 340px;
      background: var(--bg-dark);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }
    #main { flex: 1; display: flex; flex-direction: column; }
    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
      border-bottom: 1px solid var(--border);
    }
    #bottom-panel {
      display: grid;
      grid-template-columns: 2fr 1fr 1fr;
      gap: 20px;
      padding: 20px;
      background: var(--bg-dark);
      max-height: 320px;
      overflow: auto;
    }
    .panel, .box {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 16px;
      margin-bottom: 16px;
    }
    h3 {
      font-size: 13px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
      margin-bottom: 12px;
      color: var(--accent-cyan);
    }
    button, select, input, textarea {
      background: var(--bg-dark);
      color: var(--text-primary);
      border: 1px solid var(--border);
      border-radius: 6px;
      padding: 6px 10px;
      margin: 2px;
      font: inherit;
    }
    button { cursor: pointer; }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    textarea { width: 100%; font-family: monospace; }
    label { display: block; margin: 6px 0; color: var(--text-secondary); }
    .tab-btn.active { border-color: var(--accent-cyan); color: var(--accent-cyan); }
    .hint { color: var(--text-secondary); font-size: 12px; margin: 6px 0; }
    .state-badge { font-size: 11px; padding: 2px 6px; border-radius: 4px; background: var(--border); }
    .state-playing { background: var(--accent-emerald); }
    .state-finished { background: var(--accent-rose); }
    .routing-table { width: 100%; border-collapse: collapse; font-size: 13px; }
    .routing-table th, .routing-table td { border-bottom: 1px solid var(--border); padding: 4px 8px; text-align: left; }
    .routing-table tr.focus { background: rgba(50, 130, 206, 0.3); }
    .pq-item { font-family: monospace; padding: 4px 0; }
    .queue-empty, .explanation-text { color: var(--text-secondary); line-height: 1.6; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="graph-input">{{ graph_input|safe }}</div>
    <div id="picker">{{ picker|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
  </div>

  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ svg|safe }}</div>
    </div>
    <div id="bottom-panel">
      <div class="box"><h3>Routing Table</h3><div id="routing">{{ routing|safe }}</div></div>
      <div class="box"><h3>Priority Queue</h3><div id="frontier">{{ frontier|safe }}</div></div>
      <div class="box"><h3>Step Explanation</h3><div id="explanation">{{ explanation|safe }}</div></div>
    </div>
  </div>

  <script>
    const POLL_MS = {{ poll_ms }};
    let pollTimer = null;

    async function call(url, data, method) {
      const opts = {method: method || 'POST', headers: {'Content-Type': 'application/json'}};
      if (opts.method === 'POST') opts.body = JSON.stringify(data || {});
      const res = await fetch(url, opts);
      const body = await res.json();
      if (body.error) { alert(body.error); return null; }
      apply(body);
      return body;
    }

    function apply(data) {
      if (!data || !data.view) return;
      for (const key of ['playback', 'picker', 'routing', 'frontier', 'explanation']) {
        if (data[key] !== undefined) document.getElementById(key).innerHTML = data[key];
      }
      document.getElementById('canvas-svg').innerHTML = data.svg;
      if (data.view.state === 'playing') startPolling(); else stopPolling();
    }

    function startPolling() {
      if (pollTimer === null) pollTimer = setInterval(() => call('/api/state', null, 'GET'), POLL_MS);
    }
    function stopPolling() {
      if (pollTimer !== null) { clearInterval(pollTimer); pollTimer = null; }
    }

    document.addEventListener('click', async (e) => {
      const t = e.target;
      if (t.id === 'btn-start') await call('/api/run');
      else if (t.id === 'btn-pause') await call('/api/pause');
      else if (t.id === 'btn-next') await call('/api/step/next');
      else if (t.id === 'btn-prev') await call('/api/step/prev');
      else if (t.id === 'btn-reset') await call('/api/reset', {full: true});
      else if (t.classList.contains('preset-btn')) await call('/api/graph/preset', {name: t.dataset.preset});
      else if (t.id === 'btn-gen-random') await call('/api/graph/random', {
        nodes: +document.getElementById('rand-nodes').value,
        probability: +document.getElementById('rand-prob').value,
      });
      else if (t.id === 'btn-apply-edges' || t.id === 'btn-apply-matrix') {
        const isEdges = t.id === 'btn-apply-edges';
        let parsed;
        try {
          parsed = JSON.parse(document.getElementById(isEdges ? 'edges-json' : 'matrix-json').value);
        } catch (err) { alert('Invalid JSON: ' + err.message); return; }
        if (isEdges) await call('/api/graph/edges', {edges: parsed});
        else await call('/api/graph/matrix', {matrix: parsed});
      }
      else if (t.classList.contains('tab-btn')) {
        const tab = t.dataset.tab;
        document.querySelectorAll('.tab-btn').forEach(b => b.classList.toggle('active', b === t));
        document.querySelectorAll('.tab-content').forEach(c => {
          c.style.display = c.dataset.tab === tab ? 'block' : 'none';
        });
      }
    });

    document.addEventListener('change', async (e) => {
      const t = e.target;
      if (t.id === 'start-selector') await call('/api/endpoints', {start: t.value});
      else if (t.id === 'end-selector') await call('/api/endpoints', {end: t.value});
      else if (t.id === 'speed-selector') {
        await fetch('/api/config/speed', {
          method: 'POST',
          headers: {'Content-Type': 'application/json'},
          body: JSON.stringify({speed: t.value}),
        });
      }
    });

    document.addEventListener('input', (e) => {
      if (e.target.id === 'rand-prob') document.getElementById('rand-prob-val').textContent = e.target.value;
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Dijkstra Step Visualizer on http://%s:%d", config.HOST, config.PORT)
    app.run(debug=False, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
