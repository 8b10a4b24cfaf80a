"""
main.py — Graph Algorithm Stepper Flask App
=============================================
The web server that drives the step engine.

Routes:
  GET    /                       – main UI
  GET    /api/state              – current workspace state (for polling)
  POST   /api/graph/node         – add a node            {x?, y?, label?}
  DELETE /api/graph/node/<id>    – remove a node (and its edges)
  POST   /api/graph/edge         – add / re-weight an edge {a, b, weight?}
  PATCH  /api/graph/edge         – change an edge weight   {a, b, weight}
  DELETE /api/graph/edge         – remove an edge          {a, b}
  POST   /api/graph/clear        – remove everything (ids are not reused)
  POST   /api/graph/layout       – re-arrange positions    {mode: circle|grid}
  POST   /api/run                – start a run            {algorithm?, start?}
  POST   /api/run/cancel         – stop the active run
  POST   /api/step/next          – advance one step
  POST   /api/step/prev          – rewind one step
  POST   /api/step/goto          – jump to step N         {index}
  POST   /api/step/end           – run to the final step
  POST   /api/step/play          – toggle play/pause
  POST   /api/step/tick          – auto-advance if playing and due
  POST   /api/config/algo        – select algorithm       {algorithm}
  POST   /api/config/start       – select start node      {start}
  POST   /api/config/speed       – select speed preset    {speed}

State management:
  Graphs hold live runs, so they cannot round-trip through the cookie.
  The Flask session only stores a workspace id; the workspace itself
  (graph, stepper, selected algorithm, start node, speed) lives in the
  in-process WORKSPACES map.  The map keeps at most MAX_WORKSPACES
  entries; creating one more evicts the least recently used workspace
  and cancels its run.  Each request holds its workspace lock from start
  to finish, so overlapping requests from one page (e.g. play ticks)
  are served one at a time.

Errors:
  Graph / engine exceptions become JSON {"error": ...}:
    400  bad input (invalid edge, bad start node, unknown algorithm, …)
    404  unknown node / edge
    409  a run is in progress (second run, or structural edit)
"""

import functools
import logging
import secrets
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from flask import Flask, render_template_string, request, jsonify, session

from graph import (
    Graph, GraphError, NodeNotFound, EdgeNotFound, GraphBusy, MalformedGraphReference,
)
from algorithms import UnknownAlgorithm, get_algorithm, list_algorithms
from engine import (
    AlgorithmRun, EngineError, RunAlreadyInProgress, RunMetrics, Stepper, SPEED_PRESETS, summarize,
)
from ui import (
    CanvasConfig,
    render_canvas,
    playback_controls,
    algorithm_selector,
    start_picker,
    progress_table,
    color_key,
    analytics_panel,
    pseudocode_viewer,
    explanation_panel,
)


logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.update(
    SECRET_KEY=secrets.token_hex(32),
    DEFAULT_ALGORITHM="bfs",
    DEFAULT_SPEED="medium",
    CANVAS_WIDTH=800,
    CANVAS_HEIGHT=500,
    MAX_WORKSPACES=256,
)
# VISUALIZER_DEFAULT_ALGORITHM=dijkstra, VISUALIZER_CANVAS_WIDTH=1000, …
app.config.from_prefixed_env("VISUALIZER")


# ---------------------------------------------------------------------------
# Workspaces — one per browser session
# ---------------------------------------------------------------------------
@dataclass
class Workspace:
    graph:     Graph
    stepper:   Stepper                = field(default_factory=Stepper)
    algorithm: str                    = "bfs"
    start:     Optional[int]          = None
    speed:     str                    = "medium"
    metrics:   Optional[RunMetrics]   = None
    lock:      threading.Lock         = field(default_factory=threading.Lock, repr=False, compare=False)


# least recently used first; capped at MAX_WORKSPACES
WORKSPACES: "OrderedDict[str, Workspace]" = OrderedDict()
_workspaces_lock = threading.Lock()


def new_workspace() -> Workspace:
    ws = Workspace(
        graph=Graph(app.config["CANVAS_WIDTH"], app.config["CANVAS_HEIGHT"]),
        algorithm=app.config["DEFAULT_ALGORITHM"],
        speed=app.config["DEFAULT_SPEED"],
    )
    ws.stepper.set_speed(ws.speed)
    return ws


def get_workspace() -> Workspace:
    """The calling session's workspace, created on first use."""
    evicted = []
    with _workspaces_lock:
        wid = session.get("workspace")
        if wid is None or wid not in WORKSPACES:
            wid = secrets.token_hex(8)
            session["workspace"] = wid
            WORKSPACES[wid] = new_workspace()
            logger.info("workspace %s created", wid)
            while len(WORKSPACES) > max(1, app.config["MAX_WORKSPACES"]):
                evicted.append(WORKSPACES.popitem(last=False))
        else:
            WORKSPACES.move_to_end(wid)
        ws = WORKSPACES[wid]

    for old_id, old in evicted:
        with old.lock:
            old.stepper.reset()
        logger.info("workspace %s evicted", old_id)
    return ws


def with_workspace(view):
    """Pass the session's workspace to `view`, holding its lock for the whole request."""
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        ws = get_workspace()
        with ws.lock:
            return view(ws, *args, **kwargs)
    return wrapper


def canvas_config() -> CanvasConfig:
    config = CanvasConfig()
    config.width = app.config["CANVAS_WIDTH"]
    config.height = app.config["CANVAS_HEIGHT"]
    return config


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
class InvalidPayload(ValueError):
    """Malformed JSON payload."""


def payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def int_field(data: dict, name: str, default=None) -> int:
    value = data.get(name, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPayload(f"'{name}' must be an integer, got {value!r}")
    return value


def float_field(data: dict, name: str) -> Optional[float]:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPayload(f"'{name}' must be a number, got {value!r}")
    return float(value)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
def error_status(exc: Exception) -> int:
    if isinstance(exc, (NodeNotFound, EdgeNotFound)):
        return 404
    if isinstance(exc, (GraphBusy, RunAlreadyInProgress)):
        return 409
    if isinstance(exc, MalformedGraphReference):
        return 500
    return 400


@app.errorhandler(GraphError)
@app.errorhandler(EngineError)
@app.errorhandler(UnknownAlgorithm)
@app.errorhandler(InvalidPayload)
def handle_domain_error(exc: Exception):
    status = error_status(exc)
    if status >= 500:
        logger.exception("%s %s failed", request.method, request.path)
    else:
        logger.warning("rejected %s %s: %s", request.method, request.path, exc)
    return jsonify({"error": str(exc)}), status


# ---------------------------------------------------------------------------
# Views shared by every response
# ---------------------------------------------------------------------------
def view_state(ws: Workspace) -> dict:
    """Everything the page needs to redraw after any request."""
    step = ws.stepper.current_step
    algo_info = get_algorithm(ws.algorithm)
    return {
        "svg":          render_canvas(ws.graph, step, canvas_config()),
        "graph":        ws.graph.to_dict(),
        "algorithm":    ws.algorithm,
        "start":        ws.start,
        "speed":        ws.speed,
        "stepper":      ws.stepper.state.value,
        "running":      ws.graph.active_run is not None,
        "step":         step.to_dict() if step else None,
        "current_step": ws.stepper.current_idx,
        "total_steps":  ws.stepper.total_steps_fetched,
        "is_finished":  ws.stepper.is_finished,
        "progress":     progress_table(step),
        "pseudocode":   pseudocode_viewer(
            algo_info.pseudocode if algo_info else [],
            step.pseudocode_line if step else -1,
        ),
        "explanation":  explanation_panel(step.explanation if step else ""),
        "analytics":    analytics_panel(ws.metrics),
        "start_picker": start_picker(ws.graph.nodes_sorted(), ws.start),
    }


def after_edit(ws: Workspace) -> dict:
    """A structural edit invalidates the buffered steps of the last run."""
    ws.stepper.reset()
    ws.metrics = None
    ws.graph.reset_visual_state()
    if ws.start is not None and not ws.graph.has_node(ws.start):
        ws.start = None
    if ws.start is None and ws.graph.nodes:
        ws.start = ws.graph.nodes_sorted()[0]
    return view_state(ws)


def after_step(ws: Workspace) -> dict:
    run = ws.stepper.run
    if run is not None and run.done and ws.metrics is None:
        ws.metrics = summarize(run)
    return view_state(ws)


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
@with_workspace
def index(ws):
    algo_info = get_algorithm(ws.algorithm)

    html = render_template_string(INDEX_TEMPLATE,
        svg=render_canvas(ws.graph, ws.stepper.current_step, canvas_config()),
        playback=playback_controls(
            current_step=max(ws.stepper.current_idx, 0),
            total_steps=ws.stepper.total_steps_fetched,
            speed=ws.speed,
            is_finished=ws.stepper.is_finished,
        ),
        algo_selector=algorithm_selector(list_algorithms(), ws.algorithm),
        picker=start_picker(ws.graph.nodes_sorted(), ws.start),
        progress=progress_table(ws.stepper.current_step),
        key=color_key(canvas_config()),
        analytics=analytics_panel(ws.metrics),
        pseudocode=pseudocode_viewer(algo_info.pseudocode if algo_info else []),
        explanation=explanation_panel(),
    )
    return html


@app.route("/api/state")
@with_workspace
def api_state(ws):
    return jsonify(view_state(ws))


# ---------------------------------------------------------------------------
# API: Graph Editing
# ---------------------------------------------------------------------------
@app.route("/api/graph/node", methods=["POST"])
@with_workspace
def api_add_node(ws):
    data = payload()
    label = data.get("label")
    if label is not None and not isinstance(label, str):
        raise InvalidPayload(f"'label' must be a string, got {label!r}")
    node_id = ws.graph.add_node(float_field(data, "x"), float_field(data, "y"), label)
    state = after_edit(ws)
    state["id"] = node_id
    return jsonify(state), 201


@app.route("/api/graph/node/<int:node_id>", methods=["DELETE"])
@with_workspace
def api_remove_node(ws, node_id: int):
    ws.graph.remove_node(node_id)
    return jsonify(after_edit(ws))


@app.route("/api/graph/edge", methods=["POST"])
@with_workspace
def api_add_edge(ws):
    data = payload()
    edge_id = ws.graph.add_edge(
        int_field(data, "a"), int_field(data, "b"), int_field(data, "weight", default=1),
    )
    state = after_edit(ws)
    state["id"] = edge_id
    return jsonify(state), 201


@app.route("/api/graph/edge", methods=["PATCH"])
@with_workspace
def api_update_edge(ws):
    data = payload()
    ws.graph.update_edge_weight(int_field(data, "a"), int_field(data, "b"), int_field(data, "weight"))
    return jsonify(after_edit(ws))


@app.route("/api/graph/edge", methods=["DELETE"])
@with_workspace
def api_remove_edge(ws):
    data = payload()
    ws.graph.remove_edge(int_field(data, "a"), int_field(data, "b"))
    return jsonify(after_edit(ws))


@app.route("/api/graph/clear", methods=["POST"])
@with_workspace
def api_clear(ws):
    ws.graph.clear()
    return jsonify(after_edit(ws))


@app.route("/api/graph/layout", methods=["POST"])
@with_workspace
def api_layout(ws):
    mode = payload().get("mode", "circle")
    if mode == "circle":
        ws.graph.arrange_circle()
    elif mode == "grid":
        ws.graph.arrange_grid()
    else:
        raise InvalidPayload(f"Unknown layout: {mode!r}")
    return jsonify(view_state(ws))


# ---------------------------------------------------------------------------
# API: Run Control
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
@with_workspace
def api_run(ws):
    data = payload()
    algorithm = data.get("algorithm", ws.algorithm)
    start = int_field(data, "start", default=ws.start)

    # a finished run still has its colours on the graph; start from clean
    if ws.graph.active_run is None:
        ws.stepper.reset()
    run = AlgorithmRun(ws.graph, algorithm, start)

    ws.algorithm, ws.start, ws.metrics = run.info.key, start, None
    ws.stepper.start(run)
    ws.stepper.set_speed(ws.speed)
    return jsonify(after_step(ws))


@app.route("/api/run/cancel", methods=["POST"])
@with_workspace
def api_cancel(ws):
    run = ws.stepper.run
    cancelled = run.cancel() if run is not None else False
    state = view_state(ws)
    state["cancelled"] = cancelled
    return jsonify(state)


# ---------------------------------------------------------------------------
# API: Step Navigation
# ---------------------------------------------------------------------------
def _require_run(ws: Workspace) -> None:
    if ws.stepper.run is None:
        raise InvalidPayload("No run to step through; start one with /api/run")


@app.route("/api/step/next", methods=["POST"])
@with_workspace
def api_step_next(ws):
    _require_run(ws)
    ws.stepper.next_step()
    return jsonify(after_step(ws))


@app.route("/api/step/prev", methods=["POST"])
@with_workspace
def api_step_prev(ws):
    _require_run(ws)
    ws.stepper.prev_step()
    return jsonify(after_step(ws))


@app.route("/api/step/goto", methods=["POST"])
@with_workspace
def api_step_goto(ws):
    _require_run(ws)
    idx = int_field(payload(), "index")
    if not ws.stepper.goto_step(idx):
        raise InvalidPayload(f"Invalid step index: {idx}")
    return jsonify(after_step(ws))


@app.route("/api/step/end", methods=["POST"])
@with_workspace
def api_step_end(ws):
    _require_run(ws)
    ws.stepper.jump_to_end()
    return jsonify(after_step(ws))


@app.route("/api/step/play", methods=["POST"])
@with_workspace
def api_step_play(ws):
    _require_run(ws)
    ws.stepper.toggle_play()
    return jsonify(after_step(ws))


@app.route("/api/step/tick", methods=["POST"])
@with_workspace
def api_step_tick(ws):
    advanced = ws.stepper.tick()
    state = after_step(ws)
    state["advanced"] = advanced
    return jsonify(state)


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/algo", methods=["POST"])
@with_workspace
def api_config_algo(ws):
    key = payload().get("algorithm", "bfs")
    if get_algorithm(key) is None:
        raise UnknownAlgorithm(key)
    ws.algorithm = key
    return jsonify(view_state(ws))


@app.route("/api/config/start", methods=["POST"])
@with_workspace
def api_config_start(ws):
    start = int_field(payload(), "start")
    if not ws.graph.has_node(start):
        raise NodeNotFound(start)
    ws.start = start
    return jsonify(view_state(ws))


@app.route("/api/config/speed", methods=["POST"])
@with_workspace
def api_config_speed(ws):
    speed = payload().get("speed", "medium")
    if speed not in SPEED_PRESETS:
        raise InvalidPayload(f"Unknown speed: {speed!r} (expected one of {', '.join(SPEED_PRESETS)})")
    ws.speed = speed
    ws.stepper.set_speed(speed)
    return jsonify(view_state(ws))


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Graph Algorithm Stepper</title>
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
      grid-template-columns: 1fr 1fr 1fr;
      gap: 20px;
      padding: 20px;
      background: var(--bg-dark);
      max-height: 360px;
      overflow: auto;
    }

    .panel, #bottom-panel > div {
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

    .code-block {
      font-family: 'JetBrains Mono', 'Courier New', monospace;
      font-size: 13px;
      line-height: 1.6;
    }
    .code-line { padding: 2px 8px; border-radius: 4px; }
    .code-line.highlight {
      background: rgba(6, 182, 212, 0.15);
      border-left: 3px solid var(--accent-cyan);
    }

    .explanation-text { color: var(--text-secondary); line-height: 1.8; font-size: 14px; }

    table { width: 100%; border-collapse: collapse; font-size: 13px; }
    th, td { padding: 4px 6px; text-align: left; border-bottom: 1px solid var(--border); }

    button, select, input {
      background: var(--bg-darker);
      color: var(--text-primary);
      border: 1px solid var(--border);
      border-radius: 6px;
      padding: 6px 10px;
      margin: 2px;
      cursor: pointer;
    }
    .btn-primary { background: var(--accent-cyan); border: none; margin-top: 8px; }

    .swatch { display: inline-block; width: 12px; height: 12px; border-radius: 50%; margin-right: 8px; }
    .placeholder, .hint { color: var(--text-secondary); font-size: 13px; }
    .finished-badge { color: #10b981; font-weight: 700; margin-left: 8px; }
  </style>
</head>
<body>
  <div id="sidebar">
    <h2 style="margin-bottom: 20px;">Graph Algorithm Stepper</h2>
    {{ algo_selector|safe }}
    <div id="picker">{{ picker|safe }}</div>
    {{ playback|safe }}
    <div class="panel graph-editor">
      <h3>✏️ Edit Graph</h3>
      <p class="hint">Click empty canvas to add a node. Click two nodes to connect them.</p>
      <label>Weight: <input type="number" id="edge-weight" value="1" min="1" style="width: 70px"></label>
      <div class="button-row">
        <button id="btn-layout-circle">Circle</button>
        <button id="btn-layout-grid">Grid</button>
        <button id="btn-clear">Clear</button>
      </div>
    </div>
    {{ key|safe }}
    <div id="analytics">{{ analytics|safe }}</div>
  </div>

  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ svg|safe }}</div>
    </div>

    <div id="bottom-panel">
      <div>
        <h3>Pseudocode</h3>
        <div id="pseudocode">{{ pseudocode|safe }}</div>
      </div>
      <div>
        <h3>Step Explanation</h3>
        <div id="explanation">{{ explanation|safe }}</div>
      </div>
      <div id="progress">{{ progress|safe }}</div>
    </div>
  </div>

  <script>
    let selected = null;
    let ticking = false;

    async function call(method, url, data) {
      const res = await fetch(url, {
        method: method,
        headers: {'Content-Type': 'application/json'},
        body: data === undefined ? undefined : JSON.stringify(data),
      });
      const body = await res.json();
      if (!res.ok) { alert(body.error); return null; }
      redraw(body);
      return body;
    }
    const post = (url, data) => call('POST', url, data || {});

    function redraw(s) {
      document.getElementById('canvas-svg').innerHTML = s.svg;
      document.getElementById('pseudocode').innerHTML = s.pseudocode;
      document.getElementById('explanation').innerHTML = s.explanation;
      document.getElementById('progress').innerHTML = s.progress;
      document.getElementById('analytics').innerHTML = s.analytics;
      document.getElementById('picker').innerHTML = s.start_picker;
      document.getElementById('current-step').textContent = Math.max(s.current_step, 0);
      document.getElementById('total-steps').textContent = s.total_steps;
    }

    // Canvas editing
    document.getElementById('canvas-svg').addEventListener('click', async (e) => {
      const node = e.target.closest('.node');
      if (node) {
        const id = +node.dataset.id;
        if (selected === null) { selected = id; return; }
        if (selected !== id) {
          await post('/api/graph/edge', {a: selected, b: id, weight: +document.getElementById('edge-weight').value});
        }
        selected = null;
        return;
      }
      const svg = e.currentTarget.querySelector('svg');
      const box = svg.getBoundingClientRect();
      await post('/api/graph/node', {x: e.clientX - box.left, y: e.clientY - box.top});
    });

    document.getElementById('canvas-svg').addEventListener('contextmenu', async (e) => {
      const node = e.target.closest('.node');
      const edge = e.target.closest('.edge');
      e.preventDefault();
      if (node) {
        await call('DELETE', '/api/graph/node/' + node.dataset.id);
      } else if (edge) {
        const [a, b] = edge.dataset.id.split('-').map(Number);
        await call('DELETE', '/api/graph/edge', {a: a, b: b});
      }
    });

    document.getElementById('btn-layout-circle').addEventListener('click', () => post('/api/graph/layout', {mode: 'circle'}));
    document.getElementById('btn-layout-grid').addEventListener('click', () => post('/api/graph/layout', {mode: 'grid'}));
    document.getElementById('btn-clear').addEventListener('click', () => post('/api/graph/clear'));

    // Run + playback
    document.getElementById('btn-run').addEventListener('click', async () => {
      const start = document.getElementById('start-selector').value;
      await post('/api/run', {
        algorithm: document.getElementById('algo-selector').value,
        start: start === '' ? null : +start,
      });
    });
    document.getElementById('btn-next').addEventListener('click', () => post('/api/step/next'));
    document.getElementById('btn-prev').addEventListener('click', () => post('/api/step/prev'));
    document.getElementById('btn-rewind').addEventListener('click', () => post('/api/step/goto', {index: 0}));
    document.getElementById('btn-end').addEventListener('click', () => post('/api/step/end'));
    document.getElementById('btn-cancel').addEventListener('click', () => post('/api/run/cancel'));
    document.getElementById('btn-play').addEventListener('click', async () => {
      const s = await post('/api/step/play');
      if (s && s.stepper === 'playing' && !ticking) tickLoop();
    });

    // one tick in flight at a time: the next is sent only after the reply
    async function tickLoop() {
      ticking = true;
      let s = {stepper: 'playing'};
      while (s && s.stepper === 'playing') {
        await new Promise((r) => setTimeout(r, 50));
        s = await post('/api/step/tick');
      }
      ticking = false;
    }

    // Config
    document.getElementById('algo-selector').addEventListener('change', (e) => post('/api/config/algo', {algorithm: e.target.value}));
    document.getElementById('speed-selector').addEventListener('change', (e) => post('/api/config/speed', {speed: e.target.value}));
    document.addEventListener('change', (e) => {
      if (e.target.id === 'start-selector') post('/api/config/start', {start: +e.target.value});
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("Graph Algorithm Stepper on http://localhost:5000")
    app.run(debug=True, port=5000)
