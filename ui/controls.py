"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – prev/next/rewind/end/speed
  • algorithm_selector  – dropdown + run button
  • start_picker        – start-node dropdown
  • progress_table      – the running algorithm's bookkeeping, as a table
  • color_key           – what each node colour means
  • analytics_panel     – nodes reached, tree edges, tree weight, …
  • pseudocode_viewer   – with live line highlighting
  • explanation_panel   – "why this step happened"

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from html import escape
from typing import Dict, List, Optional

from algorithms import (
    AlgoInfo, StepEvent, BfsTable, DfsTable, DijkstraTable, MstTable, INF,
)
from engine import RunMetrics, SPEED_PRESETS
from ui.canvas import CONFIG, CanvasConfig


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    current_step: int = 0,
    total_steps: int = 0,
    speed: str = "medium",
    is_finished: bool = False,
) -> str:
    speed_options = []
    for name, seconds in SPEED_PRESETS.items():
        sel = 'selected' if name == speed else ''
        speed_options.append(f'<option value="{name}" {sel}>{name.capitalize()} ({seconds:g}s)</option>')

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-rewind" title="Rewind to start">⏮</button>
        <button id="btn-prev" title="Previous step">◀</button>
        <button id="btn-play" title="Play">▶▶</button>
        <button id="btn-next" title="Next step">▶</button>
        <button id="btn-end" title="Jump to end">⏭</button>
        <button id="btn-cancel" title="Stop the run">■</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{current_step}</span> / <span id="total-steps">{total_steps}</span>
        {' <span class="finished-badge">FINISHED</span>' if is_finished else ''}
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">
          {''.join(speed_options)}
        </select>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(algorithms: List[AlgoInfo], selected_key: str = "bfs") -> str:
    options = []
    for algo in algorithms:
        sel = 'selected' if algo.key == selected_key else ''
        options.append(
            f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity_time}</option>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector">
        {''.join(options)}
      </select>
      <button id="btn-run" class="btn-primary">▶ Run Algorithm</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Start Node Picker
# ---------------------------------------------------------------------------
def start_picker(node_ids: List[int], start: Optional[int] = None) -> str:
    options = []
    for nid in node_ids:
        sel = 'selected' if nid == start else ''
        options.append(f'<option value="{nid}" {sel}>{nid}</option>')
    if not options:
        options.append('<option value="">-- add a node first --</option>')

    return f"""
    <div class="panel start-picker">
      <h3>🎯 Start Node</h3>
      <select id="start-selector">
        {''.join(options)}
      </select>
    </div>
    """


# ---------------------------------------------------------------------------
# Progress Table — one layout per algorithm table type
# ---------------------------------------------------------------------------
def _fmt(value) -> str:
    if value is None:
        return "-"
    if value == INF:
        return "∞"
    return str(value)


def _rows(rows: List[List[str]]) -> str:
    return "".join(
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>"
        for row in rows
    )


def _table(headers: List[str], rows: List[List[str]]) -> str:
    head = "".join(f"<th>{h}</th>" for h in headers)
    return f'<table class="progress-table"><thead><tr>{head}</tr></thead><tbody>{_rows(rows)}</tbody></table>'


def progress_table(step: Optional[StepEvent] = None) -> str:
    """Tabular view of the algorithm's bookkeeping at `step`."""
    if step is None or step.table is None:
        return """
        <div class="panel progress-panel">
          <h3>📋 Progress</h3>
          <p class="placeholder">Run an algorithm to see its progress.</p>
        </div>
        """

    table = step.table
    if isinstance(table, DijkstraTable):
        body = _table(
            ["Node", "Distance", "Previous"],
            [[str(n), _fmt(d), _fmt(table.previous.get(n))]
             for n, d in sorted(table.distances.items())],
        )
    elif isinstance(table, BfsTable):
        body = _table(
            ["Node", "Level", "Parent"],
            [[str(n), str(lvl), _fmt(table.parents.get(n))]
             for n, lvl in sorted(table.levels.items())],
        )
        queue = ", ".join(str(n) for n in table.queue) or "empty"
        body += f'<p class="queue">Queue: [{queue}]</p>'
    elif isinstance(table, DfsTable):
        body = _table(
            ["Node", "Discovery", "Finish", "Parent"],
            [[str(n), str(t), _fmt(table.finish.get(n)), _fmt(table.parents.get(n))]
             for n, t in sorted(table.discovery.items())],
        )
    elif isinstance(table, MstTable):
        included = ", ".join(str(n) for n in table.included) or "none"
        edges = ", ".join(f"{p}–{c} ({w})" for p, c, w in table.mst_edges) or "none"
        body = _table(
            ["Included", "MST Edges", "Total Cost"],
            [[included, edges, str(table.total_cost)]],
        )
        if table.spanning is True:
            body += '<p class="status">✅ Spanning tree covers every node.</p>'
        elif table.spanning is False:
            missing = ", ".join(str(n) for n in table.uncovered)
            body += f'<p class="status">⚠️ Graph is disconnected. Not reached: {missing}</p>'
    else:
        body = ""

    return f"""
    <div class="panel progress-panel">
      <h3>📋 Progress — step {step.step_number}</h3>
      {body}
    </div>
    """


# ---------------------------------------------------------------------------
# Colour Key
# ---------------------------------------------------------------------------
_KEY_LABELS: Dict[str, str] = {
    "unvisited": "Unvisited",
    "current":   "Current",
    "visited":   "Visited",
    "on_path":   "Path / Tree",
}


def color_key(config: CanvasConfig = CONFIG) -> str:
    items = []
    for state, label in _KEY_LABELS.items():
        color = config.node_colors[state]
        items.append(
            f'<div class="key-item"><span class="swatch" style="background:{color}"></span>{label}</div>'
        )
    return f"""
    <div class="panel color-key">
      <h3>🎨 Colours</h3>
      {''.join(items)}
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📊 Analytics</h3>
          <p class="placeholder">Run an algorithm to see metrics.</p>
        </div>
        """

    reach = "✅ All nodes" if metrics.spanning else "❌ Some nodes unreachable"

    return f"""
    <div class="panel analytics-panel">
      <h3>📊 Analytics — {metrics.algo_label}</h3>
      <table>
        <tr><td>Start Node:</td><td><strong>{metrics.start}</strong></td></tr>
        <tr><td>Nodes Reached:</td><td><strong>{metrics.nodes_reached} / {metrics.nodes_total}</strong></td></tr>
        <tr><td>Tree Edges:</td><td><strong>{metrics.tree_edges}</strong></td></tr>
        <tr><td>Tree Weight:</td><td><strong>{metrics.tree_weight}</strong></td></tr>
        <tr><td>Total Steps:</td><td><strong>{metrics.total_steps}</strong></td></tr>
        <tr><td>Wall Time:</td><td><strong>{metrics.wall_time_ms:.2f} ms</strong></td></tr>
        <tr><td>Reach:</td><td><strong>{reach}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], current_line: int = -1) -> str:
    if not pseudocode_lines:
        return """
        <div class="code-block">
          <div style="color: #7d8590; padding: 20px; text-align: center;">
            Select an algorithm to view pseudocode
          </div>
        </div>
        """

    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = 'highlight' if i == current_line else ''
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{escape(line)}</div>')

    return f"""
    <div class="code-block">
      {''.join(lines_html)}
    </div>
    """


# ---------------------------------------------------------------------------
# Explanation Panel
# ---------------------------------------------------------------------------
def explanation_panel(explanation: str = "") -> str:
    if not explanation:
        return '<div class="explanation-text">▶ Click <strong>Run Algorithm</strong> to see step-by-step explanations of what\'s happening at each stage.</div>'
    return f'<div class="explanation-text">{escape(explanation)}</div>'
