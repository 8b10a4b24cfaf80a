"""
canvas.py — SVG Graph Renderer
================================
Pure rendering function: Graph (+ current StepEvent) → SVG string.

The renderer consumes:
  • graph   – node positions, edges, and the visual state the engine
              applied for the step on display
  • step    – the current StepEvent, only to glow the current node / edge
  • config  – visual config (canvas size, colours, fonts, …)

Design decisions:
  - NO mutation.  The engine is the only writer of visual state; this
    function just reads it and returns a string.
  - State-based colouring is a dict lookup: VisualState value → hex colour.
  - Weights are always drawn: every edge is weighted.
"""

import math
from html import escape
from typing import Dict, Optional

from graph import Graph, Node, Edge
from algorithms import StepEvent


# ---------------------------------------------------------------------------
# Visual Config — colour palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 800
    height: int = 500
    bg:     str = "#0d1117"

    # node colours (state → fill)
    node_colors: Dict[str, str] = {
        "unvisited": "#4CAF50",   # green
        "current":   "#FFC107",   # amber
        "visited":   "#E91E63",   # pink
        "on_path":   "#2196F3",   # blue
    }

    # edge colours (state → stroke)
    edge_colors: Dict[str, str] = {
        "unvisited": "#999999",
        "current":   "#FFC107",
        "visited":   "#E91E63",
        "on_path":   "#2196F3",
    }

    # node
    node_radius:        int = 20
    node_stroke:        str = "#ffffff"
    node_stroke_width:  int = 2
    node_label_color:   str = "#ffffff"
    node_label_size:    int = 14

    # edge
    edge_width:         int = 2
    edge_width_path:    int = 4
    edge_weight_color:  str = "#ffffff"
    edge_weight_size:   int = 12
    edge_weight_bg:     str = "rgba(0, 0, 0, 0.6)"


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(
    graph: Graph,
    step: Optional[StepEvent] = None,
    config: CanvasConfig = CONFIG,
) -> str:
    """
    Returns an SVG string.

    Args:
        graph  : The graph to render, coloured by its current visual state.
        step   : Step on display (or None for a static graph).
        config : Visual config.
    """

    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg">',
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>',
    ]

    # -- edges (draw first so nodes sit on top) --
    for edge in graph.edges.values():
        svg_parts.append(_render_edge(graph, edge, step, config))

    # -- nodes --
    for node in graph.nodes.values():
        svg_parts.append(_render_node(node, step, config))

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


# ---------------------------------------------------------------------------
# Node Rendering
# ---------------------------------------------------------------------------
def _render_node(node: Node, step: Optional[StepEvent], config: CanvasConfig) -> str:
    fill = config.node_colors.get(node.state.value, config.node_colors["unvisited"])

    glow = ""
    if step and step.current_node == node.id:
        glow = (
            f'<circle cx="{node.x}" cy="{node.y}" r="{config.node_radius + 8}" fill="none" '
            f'stroke="{config.node_colors["current"]}" stroke-width="2" opacity="0.4"/>'
        )

    cx, cy = node.x, node.y
    parts = [
        f'<g class="node" data-id="{node.id}" data-state="{node.state.value}">',
        glow,
        f'  <circle cx="{cx}" cy="{cy}" r="{config.node_radius}" '
        f'fill="{fill}" stroke="{config.node_stroke}" stroke-width="{config.node_stroke_width}"/>',
        f'  <text x="{cx}" y="{cy + 5}" text-anchor="middle" '
        f'font-size="{config.node_label_size}" font-family="Arial, sans-serif" '
        f'fill="{config.node_label_color}">{escape(node.label)}</text>',
        '</g>',
    ]
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Edge Rendering
# ---------------------------------------------------------------------------
def _render_edge(graph: Graph, edge: Edge, step: Optional[StepEvent], config: CanvasConfig) -> str:
    a = graph.get_node(edge.a)
    b = graph.get_node(edge.b)
    if not a or not b:
        return ""

    state_key = edge.state.value
    stroke = config.edge_colors.get(state_key, config.edge_colors["unvisited"])
    stroke_width = config.edge_width_path if state_key == "on_path" else config.edge_width
    if step and step.current_edge == edge.id:
        stroke_width += 2

    # shorten the line by node_radius on both ends
    dx, dy = b.x - a.x, b.y - a.y
    dist = math.sqrt(dx * dx + dy * dy)
    if dist < 0.001:
        return ""  # both nodes on the same spot
    ux, uy = dx / dist, dy / dist
    r = config.node_radius

    parts = [f'<g class="edge" data-id="{edge.id}" data-state="{state_key}">']
    parts.append(
        f'  <line x1="{a.x + ux * r}" y1="{a.y + uy * r}" x2="{b.x - ux * r}" y2="{b.y - uy * r}" '
        f'stroke="{stroke}" stroke-width="{stroke_width}"/>'
    )

    # weight label at the midpoint
    mx, my = (a.x + b.x) / 2, (a.y + b.y) / 2
    parts.append(f'  <circle cx="{mx}" cy="{my}" r="12" fill="{config.edge_weight_bg}"/>')
    parts.append(
        f'  <text x="{mx}" y="{my + 4}" text-anchor="middle" '
        f'font-size="{config.edge_weight_size}" font-family="Arial, sans-serif" '
        f'fill="{config.edge_weight_color}">{edge.weight}</text>'
    )
    parts.append('</g>')
    return "\n".join(parts)
