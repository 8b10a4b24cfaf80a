"""
layout.py — Node Placement Helpers
==================================
Positions are presentation hints only; no algorithm reads them.
All helpers work on any iterable of Node so the Graph can call them
without an import cycle.
"""

import math
from typing import Iterable, List, Tuple

from graph.node import Node


CANVAS_W:    float = 800
CANVAS_H:    float = 500
NODE_RADIUS: float = 20


def find_open_position(
    nodes: Iterable[Node],
    canvas_w: float = CANVAS_W,
    canvas_h: float = CANVAS_H,
    node_radius: float = NODE_RADIUS,
) -> Tuple[float, float]:
    """
    Pick the free slot on a ring around the canvas centre that lies
    furthest from every existing node. The first node goes to the centre.
    """
    existing: List[Node] = list(nodes)
    cx, cy = canvas_w / 2, canvas_h / 2
    if not existing:
        return cx, cy

    padding = node_radius * 2
    radius  = min(min(canvas_w, canvas_h) / 4, cx - padding, cy - padding)
    slots   = max(6, len(existing) + 1)
    step    = 2 * math.pi / slots

    best, best_gap = (cx + radius, cy), -1.0
    for i in range(slots):
        x = cx + radius * math.cos(i * step)
        y = cy + radius * math.sin(i * step)
        gap = min(node.distance_to(x, y) for node in existing)
        if gap > best_gap:
            best, best_gap = (x, y), gap
    return best


def arrange_circle(
    nodes: Iterable[Node],
    canvas_w: float = CANVAS_W,
    canvas_h: float = CANVAS_H,
) -> None:
    """Spread nodes evenly on one circle, in insertion order."""
    ordered = list(nodes)
    n = len(ordered)
    if n == 0:
        return
    cx, cy = canvas_w / 2, canvas_h / 2
    radius = min(canvas_w, canvas_h) / 3
    for i, node in enumerate(ordered):
        angle  = 2 * math.pi * i / n
        node.x = cx + radius * math.cos(angle)
        node.y = cy + radius * math.sin(angle)


def arrange_grid(
    nodes: Iterable[Node],
    canvas_w: float = CANVAS_W,
    canvas_h: float = CANVAS_H,
    margin: float = 100,
) -> None:
    """Square-ish grid, row-major in insertion order."""
    ordered = list(nodes)
    if not ordered:
        return
    per_row = math.ceil(math.sqrt(len(ordered)))
    spacing = min((canvas_w - 2 * margin) / per_row, (canvas_h - 2 * margin) / per_row)
    for i, node in enumerate(ordered):
        row, col = divmod(i, per_row)
        node.x = margin + col * spacing
        node.y = margin + row * spacing
