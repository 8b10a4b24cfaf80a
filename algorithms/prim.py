"""
prim.py — Prim's Minimum Spanning Tree
=======================================
Grows a tree from `start` by repeatedly including the outside node with
the cheapest connection to the tree.  Same selection policy as Dijkstra:
a linear scan in ascending node id, first minimum wins.

Yields a StepEvent at:
  0. Reset
  1. Each inclusion  →  node CURRENT, its tree edge ON_PATH, snapshot of
     the included set, MST edges and running total (taken after the
     neighbours' costs were updated)
  2. Complete  →  `spanning` tells whether every node was reached; the
     `uncovered` ids are the part of the graph the forest does not span
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple

from graph import Graph
from algorithms.common import edge_for, require_start, reset_step
from algorithms.step import INF, MstTable, StepBuilder, StepEvent, StepKind


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Prim(graph, start):",                      # 0
    "    cost ← {v: ∞ for v in V};  cost[start] ← 0",  # 1
    "    included ← {}",                            # 2
    "    while some v ∉ included has cost[v] < ∞:",  # 3
    "        u ← argmin cost over V \\ included",    # 4
    "        included.add(u)",                      # 5
    "        if parent[u] exists: add (parent[u], u) to MST",  # 6
    "        for v in adj(u) \\ included:",          # 7
    "            if w(u, v) < cost[v]:",            # 8
    "                cost[v] ← w(u, v);  parent[v] ← u",  # 9
    "    spanning ← included = V",                  # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def prim_mst(graph: Graph, start: int) -> Iterator[StepEvent]:
    require_start(graph, start, "mst")
    return _prim(graph, start)


def _prim(graph: Graph, start: int) -> Iterator[StepEvent]:
    sb = StepBuilder("mst")
    yield reset_step(sb, graph, "Reset: every node and edge returns to the unvisited colour.")

    order = graph.nodes_sorted()
    costs:     Dict[int, float]               = {nid: INF for nid in order}
    parents:   Dict[int, int]                 = {}
    included:  List[int]                      = []
    in_tree:   Set[int]                       = set()
    mst_edges: List[Tuple[int, int, int]]     = []
    total = 0
    costs[start] = 0

    def table(current: Optional[int] = None, spanning: Optional[bool] = None,
              uncovered: Tuple[int, ...] = ()) -> MstTable:
        return MstTable(
            included=tuple(included),
            mst_edges=tuple(mst_edges),
            total_cost=total,
            costs=dict(costs),
            parents=dict(parents),
            current=current,
            spanning=spanning,
            uncovered=uncovered,
        )

    while len(included) < len(order):
        node, best = None, INF
        for nid in order:
            if nid not in in_tree and costs[nid] < best:
                node, best = nid, costs[nid]
        if node is None:
            break

        included.append(node)
        in_tree.add(node)

        sb.kind            = StepKind.INCLUDE
        sb.set_current(node)
        if node in parents:
            parent = parents[node]
            edge   = edge_for(graph, parent, node)
            sb.choose_edge(edge.id)
            mst_edges.append((parent, node, edge.weight))
            total += edge.weight
            sb.pseudocode_line = 6
            sb.explanation     = (
                f"Include node {node} via edge {parent}–{node} (weight {edge.weight}), "
                f"the cheapest link into the tree. Total weight is now {total}."
            )
        else:
            sb.pseudocode_line = 5
            sb.explanation     = f"Include start node {node}; the tree grows from here."

        for nbr in graph.neighbours(node):
            edge = edge_for(graph, node, nbr)
            if nbr in in_tree:
                continue
            if edge.weight < costs[nbr]:
                costs[nbr]   = edge.weight
                parents[nbr] = node

        yield sb.build(table(node))
        sb.settle(node)

    uncovered = tuple(nid for nid in order if nid not in in_tree)
    spanning  = not uncovered

    sb.kind            = StepKind.COMPLETE
    sb.pseudocode_line = 10
    if spanning:
        sb.explanation = (
            f"All {len(order)} node(s) included: minimum spanning tree with "
            f"{len(mst_edges)} edge(s), total weight {total}."
        )
    else:
        sb.explanation = (
            f"No remaining node can be connected. The tree covers {len(included)} of "
            f"{len(order)} node(s) — NOT a spanning tree. Uncovered: "
            f"{', '.join(str(n) for n in uncovered)}."
        )
    yield sb.build(table(spanning=spanning, uncovered=uncovered), is_final=True)
