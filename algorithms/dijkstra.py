"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Single-source shortest paths by repeated linear scan of the unvisited
set.  No heap: graphs are small and the scan gives a fixed tie-break —
the unvisited set is walked in ascending node id and the FIRST node with
the minimum distance wins.

Yields a StepEvent at:
  0. Reset
  1. Select the closest unvisited node  →  CURRENT, full table snapshot
  2. Each relaxation that improves a distance  →  edge + neighbour VISITED
     (relaxations that do not improve anything are silent)
  3. After the loop, one step per reachable node (ascending id) colouring
     its predecessor chain back to `start` ON_PATH

Stops when the unvisited set is empty or its minimum is ∞; unreachable
nodes keep distance ∞.

Correctness note: weights are positive integers (the Graph refuses
anything else), which is what Dijkstra needs.
"""

from typing import Dict, Iterator, List, Optional, Set

from graph import Graph
from algorithms.common import edge_for, require_start, reset_step
from algorithms.step import INF, DijkstraTable, StepBuilder, StepEvent, StepKind


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, start):",                  # 0
    "    dist ← {v: ∞ for v in V};  dist[start] ← 0",  # 1
    "    unvisited ← V",                            # 2
    "    while unvisited is not empty:",             # 3
    "        u ← argmin dist over unvisited",       # 4
    "        if dist[u] = ∞: break",                # 5
    "        unvisited.remove(u)",                  # 6
    "        for v in adj(u) ∩ unvisited:",         # 7
    "            if dist[u] + w(u, v) < dist[v]:",  # 8
    "                dist[v] ← dist[u] + w(u, v)",  # 9
    "                prev[v] ← u",                  # 10
    "    for each reachable v: highlight prev chain",  # 11
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(graph: Graph, start: int) -> Iterator[StepEvent]:
    require_start(graph, start, "dijkstra")
    return _dijkstra(graph, start)


def _dijkstra(graph: Graph, start: int) -> Iterator[StepEvent]:
    sb = StepBuilder("dijkstra")
    yield reset_step(sb, graph, "Reset: every node and edge returns to the unvisited colour.")

    order = graph.nodes_sorted()
    dist:      Dict[int, float] = {nid: INF for nid in order}
    previous:  Dict[int, int]   = {}
    unvisited: List[int]        = list(order)    # kept ascending
    pending:   Set[int]         = set(order)
    dist[start] = 0

    def table(current: Optional[int] = None) -> DijkstraTable:
        return DijkstraTable(
            distances=dict(dist),
            previous=dict(previous),
            unvisited=tuple(unvisited),
            current=current,
        )

    # --- main loop ---
    while unvisited:
        current, best = None, INF
        for nid in unvisited:
            if dist[nid] < best:
                current, best = nid, dist[nid]
        if current is None:
            break

        unvisited.remove(current)
        pending.discard(current)

        # -- select event --
        sb.kind            = StepKind.SELECT
        sb.set_current(current)
        sb.pseudocode_line = 4
        sb.explanation     = (
            f"Select node {current}: distance {best:g} is the smallest among unvisited nodes. "
            f"This distance is now FINAL."
        )
        yield sb.build(table(current))

        # -- relax neighbours --
        for nbr in graph.neighbours(current):
            edge = edge_for(graph, current, nbr)
            if nbr not in pending:
                continue
            candidate = dist[current] + edge.weight
            if candidate >= dist[nbr]:
                continue

            old = dist[nbr]
            dist[nbr]     = candidate
            previous[nbr] = current

            sb.kind            = StepKind.RELAX
            sb.current_node    = current
            sb.visit_edge(edge.id)
            sb.visit(nbr)
            sb.pseudocode_line = 9
            old_txt = "∞" if old == INF else f"{old:g}"
            sb.explanation     = (
                f"Relax {current}→{nbr}: {dist[current]:g} + {edge.weight} = {candidate:g} "
                f"< {old_txt} → distance of {nbr} updated, previous = {current}."
            )
            yield sb.build(table(current))

        sb.settle(current)

    # --- shortest-path highlight, one reachable node at a time ---
    reachable = [nid for nid in order if nid != start and dist[nid] != INF]
    for i, target in enumerate(reachable):
        sb.kind            = StepKind.PATH
        sb.current_node    = target
        sb.pseudocode_line = 11
        chain = [target]
        cur = target
        while cur in previous:
            prev = previous[cur]
            sb.choose_edge(edge_for(graph, prev, cur).id)
            chain.append(prev)
            cur = prev
        sb.explanation = (
            f"Shortest path to {target} costs {dist[target]:g}: "
            f"{' → '.join(str(n) for n in reversed(chain))}"
        )
        yield sb.build(table(), is_final=(i == len(reachable) - 1))

    if not reachable:
        sb.kind            = StepKind.PATH
        sb.pseudocode_line = 11
        sb.explanation     = f"No node other than {start} is reachable; there are no paths to highlight."
        yield sb.build(table(), is_final=True)
