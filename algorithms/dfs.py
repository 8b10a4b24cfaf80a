"""
dfs.py — Depth-First Search
=============================
Recursive pre-order DFS, run on an explicit frame stack so deep graphs
never hit Python's recursion limit.  Each frame is [node, neighbours,
next index], exactly what a recursive call would keep on its stack, so
the visiting order is identical to the recursive version.

Yields a StepEvent at:
  0. Reset
  1. Enter a node       →  discovery time, CURRENT
  2. Descend an edge    →  edge VISITED, before entering the child
  3. Finish a node      →  finish time, VISITED

Discovery and finish times share one clock, so finish > discovery for
every node.  Only the component containing `start` is explored.
"""

from typing import Dict, Iterator, List, Optional

from graph import Graph
from algorithms.common import edge_for, require_start, reset_step
from algorithms.step import DfsTable, StepBuilder, StepEvent, StepKind


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DFS(graph, start):",                       # 0
    "    time ← 0",                                 # 1
    "    visit(start, parent=∅)",                   # 2
    "def visit(node, parent):",                     # 3
    "    time ← time + 1;  discovery[node] ← time", # 4
    "    for neighbour in adj(node):",              # 5
    "        if neighbour not discovered:",          # 6
    "            mark edge (node, neighbour)",      # 7
    "            visit(neighbour, node)",           # 8
    "    time ← time + 1;  finish[node] ← time",    # 9
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dfs(graph: Graph, start: int) -> Iterator[StepEvent]:
    require_start(graph, start, "dfs")
    return _dfs(graph, start)


def _dfs(graph: Graph, start: int) -> Iterator[StepEvent]:
    sb = StepBuilder("dfs")
    yield reset_step(sb, graph, "Reset: every node and edge returns to the unvisited colour.")

    time = 0
    discovery: Dict[int, int]           = {}
    finish:    Dict[int, int]           = {}
    parents:   Dict[int, Optional[int]] = {}
    frames:    List[list]               = []

    def table() -> DfsTable:
        return DfsTable(
            discovery=dict(discovery),
            finish=dict(finish),
            parents=dict(parents),
            stack=tuple(f[0] for f in frames),
            time=time,
        )

    def enter(node: int, parent: Optional[int]) -> StepEvent:
        nonlocal time
        time += 1
        discovery[node] = time
        parents[node]   = parent
        frames.append([node, graph.neighbours(node), 0])
        sb.kind            = StepKind.ENTER
        sb.set_current(node)
        sb.pseudocode_line = 4
        sb.explanation     = (
            f"Enter node {node} at time {time}"
            + (f" (reached from {parent})." if parent is not None else " — the start node.")
            + " DFS goes as deep as possible before backtracking."
        )
        return sb.build(table())

    yield enter(start, None)

    while frames:
        frame = frames[-1]
        node, nbrs, idx = frame

        if idx < len(nbrs):
            frame[2] += 1
            nbr  = nbrs[idx]
            edge = edge_for(graph, node, nbr)
            if nbr in discovery:
                continue

            # -- descend --
            sb.kind            = StepKind.DESCEND
            sb.current_node    = node
            sb.visit_edge(edge.id)
            sb.pseudocode_line = 7
            sb.explanation     = f"Neighbour {nbr} of {node} is undiscovered — follow edge {node}–{nbr}."
            yield sb.build(table())

            yield enter(nbr, node)
            continue

        # -- all neighbours done: finish --
        frames.pop()
        time += 1
        finish[node] = time
        sb.kind            = StepKind.FINISH
        sb.current_node    = node
        sb.visit(node)
        sb.pseudocode_line = 9
        sb.explanation     = (
            f"Every neighbour of {node} is done: finish time {time}."
            + (f" Backtrack to {parents[node]}." if parents[node] is not None else " Traversal complete.")
        )
        yield sb.build(table(), is_final=not frames)
