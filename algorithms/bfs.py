"""
bfs.py — Breadth-First Search
==============================
Generator-based BFS over the component reachable from `start`.
Yields a StepEvent at every meaningful event:
  0. Reset       →  every node / edge UNVISITED
  1. Discover the root  →  level 0, queue = [start]
  2. Dequeue a node     →  mark it CURRENT
  3. Discover each unseen neighbour  →  node + edge VISITED, level = parent + 1
  4. Final step  →  every BFS tree edge (child → parent) ON_PATH

A node turns VISITED once its neighbours have been scanned; that change
rides on the next emitted step.

Pseudocode lines are 0-indexed and match the PSEUDOCODE constant
exported alongside the generator so the UI can highlight them live.
"""

from collections import deque
from typing import Deque, Dict, Iterator, List, Optional

from graph import Graph
from algorithms.common import edge_for, require_start, reset_step
from algorithms.step import BfsTable, StepBuilder, StepEvent, StepKind


# ---------------------------------------------------------------------------
# Pseudocode — each string is one displayed line; index = pseudocode_line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(graph, start):",                       # 0
    "    level ← {start: 0};  parent ← {start: ∅}",   # 1
    "    queue ← [start]",                          # 2
    "    while queue is not empty:",                 # 3
    "        node ← queue.dequeue()",               # 4
    "        for neighbour in adj(node):",          # 5
    "            if neighbour has no level:",        # 6
    "                level[neighbour] ← level[node] + 1",  # 7
    "                parent[neighbour] ← node",     # 8
    "                queue.enqueue(neighbour)",     # 9
    "    highlight every (parent[v], v) edge",      # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def bfs(graph: Graph, start: int) -> Iterator[StepEvent]:
    """
    Yields StepEvent snapshots for every event during BFS execution.

    Raises InvalidStartNode immediately (before any step) if `start` is
    not in the graph.
    """
    require_start(graph, start, "bfs")
    return _bfs(graph, start)


def _bfs(graph: Graph, start: int) -> Iterator[StepEvent]:
    sb = StepBuilder("bfs")
    yield reset_step(sb, graph, "Reset: every node and edge returns to the unvisited colour.")

    queue:   Deque[int]               = deque([start])
    levels:  Dict[int, int]           = {start: 0}
    parents: Dict[int, Optional[int]] = {start: None}

    def table(current: Optional[int] = None) -> BfsTable:
        return BfsTable(levels=dict(levels), parents=dict(parents), queue=tuple(queue), current=current)

    # --- root discovery ---
    sb.kind            = StepKind.DISCOVER
    sb.pseudocode_line = 2
    sb.explanation     = (
        f"Initialise: start node {start} gets level 0 and is placed into the queue. "
        f"BFS explores layer by layer from here."
    )
    yield sb.build(table())

    # --- main loop ---
    while queue:
        node = queue.popleft()

        # -- dequeue event --
        sb.kind            = StepKind.PROCESS
        sb.set_current(node)
        sb.pseudocode_line = 4
        sb.explanation     = (
            f"Dequeue node {node} (level {levels[node]}) — it is now the CURRENT node. "
            f"BFS always dequeues the node that was discovered earliest (FIFO)."
        )
        yield sb.build(table(node))

        # -- discover neighbours --
        for nbr in graph.neighbours(node):
            edge = edge_for(graph, node, nbr)
            if nbr in levels:
                continue

            levels[nbr]  = levels[node] + 1
            parents[nbr] = node
            queue.append(nbr)

            sb.kind            = StepKind.DISCOVER
            sb.current_node    = node
            sb.visit(nbr)
            sb.visit_edge(edge.id)
            sb.pseudocode_line = 9
            sb.explanation     = (
                f"Neighbour {nbr} of {node} has no level yet: level {levels[nbr]}, "
                f"parent {node}. Enqueue it."
            )
            yield sb.build(table(node))

        sb.settle(node)

    # --- tree highlight ---
    sb.kind            = StepKind.TREE
    sb.pseudocode_line = 10
    for nid, parent in parents.items():
        if parent is not None:
            sb.choose_edge(edge_for(graph, parent, nid).id)
    tree_edges = len(parents) - 1
    sb.explanation = (
        f"Queue is empty. {len(levels)} node(s) reached; the {tree_edges} BFS tree edge(s) "
        f"give a fewest-hops route from {start} to every one of them."
    )
    yield sb.build(table(), is_final=True)
