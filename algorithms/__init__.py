"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm, run_algorithm

REGISTRY is a dict:
    {
        "bfs": AlgoInfo(key, label, fn, pseudocode, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and UI both consume it
so adding a new algorithm is: write the generator, add one entry here.

`run_algorithm(key, graph, start)` is the whole invocation surface:
pick one of bfs / dfs / dijkstra / mst plus a start node id.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from graph import Graph

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms.bfs      import bfs       as _bfs,      PSEUDOCODE as _bfs_pc
from algorithms.dfs      import dfs       as _dfs,      PSEUDOCODE as _dfs_pc
from algorithms.dijkstra import dijkstra  as _dijkstra, PSEUDOCODE as _dij_pc
from algorithms.prim     import prim_mst  as _prim,     PSEUDOCODE as _prim_pc
from algorithms.step     import (
    StepEvent, StepKind, StepBuilder, INF, table_to_dict,
    BfsTable, DfsTable, DijkstraTable, MstTable,
)


class UnknownAlgorithm(ValueError):
    def __init__(self, key: str):
        super().__init__(f"Unknown algorithm: {key!r} (expected one of {', '.join(REGISTRY)})")
        self.key = key


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "bfs"
    label:            str                    # human label, e.g. "Breadth-First Search"
    fn:               Callable               # (graph, start) -> Iterator[StepEvent]
    pseudocode:       List[str]              # lines for the side-panel
    tags:             List[str] = field(default_factory=list)
    uses_weights:     bool      = False
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", fn=_bfs, pseudocode=_bfs_pc,
        tags=["unweighted", "traversal", "shortest-path"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer by layer and builds the fewest-hops tree.",
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", fn=_dfs, pseudocode=_dfs_pc,
        tags=["unweighted", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking; records discovery and finish times.",
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", fn=_dijkstra, pseudocode=_dij_pc,
        tags=["weighted", "shortest-path"], uses_weights=True,
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Finalises the closest node each round; shortest paths to every reachable node.",
    ),

    "mst": AlgoInfo(
        key="mst", label="Prim's Minimum Spanning Tree", fn=_prim, pseudocode=_prim_pc,
        tags=["weighted", "spanning-tree"], uses_weights=True,
        complexity_time="O(V²)", complexity_space="O(V)",
        description="Grows the cheapest tree from the start node, one edge at a time.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def require_algorithm(key: str) -> AlgoInfo:
    info = REGISTRY.get(key)
    if info is None:
        raise UnknownAlgorithm(key)
    return info


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def run_algorithm(key: str, graph: Graph, start: int) -> Iterator[StepEvent]:
    """Validate and start one algorithm.  Returns its lazy step sequence."""
    return require_algorithm(key).fn(graph, start)


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "UnknownAlgorithm",
    "get_algorithm",
    "require_algorithm",
    "list_algorithms",
    "run_algorithm",
    "StepEvent",
    "StepKind",
    "StepBuilder",
    "INF",
    "table_to_dict",
    "BfsTable",
    "DfsTable",
    "DijkstraTable",
    "MstTable",
]
