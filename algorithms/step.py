"""
step.py — Algorithm Step Snapshot
==================================
Every algorithm is a generator that yields StepEvent objects.
A StepEvent is a frozen-in-time picture of everything a display
needs to render one frame:

    • Which nodes / edges changed visual state on this step
    • The node / edge being worked on right now
    • The algorithm's full bookkeeping table (levels, discovery times,
      distances, MST edges, …) for the progress panel
    • Which line of pseudocode is executing right now
    • A plain-English explanation of *why* this step happened

Design decisions:
  - StepEvent and the tables are frozen dataclasses.  They are SNAPSHOTS:
    every dict / sequence in them is a private copy taken at build time.
    The generator is the only producer; the engine applies them, the
    renderer reads them.
  - `node_states` and `edge_states` hold only what CHANGED, so applying a
    step is one pass over a handful of entries.
  - One table type per algorithm instead of a free-form overlay dict, so a
    renderer can switch on the type.
"""

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from graph import VisualState


INF = math.inf


class StepKind(Enum):
    RESET    = "reset"      # every node / edge back to UNVISITED
    DISCOVER = "discover"   # BFS: node gets a level and joins the queue
    PROCESS  = "process"    # BFS: node dequeued and expanded
    DESCEND  = "descend"    # DFS: tree edge taken before recursing
    ENTER    = "enter"      # DFS: node discovered
    FINISH   = "finish"     # DFS: all neighbours done
    TREE     = "tree"       # BFS: final tree-edge highlight
    SELECT   = "select"     # Dijkstra: minimum-distance node chosen
    RELAX    = "relax"      # Dijkstra: a distance improved
    PATH     = "path"       # Dijkstra: predecessor chain highlighted
    INCLUDE  = "include"    # Prim: node joins the tree
    COMPLETE = "complete"   # Prim: summary, spanning or not


# ---------------------------------------------------------------------------
# Per-algorithm bookkeeping tables
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BfsTable:
    levels:  Dict[int, int]             = field(default_factory=dict)
    parents: Dict[int, Optional[int]]   = field(default_factory=dict)
    queue:   Tuple[int, ...]            = ()
    current: Optional[int]              = None


@dataclass(frozen=True)
class DfsTable:
    discovery: Dict[int, int]           = field(default_factory=dict)
    finish:    Dict[int, int]           = field(default_factory=dict)
    parents:   Dict[int, Optional[int]] = field(default_factory=dict)
    stack:     Tuple[int, ...]          = ()   # recursion path, root first
    time:      int                      = 0


@dataclass(frozen=True)
class DijkstraTable:
    distances: Dict[int, float]         = field(default_factory=dict)
    previous:  Dict[int, int]           = field(default_factory=dict)
    unvisited: Tuple[int, ...]          = ()
    current:   Optional[int]            = None


@dataclass(frozen=True)
class MstTable:
    included:   Tuple[int, ...]                  = ()
    mst_edges:  Tuple[Tuple[int, int, int], ...] = ()   # (parent, child, weight)
    total_cost: int                              = 0
    costs:      Dict[int, float]                 = field(default_factory=dict)
    parents:    Dict[int, int]                   = field(default_factory=dict)
    current:    Optional[int]                    = None
    spanning:   Optional[bool]                   = None  # set on the COMPLETE step
    uncovered:  Tuple[int, ...]                  = ()


Table = Union[BfsTable, DfsTable, DijkstraTable, MstTable]


# ---------------------------------------------------------------------------
# StepEvent
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StepEvent:
    """
    Attributes:
        step_number     : 0-based index of this step in the run.
        algorithm       : Registry key ("bfs", "dfs", "dijkstra", "mst").
        kind            : StepKind — what sort of decision this step records.
        current_node    : Node being processed right now (or None).
        current_edge    : Edge id being traversed right now (or None).
        node_states     : {node_id: VisualState} — only nodes that CHANGED.
        edge_states     : {edge_id: VisualState} — only edges that CHANGED.
        table           : The algorithm's bookkeeping snapshot.
        pseudocode_line : 0-based index into the algorithm's PSEUDOCODE.
        explanation     : Human-readable "why" text.
        is_final        : True on the very last step of the run.
    """

    step_number:     int                        = 0
    algorithm:       str                        = ""
    kind:            StepKind                   = StepKind.RESET
    current_node:    Optional[int]              = None
    current_edge:    Optional[str]              = None
    node_states:     Dict[int, VisualState]     = field(default_factory=dict)
    edge_states:     Dict[str, VisualState]     = field(default_factory=dict)
    table:           Optional[Table]            = None
    pseudocode_line: int                        = 0
    explanation:     str                        = ""
    is_final:        bool                       = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view: enums as values, ∞ as None, dict keys as strings."""
        return {
            "step_number":     self.step_number,
            "algorithm":       self.algorithm,
            "kind":            self.kind.value,
            "current_node":    self.current_node,
            "current_edge":    self.current_edge,
            "node_states":     {str(k): v.value for k, v in self.node_states.items()},
            "edge_states":     {k: v.value for k, v in self.edge_states.items()},
            "table":           table_to_dict(self.table),
            "pseudocode_line": self.pseudocode_line,
            "explanation":     self.explanation,
            "is_final":        self.is_final,
        }


def table_to_dict(table: Optional[Table]) -> Dict[str, Any]:
    if table is None:
        return {}
    return {f.name: _jsonable(getattr(table, f.name)) for f in fields(table)}


def _jsonable(value):
    if isinstance(value, float) and math.isinf(value):
        return None
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Mutable scratch-pad that algorithms use to construct StepEvents cleanly.
    Numbers the steps itself and resets after every build().

    `settle(node)` queues a VISITED change that rides along on the NEXT
    built step: a node finishes being processed without a step of its own
    and shows up as visited on whatever is emitted next.

    Usage inside an algorithm generator:
        sb = StepBuilder("bfs")
        sb.set_current(3)
        sb.kind = StepKind.PROCESS
        sb.explanation = "Dequeue node 3."
        yield sb.build(table)
    """

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        self._step_no  = 0
        self._settled: Dict[int, VisualState] = {}
        self.reset()

    def reset(self):
        self.kind:            StepKind                 = StepKind.RESET
        self.current_node:    Optional[int]            = None
        self.current_edge:    Optional[str]            = None
        self.node_states:     Dict[int, VisualState]   = {}
        self.edge_states:     Dict[str, VisualState]   = {}
        self.pseudocode_line: int                      = 0
        self.explanation:     str                      = ""

    # -- helpers --
    def reset_all(self, node_ids: List[int], edge_ids: List[str]):
        self.kind = StepKind.RESET
        for nid in node_ids:
            self.node_states[nid] = VisualState.UNVISITED
        for eid in edge_ids:
            self.edge_states[eid] = VisualState.UNVISITED

    def set_current(self, node_id: int):
        self.current_node = node_id
        self.node_states[node_id] = VisualState.CURRENT

    def visit(self, node_id: int):
        self.node_states[node_id] = VisualState.VISITED

    def visit_edge(self, edge_id: str):
        self.current_edge = edge_id
        self.edge_states[edge_id] = VisualState.VISITED

    def choose_edge(self, edge_id: str):
        self.edge_states[edge_id] = VisualState.ON_PATH

    def settle(self, node_id: int):
        self._settled[node_id] = VisualState.VISITED

    def build(self, table: Optional[Table] = None, is_final: bool = False) -> StepEvent:
        node_states = dict(self._settled)
        node_states.update(self.node_states)
        step = StepEvent(
            step_number=self._step_no,
            algorithm=self.algorithm,
            kind=self.kind,
            current_node=self.current_node,
            current_edge=self.current_edge,
            node_states=node_states,
            edge_states=dict(self.edge_states),
            table=table,
            pseudocode_line=self.pseudocode_line,
            explanation=self.explanation,
            is_final=is_final,
        )
        self._step_no += 1
        self._settled.clear()
        self.reset()
        return step
