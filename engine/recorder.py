"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete algorithm run (all StepEvents), then computes the
summary the UI shows in its analytics panel.

Usage:
    rec = Recorder()
    rec.start(algo_key="dijkstra", start=0, graph=g)
    rec.run_to_completion()          # exhausts the run
    metrics = rec.get_metrics()      # the analytics card

A run that is already finished (e.g. one the Stepper played) can be
summarised directly with summarize(run).
"""

import time
from dataclasses import dataclass
from typing import List, Optional

from graph import Graph
from algorithms import (
    StepEvent, BfsTable, DfsTable, DijkstraTable, MstTable,
)
from engine.runner import AlgorithmRun


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str   = ""
    algo_label:    str   = ""
    start:         int   = 0
    total_steps:   int   = 0        # number of StepEvents applied
    nodes_total:   int   = 0        # nodes in the graph
    nodes_reached: int   = 0        # nodes the run visited / included
    tree_edges:    int   = 0        # edges in the BFS / DFS / shortest-path / MST tree
    tree_weight:   int   = 0        # summed weight of those edges
    spanning:      bool  = False    # reached every node of the graph
    completed:     bool  = False    # the final step was applied
    wall_time_ms:  float = 0.0


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps   : Full list of StepEvents from the run.
        metrics : Computed RunMetrics (available after run_to_completion).
        run     : The underlying AlgorithmRun.
    """

    def __init__(self):
        self.steps:   List[StepEvent]         = []
        self.metrics: Optional[RunMetrics]    = None
        self.run:     Optional[AlgorithmRun]  = None

    def start(self, algo_key: str, start: int, graph: Graph) -> None:
        """Claim the graph for a new run (raises on unknown algo / bad start)."""
        self.steps   = []
        self.metrics = None
        self.run     = AlgorithmRun(graph, algo_key, start)

    def run_to_completion(self) -> RunMetrics:
        """Exhaust the run, record every step, compute metrics."""
        if self.run is None:
            raise RuntimeError("Call start() first.")

        t0 = time.monotonic()
        self.steps = list(self.run.run_to_completion())
        wall_ms = (time.monotonic() - t0) * 1000

        self.metrics = summarize(self.run, wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics


# ---------------------------------------------------------------------------
# Summary of a run's last table
# ---------------------------------------------------------------------------
def summarize(run: AlgorithmRun, wall_ms: float = 0.0) -> RunMetrics:
    graph = run.graph
    last  = run.last_event
    table = last.table if last else None

    reached, edges = 0, []
    if isinstance(table, BfsTable):
        reached = len(table.levels)
        edges   = [(p, n) for n, p in table.parents.items() if p is not None]
    elif isinstance(table, DfsTable):
        reached = len(table.discovery)
        edges   = [(p, n) for n, p in table.parents.items() if p is not None]
    elif isinstance(table, DijkstraTable):
        reached = sum(1 for d in table.distances.values() if d != float("inf"))
        edges   = [(p, n) for n, p in table.previous.items()]
    elif isinstance(table, MstTable):
        reached = len(table.included)
        edges   = [(p, n) for p, n, _ in table.mst_edges]

    weight = 0
    for a, b in edges:
        w = graph.edge_weight(a, b)
        if w is not None:
            weight += w

    return RunMetrics(
        algo_key=run.info.key,
        algo_label=run.info.label,
        start=run.start,
        total_steps=len(run.events),
        nodes_total=graph.node_count(),
        nodes_reached=reached,
        tree_edges=len(edges),
        tree_weight=weight,
        spanning=reached == graph.node_count(),
        completed=bool(last and last.is_final),
        wall_time_ms=round(wall_ms, 2),
    )
