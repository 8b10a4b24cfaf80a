"""
runner.py — Algorithm Run Driver
================================
Turns an algorithm's lazy StepEvent sequence into a paced, cancellable
run against one Graph.

Per step, strictly in this order:
    1. pull the next StepEvent from the generator
    2. apply its visual-state changes to the graph   (apply_event)
    3. hand it to the renderer callback              (on_step)
    4. suspend for `pacing` seconds                  (play / play_async only)

Pacing lives only in step 4, so removing it (pacing=0, or calling
advance() directly) changes nothing about which steps are produced.
The final step gets its pause too, so it stays on screen as long as
any other.

State machine:
    PENDING  →  advance()        →  RUNNING
    RUNNING  →  final step       →  FINISHED
    RUNNING  →  cancel()         →  CANCELLED
    RUNNING  →  exception        →  FAILED     (algorithm or on_step)

Only one run may hold a Graph at a time: the constructor claims
`graph.active_run` and every terminal state releases it.  A lock around
advance() / cancel() makes cancel() wait for an in-flight step to be
fully applied, so the graph always shows the last complete step.
"""

import asyncio
import logging
import threading
import time
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional

from graph import Graph, MalformedGraphReference
from algorithms import AlgoInfo, StepEvent, require_algorithm
from engine.errors import RunAlreadyInProgress


logger = logging.getLogger(__name__)


class RunState(Enum):
    PENDING   = "pending"
    RUNNING   = "running"
    FINISHED  = "finished"
    CANCELLED = "cancelled"
    FAILED    = "failed"


_TERMINAL = (RunState.FINISHED, RunState.CANCELLED, RunState.FAILED)


# ---------------------------------------------------------------------------
# Visual-state writers — the only code that touches node.state / edge.state
# ---------------------------------------------------------------------------
def apply_event(graph: Graph, event: StepEvent) -> None:
    """Copy one step's visual changes onto the graph.  All or nothing."""
    for nid in event.node_states:
        if nid not in graph.nodes:
            raise MalformedGraphReference(f"step {event.step_number} colours missing node {nid}")
    for eid in event.edge_states:
        if eid not in graph.edges:
            raise MalformedGraphReference(f"step {event.step_number} colours missing edge {eid}")

    for nid, state in event.node_states.items():
        graph.nodes[nid].state = state
    for eid, state in event.edge_states.items():
        graph.edges[eid].state = state


def replay(graph: Graph, events: Iterable[StepEvent]) -> None:
    """Rebuild the visual state reached after `events`, from a clean slate."""
    graph.reset_visual_state()
    for event in events:
        apply_event(graph, event)


# ---------------------------------------------------------------------------
# AlgorithmRun
# ---------------------------------------------------------------------------
class AlgorithmRun:
    """
    Attributes:
        graph     : The graph this run reads and colours.
        info      : Registry card of the algorithm.
        start     : Start node id.
        events    : Every StepEvent applied so far, in order.
        state     : Current RunState.
        pacing    : Seconds to suspend after each step in play().
        on_step   : Renderer callback, called once per applied step.
    """

    def __init__(
        self,
        graph: Graph,
        algorithm: str,
        start: int,
        on_step: Optional[Callable[[StepEvent], None]] = None,
        pacing: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.info: AlgoInfo = require_algorithm(algorithm)
        if graph.active_run is not None:
            raise RunAlreadyInProgress(str(graph.active_run), self.info.key)

        # validates `start` eagerly; nothing is claimed if it is bad
        self._steps: Iterator[StepEvent] = self.info.fn(graph, start)

        self.graph:   Graph                                  = graph
        self.start:   int                                    = start
        self.events:  List[StepEvent]                        = []
        self.state:   RunState                               = RunState.PENDING
        self.pacing:  float                                  = max(0.0, pacing)
        self.on_step: Optional[Callable[[StepEvent], None]]  = on_step
        self._sleep = sleep
        self._lock  = threading.RLock()

        graph.active_run = self
        logger.info("%s run from node %s started", self.info.key, start)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------
    def advance(self) -> Optional[StepEvent]:
        """Compute, apply and deliver one step.  None once the run is over."""
        with self._lock:
            if self.state in _TERMINAL:
                return None
            self.state = RunState.RUNNING
            try:
                event = next(self._steps)
                apply_event(self.graph, event)
            except StopIteration:
                self._close(RunState.FINISHED)
                return None
            except Exception:
                logger.warning("%s run from node %s failed", self.info.key, self.start)
                self._close(RunState.FAILED)
                raise

            self.events.append(event)
            logger.debug("%s step %d: %s", self.info.key, event.step_number, event.kind.value)
            if event.is_final:
                self._close(RunState.FINISHED)

        if self.on_step is not None:
            try:
                self.on_step(event)
            except Exception:
                logger.warning("renderer failed on %s step %d", self.info.key, event.step_number)
                with self._lock:
                    if self.state not in _TERMINAL:
                        self._close(RunState.FAILED)
                raise
        return event

    def play(self) -> List[StepEvent]:
        """Drive the run to the end, suspending `pacing` seconds per step."""
        while self.advance() is not None:
            if self.pacing > 0:
                self._sleep(self.pacing)
        return self.events

    async def play_async(self) -> List[StepEvent]:
        """Same as play(), yielding to the event loop at every suspension."""
        while self.advance() is not None:
            await asyncio.sleep(self.pacing)
        return self.events

    def run_to_completion(self) -> List[StepEvent]:
        """No pacing at all — every step back to back."""
        while self.advance() is not None:
            pass
        return self.events

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------
    def cancel(self) -> bool:
        """
        Stop at the current suspension point.  The graph keeps the visual
        state of the last applied step.  Returns False if already over.
        """
        with self._lock:
            if self.state in _TERMINAL:
                return False
            self._close(RunState.CANCELLED)
            return True

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def done(self) -> bool:
        return self.state in _TERMINAL

    @property
    def last_event(self) -> Optional[StepEvent]:
        return self.events[-1] if self.events else None

    # ------------------------------------------------------------------
    # Context manager — leaving the block cancels an unfinished run
    # ------------------------------------------------------------------
    def __enter__(self) -> "AlgorithmRun":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _close(self, state: RunState) -> None:
        self.state = state
        close = getattr(self._steps, "close", None)
        if close is not None:
            close()
        if self.graph.active_run is self:
            self.graph.active_run = None
        logger.info("%s run from node %s %s after %d step(s)",
                    self.info.key, self.start, state.value, len(self.events))

    def __repr__(self) -> str:
        return f"AlgorithmRun({self.info.key}, start={self.start}, state={self.state.value}, steps={len(self.events)})"
