"""
stepper.py — Step-by-Step Playback Engine
==========================================
The Stepper is the ONLY object the UI interacts with during a run.
It owns an AlgorithmRun, keeps every step it has applied (enabling
rewind), and exposes a clean play/pause/next/prev/speed API.

Moving forward past the newest step pulls a fresh step from the run.
Moving anywhere else replays the buffered steps onto a reset graph, so
the graph's visual state always matches the step on display.

State machine:
    IDLE  →  start()  →  PAUSED
    PAUSED  →  play()   →  PLAYING
    PLAYING →  pause()  →  PAUSED
    PLAYING →  (steps exhausted) → FINISHED
    any     →  reset()  →  IDLE

Thread safety:
  Every public mutator holds one re-entrant lock, so overlapping callers
  (e.g. two HTTP ticks on different server threads) advance one step at
  a time and the graph always carries the colours of the step on display.
"""

import functools
import threading
import time
from enum import Enum
from typing import Callable, List, Optional

from algorithms import StepEvent
from engine.runner import AlgorithmRun, replay


# ---------------------------------------------------------------------------
# Locking
# ---------------------------------------------------------------------------
def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed presets (seconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1.0,    # the original one-second animation delay
    "medium": 0.4,
    "fast":   0.15,
    "turbo":  0.05,
}


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state       : Current StepperState.
        run         : The AlgorithmRun being played (None when IDLE).
        current_idx : Index into `steps` that is currently displayed.
        speed       : Seconds between auto-advance ticks.
        on_step     : Optional callback(StepEvent) fired every time the
                      displayed step changes.  The UI hooks its re-render here.
    """

    def __init__(self, on_step: Optional[Callable[[StepEvent], None]] = None, clock: Callable[[], float] = time.monotonic):
        self.run:         Optional[AlgorithmRun] = None
        self.current_idx: int                    = -1
        self.state:       StepperState           = StepperState.IDLE
        self.speed:       float                  = SPEED_PRESETS["medium"]
        self.on_step:     Optional[Callable[[StepEvent], None]] = on_step

        self._clock = clock
        self._last_tick: float = 0.0
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @_locked
    def start(self, run: AlgorithmRun) -> None:
        """Attach a fresh run and show its first (reset) step."""
        self.run         = run
        self.current_idx = -1
        self.state       = StepperState.PAUSED
        self.next_step()

    @_locked
    def reset(self) -> None:
        """Cancel whatever is running and go back to IDLE."""
        if self.run is not None:
            self.run.cancel()
        self.run         = None
        self.current_idx = -1
        self.state       = StepperState.IDLE

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    @_locked
    def next_step(self) -> bool:
        """Advance one step forward.  Returns False if already at end."""
        if self.run is None:
            return False
        target = self.current_idx + 1
        if target < len(self.steps):
            self._goto(target)
            return True
        if self.run.advance() is None:
            self.state = StepperState.FINISHED
            return False
        self.current_idx = target
        self._notify(self.steps[target])
        if self.run.done:
            self.state = StepperState.FINISHED
        return True

    @_locked
    def prev_step(self) -> bool:
        """Rewind one step.  Returns False if already at start."""
        if self.current_idx <= 0:
            return False
        self._goto(self.current_idx - 1)
        if self.state == StepperState.FINISHED:
            self.state = StepperState.PAUSED
        return True

    @_locked
    def goto_step(self, idx: int) -> bool:
        """Jump to an arbitrary step index, computing forward if needed."""
        if self.run is None or idx < 0:
            return False
        while idx >= len(self.steps):
            if self.run.advance() is None:
                break
        if idx < len(self.steps):
            self._goto(idx)
            return True
        return False

    @_locked
    def rewind(self) -> None:
        """Jump back to step 0."""
        if self.steps:
            self._goto(0)
            if self.state == StepperState.FINISHED:
                self.state = StepperState.PAUSED

    @_locked
    def jump_to_end(self) -> None:
        """Exhaust the run and jump to the final step."""
        if self.run is None:
            return
        self.run.run_to_completion()
        if self.steps:
            self._goto(len(self.steps) - 1)
        self.state = StepperState.FINISHED

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    @_locked
    def play(self) -> None:
        if self.state in (StepperState.FINISHED, StepperState.IDLE):
            return
        self.state      = StepperState.PLAYING
        self._last_tick = self._clock()

    @_locked
    def pause(self) -> None:
        if self.state == StepperState.PLAYING:
            self.state = StepperState.PAUSED

    @_locked
    def toggle_play(self) -> None:
        if self.state == StepperState.PLAYING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    @_locked
    def tick(self) -> bool:
        """
        Call periodically (e.g. every 50 ms).  If playing and enough
        time has elapsed, advances one step.  Returns True if a step
        was taken.
        """
        if self.state != StepperState.PLAYING:
            return False
        now = self._clock()
        if now - self._last_tick >= self.speed:
            self._last_tick = now
            if not self.next_step():
                self.state = StepperState.FINISHED
                return False
            return True
        return False

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.speed = SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"])

    def set_speed_value(self, seconds: float) -> None:
        self.speed = max(0.02, seconds)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def steps(self) -> List[StepEvent]:
        return self.run.events if self.run is not None else []

    @property
    def current_step(self) -> Optional[StepEvent]:
        if 0 <= self.current_idx < len(self.steps):
            return self.steps[self.current_idx]
        return None

    @property
    def total_steps_fetched(self) -> int:
        return len(self.steps)

    @property
    def is_finished(self) -> bool:
        return self.state == StepperState.FINISHED

    @property
    def is_playing(self) -> bool:
        return self.state == StepperState.PLAYING

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _goto(self, idx: int) -> None:
        self.current_idx = idx
        replay(self.run.graph, self.steps[: idx + 1])
        self._notify(self.steps[idx])

    def _notify(self, step: Optional[StepEvent]) -> None:
        if self.on_step and step is not None:
            self.on_step(step)
