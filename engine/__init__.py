"""
engine/
-------
Run, playback & recording layer.

    from engine import AlgorithmRun, Stepper, Recorder
"""

from engine.errors   import EngineError, RunAlreadyInProgress
from engine.runner   import AlgorithmRun, RunState, apply_event, replay
from engine.stepper  import Stepper, StepperState, SPEED_PRESETS
from engine.recorder import Recorder, RunMetrics, summarize

__all__ = [
    "EngineError",
    "RunAlreadyInProgress",
    "AlgorithmRun",
    "RunState",
    "apply_event",
    "replay",
    "Stepper",
    "StepperState",
    "SPEED_PRESETS",
    "Recorder",
    "RunMetrics",
    "summarize",
]
