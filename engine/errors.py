"""
errors.py — Engine Exceptions
"""


class EngineError(Exception):
    """Base for everything the engine layer raises."""


class RunAlreadyInProgress(EngineError, RuntimeError):
    """A second run was started against a graph that already has one in flight."""

    def __init__(self, active: str, requested: str):
        super().__init__(
            f"Cannot start {requested}: {active} is still running on this graph. "
            f"Finish or cancel it first."
        )
        self.active = active
        self.requested = requested
