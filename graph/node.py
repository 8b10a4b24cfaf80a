from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Visual State Enum — shared by nodes and edges, maps 1-to-1 with the palette
# ---------------------------------------------------------------------------
class VisualState(Enum):
    UNVISITED = "unvisited"   # neutral baseline, every run starts here
    CURRENT   = "current"     # amber — the node being expanded RIGHT NOW
    VISITED   = "visited"     # pink — discovered / processed
    ON_PATH   = "on_path"     # blue — tree edge, shortest path or MST edge


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Immutable identity (id), mutable position, label and visual state.

    Attributes:
        id     : Non-negative integer issued by the owning Graph.
        label  : Display string, defaults to the id.
        x, y   : Canvas coordinates. Only the renderer reads them.
        state  : Current VisualState. Written by the engine, read by the renderer.
    """

    __slots__ = ("id", "label", "x", "y", "state")

    def __init__(
        self,
        node_id: int,
        x: float = 0.0,
        y: float = 0.0,
        label: Optional[str] = None,
    ):
        self.id: int             = node_id
        self.label: str          = label if label is not None else str(node_id)
        self.x: float            = x
        self.y: float            = y
        self.state: VisualState  = VisualState.UNVISITED

    def reset(self) -> None:
        """Back to the neutral baseline — called at the start of every run."""
        self.state = VisualState.UNVISITED

    def distance_to(self, x: float, y: float) -> float:
        return ((self.x - x) ** 2 + (self.y - y) ** 2) ** 0.5

    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "label": self.label,
            "x":     self.x,
            "y":     self.y,
            "state": self.state.value,
        }

    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, state={self.state.value}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
