"""
edge.py — Graph Edge
====================
Connects two nodes with a positive integer weight and carries its own
visual state so the renderer can colour tree / path / MST edges.

Design decisions:
  - Edges are undirected. The endpoints are stored normalised
    (`a < b`) so an edge between 3 and 1 is the same object as one
    between 1 and 3.
  - The id is derived from the endpoints ("1-3"), never random, so step
    snapshots that name an edge stay valid across runs.
  - Endpoints are node ids, NOT Node references, to avoid cycles.
"""

from graph.node import VisualState


def edge_key(a: int, b: int) -> str:
    """Canonical id of the undirected edge {a, b}."""
    lo, hi = (a, b) if a <= b else (b, a)
    return f"{lo}-{hi}"


class Edge:
    """
    Attributes:
        id     : Canonical "<lo>-<hi>" key (see edge_key).
        a, b   : Endpoint node ids, a < b.
        weight : Positive integer cost.
        state  : VisualState for the renderer.
    """

    __slots__ = ("id", "a", "b", "weight", "state")

    def __init__(self, a: int, b: int, weight: int = 1):
        lo, hi = (a, b) if a <= b else (b, a)
        self.a:      int         = lo
        self.b:      int         = hi
        self.id:     str         = edge_key(lo, hi)
        self.weight: int         = weight
        self.state:  VisualState = VisualState.UNVISITED

    def reset(self) -> None:
        self.state = VisualState.UNVISITED

    def to_dict(self) -> dict:
        return {
            "id":     self.id,
            "a":      self.a,
            "b":      self.b,
            "weight": self.weight,
            "state":  self.state.value,
        }

    def __repr__(self) -> str:
        return f"Edge({self.a} ↔ {self.b}, w={self.weight}, state={self.state.value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
