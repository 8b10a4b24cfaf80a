"""
errors.py — Graph Model Exceptions
==================================
Every rejection the Graph Model (and the algorithms reading it) can raise.
Each class also derives from the matching builtin so callers that only
know about ValueError / LookupError / RuntimeError still catch it.
"""

from typing import Optional


class GraphError(Exception):
    """Base for everything the graph layer raises."""


class NodeNotFound(GraphError, LookupError):
    def __init__(self, node_id: int):
        super().__init__(f"Node {node_id} does not exist")
        self.node_id = node_id


class EdgeNotFound(GraphError, LookupError):
    def __init__(self, a: int, b: int):
        super().__init__(f"No edge between {a} and {b}")
        self.a = a
        self.b = b


class InvalidEdge(GraphError, ValueError):
    """Self-loop, or a weight that is not a positive integer."""

    def __init__(self, a: int, b: int, reason: str):
        super().__init__(f"Invalid edge {a}-{b}: {reason}")
        self.a = a
        self.b = b
        self.reason = reason


class GraphBusy(GraphError, RuntimeError):
    """Structural edit attempted while an algorithm run holds the graph."""

    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation} while an algorithm run is in progress")
        self.operation = operation


class InvalidStartNode(GraphError, ValueError):
    """The requested start node is not in the graph. No steps are emitted."""

    def __init__(self, node_id, algorithm: Optional[str] = None):
        where = f" for {algorithm}" if algorithm else ""
        super().__init__(f"Start node {node_id!r} does not exist{where}")
        self.node_id = node_id
        self.algorithm = algorithm


class MalformedGraphReference(GraphError, RuntimeError):
    """An edge or adjacency entry points at something that is not there."""

    def __init__(self, detail: str):
        super().__init__(f"Malformed graph reference: {detail}")
        self.detail = detail
