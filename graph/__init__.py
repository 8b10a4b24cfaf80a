"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge, VisualState, edge_key
    from graph import GraphError, InvalidStartNode, …
"""

from graph.node   import Node, VisualState
from graph.edge   import Edge, edge_key
from graph.errors import (
    GraphError,
    NodeNotFound,
    EdgeNotFound,
    InvalidEdge,
    GraphBusy,
    InvalidStartNode,
    MalformedGraphReference,
)
from graph.graph  import Graph

__all__ = [
    "Node",      "VisualState",
    "Edge",      "edge_key",
    "Graph",
    "GraphError",
    "NodeNotFound",
    "EdgeNotFound",
    "InvalidEdge",
    "GraphBusy",
    "InvalidStartNode",
    "MalformedGraphReference",
]
