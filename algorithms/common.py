"""
common.py — helpers shared by the algorithm generators
"""

from graph import Graph, Edge, InvalidStartNode, MalformedGraphReference
from algorithms.step import StepBuilder, StepEvent, StepKind


def require_start(graph: Graph, start, algorithm: str) -> None:
    """Fail before any step exists if the start node is not in the graph."""
    if isinstance(start, bool) or not graph.has_node(start):
        raise InvalidStartNode(start, algorithm)


def edge_for(graph: Graph, a: int, b: int) -> Edge:
    """The edge behind an adjacency entry.  A missing one aborts the run."""
    if not graph.has_node(b):
        raise MalformedGraphReference(f"node {a} lists missing neighbour {b}")
    edge = graph.edge_between(a, b)
    if edge is None:
        raise MalformedGraphReference(f"{a} and {b} are adjacent but share no edge")
    return edge


def reset_step(sb: StepBuilder, graph: Graph, explanation: str) -> StepEvent:
    sb.reset_all(graph.nodes_sorted(), sorted(graph.edges))
    sb.kind = StepKind.RESET
    sb.pseudocode_line = 0
    sb.explanation = explanation
    return sb.build()
