"""
graph.py — Graph Container
==========================
Single source of truth for the graph.  Algorithms and the renderer
both talk to this object.

Responsibilities:
  1. CRUD on nodes & edges                  (add / remove / update weight)
  2. Adjacency queries                      (neighbours, edge_between, …)
  3. Reset helpers                          (wipe visual state, keep structure)
  4. Read-only dict view for the HTTP layer (to_dict)

Design decisions:
  - Nodes stored in a dict keyed by integer id, edges in a dict keyed by
    the canonical "<lo>-<hi>" id, both O(1) lookup.
  - `_adj[node_id]` is a dict used as an insertion-ordered set of
    neighbour ids.  Neighbour order is the order edges were added, which
    is what fixes DFS branch order.  Re-adding an existing edge only
    updates its weight and leaves the order alone.
  - Ids come from a monotonic counter that survives remove_node() and
    clear(): an id is never handed out twice by the same Graph.
  - `active_run` is set by the engine while a run holds the graph; every
    structural edit is refused in the meantime.
"""

import logging
from typing import Dict, List, Optional, Set

from graph.node import Node, VisualState
from graph.edge import Edge, edge_key
from graph.errors import NodeNotFound, EdgeNotFound, InvalidEdge, GraphBusy
from graph import layout


logger = logging.getLogger(__name__)


class Graph:
    """
    Attributes:
        nodes       : {node_id: Node}
        edges       : {edge_id: Edge}
        active_run  : The engine run currently holding this graph, or None.
        _adj        : {node_id: {neighbour_id: None, …}}  (ordered set)
        _next_id    : Next id to issue.
    """

    def __init__(self, canvas_w: float = layout.CANVAS_W, canvas_h: float = layout.CANVAS_H):
        self.nodes:      Dict[int, Node]             = {}
        self.edges:      Dict[str, Edge]             = {}
        self.canvas_w:   float                       = canvas_w
        self.canvas_h:   float                       = canvas_h
        self.active_run: Optional[object]            = None
        self._adj:       Dict[int, Dict[int, None]]  = {}
        self._next_id:   int                         = 0

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, x: Optional[float] = None, y: Optional[float] = None, label: Optional[str] = None) -> int:
        """Create a node and return its id.  No position → pick an open slot."""
        self._ensure_idle("add a node")
        if x is None or y is None:
            x, y = layout.find_open_position(self.nodes.values(), self.canvas_w, self.canvas_h)
        node_id = self._next_id
        self._next_id += 1
        self.nodes[node_id] = Node(node_id, x=x, y=y, label=label)
        self._adj[node_id] = {}
        logger.debug("added node %d at (%.1f, %.1f)", node_id, x, y)
        return node_id

    def remove_node(self, node_id: int) -> None:
        self._ensure_idle("remove a node")
        if node_id not in self.nodes:
            raise NodeNotFound(node_id)
        # remove every edge touching this node
        for nbr in list(self._adj[node_id]):
            del self.edges[edge_key(node_id, nbr)]
            del self._adj[nbr][node_id]
        del self._adj[node_id]
        del self.nodes[node_id]
        logger.debug("removed node %d", node_id)

    def get_node(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    def has_node(self, node_id) -> bool:
        return node_id in self.nodes

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, a: int, b: int, weight: int = 1) -> str:
        """
        Connect a and b.  If they are already connected the existing edge
        keeps its place and only its weight changes.  Returns the edge id.
        """
        self._ensure_idle("add an edge")
        self._check_endpoints(a, b)
        self._check_weight(a, b, weight)

        eid = edge_key(a, b)
        if eid in self.edges:
            self.edges[eid].weight = weight
            logger.debug("edge %s already present, weight set to %d", eid, weight)
            return eid

        self.edges[eid] = Edge(a, b, weight)
        self._adj[a][b] = None
        self._adj[b][a] = None
        logger.debug("added edge %s (w=%d)", eid, weight)
        return eid

    def update_edge_weight(self, a: int, b: int, weight: int) -> None:
        self._ensure_idle("update an edge weight")
        edge = self.edge_between(a, b)
        if edge is None:
            raise EdgeNotFound(a, b)
        self._check_weight(a, b, weight)
        edge.weight = weight

    def remove_edge(self, a: int, b: int) -> None:
        self._ensure_idle("remove an edge")
        eid = edge_key(a, b)
        if eid not in self.edges:
            raise EdgeNotFound(a, b)
        del self.edges[eid]
        del self._adj[a][b]
        del self._adj[b][a]
        logger.debug("removed edge %s", eid)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self.edges.get(edge_id)

    def edge_between(self, a: int, b: int) -> Optional[Edge]:
        """The edge {a, b}, in either order, or None."""
        return self.edges.get(edge_key(a, b))

    def edge_weight(self, a: int, b: int) -> Optional[int]:
        edge = self.edge_between(a, b)
        return edge.weight if edge else None

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def neighbours(self, node_id: int) -> List[int]:
        """Neighbour ids in the order their edges were added."""
        if node_id not in self._adj:
            raise NodeNotFound(node_id)
        return list(self._adj[node_id])

    def all_node_ids(self) -> Set[int]:
        return set(self.nodes)

    def nodes_sorted(self) -> List[int]:
        """Node ids ascending — the engine's scan and tie-break order."""
        return sorted(self.all_node_ids())

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    # ==================================================================
    # RESET / CLEAR
    # ==================================================================
    def reset_visual_state(self) -> None:
        for node in self.nodes.values():
            node.reset()
        for edge in self.edges.values():
            edge.reset()

    def clear(self) -> None:
        """Drop every node and edge.  The id counter is NOT rewound."""
        self._ensure_idle("clear the graph")
        self.nodes.clear()
        self.edges.clear()
        self._adj.clear()
        logger.debug("graph cleared, next id stays %d", self._next_id)

    # ==================================================================
    # LAYOUT
    # ==================================================================
    def arrange_circle(self) -> None:
        layout.arrange_circle(self.nodes.values(), self.canvas_w, self.canvas_h)

    def arrange_grid(self) -> None:
        layout.arrange_grid(self.nodes.values(), self.canvas_w, self.canvas_h)

    # ==================================================================
    # VIEW
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [e.to_dict() for e in self.edges.values()],
        }

    def visual_snapshot(self) -> Dict[str, Dict]:
        """Current node/edge visual states, for comparisons in tests and the API."""
        return {
            "nodes": {nid: n.state for nid, n in self.nodes.items()},
            "edges": {eid: e.state for eid, e in self.edges.items()},
        }

    # ==================================================================
    # Internal
    # ==================================================================
    def _ensure_idle(self, operation: str) -> None:
        if self.active_run is not None:
            raise GraphBusy(operation)

    def _check_endpoints(self, a: int, b: int) -> None:
        for nid in (a, b):
            if nid not in self.nodes:
                raise NodeNotFound(nid)
        if a == b:
            raise InvalidEdge(a, b, "self-loops are not allowed")

    @staticmethod
    def _check_weight(a: int, b: int, weight) -> None:
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise InvalidEdge(a, b, f"weight must be an integer, got {weight!r}")
        if weight < 1:
            raise InvalidEdge(a, b, f"weight must be >= 1, got {weight}")

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()})"
