import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import random

import pytest

from graph import Graph


SCENARIO_EDGES = [(0, 1, 4), (0, 2, 1), (2, 1, 2), (1, 3, 5), (2, 3, 8)]


def build_graph(node_count, edges):
    g = Graph()
    for _ in range(node_count):
        g.add_node()
    for a, b, w in edges:
        g.add_edge(a, b, w)
    return g


def random_graph(seed, node_count=7, edge_prob=0.4, max_weight=9):
    rng = random.Random(seed)
    g = Graph()
    for _ in range(node_count):
        g.add_node()
    for a in range(node_count):
        for b in range(a + 1, node_count):
            if rng.random() < edge_prob:
                g.add_edge(a, b, rng.randint(1, max_weight))
    return g


@pytest.fixture
def scenario():
    """Four nodes, five weighted edges: 0-1(4) 0-2(1) 2-1(2) 1-3(5) 2-3(8)."""
    return build_graph(4, SCENARIO_EDGES)


@pytest.fixture
def disconnected():
    """Nodes 0, 1, 2 with a single edge 0-2 (weight 3); node 1 is isolated."""
    return build_graph(3, [(0, 2, 3)])


@pytest.fixture
def single():
    return build_graph(1, [])
