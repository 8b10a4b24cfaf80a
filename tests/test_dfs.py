import pytest

from graph import Graph, VisualState, InvalidStartNode
from algorithms import StepKind
from algorithms.dfs import dfs

from conftest import random_graph


def test_dfs_enter_and_finish_order(scenario):
    steps = list(dfs(scenario, 0))
    entered  = [s.current_node for s in steps if s.kind is StepKind.ENTER]
    finished = [s.current_node for s in steps if s.kind is StepKind.FINISH]
    assert entered == [0, 1, 2, 3]
    assert finished == [3, 2, 1, 0]


def test_dfs_times_and_parents(scenario):
    final = list(dfs(scenario, 0))[-1]
    assert final.is_final
    assert final.kind is StepKind.FINISH
    assert final.table.discovery == {0: 1, 1: 2, 2: 3, 3: 4}
    assert final.table.finish == {3: 5, 2: 6, 1: 7, 0: 8}
    assert final.table.parents == {0: None, 1: 0, 2: 1, 3: 2}
    assert final.table.stack == ()


def test_dfs_finish_after_discovery(scenario):
    table = list(dfs(scenario, 3))[-1].table
    for node, t in table.discovery.items():
        assert table.finish[node] > t


def test_dfs_descend_precedes_enter(scenario):
    steps = list(dfs(scenario, 0))
    kinds = [s.kind for s in steps]
    assert kinds == [
        StepKind.RESET,
        StepKind.ENTER,
        StepKind.DESCEND, StepKind.ENTER,
        StepKind.DESCEND, StepKind.ENTER,
        StepKind.DESCEND, StepKind.ENTER,
        StepKind.FINISH, StepKind.FINISH, StepKind.FINISH, StepKind.FINISH,
    ]
    descend = steps[2]
    assert descend.edge_states == {"0-1": VisualState.VISITED}
    assert descend.current_node == 0


def test_dfs_stack_tracks_recursion_path(scenario):
    steps = list(dfs(scenario, 0))
    deepest = steps[7]
    assert deepest.kind is StepKind.ENTER
    assert deepest.table.stack == (0, 1, 2, 3)


def test_dfs_colours(scenario):
    steps = list(dfs(scenario, 0))
    assert steps[1].node_states == {0: VisualState.CURRENT}
    assert steps[8].node_states == {3: VisualState.VISITED}


def test_dfs_deep_chain_does_not_recurse():
    g = Graph()
    for _ in range(1500):
        g.add_node(0, 0)
    for i in range(1499):
        g.add_edge(i, i + 1, 1)
    final = list(dfs(g, 0))[-1]
    assert final.table.finish[0] == 3000


def test_dfs_only_explores_start_component(disconnected):
    final = list(dfs(disconnected, 1))[-1]
    assert final.table.discovery == {1: 1}
    assert final.table.finish == {1: 2}


def test_dfs_rejects_missing_start(scenario):
    with pytest.raises(InvalidStartNode):
        dfs(scenario, -1)


@pytest.mark.parametrize("seed", range(8))
def test_dfs_nodes_finish_after_descendants(seed):
    g = random_graph(seed, node_count=9, edge_prob=0.3)
    steps = list(dfs(g, 0))
    table = steps[-1].table
    d, f = table.discovery, table.finish
    assert set(d) == set(f)

    for node, parent in table.parents.items():
        if parent is not None:
            assert d[parent] < d[node] < f[node] < f[parent]

    # discovery/finish intervals are nested or disjoint
    for u in d:
        for v in d:
            if u != v and d[u] < d[v] < f[u]:
                assert f[v] < f[u]

    finished = [s.current_node for s in steps if s.kind is StepKind.FINISH]
    assert finished == sorted(f, key=f.get)
