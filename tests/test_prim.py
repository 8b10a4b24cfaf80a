import pytest

from graph import VisualState, InvalidStartNode
from algorithms import StepKind
from algorithms.prim import prim_mst

from conftest import build_graph, random_graph


def kruskal_weight(graph, start):
    """MST weight of start's component, by Kruskal with union-find."""
    parent = {n: n for n in graph.nodes}

    def find(n):
        while parent[n] != n:
            parent[n] = parent[parent[n]]
            n = parent[n]
        return n

    chosen = []
    for edge in sorted(graph.edges.values(), key=lambda e: e.weight):
        ra, rb = find(edge.a), find(edge.b)
        if ra != rb:
            parent[ra] = rb
            chosen.append(edge)
    component = {n for n in graph.nodes if find(n) == find(start)}
    return sum(e.weight for e in chosen if e.a in component), component


def test_prim_scenario(scenario):
    steps = list(prim_mst(scenario, 0))
    assert [s.kind for s in steps] == [StepKind.RESET] + [StepKind.INCLUDE] * 4 + [StepKind.COMPLETE]
    final = steps[-1].table
    assert final.mst_edges == ((0, 2, 1), (2, 1, 2), (1, 3, 5))
    assert final.total_cost == 8
    assert final.included == (0, 2, 1, 3)
    assert final.spanning is True
    assert final.uncovered == ()
    assert steps[-1].is_final


def test_prim_include_step_colours(scenario):
    steps = list(prim_mst(scenario, 0))
    second = steps[2]
    assert second.current_node == 2
    assert second.node_states == {0: VisualState.VISITED, 2: VisualState.CURRENT}
    assert second.edge_states == {"0-2": VisualState.ON_PATH}
    assert second.table.total_cost == 1


def test_prim_costs_updated_before_snapshot(scenario):
    steps = list(prim_mst(scenario, 0))
    first = steps[1].table
    assert first.costs[1] == 4
    assert first.costs[2] == 1
    assert first.parents == {1: 0, 2: 0}
    after_two = steps[2].table
    assert after_two.costs[1] == 2
    assert after_two.parents[1] == 2


def test_prim_disconnected_reports_forest(disconnected):
    final = list(prim_mst(disconnected, 0))[-1]
    assert final.kind is StepKind.COMPLETE
    assert final.table.spanning is False
    assert final.table.uncovered == (1,)
    assert final.table.mst_edges == ((0, 2, 3),)
    assert "NOT a spanning tree" in final.explanation


def test_prim_single_node(single):
    final = list(prim_mst(single, 0))[-1].table
    assert final.spanning is True
    assert final.mst_edges == ()
    assert final.total_cost == 0


def test_prim_start_does_not_change_weight(scenario):
    totals = {list(prim_mst(scenario, s))[-1].table.total_cost for s in range(4)}
    assert totals == {8}


@pytest.mark.parametrize("seed", range(8))
def test_prim_matches_kruskal(seed):
    g = random_graph(seed)
    expected, component = kruskal_weight(g, 0)
    final = list(prim_mst(g, 0))[-1].table
    assert final.total_cost == expected
    assert set(final.included) == component
    assert final.spanning == (len(component) == g.node_count())
    assert len(final.mst_edges) == len(component) - 1


def test_prim_rejects_missing_start(scenario):
    with pytest.raises(InvalidStartNode):
        prim_mst(scenario, 10)


def test_prim_two_isolated_nodes():
    g = build_graph(2, [])
    final = list(prim_mst(g, 0))[-1].table
    assert final.included == (0,)
    assert final.spanning is False
    assert final.uncovered == (1,)
