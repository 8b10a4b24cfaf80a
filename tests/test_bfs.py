import pytest

from graph import VisualState, InvalidStartNode
from algorithms import StepKind, run_algorithm
from algorithms.bfs import bfs, PSEUDOCODE

from conftest import build_graph, random_graph


def test_bfs_step_sequence(scenario):
    steps = list(bfs(scenario, 0))
    assert [s.kind for s in steps] == [
        StepKind.RESET,
        StepKind.DISCOVER,
        StepKind.PROCESS,
        StepKind.DISCOVER,
        StepKind.DISCOVER,
        StepKind.PROCESS,
        StepKind.DISCOVER,
        StepKind.PROCESS,
        StepKind.PROCESS,
        StepKind.TREE,
    ]
    assert [s.step_number for s in steps] == list(range(len(steps)))
    assert [s.is_final for s in steps] == [False] * 9 + [True]


def test_bfs_processes_in_fifo_order(scenario):
    processed = [s.current_node for s in bfs(scenario, 0) if s.kind is StepKind.PROCESS]
    assert processed == [0, 1, 2, 3]


def test_bfs_levels_and_parents(scenario):
    final = list(bfs(scenario, 0))[-1].table
    assert final.levels == {0: 0, 1: 1, 2: 1, 3: 2}
    assert final.parents == {0: None, 1: 0, 2: 0, 3: 1}
    assert final.queue == ()


def test_bfs_discover_marks_node_and_edge(scenario):
    steps = list(bfs(scenario, 0))
    first = steps[3]
    assert first.node_states == {1: VisualState.VISITED}
    assert first.edge_states == {"0-1": VisualState.VISITED}
    assert first.current_edge == "0-1"
    assert first.table.queue == (1,)


def test_bfs_settled_node_rides_on_next_step(scenario):
    steps = list(bfs(scenario, 0))
    # node 0 finished scanning after step 4; it turns VISITED on step 5
    assert steps[5].node_states == {0: VisualState.VISITED, 1: VisualState.CURRENT}
    assert steps[-1].node_states == {3: VisualState.VISITED}


def test_bfs_final_step_highlights_tree(scenario):
    final = list(bfs(scenario, 0))[-1]
    assert final.edge_states == {
        "0-1": VisualState.ON_PATH,
        "0-2": VisualState.ON_PATH,
        "1-3": VisualState.ON_PATH,
    }


def test_bfs_reset_step_covers_everything(scenario):
    reset = next(bfs(scenario, 2))
    assert reset.kind is StepKind.RESET
    assert reset.node_states == {n: VisualState.UNVISITED for n in range(4)}
    assert set(reset.edge_states) == set(scenario.edges)


def test_bfs_only_explores_start_component(disconnected):
    final = list(bfs(disconnected, 0))[-1].table
    assert final.levels == {0: 0, 2: 1}


def test_bfs_single_node(single):
    steps = list(bfs(single, 0))
    assert [s.kind for s in steps] == [StepKind.RESET, StepKind.DISCOVER, StepKind.PROCESS, StepKind.TREE]
    assert steps[-1].edge_states == {}


def test_bfs_rejects_missing_start_before_any_step(scenario):
    with pytest.raises(InvalidStartNode):
        bfs(scenario, 9)
    with pytest.raises(InvalidStartNode):
        run_algorithm("bfs", scenario, True)


def test_bfs_pseudocode_lines_in_range(scenario):
    for step in bfs(scenario, 0):
        assert 0 <= step.pseudocode_line < len(PSEUDOCODE)
        assert step.explanation


def test_bfs_does_not_touch_graph_state(scenario):
    before = scenario.visual_snapshot()
    list(bfs(scenario, 0))
    assert scenario.visual_snapshot() == before


def test_bfs_two_isolated_nodes():
    g = build_graph(2, [])
    final = list(bfs(g, 0))[-1]
    assert final.table.levels == {0: 0}
    assert final.edge_states == {}


@pytest.mark.parametrize("seed", range(6))
def test_bfs_levels_are_hop_counts(seed):
    g = random_graph(seed, node_count=9, edge_prob=0.3)
    hops = {0: 0}
    frontier = [0]
    while frontier:
        nxt = []
        for node in frontier:
            for nbr in g.neighbours(node):
                if nbr not in hops:
                    hops[nbr] = hops[node] + 1
                    nxt.append(nbr)
        frontier = nxt

    steps = list(bfs(g, 0))
    assert steps[-1].table.levels == hops
    processed = [steps[-1].table.levels[s.current_node] for s in steps if s.kind is StepKind.PROCESS]
    assert processed == sorted(processed)
