import pytest

from graph import (
    Graph,
    VisualState,
    edge_key,
    NodeNotFound,
    EdgeNotFound,
    InvalidEdge,
    GraphBusy,
)


def test_node_ids_are_sequential_and_never_reused():
    g = Graph()
    assert [g.add_node() for _ in range(3)] == [0, 1, 2]
    g.remove_node(1)
    assert g.add_node() == 3
    g.clear()
    assert g.node_count() == 0
    assert g.add_node() == 4


def test_add_node_defaults():
    g = Graph()
    nid = g.add_node(10, 20)
    node = g.get_node(nid)
    assert (node.x, node.y) == (10, 20)
    assert node.label == "0"
    assert node.state is VisualState.UNVISITED


def test_auto_positions_do_not_overlap():
    g = Graph()
    for _ in range(5):
        g.add_node()
    points = [(n.x, n.y) for n in g.nodes.values()]
    assert len(set(points)) == 5


def test_edge_is_undirected(scenario):
    assert scenario.edge_between(1, 0) is scenario.edge_between(0, 1)
    assert scenario.edge_weight(1, 0) == 4
    assert edge_key(3, 1) == "1-3"
    assert scenario.get_edge("1-3").weight == 5


def test_neighbours_follow_insertion_order(scenario):
    assert scenario.neighbours(0) == [1, 2]
    assert scenario.neighbours(1) == [0, 2, 3]
    assert scenario.neighbours(2) == [0, 1, 3]
    assert scenario.neighbours(3) == [1, 2]


def test_add_existing_edge_updates_weight(scenario):
    before = list(scenario.edges)
    assert scenario.add_edge(1, 0, 7) == "0-1"
    assert scenario.edge_weight(0, 1) == 7
    assert list(scenario.edges) == before
    assert scenario.neighbours(0) == [1, 2]


def test_update_and_remove_edge(scenario):
    scenario.update_edge_weight(3, 2, 9)
    assert scenario.edge_weight(2, 3) == 9
    scenario.remove_edge(3, 2)
    assert scenario.edge_between(2, 3) is None
    assert 3 not in scenario.neighbours(2)
    with pytest.raises(EdgeNotFound):
        scenario.remove_edge(2, 3)
    with pytest.raises(EdgeNotFound):
        scenario.update_edge_weight(2, 3, 1)


def test_remove_node_drops_incident_edges(scenario):
    scenario.remove_node(1)
    assert set(scenario.edges) == {"0-2", "2-3"}
    assert scenario.neighbours(0) == [2]
    with pytest.raises(NodeNotFound):
        scenario.remove_node(1)


@pytest.mark.parametrize("weight", [0, -3, 1.5, "2", True])
def test_invalid_weights_rejected(scenario, weight):
    with pytest.raises(InvalidEdge):
        scenario.add_edge(0, 3, weight)
    assert scenario.edge_between(0, 3) is None


def test_self_loop_and_unknown_endpoint_rejected(scenario):
    with pytest.raises(InvalidEdge):
        scenario.add_edge(2, 2, 1)
    with pytest.raises(NodeNotFound):
        scenario.add_edge(0, 42, 1)
    with pytest.raises(NodeNotFound):
        scenario.neighbours(42)


def test_errors_are_builtin_compatible(scenario):
    with pytest.raises(ValueError):
        scenario.add_edge(0, 0, 1)
    with pytest.raises(LookupError):
        scenario.remove_edge(0, 3)


def test_structural_edits_refused_while_claimed(scenario):
    scenario.active_run = object()
    for edit in (
        lambda: scenario.add_node(),
        lambda: scenario.remove_node(0),
        lambda: scenario.add_edge(0, 3, 1),
        lambda: scenario.update_edge_weight(0, 1, 2),
        lambda: scenario.remove_edge(0, 1),
        lambda: scenario.clear(),
    ):
        with pytest.raises(GraphBusy):
            edit()
    assert scenario.node_count() == 4
    assert scenario.edge_count() == 5


def test_reset_visual_state(scenario):
    scenario.nodes[0].state = VisualState.VISITED
    scenario.edges["0-1"].state = VisualState.ON_PATH
    scenario.reset_visual_state()
    snap = scenario.visual_snapshot()
    assert set(snap["nodes"].values()) == {VisualState.UNVISITED}
    assert set(snap["edges"].values()) == {VisualState.UNVISITED}


def test_layouts_keep_nodes_on_canvas(scenario):
    for arrange in (scenario.arrange_circle, scenario.arrange_grid):
        arrange()
        for node in scenario.nodes.values():
            assert 0 <= node.x <= scenario.canvas_w
            assert 0 <= node.y <= scenario.canvas_h


def test_to_dict(scenario):
    data = scenario.to_dict()
    assert [n["id"] for n in data["nodes"]] == [0, 1, 2, 3]
    assert {e["id"]: e["weight"] for e in data["edges"]} == {
        "0-1": 4, "0-2": 1, "1-2": 2, "1-3": 5, "2-3": 8,
    }
    assert data["edges"][0]["state"] == "unvisited"


def test_read_contract(scenario):
    assert scenario.all_node_ids() == {0, 1, 2, 3}
    assert scenario.nodes_sorted() == [0, 1, 2, 3]
    assert scenario.node_count() == 4
    assert scenario.edge_between(3, 2).weight == 8
    assert scenario.edge_between(0, 3) is None
