import threading

import pytest

from engine import RunState
from main import app, WORKSPACES

from conftest import SCENARIO_EDGES


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def built(client):
    """The four-node scenario graph, built through the API."""
    for i in range(4):
        assert client.post("/api/graph/node", json={"x": 100 + 100 * i, "y": 200}).get_json()["id"] == i
    for a, b, w in SCENARIO_EDGES:
        assert client.post("/api/graph/edge", json={"a": a, "b": b, "weight": w}).status_code == 201
    return client


def test_index_renders(client):
    res = client.get("/")
    assert res.status_code == 200
    assert b"Graph Algorithm Stepper" in res.data
    assert b"<svg" in res.data


def test_state_starts_empty(client):
    data = client.get("/api/state").get_json()
    assert data["graph"] == {"nodes": [], "edges": []}
    assert data["algorithm"] == app.config["DEFAULT_ALGORITHM"]
    assert data["step"] is None
    assert data["running"] is False


def test_graph_editing(built):
    data = built.get("/api/state").get_json()
    assert len(data["graph"]["nodes"]) == 4
    assert len(data["graph"]["edges"]) == 5
    assert data["start"] == 0

    res = built.patch("/api/graph/edge", json={"a": 1, "b": 0, "weight": 9})
    assert res.status_code == 200
    weights = {e["id"]: e["weight"] for e in res.get_json()["graph"]["edges"]}
    assert weights["0-1"] == 9

    res = built.delete("/api/graph/edge", json={"a": 3, "b": 2})
    assert "2-3" not in {e["id"] for e in res.get_json()["graph"]["edges"]}

    res = built.delete("/api/graph/node/0")
    assert res.get_json()["start"] == 1


def test_clear_does_not_reuse_ids(built):
    built.post("/api/graph/clear")
    assert built.post("/api/graph/node", json={}).get_json()["id"] == 4


def test_layout(built):
    assert built.post("/api/graph/layout", json={"mode": "grid"}).status_code == 200
    assert built.post("/api/graph/layout", json={"mode": "spiral"}).status_code == 400


@pytest.mark.parametrize(
    "method, url, body, status",
    [
        ("post", "/api/graph/edge", {"a": 1, "b": 1, "weight": 2}, 400),
        ("post", "/api/graph/edge", {"a": 0, "b": 1, "weight": 0}, 400),
        ("post", "/api/graph/edge", {"a": 0, "b": "1"}, 400),
        ("post", "/api/graph/edge", {"a": 0, "b": 42}, 404),
        ("patch", "/api/graph/edge", {"a": 0, "b": 3, "weight": 2}, 404),
        ("delete", "/api/graph/edge", {"a": 0, "b": 3}, 404),
        ("post", "/api/graph/node", {"x": "left", "y": 4}, 400),
        ("post", "/api/config/start", {"start": 12}, 404),
        ("post", "/api/config/algo", {"algorithm": "astar"}, 400),
        ("post", "/api/config/speed", {"speed": "warp"}, 400),
    ],
)
def test_bad_edits_are_rejected(built, method, url, body, status):
    res = getattr(built, method)(url, json=body)
    assert res.status_code == status
    assert "error" in res.get_json()


def test_unknown_node_delete_is_404(client):
    assert client.delete("/api/graph/node/5").status_code == 404


def test_run_and_step(built):
    res = built.post("/api/run", json={"algorithm": "dijkstra", "start": 0})
    assert res.status_code == 200
    data = res.get_json()
    assert data["step"]["kind"] == "reset"
    assert data["running"] is True

    data = built.post("/api/step/next").get_json()
    assert data["step"]["kind"] == "select"
    assert data["current_step"] == 1

    data = built.post("/api/step/prev").get_json()
    assert data["current_step"] == 0

    data = built.post("/api/step/goto", json={"index": 3}).get_json()
    assert data["step"]["step_number"] == 3

    data = built.post("/api/step/end").get_json()
    assert data["is_finished"] is True
    assert data["running"] is False
    assert data["step"]["is_final"] is True
    assert data["step"]["table"]["distances"] == {"0": 0, "1": 3, "2": 1, "3": 8}
    assert "Analytics" in data["analytics"]


def test_run_blocks_edits_until_cancelled(built):
    built.post("/api/run", json={"algorithm": "bfs", "start": 0})

    assert built.post("/api/graph/node", json={}).status_code == 409
    assert built.post("/api/run", json={"algorithm": "dfs", "start": 0}).status_code == 409

    data = built.post("/api/run/cancel").get_json()
    assert data["cancelled"] is True
    assert data["running"] is False

    assert built.post("/api/graph/node", json={}).status_code == 201
    assert built.get("/api/state").get_json()["step"] is None


def test_rerun_after_finish(built):
    built.post("/api/run", json={"algorithm": "mst", "start": 0})
    built.post("/api/step/end")
    res = built.post("/api/run", json={"algorithm": "bfs", "start": 2})
    assert res.status_code == 200
    assert res.get_json()["algorithm"] == "bfs"
    assert res.get_json()["start"] == 2


def test_run_rejects_bad_input(built):
    assert built.post("/api/run", json={"algorithm": "astar", "start": 0}).status_code == 400
    assert built.post("/api/run", json={"algorithm": "bfs", "start": 99}).status_code == 400
    assert built.post("/api/run", json={"algorithm": "bfs", "start": None}).status_code == 400
    assert built.get("/api/state").get_json()["running"] is False


def test_stepping_without_run(built):
    assert built.post("/api/step/next").status_code == 400
    built.post("/api/run", json={"algorithm": "bfs", "start": 0})
    assert built.post("/api/step/goto", json={"index": 500}).status_code == 400


def test_play_and_tick(built):
    built.post("/api/config/speed", json={"speed": "turbo"})
    built.post("/api/run", json={"algorithm": "dfs", "start": 0})
    data = built.post("/api/step/play").get_json()
    assert data["stepper"] == "playing"
    data = built.post("/api/step/tick").get_json()
    assert "advanced" in data
    data = built.post("/api/step/play").get_json()
    assert data["stepper"] == "paused"


def test_sessions_are_isolated(built):
    with app.test_client() as other:
        assert other.get("/api/state").get_json()["graph"]["nodes"] == []


def workspace_of(client):
    with client.session_transaction() as sess:
        return WORKSPACES[sess["workspace"]]


def test_requests_wait_for_workspace_lock():
    client = app.test_client()
    client.post("/api/graph/node", json={})
    client.post("/api/graph/node", json={})
    client.post("/api/graph/edge", json={"a": 0, "b": 1})
    client.post("/api/run", json={"algorithm": "bfs", "start": 0})
    ws = workspace_of(client)
    done = threading.Event()

    def step():
        client.post("/api/step/next")
        done.set()

    with ws.lock:
        worker = threading.Thread(target=step)
        worker.start()
        assert not done.wait(0.2)
        assert ws.stepper.current_idx == 0
    worker.join(5)
    assert done.is_set()
    assert ws.stepper.current_idx == 1


def test_least_recently_used_workspace_is_evicted(monkeypatch):
    monkeypatch.setitem(app.config, "MAX_WORKSPACES", 3)
    first = app.test_client()
    first.post("/api/graph/node", json={})
    first.post("/api/run", json={"algorithm": "bfs", "start": 0})
    ws = workspace_of(first)
    run = ws.stepper.run
    assert len(WORKSPACES) <= 3

    for _ in range(3):
        app.test_client().get("/api/state")

    assert all(other is not ws for other in WORKSPACES.values())
    assert len(WORKSPACES) == 3
    assert run.state is RunState.CANCELLED
    assert ws.graph.active_run is None
    # the evicted session starts over with an empty workspace
    assert first.get("/api/state").get_json()["graph"]["nodes"] == []


def test_active_workspace_survives_eviction(monkeypatch):
    monkeypatch.setitem(app.config, "MAX_WORKSPACES", 2)
    keep = app.test_client()
    keep.post("/api/graph/node", json={})
    for _ in range(3):
        app.test_client().get("/api/state")
        keep.get("/api/state")
    assert len(keep.get("/api/state").get_json()["graph"]["nodes"]) == 1
