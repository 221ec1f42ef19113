# tests/test_app.py
import io
import json
from types import SimpleNamespace

import pytest

from conftest import FakeClock, PUZZLE, SOLUTION
from config import AppConfig, load_config
from main import create_app, Workspace, WorkspaceStore
from services import GeminiClient


@pytest.fixture
def app_clock():
    return FakeClock()


@pytest.fixture
def app(config, fake_models, app_clock):
    gemini = GeminiClient(config, client=SimpleNamespace(models=fake_models))
    app = create_app(config, gemini=gemini, clock=app_clock)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def finish(client, kind, clock, limit=10000):
    for _ in range(limit):
        clock.advance(1000)
        data = client.get(f"/api/{kind}/state").get_json()
        if not data["running"]:
            return data
    raise AssertionError("run did not finish")


def test_index_renders_all_three_tabs(client):
    res = client.get("/")
    assert res.status_code == 200
    body = res.get_data(as_text=True)
    for marker in ('id="tab-sorting"', 'id="tab-pathfinding"', 'id="tab-sudoku"', 'id="sorting-algo"'):
        assert marker in body


def test_algorithms_listing(client):
    keys = [a["key"] for a in client.get("/api/algorithms").get_json()]
    assert keys == ["bubble", "merge", "quick", "heap", "dijkstra", "astar", "bfs"]


def test_sorting_round_trip(client, app_clock):
    assert client.post("/api/sorting/size", json={"size": 6}).status_code == 200
    res = client.post("/api/sorting/algorithm", json={"key": "quick"})
    assert res.get_json()["state"]["algorithm"] == "quick"

    started = client.post("/api/sorting/start").get_json()
    assert started["running"]
    assert "<svg" in started["svg"]

    done = finish(client, "sorting", app_clock)
    state = done["state"]
    assert state["status"] == "completed"
    assert state["array"] == sorted(state["array"])
    assert state["metrics"]["array_size"] == 6


def test_bad_input_is_400(client):
    assert client.post("/api/sorting/algorithm", json={"key": "bogo"}).status_code == 400
    assert client.post("/api/sorting/size", json={"size": "big"}).status_code == 400
    assert client.post("/api/pathfinding/click", json={"row": 99, "col": 0}).status_code == 400
    assert client.post("/api/sudoku/load", json={"grid": [[1, 1] + [0] * 7] + [[0] * 9] * 8}).status_code == 400
    assert client.get("/api/chess/state").status_code == 404
    assert client.post("/api/sorting/maze").status_code == 400


def test_pathfinding_flow(client, app_clock):
    res = client.post("/api/pathfinding/start")
    assert res.status_code == 400
    assert res.get_json()["error"] == "Please set both source and target nodes first."

    client.post("/api/pathfinding/click", json={"row": 0, "col": 0})
    client.post("/api/pathfinding/click", json={"row": 4, "col": 4})
    client.post("/api/pathfinding/algorithm", json={"key": "bfs"})
    assert client.post("/api/pathfinding/start").get_json()["running"]

    state = finish(client, "pathfinding", app_clock)["state"]
    assert state["status"] == "completed"
    assert state["metrics"]["path_length"] == 9
    assert sum(row.count("path") for row in state["grid"]["cells"]) == 7


def test_sudoku_load_solve_and_stop(client, app_clock):
    assert client.post("/api/sudoku/load", json={"grid": PUZZLE}).status_code == 200
    candidates = client.get("/api/sudoku/candidates?row=0&col=2").get_json()
    assert candidates["candidates"] == [1, 2, 4]

    client.post("/api/sudoku/start")
    stopped = client.post("/api/sudoku/stop").get_json()
    assert stopped["state"]["status"] == "stopped"

    client.post("/api/sudoku/start")
    state = finish(client, "sudoku", app_clock)["state"]
    assert state["status"] == "completed"
    assert state["board"]["cells"] == SOLUTION


def test_sudoku_player_routes(client):
    client.post("/api/sudoku/load", json={"grid": PUZZLE})
    client.post("/api/sudoku/select", json={"row": 0, "col": 2})
    state = client.post("/api/sudoku/enter", json={"value": 4}).get_json()["state"]
    assert state["board"]["cells"][0][2] == 4
    assert state["selected"] == [0, 2]

    play = client.post("/api/sudoku/play").get_json()["state"]
    assert play["play_mode"] is True


def test_sudoku_hint_and_analysis(client, fake_models, app_clock):
    fake_models.reply = "Try 4: 1 and 2 are blocked by the box."
    client.post("/api/sudoku/load", json={"grid": PUZZLE})
    client.post("/api/sudoku/select", json={"row": 0, "col": 2})
    hint = client.post("/api/sudoku/hint").get_json()["hint"]
    assert hint["summary_text"] == "Try 4: 1 and 2 are blocked by the box."

    early = client.post("/api/sudoku/analyze").get_json()
    assert early["state"]["analysis"] is None

    client.post("/api/sudoku/start")
    finish(client, "sudoku", app_clock)
    fake_models.reply = (
        "Solving Summary: Smooth.\nDifficulty Assessment: Easy.\nSearch Behaviour: Few backtracks."
    )
    analysis = client.post("/api/sudoku/analyze").get_json()["state"]["analysis"]
    assert analysis["summary_text"] == "Smooth."
    assert analysis["degraded"] is False


def test_recognize_upload(client, fake_models):
    fake_models.reply = json.dumps(PUZZLE)
    res = client.post(
        "/api/sudoku/recognize",
        data={"image": (io.BytesIO(b"fake-png"), "board.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert res.status_code == 200
    assert res.get_json()["state"]["board"]["cells"] == PUZZLE

    fake_models.reply = "nothing useful"
    res = client.post(
        "/api/sudoku/recognize",
        data={"image": (io.BytesIO(b"fake-png"), "board.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert res.status_code == 400
    assert res.get_json()["state"]["board"]["cells"] == PUZZLE

    assert client.post("/api/sudoku/recognize", data={}, content_type="multipart/form-data").status_code == 400


def test_browsers_get_separate_workspaces(app):
    first, second = app.test_client(), app.test_client()
    first.post("/api/sorting/size", json={"size": 7})
    second.post("/api/sorting/size", json={"size": 9})
    assert len(first.get("/api/sorting/state").get_json()["state"]["array"]) == 7
    assert len(second.get("/api/sorting/state").get_json()["state"]["array"]) == 9
    assert len(app.extensions["workspaces"]) == 2


def test_workspace_store_evicts_and_closes(config, app_clock):
    store = WorkspaceStore(lambda: Workspace(config, None, None, app_clock), capacity=2)
    a = store.get("a")
    a.sorting.start()
    store.get("b")
    store.get("c")
    assert len(store) == 2
    assert not a.sorting.running


def test_load_without_grid_is_400(client):
    client.post("/api/sudoku/load", json={"grid": PUZZLE})
    res = client.post("/api/sudoku/load", json={})
    assert res.status_code == 400
    assert client.get("/api/sudoku/state").get_json()["state"]["board"]["cells"] == PUZZLE


def test_non_finite_speed_is_400(client):
    res = client.post("/api/pathfinding/speed", data='{"speed": Infinity}', content_type="application/json")
    assert res.status_code == 400


def test_ai_calls_run_without_holding_the_workspace_lock(app, client, fake_models, app_clock):
    client.post("/api/sudoku/load", json={"grid": PUZZLE})
    with client.session_transaction() as sess:
        ws = app.extensions["workspaces"].get(sess["sid"])

    lock_free = []

    def reply(contents):
        free = ws.lock.acquire(blocking=False)
        if free:
            ws.lock.release()
        lock_free.append(free)
        return "Try 4." if isinstance(contents, str) else json.dumps(PUZZLE)

    fake_models.reply = reply
    client.post("/api/sudoku/select", json={"row": 0, "col": 2})
    assert client.post("/api/sudoku/hint").get_json()["hint"]["summary_text"] == "Try 4."
    res = client.post(
        "/api/sudoku/recognize",
        data={"image": (io.BytesIO(b"fake-png"), "board.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert res.status_code == 200
    client.post("/api/sorting/start")
    finish(client, "sorting", app_clock)
    client.post("/api/sorting/analyze")

    assert lock_free == [True, True, True]


def test_unset_secret_key_gets_a_random_one():
    assert load_config({}).secret_key == ""
    first, second = create_app(AppConfig()), create_app(AppConfig())
    assert len(first.secret_key) == 64
    assert first.secret_key != second.secret_key
    assert create_app(AppConfig(secret_key="fixed")).secret_key == "fixed"
