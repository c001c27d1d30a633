# tests/test_api.py

import random

import pytest
from deepstoker.api import create_app
from deepstoker.core.scheduler import ManualScheduler
from deepstoker.reactor.engine import ReactorEngine
from deepstoker.reactor.state import Metric


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def engine(scheduler):
    return ReactorEngine(scheduler=scheduler, rng=random.Random(3))


@pytest.fixture
def client(engine):
    app = create_app(engine)
    app.config["TESTING"] = True
    return app.test_client()


def _new_session(client, **payload):
    return client.post("/api/session", json=payload)


def test_create_session(client):
    response = _new_session(client, rank="Engineer", config={"duration": 120, "reactorType": "star"})
    body = response.get_json()

    assert response.status_code == 200
    assert body["ok"] is True
    assert body["state"]["shift_duration"] == 120.0
    assert body["state"]["reactor_type"] == "star"
    assert body["state"]["recent_logs"][0]["message"] == "SHIFT STARTED: 120s GOAL"


def test_invalid_session_config_is_400(client):
    response = _new_session(client, config={"duration": -5})
    body = response.get_json()

    assert response.status_code == 400
    assert body["ok"] is False
    assert body["error"] == "ConfigurationError"


def test_start_requires_session(client):
    assert client.post("/api/session/start").status_code == 400


def test_session_runs_on_scheduler(client, scheduler):
    _new_session(client)
    assert client.post("/api/session/start").status_code == 200

    scheduler.advance(2.0)
    state = client.get("/api/state").get_json()["state"]
    assert state["elapsed_time"] == pytest.approx(2.0)


def test_control(client):
    _new_session(client)
    response = client.post("/api/control", json={"control": "VENT_PRESSURE", "inOptimalBand": True})
    body = response.get_json()

    assert body["ok"] is True
    assert 5.0 <= body["reduction"] <= 15.0
    assert body["state"]["control_alignment"]["pressure"] is True


def test_unknown_control_is_400(client):
    _new_session(client)
    response = client.post("/api/control", json={"control": "OPEN_HATCH"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "INVALID_CHOICE"


def test_pause(client):
    _new_session(client)
    body = client.post("/api/session/pause", json={"paused": True}).get_json()
    assert body["state"]["is_paused"] is True
    assert client.post("/api/session/pause", json={"paused": "yes"}).status_code == 400


def test_purge(client, engine):
    _new_session(client)
    for metric in Metric:
        engine.state.set_metric(metric, 90.0)

    body = client.post("/api/purge").get_json()
    assert body["purged"] is True
    assert body["state"]["hull_integrity"] == 85.0


def test_result_and_reward(client, engine):
    assert client.get("/api/result").status_code == 404

    _new_session(client, config={"duration": 1})
    engine.tick(0.5)
    engine.tick(0.5)

    result = client.get("/api/result").get_json()
    assert result["result"]["success"] is True
    assert result["result"]["cause"] == "SUCCESS"

    reward = client.get("/api/reward").get_json()
    assert reward["reward"]["total"] == reward["final_total"]


def test_stop(client):
    _new_session(client)
    client.post("/api/session/start")
    body = client.post("/api/session/stop").get_json()
    assert body["state"]["is_active"] is False
