"""
Tests for the HTTP API.
"""

import json

import pytest
from fastapi.testclient import TestClient

from doughformula import deps
from doughformula.main import app
from doughformula.schemas import TimerStatus
from doughformula.services.emergency_timer import TIMER_STORAGE_KEY, now_ms


def test_ready(client):
    response = client.get("/api/ready")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "redis_ok": True}


# --- Dough ---

def test_calculate_single_stage(client):
    response = client.post("/api/dough/calculate", json={
        "num_balls": 4,
        "ball_weight": 250,
        "hydration": 0.65,
        "salt": 0.02,
        "yeast": 0.003,
    })
    assert response.status_code == 200
    data = response.json()
    assert data["stage"] == "single"
    assert data["ingredients"]["flour"] == 598
    assert data["ingredients"]["water"] == 389
    assert data["ingredients"]["salt"] == 12.0
    assert data["ingredients"]["yeast"] == 1.8
    assert data["total_weight"] == 1000
    assert data["percentages"]["hydration"] == 65


def test_calculate_two_stage(client):
    response = client.post("/api/dough/calculate", json={"use_pre_ferment": True})
    assert response.status_code == 200
    data = response.json()
    assert data["stage"] == "two-stage"
    assert data["pre_ferment"]["ingredients"] == {"flour": 150, "water": 150, "yeast": 1.8}
    assert data["final_dough"]["ingredients"]["pre_ferment"] == "all"
    assert data["final_dough"]["ingredients"]["yeast"] == 0
    assert data["totals"]["flour"] == 598


def test_calculate_rejects_invalid_parameters(client):
    response = client.post("/api/dough/calculate", json={"num_balls": 0})
    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "invalid_parameters"
    assert data["field"] == "num_balls"


def test_calculate_rejects_malformed_body(client):
    response = client.post("/api/dough/calculate", json={"num_balls": "many"})
    assert response.status_code == 422


def test_resolve_with_style_and_overrides(client):
    response = client.post("/api/dough/resolve", json={
        "style": "newYork",
        "overrides": {"num_balls": 2},
    })
    assert response.status_code == 200
    data = response.json()
    assert data["style"] == "newYork"
    assert data["parameters"]["num_balls"] == 2
    assert data["parameters"]["ball_weight"] == 280
    assert data["recipe"]["total_weight"] == 560


def test_resolve_unknown_style_falls_back_to_custom(client):
    response = client.post("/api/dough/resolve", json={"style": "hawaiian"})
    assert response.status_code == 200
    data = response.json()
    assert data["style"] == "custom"
    assert data["parameters"]["hydration"] == 0.65


# --- Styles ---

def test_list_styles(client):
    response = client.get("/api/styles")
    assert response.status_code == 200
    ids = [style["id"] for style in response.json()]
    assert len(ids) == 7
    assert "neapolitan" in ids
    assert "custom" in ids


def test_get_style(client):
    response = client.get("/api/styles/neapolitan")
    assert response.status_code == 200
    assert response.json()["defaults"]["hydration"] == 0.62


def test_get_unknown_style(client):
    assert client.get("/api/styles/hawaiian").status_code == 404


def test_style_defaults_fall_back(client):
    response = client.get("/api/styles/hawaiian/defaults")
    assert response.status_code == 200
    assert response.json()["num_balls"] == 4


def test_timer_presets(client):
    response = client.get("/api/timer/presets")
    assert response.status_code == 200
    presets = {p["id"]: p for p in response.json()}
    assert presets["emergency"]["duration"] == 2 * 60 * 60 * 1000


# --- Share ---

def test_share_encode(client):
    response = client.post("/api/share/encode", json={"parameters": {}, "style": "detroit"})
    assert response.status_code == 200
    data = response.json()
    assert data["query"].startswith("s=detroit&n=4")
    assert data["url"].endswith("/?" + data["query"])


def test_share_decode(client):
    response = client.get("/api/share/decode", params={"link": "https://thepizzadoughformula.com/?s=newYork&n=2"})
    assert response.status_code == 200
    data = response.json()
    assert data["recipe"]["num_balls"] == 2
    assert data["recipe"]["hydration"] is None
    assert data["parameters"]["ball_weight"] == 280


def test_share_text(client):
    response = client.post("/api/share/text", json={"parameters": {}, "style": "neapolitan"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("Neapolitan")


# --- Units ---

def test_weight_in_grams(client):
    response = client.post("/api/units/weight", json={"grams": 1.8, "unit": "grams"})
    assert response.status_code == 200
    data = response.json()
    assert data["formatted"] == "2g"
    assert data["formatted_precise"] == "1.8g"


def test_weight_in_ounces(client):
    response = client.post("/api/units/weight", json={"grams": 598, "unit": "ounces"})
    assert response.status_code == 200
    assert response.json()["value"] == 21.1


def test_weight_uses_stored_preference(client):
    client.put("/api/prefs/unit", json={"unit": "ounces"})
    response = client.post("/api/units/weight", json={"grams": 283.495})
    assert response.json()["unit"] == "ounces"
    assert response.json()["value"] == 10


def test_weight_rejects_negative(client):
    assert client.post("/api/units/weight", json={"grams": -5}).status_code == 422


def test_volume_ingredients(client):
    response = client.get("/api/units/volume/ingredients")
    assert response.status_code == 200
    ids = {i["id"] for i in response.json()}
    assert {"breadFlour", "water", "instantYeast"} <= ids


@pytest.mark.parametrize(
    "body, grams",
    [
        ({"ingredient_id": "breadFlour", "amount": 2}, 254),
        ({"ingredient_id": "breadFlour", "amount": "1 1/2"}, 191),
        ({"ingredient_id": "instantYeast", "amount": "1/2", "measure": "tsp"}, 1.5),
    ],
)
def test_volume_convert(client, body, grams):
    response = client.post("/api/units/volume/convert", json=body)
    assert response.status_code == 200
    assert response.json()["grams"] == grams


def test_volume_convert_errors(client):
    assert client.post(
        "/api/units/volume/convert", json={"ingredient_id": "unobtainium", "amount": 1}
    ).status_code == 404
    assert client.post(
        "/api/units/volume/convert", json={"ingredient_id": "water", "amount": "a splash"}
    ).status_code == 400
    # no cup density for yeast
    assert client.post(
        "/api/units/volume/convert", json={"ingredient_id": "instantYeast", "amount": 1}
    ).status_code == 400


# --- Prefs ---

def test_unit_pref_defaults_to_grams(client):
    assert client.get("/api/prefs/unit").json() == {"unit": "grams"}


def test_unit_pref_is_persisted(client, mock_redis):
    response = client.put("/api/prefs/unit", json={"unit": "ounces"})
    assert response.status_code == 200
    assert mock_redis.get("doughformula:preferredUnit") == "ounces"
    assert client.get("/api/prefs/unit").json() == {"unit": "ounces"}


def test_unit_pref_rejects_unknown_unit(client):
    assert client.put("/api/prefs/unit", json={"unit": "stone"}).status_code == 422


# --- Timer ---

def test_timer_initial_state(client):
    data = client.get("/api/timer").json()
    assert data["status"] == "idle"
    assert data["remaining"] == 2 * 60 * 60 * 1000
    assert data["formatted_time"] == "02:00:00"


def test_timer_start_pause_reset(client, mock_redis):
    data = client.post("/api/timer/start").json()
    assert data["status"] == "running"
    assert data["is_running"] is True

    saved = json.loads(mock_redis.get(f"doughformula:{TIMER_STORAGE_KEY}"))
    assert saved["isRunning"] is True

    data = client.post("/api/timer/pause").json()
    assert data["status"] == "paused"

    data = client.post("/api/timer/toggle").json()
    assert data["status"] == "running"

    data = client.post("/api/timer/reset").json()
    assert data["status"] == "idle"
    assert data["remaining"] == data["duration"]


def test_timer_add_time_and_duration(client):
    data = client.post("/api/timer/duration", json={"ms": 600000}).json()
    assert data["duration"] == 600000
    assert data["remaining"] == 600000

    data = client.post("/api/timer/add-time", json={"ms": -120000}).json()
    assert data["remaining"] == 480000

    # capped at the duration
    data = client.post("/api/timer/add-time", json={"ms": 3600000}).json()
    assert data["remaining"] == 600000


def test_timer_duration_must_be_positive(client):
    assert client.post("/api/timer/duration", json={"ms": 0}).status_code == 422


def _seed_timer(mock_redis, **snapshot):
    mock_redis.set(f"doughformula:{TIMER_STORAGE_KEY}", json.dumps(snapshot))


def test_timer_restores_paused_snapshot_at_startup(mock_redis):
    _seed_timer(mock_redis, remaining=60000, isRunning=False, savedAt=0, duration=120000)

    with TestClient(app) as c:
        data = c.get("/api/timer").json()

    assert data["status"] == "paused"
    assert data["remaining"] == 60000
    assert data["progress"] == 50


def test_running_timer_resumes_at_startup(mock_redis):
    _seed_timer(mock_redis, remaining=60000, isRunning=True, savedAt=now_ms() - 10000, duration=120000)

    with TestClient(app):
        # no timer request made: the app picked the countdown up on its own
        timer = deps._timer
        assert timer is not None
        assert timer.status == TimerStatus.RUNNING
        assert 0 < timer.remaining <= 50000
        assert json.loads(mock_redis.get(f"doughformula:{TIMER_STORAGE_KEY}"))["isRunning"] is True


def test_expired_timer_fires_alarm_at_startup(mock_redis, monkeypatch):
    alarms = []
    monkeypatch.setattr(deps, "publish_alarm", lambda: alarms.append("alarm"))
    _seed_timer(mock_redis, remaining=60000, isRunning=True, savedAt=now_ms() - 600000, duration=120000)

    with TestClient(app):
        assert deps._timer.status == TimerStatus.COMPLETED
        assert alarms == ["alarm"]
        assert mock_redis.get(f"doughformula:{TIMER_STORAGE_KEY}") is None
