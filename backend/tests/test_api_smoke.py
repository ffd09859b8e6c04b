import uuid

import pytest


@pytest.fixture
def client(db_session):
    # db_session has already reset the schema on the shared in-memory engine
    from corefive.main import app  # noqa: WPS433
    from fastapi.testclient import TestClient  # noqa: WPS433
    return TestClient(app)


@pytest.fixture
def headers():
    # Fresh user per test so in-process celebration latches never carry over
    return {"X-User-Id": f"user-{uuid.uuid4().hex[:8]}"}


def log(client, headers, pillar, value, **extra):
    r = client.post("/logs/", json={"pillar": pillar, "value": value, **extra}, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_root_ok(client):
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert "message" in data


def test_pillars_listed_in_canonical_order(client):
    r = client.get("/pillars")
    assert r.status_code == 200
    assert [p["id"] for p in r.json()] == ["cardio", "strength", "clean_eating", "mindfulness", "sleep"]


def test_create_and_list_log(client, headers):
    payload = {
        "pillar": "cardio",
        "value": 45,
        "details": {"type": "run", "intensity": "easy"},
        "logged_at": "2025-01-08T07:00:00+00:00",
    }
    cr = client.post("/logs/", json=payload, headers=headers)
    assert cr.status_code == 200, cr.text
    created = cr.json()["log"]
    # Wednesday entry counts toward Monday's week
    assert created["week_start"] == "2025-01-06"

    lr = client.get("/logs/", params={"week_start": "2025-01-09"}, headers=headers)
    assert lr.status_code == 200
    arr = lr.json()
    assert [r["id"] for r in arr] == [created["id"]]
    assert arr[0]["details"]["type"] == "run"

    # Other users do not see it
    other = client.get("/logs/", params={"week_start": "2025-01-06"}, headers={"X-User-Id": "someone-else"})
    assert other.json() == []


def test_week_start_override_is_normalized(client, headers):
    created = log(client, headers, "sleep", 7, week_start="2025-01-10", logged_at="2025-01-13T06:00:00+00:00")
    assert created["log"]["week_start"] == "2025-01-06"


def test_write_boundary_rejects_bad_input(client, headers):
    r = client.post("/logs/", json={"pillar": "cardio", "value": -5}, headers=headers)
    assert r.status_code == 422
    r = client.post("/logs/", json={"pillar": "yoga", "value": 5}, headers=headers)
    assert r.status_code == 422


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_values_are_rejected(client, headers, literal):
    raw = {**headers, "Content-Type": "application/json"}
    r = client.post("/logs/", content=f'{{"pillar":"cardio","value":{literal}}}', headers=raw)
    assert r.status_code == 422, r.text

    log_id = log(client, headers, "cardio", 20)["log"]["id"]
    r = client.patch(f"/logs/{log_id}", content=f'{{"value":{literal}}}', headers=raw)
    assert r.status_code == 422, r.text

    # Nothing non-finite reached storage, so week progress still renders
    week = client.get("/progress/week", headers=headers)
    assert week.status_code == 200, week.text
    cardio = next(p for p in week.json()["pillars"] if p["pillar"] == "cardio")
    assert cardio["current"] == 20


def test_update_and_delete_log(client, headers):
    log_id = log(client, headers, "cardio", 20)["log"]["id"]

    r = client.patch(f"/logs/{log_id}", json={"value": 35}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["value"] == 35

    assert client.patch(f"/logs/{log_id}", json={}, headers=headers).status_code == 400
    assert client.patch(f"/logs/{log_id}", json={"value": -1}, headers=headers).status_code == 422
    assert client.patch(f"/logs/{log_id}", json={"value": 1}, headers={"X-User-Id": "intruder"}).status_code == 404

    assert client.delete(f"/logs/{log_id}", headers=headers).status_code == 200
    assert client.delete(f"/logs/{log_id}", headers=headers).status_code == 404


def test_celebrations_follow_live_week(client, headers):
    assert log(client, headers, "cardio", 150)["completed_pillar"] == "cardio"
    log(client, headers, "strength", 3)
    log(client, headers, "clean_eating", 5)

    fourth = log(client, headers, "mindfulness", 60)
    assert [(c["type"], c["milestone"]["id"]) for c in fourth["celebrations"]] == [("milestone", "first_five")]

    fifth = log(client, headers, "sleep", 49)
    assert [c["type"] for c in fifth["celebrations"]] == ["all_five"]
    assert fifth["celebrations"][0]["streak"] == 1

    assert log(client, headers, "sleep", 7)["celebrations"] == []

    week = client.get("/progress/week", headers=headers).json()
    assert week["coverage"] == 5
    assert all(p["met"] for p in week["pillars"])


def test_streak_summary_and_milestone_ack(client, headers):
    for pillar, value in [("cardio", 150), ("strength", 3), ("clean_eating", 5), ("mindfulness", 60)]:
        r = client.post("/logs/", json={"pillar": pillar, "value": value}, headers=headers)
        assert r.status_code == 200

    summary = client.get("/progress/streak", headers=headers).json()
    assert summary["streak"] == 1
    assert summary["best_streak"] == 1
    assert summary["weeks"][0]["coverage"] == 4
    # Already handed out by the celebration on the fourth log
    assert summary["milestone"] is None

    r = client.post("/progress/milestones/streak_2/seen", headers=headers)
    assert r.status_code == 200
    assert r.json()["recorded"] is True
    assert client.post("/progress/milestones/nope/seen", headers=headers).status_code == 404


def test_backfilled_week_counts_toward_streak_without_celebrating(client, headers):
    from datetime import timedelta
    from corefive.core.config import settings
    from corefive.core.time_utils import local_now, monday_of

    last_week = (monday_of(local_now(settings.timezone).date()) - timedelta(weeks=1)).isoformat()
    for pillar, value in [("cardio", 150), ("strength", 3), ("clean_eating", 5), ("mindfulness", 60)]:
        body = log(client, headers, pillar, value, week_start=last_week)
        assert body["celebrations"] == []

    summary = client.get("/progress/streak", headers=headers).json()
    assert summary["streak"] == 1
    assert summary["milestone"]["id"] == "first_five"


def test_nudge_for_near_complete_week(client, headers):
    for pillar, value in [("cardio", 80), ("strength", 3), ("clean_eating", 5), ("mindfulness", 60), ("sleep", 49)]:
        log(client, headers, pillar, value, week_start="2025-01-06")

    r = client.get("/progress/nudge", params={"at": "2025-01-11T08:00:00"}, headers=headers)
    assert r.status_code == 200
    nudge = r.json()
    assert nudge["id"] == "almost-prime"
    assert nudge["pillar"] == "cardio"
    assert nudge["remaining"] == 70

    r = client.get(
        "/progress/nudge",
        params={"at": "2025-01-11T08:00:00", "dismissed": ["almost-prime"]},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json() is None


def test_history_window_is_clamped(client, headers):
    log(client, headers, "cardio", 30)
    r = client.get("/logs/history", params={"weeks": 0}, headers=headers)
    assert r.status_code == 200
    assert len(r.json()) == 1


def test_json_seen_store_backend(client, headers, tmp_path, monkeypatch):
    from corefive.core.config import settings

    path = tmp_path / "seen.json"
    monkeypatch.setattr(settings, "seen_store", "json")
    monkeypatch.setattr(settings, "seen_store_path", str(path))

    r = client.post("/progress/milestones/streak_4/seen", headers=headers)
    assert r.status_code == 200
    assert r.json()["recorded"] is True
    assert "streak_4" in path.read_text()


def test_stale_celebration_latches_are_dropped(client, headers, monkeypatch):
    from collections import OrderedDict
    from datetime import date
    from corefive.api import logs as logs_api
    from corefive.tracking.celebration import CelebrationLatch

    stale = CelebrationLatch()
    stale.fire(date(2025, 1, 6))
    monkeypatch.setattr(logs_api, "_latches", OrderedDict({"gone-quiet": stale}))

    log(client, headers, "cardio", 30)

    assert "gone-quiet" not in logs_api._latches
    assert list(logs_api._latches) == [headers["X-User-Id"]]


def test_celebration_latches_are_capped(monkeypatch):
    from collections import OrderedDict
    from datetime import date
    from corefive.api import logs as logs_api

    monkeypatch.setattr(logs_api, "_latches", OrderedDict())
    monkeypatch.setattr(logs_api, "MAX_CELEBRATION_LATCHES", 2)
    week = date(2025, 1, 6)

    first = logs_api._latch_for("a", week)
    logs_api._latch_for("b", week)
    # Touching "a" makes "b" the least recently used
    assert logs_api._latch_for("a", week) is first
    logs_api._latch_for("c", week)

    assert list(logs_api._latches) == ["a", "c"]
