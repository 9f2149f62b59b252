from office.lectionary_engine import FileTableLoader, LectionaryResolver
from office.main import app


# ── Health ───────────────────────────────────────────────────────────

def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert "timestamp" in payload
    assert "mcheyne" in payload["plans"]


# ── Calendar ─────────────────────────────────────────────────────────

def test_calendar_day(client):
    response = client.get("/v1/calendar/day", params={"date": "2026-12-25"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["date"] == "2026-12-25"
    assert payload["season"] == "christmas"
    assert payload["holy_day_name"] == "Christmas Day"
    assert payload["holy_day_rank"] == "principal"
    assert payload["collect_id"] == "christmas"
    assert payload["psalms_day"] == 25


def test_calendar_day_defaults_to_today(client):
    response = client.get("/v1/calendar/day")
    assert response.status_code == 200
    assert response.json()["season"]


def test_calendar_day_rejects_bad_date(client):
    assert client.get("/v1/calendar/day", params={"date": "2026-13-01"}).status_code == 422


def test_moveable_feasts(client):
    response = client.get("/v1/calendar/feasts", params={"year": 2026})
    assert response.status_code == 200
    feasts = response.json()["feasts"]
    assert feasts["easter_day"] == "2026-04-05"
    assert feasts["advent_sunday"] == "2026-11-29"


def test_moveable_feasts_year_out_of_range(client):
    assert client.get("/v1/calendar/feasts", params={"year": 1200}).status_code == 422


# ── Psalter ──────────────────────────────────────────────────────────

def test_psalter_morning_omits_venite_on_day_19(client):
    payload = client.get("/v1/psalter", params={"date": "2026-10-19"}).json()
    assert payload["session"] == "morning"
    assert payload["psalms"] == [95, 96, 97]
    assert payload["omit_venite"] is True

    evening = client.get("/v1/psalter", params={"date": "2026-10-19", "session": "evening"}).json()
    assert evening["omit_venite"] is False


def test_psalter_psalm_119_portion(client):
    payload = client.get("/v1/psalter", params={"date": "2026-01-24", "session": "evening"}).json()
    assert payload["psalms_day"] == 24
    assert payload["references"] == ["Psalms 119:1-32"]


def test_psalter_rejects_unknown_session(client):
    assert client.get("/v1/psalter", params={"session": "compline"}).status_code == 422


# ── Readings ─────────────────────────────────────────────────────────

def test_readings_default_plan(client):
    response = client.get("/v1/readings", params={"date": "2026-10-18"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["plan"] == "1662-revised"
    assert payload["session"] == "morning"
    assert payload["plan_day"] is None
    assert payload["plan_status"] is None
    assert payload["labels"]["first"] == ["Ezekiel 34"]
    assert payload["first"][0]["book"] == "Ezekiel"


def test_readings_sequential_with_start_date(client):
    payload = client.get(
        "/v1/readings",
        params={"date": "2026-10-01", "plan": "mcheyne", "session": "evening", "start_date": "2026-10-01"},
    ).json()
    assert payload["plan_day"] == 1
    assert payload["plan_status"] == "active"
    assert payload["labels"] == {"first": ["Ezra 1"], "second": ["Acts 1"]}


def test_readings_plan_not_started(client):
    payload = client.get(
        "/v1/readings",
        params={"date": "2026-10-19", "plan": "mcheyne", "start_date": "2026-11-01"},
    ).json()
    assert payload["plan_status"] == "not_started"
    assert payload["plan_day"] is None
    assert payload["first"] == []
    assert payload["second"] == []


def test_readings_plan_complete_uses_default_session(client):
    payload = client.get(
        "/v1/readings",
        params={"date": "2026-10-19", "plan": "bibleproject", "start_date": "2024-01-01"},
    ).json()
    assert payload["session"] == "daily"
    assert payload["plan_status"] == "complete"
    assert payload["first"] == []


def test_readings_session_not_offered(client):
    response = client.get("/v1/readings", params={"date": "2026-10-19", "plan": "mcheyne", "session": "daily"})
    assert response.status_code == 422


def test_readings_unknown_plan(client):
    response = client.get("/v1/readings", params={"plan": "sarum"})
    assert response.status_code == 404
    assert "sarum" in response.json()["detail"]


def test_readings_table_unavailable(client, tmp_path):
    app.state.resolver = LectionaryResolver(loader=FileTableLoader(tmp_path / "missing"))
    response = client.get("/v1/readings", params={"date": "2026-10-19", "plan": "1662-original"})
    assert response.status_code == 503
