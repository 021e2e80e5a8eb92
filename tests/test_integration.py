"""End-to-end tests through the Flask routes with a fake results provider."""

import logging

import pytest
from conftest import FakeProvider, provider_fixture

from betting_overs.api import create_app


@pytest.fixture
def fake_provider():
    return FakeProvider(default=[provider_fixture(i) for i in range(101, 109)])


@pytest.fixture
def client(tmp_db, fake_provider):
    app = create_app(db_path=tmp_db, provider=fake_provider)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def loaded(client):
    """Load this week's fixtures; returns (week, {external_id: fixture_id})."""
    data = client.get("/api/fixtures").get_json()
    return data["week"], {f["api_fixture_id"]: f["id"] for f in data["fixtures"]}


def _submit(client, week, by_ext, player, ext_ids):
    return client.post("/api/selections", json={
        "player_name": player,
        "fixture_ids": [by_ext[e] for e in ext_ids],
        "week_id": week["id"],
    })


class TestWeeksAndFixtures:
    def test_fixtures_load_once(self, client, fake_provider, loaded):
        week, by_ext = loaded
        assert len(by_ext) == 8
        assert week["status"] == "active"
        client.get("/api/fixtures")
        assert len(fake_provider.fixture_calls) == 1

    def test_no_store_header(self, client, loaded):
        resp = client.get("/api/weeks")
        assert resp.headers["Cache-Control"] == "no-store"

    def test_active_week(self, client, loaded):
        week, _ = loaded
        data = client.get("/api/weeks?active=true").get_json()
        assert data["week"]["id"] == week["id"]
        assert len(client.get("/api/weeks").get_json()["weeks"]) == 1

    def test_refresh_cooldown_is_429(self, client, loaded):
        resp = client.post("/api/fixtures/refresh")
        assert resp.status_code == 429
        body = resp.get_json()
        assert body["wait_seconds"] > 0
        assert "Try again" in body["error"]

    def test_bad_week_offset(self, client):
        resp = client.get("/api/fixtures?week_offset=soon")
        assert resp.status_code == 400

    def test_reset(self, client, loaded):
        body = client.post("/api/weeks/reset").get_json()
        assert body["success"] is True
        assert body["completed"] == 1
        assert client.get("/api/weeks?active=true").get_json()["week"] is None

    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Not found"}


class TestSelections:
    def test_submit_and_list(self, client, loaded):
        week, by_ext = loaded
        resp = _submit(client, week, by_ext, "Kezza", [101, 102])
        assert resp.status_code == 200
        assert len(resp.get_json()["selections"]) == 2

        data = client.get(f"/api/selections?week_id={week['id']}").get_json()
        assert [s["player_name"] for s in data["selections"]] == ["Kezza", "Kezza"]
        assert data["selections"][0]["fixture"]["home_team"].startswith("Home")

    def test_rejected_submission_is_400(self, client, loaded):
        week, by_ext = loaded
        resp = _submit(client, week, by_ext, "Dave", [101, 102])
        assert resp.status_code == 400
        assert "Invalid player name" in resp.get_json()["error"]

    def test_missing_week_id(self, client, loaded):
        resp = client.post("/api/selections", json={"player_name": "Kezza", "fixture_ids": [1, 2]})
        assert resp.status_code == 400

    def test_non_integer_fixture_ids(self, client, loaded):
        week, _ = loaded
        resp = client.post("/api/selections", json={
            "player_name": "Kezza", "fixture_ids": ["a", "b"], "week_id": week["id"],
        })
        assert resp.status_code == 400

    def test_fixture_ids_must_be_a_list(self, client, loaded):
        week, _ = loaded
        resp = client.post("/api/selections", json={
            "player_name": "Kezza", "fixture_ids": "12", "week_id": week["id"],
        })
        assert resp.status_code == 400
        assert "fixture_ids" in resp.get_json()["error"]
        assert client.get("/api/selections").get_json()["selections"] == []

    def test_fractional_fixture_ids(self, client, loaded):
        week, by_ext = loaded
        resp = client.post("/api/selections", json={
            "player_name": "Kezza", "fixture_ids": [by_ext[101] + 0.9, by_ext[102] + 0.7],
            "week_id": week["id"],
        })
        assert resp.status_code == 400
        assert client.get("/api/selections").get_json()["selections"] == []

    def test_string_week_id(self, client, loaded):
        week, by_ext = loaded
        resp = client.post("/api/selections", json={
            "player_name": "Kezza", "fixture_ids": [by_ext[101]], "week_id": str(week["id"]),
        })
        assert resp.status_code == 400

    @pytest.mark.parametrize("method", ["post", "delete"])
    def test_body_must_be_an_object(self, client, loaded, method):
        resp = getattr(client, method)("/api/selections", json=[1, 2])
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Request body must be a JSON object."}

    def test_delete(self, client, loaded):
        week, by_ext = loaded
        _submit(client, week, by_ext, "Tommy", [101, 102])
        resp = client.delete("/api/selections", json={"player_name": "Tommy", "week_id": week["id"]})
        assert resp.get_json() == {"success": True, "deleted": 2}

    def test_share(self, client, loaded):
        week, by_ext = loaded
        _submit(client, week, by_ext, "Krissy", [103, 104])
        text = client.get("/api/selections/share").get_json()["text"]
        assert "Krissy:" in text
        assert "  1. Home10" in text


class TestResultsFinesStats:
    @pytest.fixture
    def settled(self, client, fake_provider, loaded):
        week, by_ext = loaded
        _submit(client, week, by_ext, "Kezza", [101, 102])
        _submit(client, week, by_ext, "Mikey", [103, 104])
        _submit(client, week, by_ext, "Krissy", [105, 106])
        _submit(client, week, by_ext, "Tommy", [107, 108])
        for ext, score in {101: (3, 1), 102: (2, 0), 103: (0, 0), 104: (0, 0),
                           105: (2, 2), 106: (1, 2), 107: (0, 0), 108: (1, 0)}.items():
            fake_provider.set_result(ext, *score)
        resp = client.post("/api/results", json={"week_id": week["id"], "force": True})
        assert resp.status_code == 200
        return week, resp.get_json()

    def test_results_complete_week(self, settled):
        _, body = settled
        assert body["week"]["status"] == "completed"
        assert {s["result"] for s in body["selections"]} == {"won", "lost"}
        amounts = sorted((f["player_name"], f["amount"]) for f in body["fines"])
        assert amounts == [("Mikey", 20.0), ("Tommy", 2.0), ("Tommy", 5.0)]

    def test_fines_summary(self, client, settled):
        body = client.get("/api/fines").get_json()
        assert len(body["fines"]) == 3
        assert body["summary"]["Tommy"] == {"total": 7.0, "outstanding": 7.0, "cleared": 0.0}

    def test_fines_filters(self, client, settled):
        assert len(client.get("/api/fines?player=Tommy").get_json()["fines"]) == 2
        assert client.get("/api/fines?cleared=true").get_json()["fines"] == []

    def test_clear_fines(self, client, settled):
        body = client.post("/api/fines/clear", json={"player_name": "Tommy"}).get_json()
        assert body["success"] is True
        assert body["cleared_count"] == 2
        summary = client.get("/api/fines").get_json()["summary"]
        assert summary["Tommy"]["outstanding"] == 0.0
        assert summary["Mikey"]["outstanding"] == 20.0

    def test_clear_fines_bad_ids(self, client, settled):
        resp = client.post("/api/fines/clear", json={"fine_ids": ["x"]})
        assert resp.status_code == 400

    def test_clear_fines_body_must_be_an_object(self, client, settled):
        resp = client.post("/api/fines/clear", json=[1, 2])
        assert resp.status_code == 400
        assert client.get("/api/fines?cleared=true").get_json()["fines"] == []

    def test_rerun_keeps_fines_stable(self, client, settled):
        week, _ = settled
        client.post("/api/fines/clear", json={})
        body = client.post("/api/results", json={"week_id": week["id"], "force": True}).get_json()
        assert len(body["fines"]) == 3
        assert all(f["cleared"] for f in body["fines"])

    def test_stats(self, client, settled):
        body = client.get("/api/stats").get_json()
        stats = {s["player_name"]: s for s in body["stats"]}
        assert stats["Krissy"]["win_rate"] == 100
        assert stats["Kezza"]["win_rate"] == 50
        assert stats["Mikey"]["total_fines"] == 20.0
        assert len(body["weeklyBreakdown"]) == 1

    def test_history(self, client, settled):
        week, _ = settled
        weeks = client.get("/api/history").get_json()["weeks"]
        assert [w["id"] for w in weeks] == [week["id"]]
        detail = client.get(f"/api/history?week_id={week['id']}").get_json()
        assert len(detail["selections"]) == 8
        assert client.get("/api/history?week_id=999").status_code == 404


class TestResultsGate:
    def test_gated_without_force(self, client, loaded, monkeypatch):
        monkeypatch.setattr("betting_overs.api.results_bp.can_check_results", lambda: False)
        monkeypatch.setattr("betting_overs.api.results_bp.results_open_in", lambda: 1800)
        resp = client.post("/api/results", json={})
        assert resp.status_code == 400
        assert resp.get_json()["opens_in_seconds"] == 1800

    def test_no_active_week(self, client):
        resp = client.post("/api/results", json={"force": True})
        assert resp.status_code == 404

    @pytest.mark.parametrize("force", ["false", "true", 1])
    def test_force_must_be_a_boolean(self, client, loaded, monkeypatch, force):
        monkeypatch.setattr("betting_overs.api.results_bp.can_check_results", lambda: False)
        resp = client.post("/api/results", json={"force": force})
        assert resp.status_code == 400
        assert "opens_in_seconds" not in resp.get_json()

    def test_force_false_is_gated(self, client, loaded, monkeypatch):
        monkeypatch.setattr("betting_overs.api.results_bp.can_check_results", lambda: False)
        monkeypatch.setattr("betting_overs.api.results_bp.results_open_in", lambda: 60)
        resp = client.post("/api/results", json={"force": False})
        assert resp.status_code == 400
        assert resp.get_json()["opens_in_seconds"] == 60

    def test_body_must_be_an_object(self, client, loaded):
        resp = client.post("/api/results", json=[1, 2])
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Request body must be a JSON object."}

    def test_refused_check_is_logged(self, client, loaded, monkeypatch, caplog):
        monkeypatch.setattr("betting_overs.api.results_bp.can_check_results", lambda: False)
        monkeypatch.setattr("betting_overs.api.results_bp.results_open_in", lambda: 900)
        caplog.set_level(logging.INFO, logger="betting_overs.api.results_bp")
        client.post("/api/results", json={})
        assert "Results check refused: opens in 900s" in caplog.text
