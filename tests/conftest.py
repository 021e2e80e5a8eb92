"""Shared test fixtures for Betting Overs."""

from datetime import date, datetime, timezone

import pytest

from betting_overs.schemas.domain import Fixture, Selection
from betting_overs.schemas.provider import ProviderFixture

SATURDAY = date(2025, 10, 18)
# 15:00 London (BST) on SATURDAY
KICK_OFF = datetime(2025, 10, 18, 14, 0, tzinfo=timezone.utc)
# Thursday before SATURDAY, 12:00 London
THURSDAY_NOON = datetime(2025, 10, 16, 11, 0, tzinfo=timezone.utc)


def make_fixture(fid, home_score=None, away_score=None, status="NS", **kw):
    """Build a domain Fixture with sensible defaults."""
    data = {
        "id": fid,
        "api_fixture_id": 1000 + fid,
        "week_id": 1,
        "home_team": f"Home{fid}",
        "away_team": f"Away{fid}",
        "league_name": "Premier League",
        "home_score": home_score,
        "away_score": away_score,
        "match_status": status,
    }
    data.update(kw)
    return Fixture(**data)


def make_selection(sid, player, fixture_id, **kw):
    data = {"id": sid, "week_id": 1, "player_name": player, "fixture_id": fixture_id}
    data.update(kw)
    return Selection(**data)


def provider_fixture(external_id, home_score=None, away_score=None, status="NS", **kw):
    data = {
        "external_id": external_id,
        "home_team": f"Home{external_id}",
        "away_team": f"Away{external_id}",
        "league_id": 17,
        "league_name": "Premier League",
        "kick_off": KICK_OFF,
        "home_score": home_score,
        "away_score": away_score,
        "status": status,
    }
    data.update(kw)
    return ProviderFixture(**data)


class FakeProvider:
    """In-memory results provider.

    ``schedule`` maps a Saturday to the fixtures it returns (``default`` is
    used for any other day); ``results`` maps external ids to their latest
    snapshot.
    """

    def __init__(self, schedule=None, results=None, default=None):
        self.schedule = schedule or {}
        self.results = results or {}
        self.default = default or []
        self.fixture_calls = []
        self.result_calls = []

    def fetch_saturday_fixtures(self, day):
        self.fixture_calls.append(day)
        return list(self.schedule.get(day, self.default))

    def fetch_fixture_results(self, fixture_ids):
        self.result_calls.append(list(fixture_ids))
        return [self.results[i] for i in fixture_ids if i in self.results]

    def set_result(self, external_id, home_score, away_score, status="FT"):
        self.results[external_id] = provider_fixture(external_id, home_score, away_score, status)


@pytest.fixture
def tmp_db(tmp_path):
    """Temporary database path for DB tests."""
    return tmp_path / "test_overs.db"


@pytest.fixture
def provider():
    """Provider with eight 15:00 fixtures on SATURDAY (external ids 101-108)."""
    return FakeProvider(schedule={
        SATURDAY: [provider_fixture(i) for i in range(101, 109)],
    })


@pytest.fixture
def manager(tmp_db, provider):
    from betting_overs.season.manager import WeekManager
    return WeekManager(db_path=tmp_db, provider=provider)


@pytest.fixture
def loaded_week(manager):
    """Active week for SATURDAY with its fixtures stored; returns (week, {external_id: fixture})."""
    week, fixtures = manager.load_fixtures(now=THURSDAY_NOON)
    return week, {f.api_fixture_id: f for f in fixtures}
