"""Repository classes — one per database table.

Each repository takes a ``db_path`` in ``__init__`` and uses
:func:`betting_overs.db.connection.connect` for every operation.  Rows are
returned as pydantic models from :mod:`betting_overs.schemas.domain`.
"""

from __future__ import annotations

import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path

from betting_overs.db.connection import connect, transaction
from betting_overs.paths import DB_PATH
from betting_overs.schemas.domain import (
    Fine,
    Fixture,
    Selection,
    Week,
    WeekStatus,
)
from betting_overs.schemas.provider import ProviderFixture


def _stamp(now: datetime | None = None) -> str:
    """UTC ISO timestamp used for created_at columns."""
    ts = now or datetime.now(timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="seconds")


def _placeholders(n: int) -> str:
    return ",".join("?" * n)


# ---------------------------------------------------------------------------
# WeekRepository
# ---------------------------------------------------------------------------

class WeekRepository:
    """CRUD for the ``weeks`` table."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def get_or_create(
        self,
        saturday_date: date,
        week_number: int,
        season: str,
    ) -> Week:
        """Upsert keyed on ``saturday_date``; an existing row is returned as-is."""
        with connect(self.db_path) as conn:
            conn.execute(
                """INSERT INTO weeks (week_number, season, saturday_date, status, created_at)
                   VALUES (?, ?, ?, 'active', ?)
                   ON CONFLICT(saturday_date) DO NOTHING""",
                (week_number, season, saturday_date.isoformat(), _stamp()),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM weeks WHERE saturday_date=?",
                (saturday_date.isoformat(),),
            ).fetchone()
        return Week.model_validate(dict(row))

    def get(self, week_id: int) -> Week | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM weeks WHERE id=?", (week_id,)).fetchone()
        return Week.model_validate(dict(row)) if row else None

    def get_by_date(self, saturday_date: date) -> Week | None:
        with connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM weeks WHERE saturday_date=?",
                (saturday_date.isoformat(),),
            ).fetchone()
        return Week.model_validate(dict(row)) if row else None

    def get_active(self) -> Week | None:
        """The active week with the most recent Saturday."""
        with connect(self.db_path) as conn:
            row = conn.execute(
                """SELECT * FROM weeks WHERE status='active'
                   ORDER BY saturday_date DESC LIMIT 1"""
            ).fetchone()
        return Week.model_validate(dict(row)) if row else None

    def list_weeks(self, status: WeekStatus | None = None) -> list[Week]:
        with connect(self.db_path) as conn:
            if status is None:
                rows = conn.execute(
                    "SELECT * FROM weeks ORDER BY saturday_date DESC"
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM weeks WHERE status=? ORDER BY saturday_date DESC",
                    (status.value,),
                ).fetchall()
        return [Week.model_validate(dict(r)) for r in rows]

    def update_status(self, week_id: int, status: WeekStatus) -> None:
        with connect(self.db_path) as conn:
            conn.execute(
                "UPDATE weeks SET status=? WHERE id=?", (status.value, week_id)
            )
            conn.commit()

    def complete_all_active(self) -> int:
        """Mark every active week completed; return how many changed."""
        with connect(self.db_path) as conn:
            cur = conn.execute(
                "UPDATE weeks SET status='completed' WHERE status='active'"
            )
            conn.commit()
        return cur.rowcount


# ---------------------------------------------------------------------------
# FixtureRepository
# ---------------------------------------------------------------------------

class FixtureRepository:
    """CRUD for the ``fixtures`` table."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def upsert_many(
        self,
        week_id: int,
        fixtures: list[ProviderFixture],
        now: datetime | None = None,
    ) -> None:
        """Insert or update fixtures keyed on the provider's fixture id.

        Every written row is re-stamped with *now*, which is what the
        refresh cooldown measures from.  Known scores are kept when the
        snapshot has none.
        """
        stamp = _stamp(now)
        rows = [
            (
                f.external_id, week_id, f.home_team, f.away_team, f.league_id,
                f.league_name, f.kick_off.isoformat(), f.home_score, f.away_score,
                f.status, stamp,
            )
            for f in fixtures
        ]
        with transaction(self.db_path) as conn:
            conn.executemany(
                """INSERT INTO fixtures
                   (api_fixture_id, week_id, home_team, away_team, league_id,
                    league_name, kick_off, home_score, away_score, match_status,
                    created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(api_fixture_id) DO UPDATE SET
                     week_id=excluded.week_id,
                     home_team=excluded.home_team,
                     away_team=excluded.away_team,
                     league_id=excluded.league_id,
                     league_name=excluded.league_name,
                     kick_off=excluded.kick_off,
                     home_score=COALESCE(excluded.home_score, fixtures.home_score),
                     away_score=COALESCE(excluded.away_score, fixtures.away_score),
                     match_status=excluded.match_status,
                     created_at=excluded.created_at""",
                rows,
            )

    def list_for_week(self, week_id: int) -> list[Fixture]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                """SELECT * FROM fixtures WHERE week_id=?
                   ORDER BY league_name, home_team""",
                (week_id,),
            ).fetchall()
        return [Fixture.model_validate(dict(r)) for r in rows]

    def update_scores(self, results: list[ProviderFixture]) -> int:
        """Write the latest scores/status from the provider; return rows updated.

        A missing score never replaces a stored one, so a snapshot that
        reports a finished match without its score leaves the result intact.
        """
        with transaction(self.db_path) as conn:
            updated = 0
            for r in results:
                cur = conn.execute(
                    """UPDATE fixtures
                       SET home_score=COALESCE(?, home_score),
                           away_score=COALESCE(?, away_score),
                           match_status=?
                       WHERE api_fixture_id=?""",
                    (r.home_score, r.away_score, r.status, r.external_id),
                )
                updated += cur.rowcount
        return updated

    def latest_created_at(self, week_id: int) -> datetime | None:
        with connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT MAX(created_at) FROM fixtures WHERE week_id=?", (week_id,)
            ).fetchone()
        if not row or row[0] is None:
            return None
        ts = datetime.fromisoformat(row[0])
        return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# SelectionRepository
# ---------------------------------------------------------------------------

_SELECTION_JOIN = """\
SELECT s.*,
       f.id AS f_id, f.api_fixture_id AS f_api_fixture_id, f.week_id AS f_week_id,
       f.home_team AS f_home_team, f.away_team AS f_away_team,
       f.league_id AS f_league_id, f.league_name AS f_league_name,
       f.kick_off AS f_kick_off, f.home_score AS f_home_score,
       f.away_score AS f_away_score, f.match_status AS f_match_status,
       f.created_at AS f_created_at
FROM selections s
LEFT JOIN fixtures f ON f.id = s.fixture_id
"""


def _selection_from_row(row: sqlite3.Row) -> Selection:
    data = dict(row)
    fixture = None
    if data.get("f_id") is not None:
        fixture = Fixture.model_validate(
            {k[2:]: v for k, v in data.items() if k.startswith("f_")}
        )
    base = {k: v for k, v in data.items() if not k.startswith("f_")}
    return Selection.model_validate({**base, "fixture": fixture})


class SelectionRepository:
    """CRUD for the ``selections`` table."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def replace_for_player(
        self,
        week_id: int,
        player_name: str,
        fixture_ids: list[int],
        now: datetime | None = None,
    ) -> list[Selection]:
        """Delete the player's picks for the week and insert the new set."""
        stamp = _stamp(now)
        with transaction(self.db_path) as conn:
            conn.execute(
                "DELETE FROM selections WHERE week_id=? AND player_name=?",
                (week_id, player_name),
            )
            conn.executemany(
                """INSERT INTO selections (week_id, player_name, fixture_id, result, created_at)
                   VALUES (?, ?, ?, 'pending', ?)""",
                [(week_id, player_name, fid, stamp) for fid in fixture_ids],
            )
        return self.list(week_id=week_id, player_name=player_name)

    def delete_for_player(self, week_id: int, player_name: str) -> int:
        with connect(self.db_path) as conn:
            cur = conn.execute(
                "DELETE FROM selections WHERE week_id=? AND player_name=?",
                (week_id, player_name),
            )
            conn.commit()
        return cur.rowcount

    def list(
        self,
        week_id: int | None = None,
        player_name: str | None = None,
    ) -> list[Selection]:
        """Selections with their fixture joined, ordered by player then creation."""
        clauses, params = [], []
        if week_id is not None:
            clauses.append("s.week_id=?")
            params.append(week_id)
        if player_name is not None:
            clauses.append("s.player_name=?")
            params.append(player_name)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with connect(self.db_path) as conn:
            rows = conn.execute(
                f"{_SELECTION_JOIN} {where} ORDER BY s.player_name, s.created_at, s.id",
                params,
            ).fetchall()
        return [_selection_from_row(r) for r in rows]

    def update_results(self, selections: list[Selection]) -> None:
        """Persist ``result`` and ``total_goals`` for each selection."""
        rows = [
            (s.result.value, s.total_goals, s.id)
            for s in selections if s.id is not None
        ]
        if not rows:
            return
        with transaction(self.db_path) as conn:
            conn.executemany(
                "UPDATE selections SET result=?, total_goals=? WHERE id=?", rows,
            )


# ---------------------------------------------------------------------------
# FineRepository
# ---------------------------------------------------------------------------

class FineRepository:
    """CRUD for the ``fines`` table."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def list(
        self,
        week_id: int | None = None,
        player_name: str | None = None,
        cleared: bool | None = None,
    ) -> list[Fine]:
        clauses, params = [], []
        if week_id is not None:
            clauses.append("week_id=?")
            params.append(week_id)
        if player_name is not None:
            clauses.append("player_name=?")
            params.append(player_name)
        if cleared is not None:
            clauses.append("cleared=?")
            params.append(int(cleared))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT * FROM fines {where} ORDER BY created_at DESC, id DESC",
                params,
            ).fetchall()
        return [Fine.model_validate(dict(r)) for r in rows]

    def replace_uncleared(
        self,
        week_id: int,
        fines: list[Fine],
        now: datetime | None = None,
    ) -> None:
        """Delete the week's uncleared fines and insert *fines*, atomically.

        Cleared fines are never touched.
        """
        stamp = _stamp(now)
        with transaction(self.db_path) as conn:
            conn.execute(
                "DELETE FROM fines WHERE week_id=? AND cleared=0", (week_id,)
            )
            conn.executemany(
                """INSERT INTO fines
                   (week_id, player_name, amount, reason, fixture_id, kind, cleared, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, 0, ?)""",
                [
                    (
                        week_id, f.player_name, str(f.amount), f.reason,
                        f.fixture_id, f.kind.value if f.kind else None, stamp,
                    )
                    for f in fines
                ],
            )

    def mark_cleared(self, fine_ids: list[int]) -> list[Fine]:
        """Set ``cleared`` on the given uncleared fines; return the rows changed."""
        if not fine_ids:
            return []
        marks = _placeholders(len(fine_ids))
        with transaction(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT id FROM fines WHERE cleared=0 AND id IN ({marks})",
                fine_ids,
            ).fetchall()
            changed = [r["id"] for r in rows]
            if changed:
                conn.execute(
                    f"UPDATE fines SET cleared=1 WHERE id IN ({_placeholders(len(changed))})",
                    changed,
                )
            result = (
                conn.execute(
                    f"SELECT * FROM fines WHERE id IN ({_placeholders(len(changed))}) ORDER BY id",
                    changed,
                ).fetchall()
                if changed else []
            )
        return [Fine.model_validate(dict(r)) for r in result]
