"""Table and index definitions for the Betting Overs database."""

from __future__ import annotations

import sqlite3

TABLES: tuple[str, ...] = (
    """CREATE TABLE IF NOT EXISTS weeks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        week_number INTEGER NOT NULL,
        season TEXT NOT NULL,
        saturday_date TEXT NOT NULL UNIQUE,
        status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'completed')),
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )""",
    """CREATE TABLE IF NOT EXISTS fixtures (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        api_fixture_id INTEGER NOT NULL UNIQUE,
        week_id INTEGER NOT NULL REFERENCES weeks(id) ON DELETE CASCADE,
        home_team TEXT NOT NULL,
        away_team TEXT NOT NULL,
        league_id INTEGER,
        league_name TEXT NOT NULL DEFAULT '',
        kick_off TEXT,
        home_score INTEGER,
        away_score INTEGER,
        match_status TEXT NOT NULL DEFAULT 'NS',
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )""",
    """CREATE TABLE IF NOT EXISTS selections (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        week_id INTEGER NOT NULL REFERENCES weeks(id) ON DELETE CASCADE,
        player_name TEXT NOT NULL,
        fixture_id INTEGER NOT NULL REFERENCES fixtures(id) ON DELETE CASCADE,
        result TEXT NOT NULL DEFAULT 'pending' CHECK (result IN ('pending', 'won', 'lost')),
        total_goals INTEGER,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        UNIQUE(week_id, player_name, fixture_id)
    )""",
    # amount is TEXT so money never passes through a float
    """CREATE TABLE IF NOT EXISTS fines (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        week_id INTEGER NOT NULL REFERENCES weeks(id) ON DELETE CASCADE,
        player_name TEXT NOT NULL,
        amount TEXT NOT NULL,
        reason TEXT NOT NULL,
        kind TEXT CHECK (kind IN ('zero_zero', 'one_goal', 'both_zero_zero')),
        fixture_id INTEGER REFERENCES fixtures(id) ON DELETE SET NULL,
        cleared INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL DEFAULT (datetime('now'))
    )""",
)

INDEXES: tuple[str, ...] = (
    "CREATE INDEX IF NOT EXISTS idx_fixtures_week ON fixtures(week_id)",
    "CREATE INDEX IF NOT EXISTS idx_selections_week ON selections(week_id)",
    "CREATE INDEX IF NOT EXISTS idx_fines_week ON fines(week_id)",
    "CREATE INDEX IF NOT EXISTS idx_fines_player ON fines(player_name)",
)


def init_schema(conn: sqlite3.Connection) -> None:
    """Create every table and index, inside the caller's transaction."""
    for ddl in TABLES + INDEXES:
        conn.execute(ddl)
