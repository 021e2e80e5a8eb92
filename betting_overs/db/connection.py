"""SQLite access: configured connections and write transactions."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from betting_overs.paths import DB_PATH

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA foreign_keys=ON",
)


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Open the database with ``sqlite3.Row`` rows, WAL and FK enforcement.

    Pending migrations are applied on open, so a database file removed while
    the app is running is recreated on the next request.
    """
    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, timeout=30)
    conn.row_factory = sqlite3.Row
    for pragma in _PRAGMAS:
        conn.execute(pragma)

    from betting_overs.db.migrations import apply_migrations
    try:
        apply_migrations(conn)
    except Exception:
        conn.close()
        raise
    return conn


@contextmanager
def connect(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Yield a connection and always close it."""
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Yield a connection inside ``BEGIN IMMEDIATE``; commit, or roll back on error.

    The write lock is held for the whole block, so delete-then-insert
    replacements are never seen half-done.
    """
    with connect(db_path) as conn:
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
