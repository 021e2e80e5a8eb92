"""Numbered schema migrations, tracked in SQLite's ``user_version``.

``MIGRATIONS[n - 1]`` takes the database from version ``n - 1`` to ``n``.
Each one runs in its own transaction together with the version bump, so a
failed migration leaves the database at the previous version.
"""

from __future__ import annotations

import sqlite3
from typing import Callable

from betting_overs.db.schema import init_schema
from betting_overs.logging_config import get_logger

logger = get_logger(__name__)


def _create_tables(conn: sqlite3.Connection) -> None:
    """Create weeks, fixtures, selections and fines."""
    init_schema(conn)


MIGRATIONS: tuple[Callable[[sqlite3.Connection], None], ...] = (
    _create_tables,
)

LATEST_VERSION: int = len(MIGRATIONS)


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Current schema version; 0 for a brand-new file."""
    return conn.execute("PRAGMA user_version").fetchone()[0]


def apply_migrations(conn: sqlite3.Connection) -> int:
    """Run every pending migration on *conn*; return how many were applied.

    Raises ``RuntimeError`` if the file was written by a newer schema.
    """
    current = get_schema_version(conn)
    if current > LATEST_VERSION:
        raise RuntimeError(
            f"Database schema version {current} is newer than supported ({LATEST_VERSION})"
        )

    for version in range(current + 1, LATEST_VERSION + 1):
        migration = MIGRATIONS[version - 1]
        logger.info("Applying migration %d: %s", version, migration.__doc__.strip())
        conn.execute("BEGIN IMMEDIATE")
        try:
            migration(conn)
            conn.execute(f"PRAGMA user_version = {version}")
        except BaseException:
            conn.rollback()
            raise
        conn.commit()

    applied = LATEST_VERSION - current
    if applied:
        logger.info("Database schema is now at version %d", LATEST_VERSION)
    return applied
