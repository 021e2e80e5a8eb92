"""Database layer — connection, schema, migrations, and repositories."""

from betting_overs.db.connection import connect, get_connection, transaction
from betting_overs.db.migrations import apply_migrations, get_schema_version
from betting_overs.db.repositories import (
    FineRepository,
    FixtureRepository,
    SelectionRepository,
    WeekRepository,
)
from betting_overs.db.schema import INDEXES, TABLES, init_schema

__all__ = [
    "connect",
    "get_connection",
    "transaction",
    "apply_migrations",
    "get_schema_version",
    "init_schema",
    "TABLES",
    "INDEXES",
    "WeekRepository",
    "FixtureRepository",
    "SelectionRepository",
    "FineRepository",
]
