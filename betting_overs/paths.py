"""Centralized path resolution."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

OUTPUT_DIR = BASE_DIR / "output"
DB_PATH = Path(os.environ.get("BETTING_OVERS_DB", OUTPUT_DIR / "overs.db"))
