"""Logging setup for Betting Overs.

Console output always goes to stdout.  Set ``BETTING_OVERS_LOG_LEVEL``
(e.g. ``DEBUG``) to change verbosity and ``BETTING_OVERS_LOG_FILE`` to also
append to a file, which is handy for keeping a record of settlement runs.
"""

import logging
import os
import sys
from pathlib import Path

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO.
_QUIET = ("urllib3", "werkzeug")


def _env_level(default: int) -> int:
    name = os.environ.get("BETTING_OVERS_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None) -> None:
    """Configure the root logger once; later calls are no-ops."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = _env_level(level)
    root.setLevel(level)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    log_file = log_file or os.environ.get("BETTING_OVERS_LOG_FILE")
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(file_handler)

    for name in _QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Named logger; configures logging on first use."""
    setup_logging()
    return logging.getLogger(name)
