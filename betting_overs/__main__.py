"""Run the Betting Overs server: ``python -m betting_overs [--port N] [--db PATH]``."""

import argparse
from pathlib import Path

from betting_overs.logging_config import setup_logging


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Betting Overs weekly picks tracker")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=9874)
    parser.add_argument("--db", type=Path, default=None, help="SQLite file (default: output/overs.db)")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    setup_logging()

    from betting_overs.api import create_app

    app = create_app(db_path=args.db)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
