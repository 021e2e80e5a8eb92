"""Flask application factory."""

from __future__ import annotations

from pathlib import Path

from flask import Flask


def create_app(db_path: Path | None = None, provider=None) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    db_path:
        SQLite database file; defaults to ``DB_PATH``.
    provider:
        Results provider; a :class:`SofaScoreClient` is built when omitted.
        One instance is shared by every request for the app's lifetime.
    """
    app = Flask(__name__)

    from betting_overs.api.middleware import register_middleware
    register_middleware(app)

    from betting_overs.data.sofascore import SofaScoreClient
    from betting_overs.season.manager import WeekManager

    if provider is None:
        provider = SofaScoreClient()
    app.extensions["week_manager"] = WeekManager(db_path=db_path, provider=provider)

    from betting_overs.api.weeks_bp import weeks_bp
    from betting_overs.api.fixtures_bp import fixtures_bp
    from betting_overs.api.selections_bp import selections_bp
    from betting_overs.api.results_bp import results_bp
    from betting_overs.api.fines_bp import fines_bp
    from betting_overs.api.stats_bp import stats_bp

    app.register_blueprint(weeks_bp, url_prefix="/api/weeks")
    app.register_blueprint(fixtures_bp, url_prefix="/api/fixtures")
    app.register_blueprint(selections_bp, url_prefix="/api/selections")
    app.register_blueprint(results_bp, url_prefix="/api/results")
    app.register_blueprint(fines_bp, url_prefix="/api/fines")
    app.register_blueprint(stats_bp, url_prefix="/api")

    return app
