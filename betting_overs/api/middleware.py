"""Flask middleware — no-cache headers and JSON error handlers."""

from flask import Flask, jsonify, request

from betting_overs.data.sofascore import ProviderError
from betting_overs.logging_config import get_logger
from betting_overs.season.exceptions import RefreshCooldown, SelectionRejected, WeekNotFound

log = get_logger(__name__)


def register_middleware(app: Flask) -> None:
    """Register middleware on the Flask app."""

    @app.after_request
    def add_no_cache_headers(response):
        if request.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"
        return response

    @app.errorhandler(WeekNotFound)
    def week_not_found(exc):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(SelectionRejected)
    def selection_rejected(exc):
        log.info("Rejected submission: %s", exc)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(RefreshCooldown)
    def refresh_cooldown(exc):
        return jsonify({"error": str(exc), "wait_seconds": exc.wait_seconds}), 429

    @app.errorhandler(ProviderError)
    def provider_error(exc):
        log.error("Results provider error: %s", exc)
        return jsonify({"error": f"Results provider unavailable: {exc}"}), 502

    @app.errorhandler(404)
    def not_found(_):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def internal_error(_):
        return jsonify({"error": "Internal server error"}), 500
