"""Fixtures blueprint — load and refresh a week's fixtures."""

from flask import Blueprint, jsonify, request

from betting_overs.api.helpers import dump, get_manager, optional_int

fixtures_bp = Blueprint("fixtures", __name__)


def _week_offset():
    offset, err = optional_int(request.args, "week_offset")
    return (offset or 0), err


@fixtures_bp.route("")
def api_fixtures():
    """Fixtures for the relevant Saturday; fetched from the provider on first load."""
    offset, err = _week_offset()
    if err:
        return jsonify(err[0]), err[1]
    week, fixtures = get_manager().load_fixtures(week_offset=offset)
    return jsonify({"week": dump(week), "fixtures": dump(fixtures)})


@fixtures_bp.route("/refresh", methods=["POST"])
def api_fixtures_refresh():
    """Force a re-fetch, subject to the refresh cooldown (429 when too soon)."""
    offset, err = _week_offset()
    if err:
        return jsonify(err[0]), err[1]
    week, fixtures = get_manager().refresh_fixtures(week_offset=offset)
    return jsonify({"week": dump(week), "fixtures": dump(fixtures)})
