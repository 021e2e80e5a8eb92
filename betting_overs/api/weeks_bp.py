"""Weeks blueprint — list weeks, active week, reset."""

from flask import Blueprint, jsonify, request

from betting_overs.api.helpers import dump, get_manager, optional_bool

weeks_bp = Blueprint("weeks", __name__)


@weeks_bp.route("")
def api_weeks():
    """All weeks (newest first), or the active week with ``?active=true``."""
    mgr = get_manager()
    if optional_bool(request.args, "active"):
        return jsonify({"week": dump(mgr.active_week())})
    return jsonify({"weeks": dump(mgr.list_weeks())})


@weeks_bp.route("/reset", methods=["POST"])
def api_weeks_reset():
    """Complete every active week so the next Saturday becomes current."""
    count = get_manager().reset_weeks()
    return jsonify({
        "success": True,
        "completed": count,
        "message": "Week reset complete. New fixtures will load for next Saturday.",
    })
