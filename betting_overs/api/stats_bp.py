"""Stats and history blueprint."""

from flask import Blueprint, jsonify, request

from betting_overs.api.helpers import dump, get_manager, optional_int

stats_bp = Blueprint("stats", __name__)


@stats_bp.route("/stats")
def api_stats():
    result = get_manager().stats(request.args.get("player") or None)
    return jsonify({
        "stats": dump(result["stats"]),
        "weeklyBreakdown": dump(result["weekly_breakdown"]),
    })


@stats_bp.route("/history")
def api_history():
    """Completed weeks, or one week's selections and fines with ``?week_id=``."""
    mgr = get_manager()
    week_id, err = optional_int(request.args, "week_id")
    if err:
        return jsonify(err[0]), err[1]
    if week_id is not None:
        return jsonify(dump(mgr.week_summary(mgr.get_week(week_id))))
    return jsonify({"weeks": dump(mgr.history())})
