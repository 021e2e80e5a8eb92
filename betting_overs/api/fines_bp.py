"""Fines blueprint — list with summary, clear."""

from flask import Blueprint, jsonify, request

from betting_overs.api.helpers import dump, get_manager, optional_bool, optional_int, parse_body
from betting_overs.season.fines import ClearSelector

fines_bp = Blueprint("fines", __name__)


@fines_bp.route("")
def api_fines():
    """Fines filtered by ``player``, ``week_id`` and ``cleared``, plus per-player totals."""
    week_id, err = optional_int(request.args, "week_id")
    if err:
        return jsonify(err[0]), err[1]
    fines, summary = get_manager().list_fines(
        player_name=request.args.get("player") or None,
        week_id=week_id,
        cleared=optional_bool(request.args, "cleared"),
    )
    return jsonify({"fines": dump(fines), "summary": dump(summary)})


@fines_bp.route("/clear", methods=["POST"])
def api_clear_fines():
    """Body: ``{fine_ids?, player_name?}``; neither clears every outstanding fine."""
    selector, err = parse_body(ClearSelector)
    if err:
        return jsonify(err[0]), err[1]

    cleared = get_manager().clear_fines(selector)
    return jsonify({
        "success": True,
        "cleared_count": len(cleared),
        "cleared_fines": dump(cleared),
    })
