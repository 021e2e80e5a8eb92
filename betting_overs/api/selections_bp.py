"""Selections blueprint — list, submit, clear and share picks."""

from flask import Blueprint, jsonify, request

from betting_overs.api.helpers import dump, get_manager, optional_int, parse_body
from betting_overs.schemas.requests import ClearSelections, SubmitSelections
from betting_overs.season.share import format_selections_for_copy

selections_bp = Blueprint("selections", __name__)


@selections_bp.route("", methods=["GET"])
def api_selections():
    week_id, err = optional_int(request.args, "week_id")
    if err:
        return jsonify(err[0]), err[1]
    week, selections = get_manager().get_selections(week_id)
    return jsonify({"week": dump(week), "selections": dump(selections)})


@selections_bp.route("", methods=["POST"])
def api_submit_selections():
    """Body: ``{player_name, fixture_ids, week_id}``.  Replaces earlier picks."""
    req, err = parse_body(SubmitSelections)
    if err:
        return jsonify(err[0]), err[1]
    selections = get_manager().submit_selections(req.player_name, req.fixture_ids, req.week_id)
    return jsonify({"selections": dump(selections)})


@selections_bp.route("", methods=["DELETE"])
def api_clear_selections():
    """Body: ``{player_name, week_id}``."""
    req, err = parse_body(ClearSelections)
    if err:
        return jsonify(err[0]), err[1]
    if not req.player_name:
        return jsonify({"error": "player_name is required."}), 400
    deleted = get_manager().clear_selections(req.player_name, req.week_id)
    return jsonify({"success": True, "deleted": deleted})


@selections_bp.route("/share")
def api_share_selections():
    """Group-chat text for a week's picks."""
    week_id, err = optional_int(request.args, "week_id")
    if err:
        return jsonify(err[0]), err[1]
    week, selections = get_manager().get_selections(week_id)
    return jsonify({"week": dump(week), "text": format_selections_for_copy(selections)})
