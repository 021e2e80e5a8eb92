"""Results blueprint — the settlement trigger."""

from flask import Blueprint, jsonify

from betting_overs.api.helpers import dump, get_manager, parse_body
from betting_overs.logging_config import get_logger
from betting_overs.schemas.requests import CheckResults
from betting_overs.season.state_machine import can_check_results, results_open_in

log = get_logger(__name__)

results_bp = Blueprint("results", __name__)


@results_bp.route("", methods=["POST"])
def api_check_results():
    """Fetch scores and settle a week (default: the active week).

    Body: ``{week_id?, force?}``.  On matchday, checks open at the cutoff
    hour unless ``force`` is ``true``.
    """
    req, err = parse_body(CheckResults)
    if err:
        return jsonify(err[0]), err[1]

    if not req.force and not can_check_results():
        opens_in = results_open_in()
        log.info("Results check refused: opens in %ds", opens_in)
        return jsonify({
            "error": "Results can't be checked yet.",
            "opens_in_seconds": opens_in,
        }), 400
    if req.force:
        log.info("Forced results check (week_id=%s)", req.week_id)

    summary = get_manager().check_results(req.week_id)
    return jsonify(dump(summary))
