"""Shared helpers for API blueprints."""

from flask import current_app, request
from pydantic import BaseModel, ValidationError


def get_manager():
    """The app's :class:`~betting_overs.season.manager.WeekManager`."""
    return current_app.extensions["week_manager"]


def dump(obj):
    """Recursively convert pydantic models (and containers of them) to JSON-ready data."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, dict):
        return {k: dump(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [dump(v) for v in obj]
    return obj


def _describe(exc: ValidationError) -> str:
    """One line per failing field, e.g. ``fixture_ids.0: Input should be a valid integer``."""
    parts = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "")
        parts.append(f"{where}: {msg}" if where else msg)
    return "; ".join(parts)


def parse_body(model: type[BaseModel]):
    """Validate the JSON body against *model*.

    Returns (instance, None) or (None, error_tuple).  A missing body is
    treated as ``{}``; a body that is not a JSON object is rejected.
    """
    body = request.get_json(silent=True)
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return None, ({"error": "Request body must be a JSON object."}, 400)
    try:
        return model.model_validate(body), None
    except ValidationError as exc:
        return None, ({"error": _describe(exc)}, 400)


def optional_int(args, key):
    """Extract an optional integer query value. Returns (int | None, None) or (None, error_tuple)."""
    value = args.get(key)
    if value is None or value == "":
        return None, None
    try:
        return int(value), None
    except (TypeError, ValueError):
        return None, ({"error": f"{key} must be an integer."}, 400)


def optional_bool(args, key):
    """Parse ``true``/``false`` query values; anything else means unset."""
    value = args.get(key)
    if value == "true":
        return True
    if value == "false":
        return False
    return None
