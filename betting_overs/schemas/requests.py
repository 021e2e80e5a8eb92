"""Request bodies accepted by the JSON API.

Fields are strict: ``"12"`` is not a list of ids and ``1.9`` is not an id.
"""

from pydantic import BaseModel, StrictBool, StrictInt, StrictStr


class SubmitSelections(BaseModel):
    """``POST /api/selections`` — replaces the player's picks for the week."""

    player_name: StrictStr
    fixture_ids: list[StrictInt]
    week_id: StrictInt


class ClearSelections(BaseModel):
    """``DELETE /api/selections``."""

    player_name: StrictStr
    week_id: StrictInt


class CheckResults(BaseModel):
    """``POST /api/results`` — defaults to the active week, gated unless forced."""

    week_id: StrictInt | None = None
    force: StrictBool = False
