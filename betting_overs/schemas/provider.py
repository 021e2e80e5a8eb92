"""Pydantic schema for fixtures as reported by the results provider.

Raw SofaScore event payloads are parsed into :class:`ProviderFixture` at the
client boundary so the rest of the package never touches upstream JSON.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

# SofaScore status.code values for finished matches decided after 90 minutes.
_AET_CODE = 110
_PEN_CODE = 120

_STATUS_BY_TYPE: dict[str, str] = {
    "inprogress": "LIVE",
    "postponed": "PST",
    "canceled": "CANC",
    "notstarted": "NS",
}


def map_status(status: dict | None) -> str:
    """Translate a SofaScore ``status`` object into a short match status."""
    status = status or {}
    kind = status.get("type")
    if kind == "finished":
        code = status.get("code")
        if code == _AET_CODE:
            return "AET"
        if code == _PEN_CODE:
            return "PEN"
        return "FT"
    return _STATUS_BY_TYPE.get(kind, "NS")


class ProviderFixture(BaseModel):
    """Validated snapshot of one fixture from the provider."""

    external_id: int
    home_team: str = Field(min_length=1)
    away_team: str = Field(min_length=1)
    league_id: int | None = None
    league_name: str = "Unknown"
    kick_off: datetime
    home_score: int | None = Field(default=None, ge=0)
    away_score: int | None = Field(default=None, ge=0)
    status: str = "NS"

    @classmethod
    def from_event(
        cls,
        event: dict,
        tournaments: dict[int, str] | None = None,
    ) -> "ProviderFixture":
        """Build from a SofaScore event.  Raises ``pydantic.ValidationError``
        when required fields are missing or malformed.
        """
        unique = (event.get("tournament") or {}).get("uniqueTournament") or {}
        league_id = unique.get("id")
        league_name = (tournaments or {}).get(league_id) or unique.get("name") or "Unknown"
        start = event.get("startTimestamp")
        kick_off = (
            datetime.fromtimestamp(start, tz=timezone.utc)
            if isinstance(start, (int, float))
            else start
        )
        return cls.model_validate({
            "external_id": event.get("id"),
            "home_team": (event.get("homeTeam") or {}).get("name"),
            "away_team": (event.get("awayTeam") or {}).get("name"),
            "league_id": league_id,
            "league_name": league_name,
            "kick_off": kick_off,
            "home_score": (event.get("homeScore") or {}).get("current"),
            "away_score": (event.get("awayScore") or {}).get("current"),
            "status": map_status(event.get("status")),
        })
