"""Pydantic schemas for weeks, fixtures, selections and fines."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_serializer


class WeekStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class SelectionResult(str, Enum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"


class FineKind(str, Enum):
    ZERO_ZERO = "zero_zero"
    ONE_GOAL = "one_goal"
    BOTH_ZERO_ZERO = "both_zero_zero"


class Week(BaseModel):
    """One calendar Saturday's round of picks."""

    id: int
    week_number: int
    season: str
    saturday_date: date
    status: WeekStatus = WeekStatus.ACTIVE
    created_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status is WeekStatus.ACTIVE


class Fixture(BaseModel):
    """A tracked match, keyed externally by the provider's fixture id."""

    id: int
    api_fixture_id: int
    week_id: int
    home_team: str
    away_team: str
    league_id: int | None = None
    league_name: str = ""
    kick_off: datetime | None = None
    home_score: int | None = None
    away_score: int | None = None
    match_status: str = "NS"
    created_at: datetime | None = None

    @property
    def total_goals(self) -> int | None:
        if self.home_score is None or self.away_score is None:
            return None
        return self.home_score + self.away_score

    @property
    def label(self) -> str:
        return f"{self.home_team} vs {self.away_team}"


class Selection(BaseModel):
    """A player's pick of one fixture for a week."""

    id: int | None = None
    week_id: int
    player_name: str
    fixture_id: int
    result: SelectionResult = SelectionResult.PENDING
    total_goals: int | None = None
    created_at: datetime | None = None
    fixture: Fixture | None = None

    @property
    def is_pending(self) -> bool:
        return self.result is SelectionResult.PENDING


class Fine(BaseModel):
    """Monetary penalty against a player; ``cleared`` once paid."""

    id: int | None = None
    week_id: int
    player_name: str
    amount: Decimal = Field(gt=0)
    reason: str
    fixture_id: int | None = None
    kind: FineKind | None = None
    cleared: bool = False
    created_at: datetime | None = None

    @field_serializer("amount")
    def _amount_as_float(self, amount: Decimal) -> float:
        return float(amount)


class FineSummary(BaseModel):
    """Per-player fine totals."""

    total: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")
    cleared: Decimal = Decimal("0")

    @field_serializer("total", "outstanding", "cleared")
    def _as_float(self, value: Decimal) -> float:
        return float(value)


class WeekSummary(BaseModel):
    """A week with its joined selections and fines."""

    week: Week
    selections: list[Selection] = Field(default_factory=list)
    fines: list[Fine] = Field(default_factory=list)


class PlayerStats(BaseModel):
    """Season-to-date record for one player."""

    player_name: str
    total_selections: int = 0
    wins: int = 0
    losses: int = 0
    pending: int = 0
    win_rate: int = 0
    total_fines: float = 0.0
    outstanding_fines: float = 0.0
    cleared_fines: float = 0.0
    current_streak: int = 0
    best_streak: int = 0
