"""Pydantic schemas for the domain records, the provider boundary and API request bodies."""

from betting_overs.schemas.domain import (
    Fine,
    FineKind,
    FineSummary,
    Fixture,
    PlayerStats,
    Selection,
    SelectionResult,
    Week,
    WeekStatus,
    WeekSummary,
)
from betting_overs.schemas.provider import ProviderFixture
from betting_overs.schemas.requests import CheckResults, ClearSelections, SubmitSelections

__all__ = [
    "CheckResults",
    "ClearSelections",
    "Fine",
    "FineKind",
    "FineSummary",
    "Fixture",
    "PlayerStats",
    "ProviderFixture",
    "Selection",
    "SelectionResult",
    "SubmitSelections",
    "Week",
    "WeekStatus",
    "WeekSummary",
]
