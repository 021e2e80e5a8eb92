"""Central configuration — every magic number in one place."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class RosterConfig:
    players: tuple[str, ...] = ("Kezza", "Mikey", "Krissy", "Tommy")
    selections_per_player: int = 2

    @property
    def full_week_selections(self) -> int:
        """Selection count once every player has submitted."""
        return len(self.players) * self.selections_per_player


# ---------------------------------------------------------------------------
# Settlement
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SettlementConfig:
    goal_threshold: int = 2  # "over 2.5 goals" = 3+ total
    final_statuses: frozenset[str] = frozenset({"FT", "AET", "PEN"})


# ---------------------------------------------------------------------------
# Fines (GBP)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FineConfig:
    zero_zero: Decimal = Decimal("5")
    one_goal: Decimal = Decimal("2")
    both_zero_zero: Decimal = Decimal("20")
    both_zero_zero_reason: str = "Both games 0-0! \U0001F480"


# ---------------------------------------------------------------------------
# Calendar / lifecycle
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CalendarConfig:
    home_timezone: str = "Europe/London"
    season_start: date = date(2025, 8, 1)
    season_start_month: int = 8  # Season label flips in August
    results_cutoff_hour: int = 17
    results_gated_weekday: int = 5  # Saturday (Monday == 0)
    refresh_cooldown: int = 60 * 60  # seconds
    kickoff_time: str = "15:00"


# ---------------------------------------------------------------------------
# Results provider (SofaScore)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ProviderConfig:
    api_base: str = "https://api.sofascore.com/api/v1"
    request_timeout: int = 30  # seconds
    max_retries: int = 3
    backoff_base: float = 1.0  # seconds, doubled per attempt
    backoff_jitter: float = 0.5  # seconds, uniform random extra
    user_agent: str = "betting-overs/1.0"
    # uniqueTournament id -> display name.  Cups first.
    tournaments: dict[int, str] = field(default_factory=lambda: {
        19: "FA Cup",
        347: "Scottish Cup",
        17: "Premier League",
        18: "Championship",
        24: "League One",
        25: "League Two",
        173: "National League",
        36: "Scottish Premiership",
        206: "Scottish Championship",
        207: "Scottish League One",
        209: "Scottish League Two",
    })


# ---------------------------------------------------------------------------
# Singleton instances (importable as `from betting_overs.config import roster_cfg, ...`)
# ---------------------------------------------------------------------------
roster_cfg = RosterConfig()
settlement_cfg = SettlementConfig()
fine_cfg = FineConfig()
calendar_cfg = CalendarConfig()
provider_cfg = ProviderConfig()
