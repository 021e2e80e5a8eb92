"""Week resolution in the league's home timezone.

"Saturday" and "15:00 kick-off" are civil-time concepts, so every helper
here works on dates in ``calendar_cfg.home_timezone`` regardless of the
server's own timezone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from betting_overs.config import calendar_cfg

SATURDAY = 5
SUNDAY = 6


def home_tz() -> ZoneInfo:
    return ZoneInfo(calendar_cfg.home_timezone)


def home_now(now: datetime | None = None) -> datetime:
    """Return *now* (default: the current instant) in the home timezone.

    Naive datetimes are assumed to already be home civil time.
    """
    if now is None:
        return datetime.now(home_tz())
    if now.tzinfo is None:
        return now.replace(tzinfo=home_tz())
    return now.astimezone(home_tz())


def _home_date(today: date | datetime) -> date:
    if isinstance(today, datetime):
        return home_now(today).date()
    return today


def relevant_saturday(today: date | datetime, week_offset: int = 0) -> date:
    """Return the Saturday a given day belongs to, shifted by *week_offset* weeks.

    Saturday maps to itself; Sunday through Friday all map to the coming
    Saturday (Sunday starts a new week rather than looking back).
    """
    day = _home_date(today)
    days_ahead = (SATURDAY - day.weekday()) % 7
    return day + timedelta(days=days_ahead + 7 * week_offset)


def week_number(saturday_date: date, season_start: date | None = None) -> int:
    """Sequential 1-based week number of *saturday_date* within the season."""
    start = season_start or calendar_cfg.season_start
    return max(1, (saturday_date - start).days // 7 + 1)


def current_season_label(today: date | datetime) -> str:
    """Season label such as ``"2025-26"``; the season flips in August."""
    day = _home_date(today)
    y = day.year if day.month >= calendar_cfg.season_start_month else day.year - 1
    return f"{y}-{str(y + 1)[-2:]}"


def is_reset_day(now: datetime | None = None) -> bool:
    """Sunday in home time, the day a finished week rolls over."""
    return home_now(now).weekday() == SUNDAY
