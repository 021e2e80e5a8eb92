"""Week lifecycle state machine.

Statuses:
    ACTIVE → COMPLETED

A week is created ACTIVE and becomes COMPLETED once every selection in it
has a result, or when an administrative reset rolls all weeks over.
COMPLETED is terminal for that week.
"""

from __future__ import annotations

import math
from datetime import datetime

from betting_overs.config import calendar_cfg
from betting_overs.schemas.domain import Selection, Week, WeekStatus
from betting_overs.season.calendar import home_now

# Valid (from -> {to, ...}) transitions.
_TRANSITIONS: dict[WeekStatus, set[WeekStatus]] = {
    WeekStatus.ACTIVE: {WeekStatus.COMPLETED},
    WeekStatus.COMPLETED: set(),
}


def can_transition(from_status: WeekStatus, to_status: WeekStatus) -> bool:
    """Return True if *from_status* → *to_status* is a valid transition."""
    return to_status in _TRANSITIONS.get(from_status, set())


def next_status(status: WeekStatus) -> WeekStatus | None:
    """Return the next status, or None for the terminal COMPLETED."""
    if status is WeekStatus.ACTIVE:
        return WeekStatus.COMPLETED
    return None


def detect_status(selections: list[Selection], current: WeekStatus) -> WeekStatus:
    """Derive a week's status from its selections.

    A week with at least one selection and no pending results is COMPLETED.
    An empty week is never auto-completed, and a COMPLETED week never reopens.
    """
    if current is WeekStatus.COMPLETED:
        return current
    if selections and all(not s.is_pending for s in selections):
        return WeekStatus.COMPLETED
    return current


def can_submit_selections(week: Week | None) -> bool:
    """Picks are accepted only against an existing ACTIVE week."""
    return week is not None and week.status is WeekStatus.ACTIVE


def can_check_results(
    now: datetime | None = None,
    *,
    cutoff_hour: int | None = None,
    gated_weekday: int | None = None,
) -> bool:
    """Whether a results check is allowed at *now* (home time).

    On the matchday (Saturday by default) checks open at the cutoff hour
    (17:00).  Every other day is unrestricted so results can be re-checked
    manually after the weekend.
    """
    cutoff = calendar_cfg.results_cutoff_hour if cutoff_hour is None else cutoff_hour
    weekday = calendar_cfg.results_gated_weekday if gated_weekday is None else gated_weekday
    local = home_now(now)
    if local.weekday() != weekday:
        return True
    return local.hour >= cutoff


def results_open_in(now: datetime | None = None) -> int:
    """Seconds until results checking opens (0 if already open)."""
    if can_check_results(now):
        return 0
    local = home_now(now)
    opens = local.replace(
        hour=calendar_cfg.results_cutoff_hour, minute=0, second=0, microsecond=0,
    )
    return max(0, int((opens - local).total_seconds()))


def refresh_wait_seconds(
    last_refreshed: datetime | None,
    now: datetime | None = None,
    cooldown: int | None = None,
) -> int:
    """Seconds left before fixtures may be re-fetched (0 means allowed now).

    The window is measured from *last_refreshed*, the most recent fixture-row
    timestamp for the week.  With no fixtures stored, refresh is always
    allowed.
    """
    if last_refreshed is None:
        return 0
    window = calendar_cfg.refresh_cooldown if cooldown is None else cooldown
    elapsed = (home_now(now) - home_now(last_refreshed)).total_seconds()
    remaining = window - elapsed
    return math.ceil(remaining) if remaining > 0 else 0
