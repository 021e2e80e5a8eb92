"""Week orchestration — calendar, settlement, lifecycle and fines."""

from betting_overs.season.manager import WeekManager
from betting_overs.season.settlement import SettlementResult, is_week_settled, settle
from betting_overs.season.state_machine import (
    can_check_results,
    can_submit_selections,
    can_transition,
    detect_status,
    next_status,
)

__all__ = [
    "WeekManager",
    "SettlementResult",
    "settle",
    "is_week_settled",
    "can_check_results",
    "can_submit_selections",
    "can_transition",
    "detect_status",
    "next_status",
]
