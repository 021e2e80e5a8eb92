"""Weekly settlement — turn final scores into pick outcomes and fines.

Everything here is a pure function of (fixtures, selections).  Callers load
the week from the store, hand the rows in, and persist what comes back.

Rules per settled selection:
    total goals > threshold   → won, otherwise lost
    0 goals                   → zero-zero fine
    1 goal                    → one-goal fine
Then per player: two or more 0-0 picks in the same pass collapse into a
single both-zero-zero fine.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from betting_overs.config import FineConfig, SettlementConfig, fine_cfg, settlement_cfg
from betting_overs.logging_config import get_logger
from betting_overs.schemas.domain import (
    Fine,
    FineKind,
    Fixture,
    Selection,
    SelectionResult,
)

logger = get_logger(__name__)


@dataclass
class SettlementResult:
    """Output of one settlement pass."""

    selections: list[Selection] = field(default_factory=list)
    fines: list[Fine] = field(default_factory=list)
    settled_ids: list[int] = field(default_factory=list)
    skipped_ids: list[int] = field(default_factory=list)

    @property
    def settled_count(self) -> int:
        return len(self.settled_ids)


def is_final(fixture: Fixture | None, rules: SettlementConfig = settlement_cfg) -> bool:
    """A fixture is final when its status is FT/AET/PEN and both scores are known."""
    if fixture is None:
        return False
    return (
        fixture.match_status in rules.final_statuses
        and fixture.home_score is not None
        and fixture.away_score is not None
    )


def outcome_for(total_goals: int, rules: SettlementConfig = settlement_cfg) -> SelectionResult:
    """Strictly more than the threshold wins; exactly the threshold loses."""
    return SelectionResult.WON if total_goals > rules.goal_threshold else SelectionResult.LOST


def _fine_for(
    week_id: int,
    player: str,
    fixture: Fixture,
    total_goals: int,
    fines: FineConfig,
) -> Fine | None:
    if total_goals == 0:
        return Fine(
            week_id=week_id,
            player_name=player,
            amount=fines.zero_zero,
            reason=f"0-0: {fixture.home_team} vs {fixture.away_team}",
            fixture_id=fixture.id,
            kind=FineKind.ZERO_ZERO,
        )
    if total_goals == 1:
        return Fine(
            week_id=week_id,
            player_name=player,
            amount=fines.one_goal,
            reason=(
                f"1 goal: {fixture.home_team} {fixture.home_score}-"
                f"{fixture.away_score} {fixture.away_team}"
            ),
            fixture_id=fixture.id,
            kind=FineKind.ONE_GOAL,
        )
    return None


def settle(
    week_id: int,
    fixtures: list[Fixture],
    selections: list[Selection],
    rules: SettlementConfig = settlement_cfg,
    fines: FineConfig = fine_cfg,
) -> SettlementResult:
    """Settle every selection whose fixture is final.

    Parameters
    ----------
    week_id:
        Week the fines are recorded against.
    fixtures:
        The week's fixtures with the freshest known scores.
    selections:
        All selections of the week.  Selections on non-final fixtures are
        returned unchanged (``pending`` stays ``pending``).
    rules, fines:
        Threshold and fine amounts; default to the module config.

    Returns
    -------
    SettlementResult
        Updated copies of *all* selections (input order preserved) and the
        freshly computed, uncleared fine entries.
    """
    by_id = {f.id: f for f in fixtures}
    result = SettlementResult()
    zero_zero: dict[str, list[int]] = {}  # player -> fixture ids

    for sel in selections:
        fixture = by_id.get(sel.fixture_id) or sel.fixture
        if not is_final(fixture, rules):
            result.selections.append(sel)
            if sel.id is not None:
                result.skipped_ids.append(sel.id)
            continue

        total = fixture.home_score + fixture.away_score
        result.selections.append(sel.model_copy(update={
            "result": outcome_for(total, rules),
            "total_goals": total,
        }))
        if sel.id is not None:
            result.settled_ids.append(sel.id)

        fine = _fine_for(week_id, sel.player_name, fixture, total, fines)
        if fine is not None:
            result.fines.append(fine)
        if total == 0:
            zero_zero.setdefault(sel.player_name, []).append(fixture.id)

    for player, fixture_ids in zero_zero.items():
        if len(fixture_ids) < 2:
            continue
        result.fines = [
            f for f in result.fines
            if not (f.player_name == player and f.kind is FineKind.ZERO_ZERO)
        ]
        result.fines.append(Fine(
            week_id=week_id,
            player_name=player,
            amount=fines.both_zero_zero,
            reason=fines.both_zero_zero_reason,
            fixture_id=fixture_ids[0],
            kind=FineKind.BOTH_ZERO_ZERO,
        ))

    logger.debug(
        "Week %d: settled %d selections, %d pending, %d fines",
        week_id, len(result.settled_ids), len(result.skipped_ids), len(result.fines),
    )
    return result


def _fine_key(fine: Fine) -> tuple:
    return (fine.player_name, fine.kind, fine.fixture_id)


def drop_cleared_duplicates(fresh: list[Fine], existing: list[Fine]) -> list[Fine]:
    """Remove fresh fines already recorded and cleared for the same week.

    Cleared fines are history: a re-run must neither delete nor re-issue them.
    """
    cleared = {_fine_key(f) for f in existing if f.cleared}
    return [f for f in fresh if _fine_key(f) not in cleared]


def is_week_settled(selections: list[Selection]) -> bool:
    """True when the week has selections and none are pending."""
    return bool(selections) and all(not s.is_pending for s in selections)
