"""Plain-text summary of a week's picks for pasting into the group chat."""

from __future__ import annotations

from betting_overs.config import settlement_cfg
from betting_overs.schemas.domain import Selection

_RULE = "━" * 24


def format_selections_for_copy(selections: list[Selection]) -> str:
    grouped: dict[str, list[str]] = {}
    for sel in selections:
        picks = grouped.setdefault(sel.player_name, [])
        if sel.fixture is not None:
            picks.append(sel.fixture.label)

    lines = ["⚽ BETTING OVERS - This Week's Picks ⚽", _RULE]
    for player, picks in grouped.items():
        lines.append("")
        lines.append(f"{player}:")
        lines.extend(f"  {i}. {pick}" for i, pick in enumerate(picks, start=1))
    lines.append("")
    lines.append(_RULE)
    lines.append(f"Over {settlement_cfg.goal_threshold}.5 goals to win!")
    return "\n".join(lines)
