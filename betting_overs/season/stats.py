"""Player statistics and weekly breakdowns."""

from __future__ import annotations

import pandas as pd

from betting_overs.config import roster_cfg
from betting_overs.schemas.domain import Fine, PlayerStats, Selection, SelectionResult, Week
from betting_overs.season.fines import summarize

_RESULT_COLUMNS = [r.value for r in SelectionResult]


def _selections_frame(selections: list[Selection]) -> pd.DataFrame:
    """Flatten selections into a DataFrame in creation order."""
    rows = [
        {
            "id": s.id,
            "week_id": s.week_id,
            "player_name": s.player_name,
            "result": s.result.value,
            "created_at": s.created_at,
        }
        for s in selections
    ]
    df = pd.DataFrame(rows, columns=["id", "week_id", "player_name", "result", "created_at"])
    if not df.empty:
        df = df.sort_values(["created_at", "id"], kind="stable", na_position="first")
    return df


def _streaks(results: list[str]) -> tuple[int, int]:
    """Return (current, best) run of wins over resolved results."""
    best = run = 0
    for r in results:
        if r == SelectionResult.WON.value:
            run += 1
            best = max(best, run)
        else:
            run = 0
    current = 0
    for r in reversed(results):
        if r != SelectionResult.WON.value:
            break
        current += 1
    return current, best


def player_stats(
    selections: list[Selection],
    fines: list[Fine],
    players: list[str] | tuple[str, ...] | None = None,
) -> list[PlayerStats]:
    """Compute win/loss record, streaks and fine totals per player."""
    players = list(players or roster_cfg.players)
    df = _selections_frame(selections)
    counts = (
        df.groupby("player_name")["result"].value_counts().unstack(fill_value=0)
        if not df.empty else pd.DataFrame()
    )
    counts = counts.reindex(index=players, columns=_RESULT_COLUMNS, fill_value=0)
    fine_summary = summarize(fines)

    out: list[PlayerStats] = []
    for player in players:
        wins = int(counts.at[player, "won"])
        losses = int(counts.at[player, "lost"])
        pending = int(counts.at[player, "pending"])
        total = wins + losses + pending

        resolved = (
            df.loc[(df["player_name"] == player) & (df["result"] != "pending"), "result"].tolist()
            if not df.empty else []
        )
        current, best = _streaks(resolved)
        fs = fine_summary.get(player)

        out.append(PlayerStats(
            player_name=player,
            total_selections=total,
            wins=wins,
            losses=losses,
            pending=pending,
            win_rate=round(wins / max(wins + losses, 1) * 100) if total else 0,
            total_fines=float(fs.total) if fs else 0.0,
            outstanding_fines=float(fs.outstanding) if fs else 0.0,
            cleared_fines=float(fs.cleared) if fs else 0.0,
            current_streak=current,
            best_streak=best,
        ))
    return out


def weekly_breakdown(
    weeks: list[Week],
    selections: list[Selection],
    fines: list[Fine],
) -> list[dict]:
    """Per-week selections, fines and ``{player: {won, lost, pending}}`` counts."""
    df = _selections_frame(selections)
    table = (
        df.groupby(["week_id", "player_name"])["result"].value_counts().unstack(fill_value=0)
        if not df.empty else pd.DataFrame()
    )
    table = table.reindex(columns=_RESULT_COLUMNS, fill_value=0)

    breakdown = []
    for week in weeks:
        player_results: dict[str, dict[str, int]] = {}
        if not table.empty and week.id in table.index.get_level_values(0):
            for player, row in table.loc[week.id].iterrows():
                player_results[player] = {col: int(row[col]) for col in _RESULT_COLUMNS}
        breakdown.append({
            "week": week,
            "selections": [s for s in selections if s.week_id == week.id],
            "fines": [f for f in fines if f.week_id == week.id],
            "player_results": player_results,
        })
    return breakdown
