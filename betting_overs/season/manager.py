"""Week Manager — orchestrates the weekly lifecycle.

Wires the persistence layer, the results provider and the pure settlement
engine together:

    resolve Saturday → get/create week → load fixtures → take picks
    → check results (settle) → complete week → reset / roll over
"""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path

from betting_overs.config import roster_cfg
from betting_overs.db.connection import connect
from betting_overs.db.migrations import apply_migrations
from betting_overs.db.repositories import (
    FineRepository,
    FixtureRepository,
    SelectionRepository,
    WeekRepository,
)
from betting_overs.logging_config import get_logger
from betting_overs.paths import DB_PATH
from betting_overs.schemas.domain import (
    Fine,
    FineSummary,
    Fixture,
    Selection,
    Week,
    WeekStatus,
    WeekSummary,
)
from betting_overs.season.calendar import (
    current_season_label,
    home_now,
    relevant_saturday,
    week_number,
)
from betting_overs.season.exceptions import (
    RefreshCooldown,
    SelectionRejected,
    WeekNotFound,
)
from betting_overs.season.fines import ClearSelector, select_for_clearing, summarize
from betting_overs.season.settlement import drop_cleared_duplicates, settle
from betting_overs.season.state_machine import (
    can_submit_selections,
    can_transition,
    detect_status,
    refresh_wait_seconds,
)
from betting_overs.season.stats import player_stats, weekly_breakdown

logger = get_logger(__name__)


class WeekManager:
    """Orchestrator for weeks, picks, settlement and fines.

    Parameters
    ----------
    db_path:
        SQLite database file.  Defaults to ``DB_PATH``.
    provider:
        Results provider exposing ``fetch_saturday_fixtures(day)`` and
        ``fetch_fixture_results(ids)`` (normally a
        :class:`~betting_overs.data.sofascore.SofaScoreClient`).
    """

    def __init__(self, db_path: Path | None = None, provider=None):
        self.db_path = Path(db_path or DB_PATH)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Run migrations to ensure schema is current.
        with connect(self.db_path) as conn:
            apply_migrations(conn)

        # Repositories -- one per table.
        self.weeks = WeekRepository(self.db_path)
        self.fixtures = FixtureRepository(self.db_path)
        self.selections = SelectionRepository(self.db_path)
        self.fines = FineRepository(self.db_path)

        self.provider = provider
        # Serializes writes (settlement, picks, clearing) within the process.
        self._write_lock = threading.Lock()

    def _require_provider(self):
        if self.provider is None:
            raise RuntimeError("No results provider configured")
        return self.provider

    # ------------------------------------------------------------------
    # Weeks
    # ------------------------------------------------------------------

    def get_or_create_week(self, week_offset: int = 0, now: datetime | None = None) -> Week:
        """Return the week for the relevant Saturday, creating it if needed."""
        local = home_now(now)
        saturday = relevant_saturday(local, week_offset)
        week = self.weeks.get_or_create(
            saturday,
            week_number(saturday),
            current_season_label(saturday),
        )
        logger.debug("Week %d resolved for %s", week.id, saturday)
        return week

    def active_week(self) -> Week | None:
        return self.weeks.get_active()

    def get_week(self, week_id: int | None = None) -> Week:
        """Look up a week by id, or the active week; raise WeekNotFound."""
        week = self.weeks.get(week_id) if week_id is not None else self.weeks.get_active()
        if week is None:
            raise WeekNotFound(
                f"Week {week_id} not found" if week_id is not None else "No active week found"
            )
        return week

    def list_weeks(self, active_only: bool = False) -> list[Week]:
        if active_only:
            week = self.weeks.get_active()
            return [week] if week else []
        return self.weeks.list_weeks()

    def reset_weeks(self) -> int:
        """Complete every active week regardless of pending picks."""
        with self._write_lock:
            count = self.weeks.complete_all_active()
        logger.info("Week reset: %d active week(s) marked completed", count)
        return count

    # ------------------------------------------------------------------
    # Fixtures
    # ------------------------------------------------------------------

    def load_fixtures(
        self,
        week_offset: int = 0,
        now: datetime | None = None,
    ) -> tuple[Week, list[Fixture]]:
        """Fixtures for the relevant week, fetched from the provider if none stored."""
        week = self.get_or_create_week(week_offset, now)
        stored = self.fixtures.list_for_week(week.id)
        if stored:
            return week, stored

        fetched = self._require_provider().fetch_saturday_fixtures(week.saturday_date)
        if fetched:
            self.fixtures.upsert_many(week.id, fetched, now=now)
        return week, self.fixtures.list_for_week(week.id)

    def refresh_fixtures(
        self,
        week_offset: int = 0,
        now: datetime | None = None,
    ) -> tuple[Week, list[Fixture]]:
        """Re-fetch the week's fixtures, at most once per cooldown window."""
        local = home_now(now)
        week = self.get_or_create_week(week_offset, local)
        wait = refresh_wait_seconds(self.fixtures.latest_created_at(week.id), local)
        if wait > 0:
            logger.info("Refresh for week %d rejected: %ds remaining", week.id, wait)
            raise RefreshCooldown(wait)

        fetched = self._require_provider().fetch_saturday_fixtures(week.saturday_date)
        if fetched:
            self.fixtures.upsert_many(week.id, fetched, now=local)
        logger.info("Refreshed %d fixtures for week %d", len(fetched), week.id)
        return week, self.fixtures.list_for_week(week.id)

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def get_selections(self, week_id: int | None = None) -> tuple[Week | None, list[Selection]]:
        """Selections for *week_id*, or for the active week when omitted."""
        week = self.weeks.get(week_id) if week_id is not None else self.weeks.get_active()
        if week is None:
            return None, []
        return week, self.selections.list(week_id=week.id)

    def _validate_submission(self, player_name: str, fixture_ids: list, week: Week | None) -> None:
        if player_name not in roster_cfg.players:
            raise SelectionRejected(
                f"Invalid player name. Must be one of: {', '.join(roster_cfg.players)}"
            )
        count = roster_cfg.selections_per_player
        if not fixture_ids or len(fixture_ids) != count:
            raise SelectionRejected(f"Must select exactly {count} fixtures")
        if len(set(fixture_ids)) != len(fixture_ids):
            raise SelectionRejected("The same fixture cannot be picked twice")
        if not can_submit_selections(week):
            raise SelectionRejected("Week not found or already completed")
        week_fixture_ids = {f.id for f in self.fixtures.list_for_week(week.id)}
        unknown = [fid for fid in fixture_ids if fid not in week_fixture_ids]
        if unknown:
            raise SelectionRejected(f"Fixtures not in this week: {unknown}")

    def submit_selections(
        self,
        player_name: str,
        fixture_ids: list[int],
        week_id: int,
        now: datetime | None = None,
    ) -> list[Selection]:
        """Replace the player's picks for an active week."""
        with self._write_lock:
            week = self.weeks.get(week_id)
            self._validate_submission(player_name, fixture_ids, week)
            saved = self.selections.replace_for_player(week_id, player_name, fixture_ids, now)
            total = len(self.selections.list(week_id=week_id))

        logger.info("%s submitted %d picks for week %d", player_name, len(saved), week_id)
        if total == roster_cfg.full_week_selections:
            logger.info("All %d picks are in for week %d", total, week_id)
        return saved

    def clear_selections(self, player_name: str, week_id: int) -> int:
        with self._write_lock:
            deleted = self.selections.delete_for_player(week_id, player_name)
        logger.info("Cleared %d picks for %s in week %d", deleted, player_name, week_id)
        return deleted

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def check_results(self, week_id: int | None = None) -> WeekSummary:
        """Fetch fresh scores and settle the week.

        Defaults to the active week.  Non-final fixtures are skipped, so this
        is safe to call at any time and repeatedly.
        """
        week = self.get_week(week_id)
        fixtures = self.fixtures.list_for_week(week.id)
        if not fixtures:
            raise WeekNotFound(f"No fixtures found for week {week.id}")

        results = self._require_provider().fetch_fixture_results(
            [f.api_fixture_id for f in fixtures]
        )

        with self._write_lock:
            if results:
                self.fixtures.update_scores(results)
            week = self.settle_week(week)

        return self.week_summary(week)

    def settle_week(self, week: Week) -> Week:
        """Settle *week* from stored scores and persist outcomes and fines.

        Callers must hold the write lock or otherwise serialize per week.
        """
        fixtures = self.fixtures.list_for_week(week.id)
        selections = self.selections.list(week_id=week.id)
        if not selections:
            logger.info("Week %d has no selections to settle", week.id)
            return week

        outcome = settle(week.id, fixtures, selections)
        settled_ids = set(outcome.settled_ids)
        changed = [s for s in outcome.selections if s.id in settled_ids]
        self.selections.update_results(changed)

        existing = self.fines.list(week_id=week.id)
        fresh = drop_cleared_duplicates(outcome.fines, existing)
        self.fines.replace_uncleared(week.id, fresh)

        status = detect_status(outcome.selections, week.status)
        if status is not week.status and can_transition(week.status, status):
            self.weeks.update_status(week.id, status)
            logger.info("Week %d: %s -> %s", week.id, week.status.value, status.value)
            week = week.model_copy(update={"status": status})

        logger.info(
            "Settled week %d: %d settled, %d pending, %d fines",
            week.id, outcome.settled_count, len(outcome.skipped_ids), len(fresh),
        )
        return week

    def week_summary(self, week: Week) -> WeekSummary:
        return WeekSummary(
            week=week,
            selections=self.selections.list(week_id=week.id),
            fines=self.fines.list(week_id=week.id),
        )

    # ------------------------------------------------------------------
    # Fines
    # ------------------------------------------------------------------

    def list_fines(
        self,
        player_name: str | None = None,
        week_id: int | None = None,
        cleared: bool | None = None,
    ) -> tuple[list[Fine], dict[str, FineSummary]]:
        fines = self.fines.list(week_id=week_id, player_name=player_name, cleared=cleared)
        return fines, summarize(fines)

    def clear_fines(self, selector: ClearSelector) -> list[Fine]:
        """Mark the fines matched by *selector* as cleared."""
        with self._write_lock:
            candidates = self.fines.list(cleared=False)
            ids = select_for_clearing(candidates, selector)
            cleared = self.fines.mark_cleared(ids)
        logger.info("Cleared %d fine(s)", len(cleared))
        return cleared

    # ------------------------------------------------------------------
    # History / stats
    # ------------------------------------------------------------------

    def history(self) -> list[Week]:
        return self.weeks.list_weeks(WeekStatus.COMPLETED)

    def stats(self, player_name: str | None = None) -> dict:
        selections = self.selections.list(player_name=player_name)
        fines = self.fines.list(player_name=player_name)
        players = [player_name] if player_name else list(roster_cfg.players)
        return {
            "stats": player_stats(selections, fines, players),
            "weekly_breakdown": weekly_breakdown(self.weeks.list_weeks(), selections, fines),
        }
