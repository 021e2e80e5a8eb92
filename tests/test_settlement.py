"""Tests for the settlement engine: outcomes, fines and week completion."""

from decimal import Decimal

import pytest
from conftest import make_fixture, make_selection

from betting_overs.config import SettlementConfig
from betting_overs.schemas.domain import Fine, FineKind, SelectionResult
from betting_overs.season.settlement import (
    drop_cleared_duplicates,
    is_final,
    is_week_settled,
    outcome_for,
    settle,
)


def _fines_for(result, player):
    return [f for f in result.fines if f.player_name == player]


# ---------------------------------------------------------------------------
# Finality
# ---------------------------------------------------------------------------

class TestIsFinal:
    @pytest.mark.parametrize("status", ["FT", "AET", "PEN"])
    def test_final_statuses(self, status):
        assert is_final(make_fixture(1, 1, 0, status)) is True

    @pytest.mark.parametrize("status", ["NS", "LIVE", "HT", "PST", "CANC"])
    def test_non_final_statuses(self, status):
        assert is_final(make_fixture(1, 1, 0, status)) is False

    def test_missing_score_is_not_final(self):
        assert is_final(make_fixture(1, None, 0, "FT")) is False
        assert is_final(make_fixture(1, 2, None, "FT")) is False

    def test_none_fixture(self):
        assert is_final(None) is False


# ---------------------------------------------------------------------------
# Win/loss
# ---------------------------------------------------------------------------

class TestOutcome:
    def test_above_threshold_wins(self):
        assert outcome_for(3) is SelectionResult.WON

    def test_exactly_threshold_loses(self):
        assert outcome_for(2) is SelectionResult.LOST

    def test_custom_threshold(self):
        rules = SettlementConfig(goal_threshold=3)
        assert outcome_for(3, rules) is SelectionResult.LOST
        assert outcome_for(4, rules) is SelectionResult.WON

    @pytest.mark.parametrize("home,away,expected", [
        (2, 1, SelectionResult.WON),
        (4, 0, SelectionResult.WON),
        (1, 1, SelectionResult.LOST),
        (0, 0, SelectionResult.LOST),
    ])
    def test_every_selection_on_fixture_gets_same_result(self, home, away, expected):
        fixture = make_fixture(1, home, away, "FT")
        sels = [make_selection(i, p, 1) for i, p in enumerate(["Kezza", "Mikey", "Tommy"], 1)]
        result = settle(1, [fixture], sels)
        assert {s.result for s in result.selections} == {expected}
        assert {s.total_goals for s in result.selections} == {home + away}


# ---------------------------------------------------------------------------
# Fines
# ---------------------------------------------------------------------------

class TestFines:
    def test_tommy_example(self):
        """0-0 and 1-0 picks: £5 + £2, both lost, £7 outstanding."""
        fixtures = [make_fixture(1, 0, 0, "FT"), make_fixture(2, 1, 0, "FT")]
        sels = [make_selection(1, "Tommy", 1), make_selection(2, "Tommy", 2)]
        result = settle(1, fixtures, sels)

        assert [s.result for s in result.selections] == [SelectionResult.LOST] * 2
        fines = _fines_for(result, "Tommy")
        assert sorted(f.amount for f in fines) == [Decimal("2"), Decimal("5")]
        assert sum(f.amount for f in fines) == Decimal("7")
        zero = next(f for f in fines if f.kind is FineKind.ZERO_ZERO)
        assert zero.reason == "0-0: Home1 vs Away1"
        assert zero.fixture_id == 1
        one = next(f for f in fines if f.kind is FineKind.ONE_GOAL)
        assert one.reason == "1 goal: Home2 1-0 Away2"

    def test_mikey_both_zero_zero(self):
        fixtures = [make_fixture(1, 0, 0, "FT"), make_fixture(2, 0, 0, "AET")]
        sels = [make_selection(1, "Mikey", 1), make_selection(2, "Mikey", 2)]
        result = settle(1, fixtures, sels)

        fines = _fines_for(result, "Mikey")
        assert len(fines) == 1
        assert fines[0].kind is FineKind.BOTH_ZERO_ZERO
        assert fines[0].amount == Decimal("20")
        assert fines[0].fixture_id == 1
        assert fines[0].reason.startswith("Both games 0-0!")

    def test_both_zero_zero_only_affects_that_player(self):
        fixtures = [make_fixture(1, 0, 0, "FT"), make_fixture(2, 0, 0, "FT")]
        sels = [
            make_selection(1, "Mikey", 1),
            make_selection(2, "Mikey", 2),
            make_selection(3, "Kezza", 1),
            make_selection(4, "Kezza", 3),
        ]
        result = settle(1, fixtures, sels)
        kezza = _fines_for(result, "Kezza")
        assert [f.kind for f in kezza] == [FineKind.ZERO_ZERO]
        assert kezza[0].amount == Decimal("5")

    def test_both_zero_zero_keeps_one_goal_fines(self):
        fixtures = [make_fixture(1, 0, 0, "FT"), make_fixture(2, 0, 0, "FT"), make_fixture(3, 0, 1, "FT")]
        sels = [make_selection(i, "Krissy", i) for i in (1, 2, 3)]
        result = settle(1, fixtures, sels)
        kinds = sorted(f.kind.value for f in result.fines)
        assert kinds == ["both_zero_zero", "one_goal"]

    def test_two_or_more_goals_no_fine(self):
        fixtures = [make_fixture(1, 1, 1, "FT"), make_fixture(2, 3, 2, "FT")]
        sels = [make_selection(1, "Kezza", 1), make_selection(2, "Kezza", 2)]
        assert settle(1, fixtures, sels).fines == []

    def test_one_fine_per_selection_on_same_fixture(self):
        fixture = make_fixture(1, 0, 1, "FT")
        sels = [make_selection(1, "Kezza", 1), make_selection(2, "Tommy", 1)]
        result = settle(1, [fixture], sels)
        assert sorted(f.player_name for f in result.fines) == ["Kezza", "Tommy"]
        assert all(f.amount == Decimal("2") for f in result.fines)

    def test_fines_carry_week_id(self):
        result = settle(42, [make_fixture(1, 0, 0, "FT")], [make_selection(1, "Kezza", 1)])
        assert result.fines[0].week_id == 42
        assert result.fines[0].cleared is False


# ---------------------------------------------------------------------------
# Skipping
# ---------------------------------------------------------------------------

class TestSkipping:
    def test_not_started_stays_pending_without_fine(self):
        fixture = make_fixture(1, None, None, "NS")
        sel = make_selection(1, "Kezza", 1)
        result = settle(1, [fixture], [sel])
        assert result.selections[0].result is SelectionResult.PENDING
        assert result.selections[0].total_goals is None
        assert result.fines == []
        assert result.skipped_ids == [1]
        assert result.settled_ids == []

    def test_final_status_with_null_score_is_skipped(self):
        fixture = make_fixture(1, 0, None, "FT")
        result = settle(1, [fixture], [make_selection(1, "Kezza", 1)])
        assert result.selections[0].result is SelectionResult.PENDING
        assert result.fines == []

    def test_missing_fixture_is_skipped(self):
        result = settle(1, [], [make_selection(1, "Kezza", 99)])
        assert result.skipped_ids == [1]

    def test_zero_zero_pair_needs_same_pass(self):
        fixtures = [make_fixture(1, 0, 0, "FT"), make_fixture(2, None, None, "NS")]
        sels = [make_selection(1, "Mikey", 1), make_selection(2, "Mikey", 2)]
        result = settle(1, fixtures, sels)
        assert [f.kind for f in result.fines] == [FineKind.ZERO_ZERO]

        fixtures[1] = make_fixture(2, 0, 0, "FT")
        result = settle(1, fixtures, sels)
        assert [f.kind for f in result.fines] == [FineKind.BOTH_ZERO_ZERO]

    def test_input_order_preserved(self):
        fixtures = [make_fixture(1, 3, 0, "FT"), make_fixture(2)]
        sels = [make_selection(2, "Kezza", 2), make_selection(1, "Kezza", 1)]
        result = settle(1, fixtures, sels)
        assert [s.id for s in result.selections] == [2, 1]


# ---------------------------------------------------------------------------
# Idempotence and cleared fines
# ---------------------------------------------------------------------------

class TestIdempotence:
    def test_rerun_gives_same_output(self):
        fixtures = [make_fixture(1, 0, 0, "FT"), make_fixture(2, 1, 0, "FT"), make_fixture(3, 2, 2, "PEN")]
        sels = [make_selection(i, p, f) for i, (p, f) in enumerate(
            [("Tommy", 1), ("Tommy", 2), ("Kezza", 3), ("Kezza", 1)], 1)]
        first = settle(1, fixtures, sels)
        second = settle(1, fixtures, first.selections)
        assert [s.result for s in first.selections] == [s.result for s in second.selections]
        assert [f.model_dump() for f in first.fines] == [f.model_dump() for f in second.fines]

    def test_cleared_fine_not_reissued(self):
        fresh = settle(1, [make_fixture(1, 0, 0, "FT")], [make_selection(1, "Kezza", 1)]).fines
        existing = [Fine(id=7, week_id=1, player_name="Kezza", amount=Decimal("5"),
                         reason="0-0: Home1 vs Away1", fixture_id=1,
                         kind=FineKind.ZERO_ZERO, cleared=True)]
        assert drop_cleared_duplicates(fresh, existing) == []

    def test_uncleared_existing_does_not_filter(self):
        fresh = settle(1, [make_fixture(1, 0, 0, "FT")], [make_selection(1, "Kezza", 1)]).fines
        existing = [f.model_copy(update={"id": 3}) for f in fresh]
        assert drop_cleared_duplicates(fresh, existing) == fresh


# ---------------------------------------------------------------------------
# Week settled
# ---------------------------------------------------------------------------

class TestWeekSettled:
    def test_empty_week_is_not_settled(self):
        assert is_week_settled([]) is False

    def test_seven_of_eight_resolved(self):
        sels = [make_selection(i, "Kezza", i, result="won") for i in range(1, 8)]
        sels.append(make_selection(8, "Kezza", 8))
        assert is_week_settled(sels) is False
        sels[-1] = sels[-1].model_copy(update={"result": SelectionResult.LOST})
        assert is_week_settled(sels) is True
