"""Fine ledger — per-player totals and selecting fines to clear."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, StrictInt, StrictStr

from betting_overs.schemas.domain import Fine, FineSummary


class ClearSelector(BaseModel):
    """Which fines a clear request targets.

    ``fine_ids`` wins over ``player_name``; with neither, every outstanding
    fine is cleared.
    """

    fine_ids: list[StrictInt] | None = None
    player_name: StrictStr | None = None

    @property
    def clears_all(self) -> bool:
        return not self.fine_ids and not self.player_name


def parse_amount(value) -> Decimal:
    """Parse a stored amount (Decimal, int, float or text) to ``Decimal``."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid fine amount: {value!r}") from exc


def summarize(fines: list[Fine]) -> dict[str, FineSummary]:
    """Return ``{player: FineSummary}`` with total, outstanding and cleared sums."""
    summary: dict[str, FineSummary] = {}
    for fine in fines:
        s = summary.setdefault(fine.player_name, FineSummary())
        amount = parse_amount(fine.amount)
        s.total += amount
        if fine.cleared:
            s.cleared += amount
        else:
            s.outstanding += amount
    return summary


def outstanding_total(fines: list[Fine], player_name: str | None = None) -> Decimal:
    """Sum of uncleared fines, optionally for one player."""
    return sum(
        (parse_amount(f.amount) for f in fines
         if not f.cleared and (player_name is None or f.player_name == player_name)),
        Decimal("0"),
    )


def select_for_clearing(fines: list[Fine], selector: ClearSelector) -> list[int]:
    """Return the ids of currently uncleared fines matched by *selector*.

    Already-cleared fines are never returned, so clearing stays monotonic.
    """
    candidates = [f for f in fines if not f.cleared and f.id is not None]
    if selector.fine_ids:
        wanted = set(selector.fine_ids)
        return [f.id for f in candidates if f.id in wanted]
    if selector.player_name:
        return [f.id for f in candidates if f.player_name == selector.player_name]
    return [f.id for f in candidates]
