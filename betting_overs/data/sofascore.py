"""SofaScore API client — Saturday fixtures and live/final scores.

One :class:`SofaScoreClient` is built per process (see
:func:`betting_overs.api.create_app`) and owns a ``requests.Session``.
Transient failures are retried with exponential backoff plus jitter; the
caller always receives parsed :class:`ProviderFixture` objects, never raw
JSON.
"""

from __future__ import annotations

import random
import time
from datetime import date

import requests
from pydantic import ValidationError

from betting_overs.config import ProviderConfig, calendar_cfg, provider_cfg
from betting_overs.logging_config import get_logger
from betting_overs.schemas.provider import ProviderFixture
from betting_overs.season.calendar import home_now

logger = get_logger(__name__)

_RETRY_STATUSES = {429, 500, 502, 503, 504}


class ProviderError(RuntimeError):
    """The results provider could not be reached or returned an error."""


class SofaScoreClient:
    """Thin HTTP client for the public SofaScore API."""

    def __init__(
        self,
        config: ProviderConfig = provider_cfg,
        session: requests.Session | None = None,
        sleep=time.sleep,
    ):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": config.user_agent,
        })
        self._sleep = sleep

    def close(self) -> None:
        self.session.close()

    # ── Low-level HTTP ──────────────────────────────────────────────────

    def _backoff(self, attempt: int) -> float:
        """Delay before retry *attempt* (1-based)."""
        cfg = self.config
        return cfg.backoff_base * 2 ** (attempt - 1) + random.uniform(0, cfg.backoff_jitter)

    def _get(self, path: str) -> dict:
        """GET ``api_base + path`` and return the JSON body.

        Retries connection errors, timeouts, 429 and 5xx responses up to
        ``max_retries`` times.  Other HTTP errors raise immediately.
        """
        url = f"{self.config.api_base}{path}"
        attempt = 0
        while True:
            try:
                resp = self.session.get(url, timeout=self.config.request_timeout)
                if resp.status_code in _RETRY_STATUSES:
                    raise requests.HTTPError(
                        f"{resp.status_code} from {url}", response=resp,
                    )
                resp.raise_for_status()
                return resp.json()
            except (requests.ConnectionError, requests.Timeout, requests.HTTPError) as exc:
                response = getattr(exc, "response", None)
                status = response.status_code if response is not None else None
                retryable = status is None or status in _RETRY_STATUSES
                attempt += 1
                if not retryable or attempt > self.config.max_retries:
                    raise ProviderError(f"Request to {url} failed: {exc}") from exc
                delay = self._backoff(attempt)
                logger.warning(
                    "Request to %s failed (%s), retrying in %.1fs (attempt %d/%d)",
                    url, exc, delay, attempt, self.config.max_retries,
                )
                self._sleep(delay)
            except ValueError as exc:  # JSON decode
                raise ProviderError(f"Invalid JSON from {url}") from exc

    def _parse(self, event: dict) -> ProviderFixture | None:
        try:
            return ProviderFixture.from_event(event, self.config.tournaments)
        except ValidationError as exc:
            logger.warning("Skipping malformed event %s: %s", event.get("id"), exc)
            return None

    # ── Public endpoints ────────────────────────────────────────────────

    def fetch_saturday_fixtures(self, day: date) -> list[ProviderFixture]:
        """Fixtures in tracked tournaments kicking off at 15:00 home time on *day*."""
        logger.info("Fetching fixtures for %s", day.isoformat())
        data = self._get(f"/sport/football/scheduled-events/{day.isoformat()}")
        events = data.get("events") or []

        fixtures: list[ProviderFixture] = []
        for event in events:
            league_id = ((event.get("tournament") or {}).get("uniqueTournament") or {}).get("id")
            if league_id not in self.config.tournaments:
                continue
            fixture = self._parse(event)
            if fixture is None:
                continue
            local = home_now(fixture.kick_off)
            if local.date() != day or local.strftime("%H:%M") != calendar_cfg.kickoff_time:
                continue
            fixtures.append(fixture)

        logger.info(
            "Found %d %s fixtures for %s (of %d events)",
            len(fixtures), calendar_cfg.kickoff_time, day.isoformat(), len(events),
        )
        return fixtures

    def fetch_fixture_results(self, fixture_ids: list[int]) -> list[ProviderFixture]:
        """Latest score and status for each external fixture id.

        Best-effort: ids that fail or come back malformed are logged and
        left out of the result.
        """
        results: list[ProviderFixture] = []
        for fixture_id in fixture_ids:
            try:
                data = self._get(f"/event/{fixture_id}")
            except ProviderError as exc:
                logger.error("Could not fetch fixture %d: %s", fixture_id, exc)
                continue
            event = data.get("event")
            if not event:
                logger.warning("No event payload for fixture %d", fixture_id)
                continue
            fixture = self._parse(event)
            if fixture is not None:
                logger.debug(
                    "Fixture %d: %s %s-%s %s (%s)",
                    fixture_id, fixture.home_team, fixture.home_score,
                    fixture.away_score, fixture.away_team, fixture.status,
                )
                results.append(fixture)
        logger.info("Fetched results for %d / %d fixtures", len(results), len(fixture_ids))
        return results
