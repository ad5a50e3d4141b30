from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional

from nomadguide.core.config import Settings, get_settings
from nomadguide.core.errors import RateProviderUnavailable
from nomadguide.models import ExchangeRateTable, RatesResult
from .base import RateProvider
from .providers import OFFLINE_BASE, StaticRateProvider, make_rate_provider

"""Central rate cache service.

Purpose:
    Hold the last fetched ExchangeRateTable and decide when to refresh it.
    Balance and conversion code never talk to this service directly; callers
    ask it for a table and pass the table into the pure functions.

Policy:
    - A cached table younger than `rates_stale_after_seconds` (24h) is served
      as is unless a refresh is forced.
    - Otherwise the provider is asked for a fresh table.
    - A failed fetch is never raised: the last cached table is returned with
      success=False, or the static offline table if nothing was cached yet.
      The offline table is not cached, so the next call retries the provider.
"""

logger = logging.getLogger("nomadguide.rates")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CentralRateCacheService:
    """Cached rate table with staleness-bound refresh."""

    def __init__(
        self,
        provider: Optional[RateProvider] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._settings = settings or get_settings()
        self._provider = provider or make_rate_provider(self._settings.exchange_rate_provider)
        self._fallback = StaticRateProvider()
        self._max_age = self._settings.rates_stale_after_seconds
        self._base = self._settings.base_currency
        self._clock = clock
        self._cached: Optional[ExchangeRateTable] = None

    # Internal --------------------------------------------------
    def _is_stale(self, table: ExchangeRateTable) -> bool:
        return table.is_stale(self._clock(), self._max_age)

    def _fallback_table(self) -> ExchangeRateTable:
        try:
            rates = self._fallback.fetch_rates(self._base)
            base = self._base
        except RateProviderUnavailable:
            rates = self._fallback.fetch_rates(OFFLINE_BASE)
            base = OFFLINE_BASE
        return ExchangeRateTable(
            base=base, rates=rates, fetched_at=self._clock(), source="fallback"
        )

    # Public API -----------------------------------------------
    @property
    def cached_table(self) -> Optional[ExchangeRateTable]:
        return self._cached

    def clear(self) -> None:
        self._cached = None

    def get_rates(self, force_refresh: bool = False) -> RatesResult:
        cached = self._cached
        if not force_refresh and cached is not None and not self._is_stale(cached):
            return RatesResult(table=cached, success=True, cached=True, stale=False)

        try:
            rates = self._provider.fetch_rates(self._base)
        except RateProviderUnavailable as exc:
            logger.warning(
                "rate refresh failed: %s",
                exc,
                extra={"provider": self._provider.name},
            )
            if cached is not None:
                return RatesResult(
                    table=cached,
                    success=False,
                    cached=True,
                    stale=self._is_stale(cached),
                    error=str(exc),
                )
            return RatesResult(
                table=self._fallback_table(),
                success=False,
                cached=False,
                stale=False,
                error=str(exc),
            )

        table = ExchangeRateTable(
            base=self._base, rates=rates, fetched_at=self._clock(), source="live"
        )
        self._cached = table
        logger.info(
            "rates refreshed (%d currencies)",
            len(rates),
            extra={"provider": self._provider.name},
        )
        return RatesResult(table=table, success=True, cached=False, stale=False)


# Singleton dependency helper used by FastAPI DI
@lru_cache
def get_central_rate_cache_service() -> CentralRateCacheService:
    return CentralRateCacheService()
