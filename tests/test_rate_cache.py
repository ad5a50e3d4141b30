import logging
from datetime import timedelta
from decimal import Decimal

import pytest

from nomadguide.core.errors import RateProviderUnavailable
from nomadguide.services.http_client import HttpError
from nomadguide.services.rates.cache_service import CentralRateCacheService
from nomadguide.services.rates.providers import (
    ExternalHTTPRateProvider,
    StaticRateProvider,
    make_rate_provider,
)


@pytest.fixture
def svc(provider, settings, clock):
    return CentralRateCacheService(provider=provider, settings=settings, clock=clock)


def test_first_call_fetches_then_serves_cache(svc, provider):
    first = svc.get_rates()
    assert first.success and not first.cached
    assert first.table.source == "live"
    second = svc.get_rates()
    assert second.cached and second.success
    assert provider.calls == 1


def test_refetch_after_24_hours(svc, provider, clock):
    svc.get_rates()
    clock.advance(hours=24)
    assert svc.get_rates().cached
    clock.advance(seconds=1)
    result = svc.get_rates()
    assert not result.cached
    assert provider.calls == 2
    assert result.table.fetched_at == clock.now


def test_force_refresh_bypasses_cache(svc, provider):
    svc.get_rates()
    svc.get_rates(force_refresh=True)
    assert provider.calls == 2


def test_failure_returns_cached_table(svc, provider, clock, caplog):
    fresh = svc.get_rates().table
    clock.advance(hours=30)
    provider.fail = True
    with caplog.at_level(logging.WARNING, logger="nomadguide.rates"):
        result = svc.get_rates()
    assert not result.success
    assert result.cached and result.stale
    assert result.table == fresh
    assert result.error == "provider down"
    assert any(getattr(r, "provider", None) == "fake" for r in caplog.records)


def test_failure_without_cache_uses_offline_table(svc, provider):
    provider.fail = True
    result = svc.get_rates()
    assert not result.success and not result.cached
    assert result.table.source == "fallback"
    assert result.table.rate_for("EUR") == Decimal("0.85")
    # the fallback is not cached, so the next call retries the provider
    assert svc.cached_table is None
    provider.fail = False
    assert svc.get_rates().success
    assert provider.calls == 2


def test_clear(svc, provider):
    svc.get_rates()
    svc.clear()
    svc.get_rates()
    assert provider.calls == 2


def test_static_provider_rebases():
    rates = StaticRateProvider().fetch_rates("EUR")
    assert rates["EUR"] == Decimal("1")
    assert rates["USD"] == Decimal("1.0") / Decimal("0.85")


def test_static_provider_unknown_base():
    with pytest.raises(RateProviderUnavailable):
        StaticRateProvider().fetch_rates("XYZ")


def test_make_rate_provider():
    assert isinstance(make_rate_provider("static"), StaticRateProvider)
    with pytest.raises(ValueError):
        make_rate_provider("carrier-pigeon")


def test_external_provider_parses_table(monkeypatch, settings):
    seen = {}

    def fake_get_json(url, **kwargs):
        seen["url"] = url
        return {"rates": {"eur": 0.9, "GBP": "0.8", "BAD": "n/a", "ZZZ": -1}}

    monkeypatch.setattr("nomadguide.services.rates.providers.get_json", fake_get_json)
    rates = ExternalHTTPRateProvider(settings).fetch_rates("usd")
    assert seen["url"].endswith("/latest/USD")
    assert rates == {"EUR": Decimal("0.9"), "GBP": Decimal("0.8"), "USD": Decimal("1")}


def test_external_provider_wraps_http_errors(monkeypatch, settings):
    def boom(url, **kwargs):
        raise HttpError("timed out")

    monkeypatch.setattr("nomadguide.services.rates.providers.get_json", boom)
    with pytest.raises(RateProviderUnavailable):
        ExternalHTTPRateProvider(settings).fetch_rates("USD")


def test_table_age_hours_and_staleness(table):
    fetched = table.fetched_at
    assert table.age_hours(fetched + timedelta(minutes=90)) == 1.5
    assert table.age_hours(fetched) == 0
    assert not table.is_stale(fetched + timedelta(hours=24), 24 * 3600)
    assert table.is_stale(fetched + timedelta(hours=24, seconds=1), 24 * 3600)
