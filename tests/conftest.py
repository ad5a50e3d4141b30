from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Optional

import pytest

from nomadguide.core.config import Settings
from nomadguide.core.errors import RateProviderUnavailable
from nomadguide.models import ExchangeRateTable, Income, Outcome, RecurringTransaction, Trip
from nomadguide.services.rates.base import RateProvider
from nomadguide.services.rates.providers import OFFLINE_RATES

AS_OF = date(2026, 10, 17)


class FakeProvider(RateProvider):
    """Counts fetches and fails on demand."""

    name = "fake"

    def __init__(self, rates: Optional[Dict[str, Decimal]] = None):
        self.rates = dict(rates or OFFLINE_RATES)
        self.calls = 0
        self.fail = False

    def fetch_rates(self, base: str) -> Dict[str, Decimal]:
        self.calls += 1
        if self.fail:
            raise RateProviderUnavailable("provider down")
        return dict(self.rates)


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings() -> Settings:
    s = Settings()
    s.init_post_load()
    return s


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def table() -> ExchangeRateTable:
    return ExchangeRateTable(
        base="USD",
        rates=OFFLINE_RATES,
        fetched_at=datetime(2026, 10, 17, tzinfo=timezone.utc),
    )


@pytest.fixture
def trip() -> Trip:
    return Trip(
        id="trip-1",
        name="Lisbon",
        start_date=date(2026, 10, 1),
        end_date=date(2026, 10, 31),
        initial_budget=Decimal("1000"),
        currency="USD",
    )


def income(id: str, amount, day: date = AS_OF, **kw) -> Income:
    return Income(id=id, trip_id="trip-1", amount=amount, currency=kw.pop("currency", "USD"), date=day, **kw)


def outcome(id: str, amount, day: date = AS_OF, **kw) -> Outcome:
    return Outcome(id=id, trip_id="trip-1", amount=amount, currency=kw.pop("currency", "USD"), date=day, **kw)


def recurring(id: str, amount, type: str, frequency: str, start: date, end: date, **kw) -> RecurringTransaction:
    return RecurringTransaction(
        id=id,
        trip_id="trip-1",
        amount=amount,
        currency=kw.pop("currency", "USD"),
        type=type,
        frequency=frequency,
        start_date=start,
        end_date=end,
        **kw,
    )
