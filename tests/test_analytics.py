from datetime import date
from decimal import Decimal

import pytest

from nomadguide.models import Category
from nomadguide.services import analytics_utils as au

from conftest import AS_OF, income, outcome


def test_daily_series_is_dense():
    outcomes = [outcome("o1", "10", date(2026, 10, 2)), outcome("o2", "5", date(2026, 10, 2))]
    points = au.daily_series(outcomes, date(2026, 10, 1), date(2026, 10, 10), as_of=AS_OF)
    assert len(points) == 10
    assert points[0].total_amount == Decimal("0")
    assert points[1].total_amount == Decimal("15")
    assert points[1].transaction_count == 2
    assert points[1].label == "Oct 02"
    assert points[-1].cumulative_amount == Decimal("15")


def test_daily_series_stops_at_as_of():
    points = au.daily_series([], date(2026, 10, 10), date(2026, 10, 31), as_of=AS_OF)
    assert [p.date for p in points][-1] == AS_OF
    assert len(points) == 8


def test_daily_series_empty_when_reversed():
    assert au.daily_series([], date(2026, 10, 10), date(2026, 10, 1), as_of=AS_OF) == []


def test_spending_by_category_uncategorized_bucket():
    categories = [Category(id="food", name="Food", icon="food", color="#FF5722")]
    outcomes = [
        outcome("o1", "30", category_id="food"),
        outcome("o2", "20", category_id="gone"),
        outcome("o3", "10"),
    ]
    items = au.spending_by_category(outcomes, categories)
    assert [i.name for i in items] == ["Food", "Uncategorized"]
    uncategorized = items[1]
    assert uncategorized.category_id == "uncategorized"
    assert uncategorized.icon == "help-circle"
    assert uncategorized.color == "#757575"
    assert uncategorized.transaction_count == 2
    assert uncategorized.percent == Decimal("50.00")


def test_spending_by_category_sorted_and_drops_zero():
    categories = [
        Category(id="a", name="Accommodation"),
        Category(id="b", name="Bars"),
        Category(id="c", name="Coffee"),
    ]
    outcomes = [
        outcome("o1", "5", category_id="a"),
        outcome("o2", "50", category_id="b"),
        outcome("o3", "0", category_id="c"),
    ]
    items = au.spending_by_category(outcomes, categories)
    assert [i.category_id for i in items] == ["b", "a"]
    assert sum(i.percent for i in items) == Decimal("100.00")


def test_weekly_series_iso_weeks():
    # 2026-10-17 is a Saturday; its week starts Monday 2026-10-12
    outcomes = [
        outcome("o1", "7", date(2026, 10, 4)),
        outcome("o2", "10", date(2026, 10, 11)),
        outcome("o3", "20", date(2026, 10, 12)),
        outcome("o4", "99", date(2026, 10, 18)),
    ]
    points = au.weekly_series(outcomes, 2, as_of=AS_OF)
    assert [p.date for p in points] == [date(2026, 10, 5), date(2026, 10, 12)]
    assert [p.total_amount for p in points] == [Decimal("10"), Decimal("20")]
    assert points[-1].cumulative_amount == Decimal("30")
    assert au.weekly_series(outcomes, 0, as_of=AS_OF) == []


def test_monthly_trend():
    transactions = [
        income("i1", "500", date(2026, 9, 3)),
        outcome("o1", "120", date(2026, 9, 20)),
        outcome("o2", "80", date(2026, 10, 2)),
        outcome("o3", "999", date(2026, 7, 31)),
        outcome("o4", "999", date(2026, 10, 30)),
    ]
    points = au.monthly_trend(transactions, 3, as_of=AS_OF)
    assert [p.month for p in points] == ["2026-08", "2026-09", "2026-10"]
    assert points[0].label == "Aug 2026"
    assert points[0].income == points[0].outcome == Decimal("0")
    assert points[1].income == Decimal("500")
    assert points[1].outcome == Decimal("120")
    assert points[2].outcome == Decimal("80")


def test_monthly_trend_crosses_year():
    points = au.monthly_trend([], 3, as_of=date(2026, 1, 15))
    assert [p.month for p in points] == ["2025-11", "2025-12", "2026-01"]


def test_currency_distribution():
    transactions = [
        outcome("o1", "10", currency="EUR"),
        outcome("o2", "30", currency="EUR"),
        outcome("o3", "25"),
        outcome("o4", "1000", currency="JPY"),
    ]
    items = au.currency_distribution(transactions, limit=2)
    assert [(i.currency, i.total_amount) for i in items] == [
        ("JPY", Decimal("1000")),
        ("EUR", Decimal("40")),
    ]
    assert items[1].transaction_count == 2


def test_moving_average_and_stats():
    values = [Decimal(v) for v in ("1", "2", "3", "4", "5")]
    assert au.moving_average(values, window=3) == [
        Decimal("1.5"),
        Decimal("2"),
        Decimal("3"),
        Decimal("4"),
        Decimal("4.5"),
    ]
    stats = au.series_stats(values)
    assert (stats.minimum, stats.maximum, stats.average, stats.total) == (
        Decimal("1"),
        Decimal("5"),
        Decimal("3"),
        Decimal("15"),
    )
    assert au.series_stats([]).total == Decimal("0")


def test_budget_comparison_clamps_remaining(trip):
    kyoto = trip.model_copy(update={"id": "trip-2", "name": "Kyoto", "initial_budget": Decimal("500")})
    items = au.budget_comparison([(trip, Decimal("250")), (kyoto, "620")])
    assert [i.trip_id for i in items] == ["trip-1", "trip-2"]
    assert items[0].remaining == Decimal("750")
    assert items[1].spent == Decimal("620")
    assert items[1].remaining == Decimal("0")


def test_transaction_frequency_by_weekday():
    txns = [
        outcome("o1", "10", date(2026, 10, 12)),
        income("i1", "10", date(2026, 10, 19)),
        outcome("o2", "10", AS_OF),
    ]
    buckets = au.transaction_frequency(txns, "daily")
    assert len(buckets) == 7
    assert buckets[0].label == "Monday"
    assert buckets[0].transaction_count == 2
    assert buckets[5].transaction_count == 1
    assert sum(b.transaction_count for b in buckets) == 3


def test_transaction_frequency_by_month_pools_years():
    txns = [outcome("o1", "10", date(2025, 10, 3)), outcome("o2", "10", AS_OF)]
    buckets = au.transaction_frequency(txns, "monthly")
    assert len(buckets) == 12
    assert buckets[9].label == "October"
    assert buckets[9].transaction_count == 2


def test_transaction_frequency_weekly_is_dense():
    txns = [
        outcome("o1", "10", date(2026, 10, 5)),
        outcome("o2", "10", AS_OF),
        outcome("o3", "10", date(2026, 10, 27)),
    ]
    buckets = au.transaction_frequency(txns, "weekly")
    assert [(b.label, b.transaction_count) for b in buckets] == [
        ("2026-W41", 1),
        ("2026-W42", 1),
        ("2026-W43", 0),
        ("2026-W44", 1),
    ]
    assert au.transaction_frequency([], "weekly") == []


def test_transaction_frequency_unknown_period():
    with pytest.raises(ValueError):
        au.transaction_frequency([], "hourly")
