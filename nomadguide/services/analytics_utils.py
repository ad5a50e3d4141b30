from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Tuple

from nomadguide.models import Category, Transaction, Trip
from nomadguide.models.constants import (
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_ICON,
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
)
from nomadguide.services import calendar
from nomadguide.services.money import HUNDRED, ZERO, round2, to_decimal

"""Chart data builders.

Scopes implemented:
    - Category breakdown (spending by category)
    - Daily series (dense, with cumulative total)
    - Weekly series (last N ISO weeks)
    - Monthly income/outcome trend (last N calendar months)
    - Currency distribution
    - Budget vs spent per trip
    - Transaction frequency per weekday, week or month
    - Moving average and series statistics

Design notes:
    Presentation-agnostic: builders return immutable dataclasses with raw
    Decimal totals; percentages are the only rounded values. Dense series
    initialize every bucket to zero before accumulating. Missing amounts count
    as zero here; the balance engine is where they get reported.
"""

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _amount(txn: Transaction) -> Decimal:
    return to_decimal(txn.amount)


# ---------------- Category Breakdown -----------------
@dataclass(frozen=True)
class CategoryBreakdownItem:
    category_id: str
    name: str
    icon: Optional[str]
    color: Optional[str]
    total_amount: Decimal
    transaction_count: int
    percent: Decimal


def spending_by_category(
    outcomes: Iterable[Transaction], categories: Sequence[Category]
) -> List[CategoryBreakdownItem]:
    """Totals per category, largest first.

    Outcomes whose category is absent or unknown land in the synthetic
    "uncategorized" bucket. Buckets with a zero total are dropped.
    """
    by_id: Dict[str, Category] = {c.id: c for c in categories}
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: Dict[str, int] = defaultdict(int)
    for txn in outcomes:
        key = txn.category_id if txn.category_id in by_id else UNCATEGORIZED_ID
        totals[key] += _amount(txn)
        counts[key] += 1

    grand = sum((t for t in totals.values() if t > 0), ZERO)
    items: List[CategoryBreakdownItem] = []
    for key, total in totals.items():
        if total <= 0:
            continue
        category = by_id.get(key)
        items.append(
            CategoryBreakdownItem(
                category_id=key,
                name=category.name if category else UNCATEGORIZED_NAME,
                icon=category.icon if category else UNCATEGORIZED_ICON,
                color=category.color if category else UNCATEGORIZED_COLOR,
                total_amount=total,
                transaction_count=counts[key],
                percent=round2(total / grand * HUNDRED),
            )
        )
    items.sort(key=lambda i: (-i.total_amount, i.name))
    return items


# ---------------- Daily Series -----------------
@dataclass(frozen=True)
class SeriesPoint:
    date: date
    label: str
    total_amount: Decimal
    transaction_count: int
    cumulative_amount: Decimal


def _bucket_by_day(transactions: Iterable[Transaction]) -> Dict[date, List[Transaction]]:
    buckets: Dict[date, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        buckets[calendar.as_date(txn.date)].append(txn)
    return buckets


def daily_series(
    outcomes: Iterable[Transaction],
    window_start: date,
    window_end: date,
    as_of: date | None = None,
) -> List[SeriesPoint]:
    """One point per calendar day in [window_start, min(as_of, window_end)].

    Future days are never emitted. Days without spending appear with zero
    totals.
    """
    as_of = calendar.as_date(as_of or calendar.today())
    start = calendar.as_date(window_start)
    end = min(as_of, calendar.as_date(window_end))
    buckets = _bucket_by_day(outcomes)
    points: List[SeriesPoint] = []
    cumulative = ZERO
    day = start
    while day <= end:
        day_txns = buckets.get(day, [])
        total = sum((_amount(t) for t in day_txns), ZERO)
        cumulative += total
        points.append(
            SeriesPoint(
                date=day,
                label=f"{_MONTH_ABBR[day.month - 1]} {day.day:02d}",
                total_amount=total,
                transaction_count=len(day_txns),
                cumulative_amount=cumulative,
            )
        )
        day += timedelta(days=1)
    return points


# ---------------- Weekly Series -----------------
def weekly_series(
    outcomes: Iterable[Transaction], week_count: int, as_of: date | None = None
) -> List[SeriesPoint]:
    """Dense totals for the last `week_count` ISO weeks (Monday start).

    The final bucket is the week containing `as_of`; later transactions are
    ignored.
    """
    as_of = calendar.as_date(as_of or calendar.today())
    if week_count <= 0:
        return []
    current_week = as_of - timedelta(days=as_of.weekday())
    first_week = current_week - timedelta(weeks=week_count - 1)
    totals: Dict[date, Decimal] = {
        first_week + timedelta(weeks=i): ZERO for i in range(week_count)
    }
    counts: Dict[date, int] = {week: 0 for week in totals}
    for txn in outcomes:
        day = calendar.as_date(txn.date)
        if day > as_of or day < first_week:
            continue
        week = day - timedelta(days=day.weekday())
        totals[week] += _amount(txn)
        counts[week] += 1

    points: List[SeriesPoint] = []
    cumulative = ZERO
    for week in sorted(totals):
        cumulative += totals[week]
        points.append(
            SeriesPoint(
                date=week,
                label=f"{_MONTH_ABBR[week.month - 1]} {week.day:02d}",
                total_amount=totals[week],
                transaction_count=counts[week],
                cumulative_amount=cumulative,
            )
        )
    return points


# ---------------- Monthly Trend -----------------
@dataclass(frozen=True)
class MonthlyTrendPoint:
    month: str  # YYYY-MM
    label: str  # e.g. "Oct 2026"
    income: Decimal
    outcome: Decimal


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_trend(
    transactions: Iterable[Transaction], month_count: int, as_of: date | None = None
) -> List[MonthlyTrendPoint]:
    """Income and outcome totals for the last `month_count` calendar months.

    The last bucket is the month of `as_of`. Transactions dated after
    `as_of` or before the first bucket are ignored.
    """
    as_of = calendar.as_date(as_of or calendar.today())
    if month_count <= 0:
        return []
    months = [
        _shift_month(as_of.year, as_of.month, -offset)
        for offset in range(month_count - 1, -1, -1)
    ]
    income: Dict[tuple[int, int], Decimal] = {m: ZERO for m in months}
    outcome: Dict[tuple[int, int], Decimal] = {m: ZERO for m in months}
    for txn in transactions:
        day = calendar.as_date(txn.date)
        key = (day.year, day.month)
        if day > as_of or key not in income:
            continue
        if txn.kind == "income":
            income[key] += _amount(txn)
        else:
            outcome[key] += _amount(txn)
    return [
        MonthlyTrendPoint(
            month=f"{year:04d}-{month:02d}",
            label=f"{_MONTH_ABBR[month - 1]} {year}",
            income=income[(year, month)],
            outcome=outcome[(year, month)],
        )
        for year, month in months
    ]


# ---------------- Currency Distribution -----------------
@dataclass(frozen=True)
class CurrencyDistributionItem:
    currency: str
    total_amount: Decimal
    transaction_count: int


def currency_distribution(
    transactions: Iterable[Transaction], limit: int = 10, default_currency: str = "USD"
) -> List[CurrencyDistributionItem]:
    """Original-currency totals, largest first, capped at `limit` entries."""
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: Dict[str, int] = defaultdict(int)
    for txn in transactions:
        currency = txn.currency or default_currency
        totals[currency] += _amount(txn)
        counts[currency] += 1
    items = [
        CurrencyDistributionItem(currency=c, total_amount=t, transaction_count=counts[c])
        for c, t in totals.items()
    ]
    items.sort(key=lambda i: (-i.total_amount, i.currency))
    return items[:limit]


# ---------------- Budget Comparison -----------------
@dataclass(frozen=True)
class BudgetComparisonItem:
    trip_id: str
    name: str
    currency: str
    budget: Decimal
    spent: Decimal
    remaining: Decimal


def budget_comparison(
    trips_with_spent: Iterable[Tuple[Trip, Any]]
) -> List[BudgetComparisonItem]:
    """Budget vs spent per trip, in input order. Remaining is clamped at zero."""
    items: List[BudgetComparisonItem] = []
    for trip, spent in trips_with_spent:
        budget = to_decimal(trip.initial_budget)
        spent = to_decimal(spent)
        items.append(
            BudgetComparisonItem(
                trip_id=trip.id,
                name=trip.name,
                currency=trip.currency,
                budget=budget,
                spent=spent,
                remaining=max(ZERO, budget - spent),
            )
        )
    return items


# ---------------- Transaction Frequency -----------------
FrequencyPeriod = Literal["daily", "weekly", "monthly"]

_WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class FrequencyBucket:
    label: str
    transaction_count: int


def transaction_frequency(
    transactions: Iterable[Transaction], period: FrequencyPeriod = "daily"
) -> List[FrequencyBucket]:
    """Transaction counts per weekday, ISO week or calendar month.

    "daily" always yields the seven weekdays (Monday first) and "monthly" the
    twelve months, pooled across years. "weekly" runs densely from the first
    to the last ISO week holding a transaction, labelled like "2026-W42".
    """
    days = [calendar.as_date(t.date) for t in transactions]
    if period == "daily":
        counts = [0] * 7
        for day in days:
            counts[day.weekday()] += 1
        return [FrequencyBucket(label=n, transaction_count=c) for n, c in zip(_WEEKDAY_NAMES, counts)]
    if period == "monthly":
        counts = [0] * 12
        for day in days:
            counts[day.month - 1] += 1
        return [FrequencyBucket(label=n, transaction_count=c) for n, c in zip(_MONTH_NAMES, counts)]
    if period != "weekly":
        raise ValueError(f"Unknown frequency period '{period}'")
    if not days:
        return []
    weeks: Dict[date, int] = defaultdict(int)
    for day in days:
        weeks[day - timedelta(days=day.weekday())] += 1
    buckets: List[FrequencyBucket] = []
    week, last = min(weeks), max(weeks)
    while week <= last:
        iso_year, iso_week, _ = week.isocalendar()
        buckets.append(
            FrequencyBucket(label=f"{iso_year}-W{iso_week:02d}", transaction_count=weeks.get(week, 0))
        )
        week += timedelta(weeks=1)
    return buckets


# ---------------- Smoothing & Stats -----------------
def moving_average(values: Sequence[Decimal], window: int = 7) -> List[Decimal]:
    """Centred moving average; the window shrinks at both edges."""
    half = max(window, 1) // 2
    result: List[Decimal] = []
    for i in range(len(values)):
        lo = max(0, i - half)
        hi = min(len(values) - 1, i + half)
        chunk = [to_decimal(v) for v in values[lo : hi + 1]]
        result.append(sum(chunk, ZERO) / len(chunk))
    return result


@dataclass(frozen=True)
class SeriesStats:
    minimum: Decimal
    maximum: Decimal
    average: Decimal
    total: Decimal


def series_stats(values: Sequence[Decimal]) -> SeriesStats:
    if not values:
        return SeriesStats(minimum=ZERO, maximum=ZERO, average=ZERO, total=ZERO)
    decimals = [to_decimal(v) for v in values]
    total = sum(decimals, ZERO)
    return SeriesStats(
        minimum=min(decimals),
        maximum=max(decimals),
        average=total / len(decimals),
        total=total,
    )
