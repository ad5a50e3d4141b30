"""Balance engine: current/projected balance, budget status and daily rates.

Scopes implemented:
    - Current balance (initial budget + incomes - outcomes)
    - Projected balance through recurring templates
    - Budget status classification (good / warning / critical)
    - Budget usage, average daily spend, remaining daily budget
    - Transaction statistics and a bundled per-trip summary

Design notes:
    Every function is pure with respect to its arguments; callers recompute
    from scratch whenever their inputs change. All amounts must already be in
    the trip currency (see `convert_transactions`); a mismatch raises
    `CurrencyMismatchError` instead of being summed silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Literal, Optional, Sequence

from nomadguide.core.errors import CurrencyMismatchError
from nomadguide.models import RecurringTransaction, Transaction, Trip
from nomadguide.services import calendar
from nomadguide.services.money import HUNDRED, ZERO, to_decimal
from nomadguide.services.thresholds import BudgetThresholds

logger = logging.getLogger("nomadguide.balance")

BudgetStatus = Literal["good", "warning", "critical"]


def _amount(record: Transaction | RecurringTransaction) -> Decimal:
    if record.amount is None:
        logger.warning(
            "amount missing; counted as 0",
            extra={"transaction_id": record.id, "trip_id": record.trip_id},
        )
        return ZERO
    return to_decimal(record.amount)


def _sum(records: Iterable[Transaction]) -> Decimal:
    total = ZERO
    for record in records:
        total += _amount(record)
    return total


def missing_amount_ids(records: Iterable[Transaction | RecurringTransaction]) -> List[str]:
    return [r.id for r in records if r.amount is None]


def ensure_trip_currency(
    trip: Trip, records: Iterable[Transaction | RecurringTransaction]
) -> None:
    """Raise CurrencyMismatchError for any record not in the trip currency.

    Records without a currency are assumed to be in the trip currency.
    """
    for record in records:
        if record.currency is not None and record.currency != trip.currency:
            raise CurrencyMismatchError(trip.currency, record.currency, record.id)


def total_income(incomes: Iterable[Transaction]) -> Decimal:
    return _sum(incomes)


def total_spent(outcomes: Iterable[Transaction]) -> Decimal:
    return _sum(outcomes)


def current_balance(
    trip: Trip, incomes: Sequence[Transaction], outcomes: Sequence[Transaction]
) -> Decimal:
    ensure_trip_currency(trip, incomes)
    ensure_trip_currency(trip, outcomes)
    return to_decimal(trip.initial_budget) + total_income(incomes) - total_spent(outcomes)


# ---------------- Projection -----------------
@dataclass(frozen=True)
class RecurringImpact:
    recurring_id: str
    type: str
    frequency: str
    window_start: date
    window_end: date
    occurrences: int
    amount: Decimal
    impact: Decimal  # signed: positive for income, negative for outcome


def recurring_impacts(
    trip: Trip,
    recurring: Sequence[RecurringTransaction],
    as_of: date | None = None,
) -> List[RecurringImpact]:
    """Contribution of each recurring template between `as_of` and trip end.

    Templates whose interval does not intersect [as_of, trip.end_date] are
    left out. An intersecting template whose overlap holds no full step
    contributes 0 occurrences.
    """
    as_of = calendar.as_date(as_of or calendar.today())
    ensure_trip_currency(trip, recurring)
    impacts: List[RecurringImpact] = []
    for item in recurring:
        if item.start_date > trip.end_date or item.end_date < as_of:
            continue
        window_start = max(as_of, item.start_date)
        window_end = min(trip.end_date, item.end_date)
        occurrences = calendar.occurrences_between(item.frequency, window_start, window_end)
        amount = _amount(item)
        impact = occurrences * amount
        if item.type != "income":
            impact = -impact
        impacts.append(
            RecurringImpact(
                recurring_id=item.id,
                type=item.type,
                frequency=item.frequency.value,
                window_start=window_start,
                window_end=window_end,
                occurrences=occurrences,
                amount=amount,
                impact=impact,
            )
        )
    return impacts


def projected_balance(
    trip: Trip,
    incomes: Sequence[Transaction],
    outcomes: Sequence[Transaction],
    recurring: Sequence[RecurringTransaction],
    as_of: date | None = None,
) -> Decimal:
    balance = current_balance(trip, incomes, outcomes)
    for impact in recurring_impacts(trip, recurring, as_of):
        balance += impact.impact
    return balance


# ---------------- Budget status -----------------
def budget_percentage(current: Decimal, initial_budget: Decimal) -> Optional[Decimal]:
    """Share of the initial budget still available, or None for a zero budget."""
    initial_budget = to_decimal(initial_budget)
    if initial_budget <= 0:
        return None
    return HUNDRED * to_decimal(current) / initial_budget


def budget_status(
    current: Decimal,
    initial_budget: Decimal,
    thresholds: BudgetThresholds | None = None,
) -> BudgetStatus:
    thresholds = thresholds or BudgetThresholds()
    percentage = budget_percentage(current, initial_budget)
    if percentage is None:
        return "good" if to_decimal(current) >= 0 else "critical"
    if percentage >= thresholds.good_pct:
        return "good"
    if percentage >= thresholds.warning_pct:
        return "warning"
    return "critical"


def budget_usage_percent(initial_budget: Decimal, outcomes: Iterable[Transaction]) -> Decimal:
    initial_budget = to_decimal(initial_budget)
    if initial_budget <= 0:
        return ZERO
    return min(HUNDRED, total_spent(outcomes) / initial_budget * HUNDRED)


# ---------------- Daily rates -----------------
def daily_average_spend(
    outcomes: Iterable[Transaction], trip_start: date, as_of: date | None = None
) -> Decimal:
    as_of = as_of or calendar.today()
    days_passed = max(1, calendar.days_between(trip_start, as_of))
    return total_spent(outcomes) / days_passed


def remaining_daily_budget(
    current: Decimal, trip_end: date, as_of: date | None = None
) -> Decimal:
    as_of = calendar.as_date(as_of or calendar.today())
    current = to_decimal(current)
    if current <= 0 or as_of > calendar.as_date(trip_end):
        return ZERO
    days_left = max(1, calendar.days_between(as_of, trip_end))
    return current / days_left


# ---------------- Statistics -----------------
@dataclass(frozen=True)
class TransactionStats:
    total_transactions: int
    income_count: int
    outcome_count: int
    total_income: Decimal
    total_outcome: Decimal
    net_amount: Decimal
    average_income: Decimal
    average_outcome: Decimal
    largest_income: Decimal
    largest_outcome: Decimal


def transaction_stats(
    incomes: Sequence[Transaction], outcomes: Sequence[Transaction]
) -> TransactionStats:
    income_total = total_income(incomes)
    outcome_total = total_spent(outcomes)
    income_amounts = [to_decimal(i.amount) for i in incomes]
    outcome_amounts = [to_decimal(o.amount) for o in outcomes]
    return TransactionStats(
        total_transactions=len(incomes) + len(outcomes),
        income_count=len(incomes),
        outcome_count=len(outcomes),
        total_income=income_total,
        total_outcome=outcome_total,
        net_amount=income_total - outcome_total,
        average_income=income_total / len(incomes) if incomes else ZERO,
        average_outcome=outcome_total / len(outcomes) if outcomes else ZERO,
        largest_income=max(income_amounts, default=ZERO),
        largest_outcome=max(outcome_amounts, default=ZERO),
    )


# ---------------- Summary -----------------
@dataclass(frozen=True)
class BalanceSummary:
    trip_id: str
    currency: str
    as_of: date
    initial_budget: Decimal
    total_income: Decimal
    total_spent: Decimal
    current_balance: Decimal
    projected_balance: Decimal
    status: BudgetStatus
    budget_percentage: Optional[Decimal]
    budget_usage_percent: Decimal
    daily_average_spend: Decimal
    remaining_daily_budget: Decimal
    trip_progress_percent: int
    is_active_today: bool
    days_remaining: int
    spent_today: Decimal
    transactions_today: int
    stats: TransactionStats
    recurring: List[RecurringImpact] = field(default_factory=list)
    missing_amount_ids: List[str] = field(default_factory=list)


def summarize_balance(
    trip: Trip,
    incomes: Sequence[Transaction],
    outcomes: Sequence[Transaction],
    recurring: Sequence[RecurringTransaction] = (),
    as_of: date | None = None,
    thresholds: BudgetThresholds | None = None,
) -> BalanceSummary:
    as_of = calendar.as_date(as_of or calendar.today())
    current = current_balance(trip, incomes, outcomes)
    impacts = recurring_impacts(trip, recurring, as_of)
    projected = current + sum((i.impact for i in impacts), ZERO)
    todays = [o for o in outcomes if calendar.is_today(o.date, as_of)]
    missing = missing_amount_ids([*incomes, *outcomes, *recurring])
    if missing:
        logger.warning(
            "%d record(s) without amount in trip summary",
            len(missing),
            extra={"trip_id": trip.id},
        )
    return BalanceSummary(
        trip_id=trip.id,
        currency=trip.currency,
        as_of=as_of,
        initial_budget=to_decimal(trip.initial_budget),
        total_income=total_income(incomes),
        total_spent=total_spent(outcomes),
        current_balance=current,
        projected_balance=projected,
        status=budget_status(current, trip.initial_budget, thresholds),
        budget_percentage=budget_percentage(current, trip.initial_budget),
        budget_usage_percent=budget_usage_percent(trip.initial_budget, outcomes),
        daily_average_spend=daily_average_spend(outcomes, trip.start_date, as_of),
        remaining_daily_budget=remaining_daily_budget(current, trip.end_date, as_of),
        trip_progress_percent=calendar.trip_progress_percent(
            trip.start_date, trip.end_date, as_of
        ),
        is_active_today=calendar.is_active_today(trip.start_date, trip.end_date, as_of),
        days_remaining=calendar.days_remaining(trip.end_date, as_of),
        spent_today=total_spent(todays),
        transactions_today=len(todays),
        stats=transaction_stats(incomes, outcomes),
        recurring=impacts,
        missing_amount_ids=missing,
    )
