from __future__ import annotations

from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from nomadguide.models import Category, Income, Outcome, RecurringTransaction, Trip
from nomadguide.services import calendar
from nomadguide.services.alerts import collect_alerts
from nomadguide.services.rates.cache_service import CentralRateCacheService
from nomadguide.services.store import InMemoryTripStore, build_trip_summary
from nomadguide.services.thresholds import BudgetThresholds, get_thresholds
from .rates import get_cache_service

router = APIRouter(prefix="/trips", tags=["trips"])


def get_budget_thresholds() -> BudgetThresholds:
    return get_thresholds()


class TripSnapshot(BaseModel):
    """Everything the store holds for one trip, posted by the consuming layer."""

    trip: Trip
    incomes: List[Income] = Field(default_factory=list)
    outcomes: List[Outcome] = Field(default_factory=list)
    recurring: List[RecurringTransaction] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=list)
    as_of: Optional[date] = None
    convert_currencies: bool = True
    include_daily_summary: bool = False


class RecurringImpactOut(BaseModel):
    recurring_id: str
    type: str
    frequency: str
    window_start: date
    window_end: date
    occurrences: int
    amount: Decimal
    impact: Decimal


class TransactionStatsOut(BaseModel):
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


class TripSummaryOut(BaseModel):
    trip_id: str
    currency: str
    as_of: date
    initial_budget: Decimal
    total_income: Decimal
    total_spent: Decimal
    current_balance: Decimal
    projected_balance: Decimal
    status: str
    budget_percentage: Optional[Decimal]
    budget_usage_percent: Decimal
    daily_average_spend: Decimal
    remaining_daily_budget: Decimal
    trip_progress_percent: int
    is_active_today: bool
    days_remaining: int
    spent_today: Decimal
    transactions_today: int
    stats: TransactionStatsOut
    recurring: List[RecurringImpactOut]
    missing_amount_ids: List[str]
    alerts: List[Dict[str, Any]]


def _load_snapshot(snapshot: TripSnapshot) -> InMemoryTripStore:
    trip_id = snapshot.trip.id
    store = InMemoryTripStore()
    store.add_trip(snapshot.trip, seed_categories=False)
    for record in [*snapshot.incomes, *snapshot.outcomes]:
        store.add_transaction(record.model_copy(update={"trip_id": trip_id}))
    for item in snapshot.recurring:
        store.add_recurring(item.model_copy(update={"trip_id": trip_id}))
    for category in snapshot.categories:
        store.add_category(category.model_copy(update={"trip_id": trip_id}))
    return store


def _has_foreign_currency(snapshot: TripSnapshot) -> bool:
    records = [*snapshot.incomes, *snapshot.outcomes, *snapshot.recurring]
    return any(r.currency not in (None, snapshot.trip.currency) for r in records)


@router.post("/summary", response_model=TripSummaryOut, summary="Balance summary for a trip snapshot")
def trip_summary(
    snapshot: TripSnapshot,
    svc: CentralRateCacheService = Depends(get_cache_service),
    thresholds: BudgetThresholds = Depends(get_budget_thresholds),
):
    """Compute current/projected balance, budget status and daily figures.

    Foreign-currency records are converted into the trip currency with the
    cached rate table when `convert_currencies` is set; otherwise they are
    rejected with 422 currency_mismatch.
    """
    as_of = snapshot.as_of or calendar.today()
    store = _load_snapshot(snapshot)
    rates = None
    if snapshot.convert_currencies and _has_foreign_currency(snapshot):
        rates = svc.get_rates()
    summary = build_trip_summary(
        store,
        snapshot.trip.id,
        as_of=as_of,
        thresholds=thresholds,
        rates=rates.table if rates else None,
    )
    alerts = collect_alerts(
        snapshot.trip, summary, rates, daily_summary=snapshot.include_daily_summary
    )
    return TripSummaryOut.model_validate({**asdict(summary), "alerts": alerts})
