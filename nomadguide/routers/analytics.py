from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from nomadguide.core.config import get_settings
from nomadguide.models import Category, Outcome, Transaction, Trip
from nomadguide.models.fields import Money
from nomadguide.services.analytics_utils import (
    budget_comparison,
    currency_distribution,
    daily_series,
    monthly_trend,
    spending_by_category,
    transaction_frequency,
    weekly_series,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


class CategoryBreakdownRequest(BaseModel):
    outcomes: List[Outcome] = Field(default_factory=list)
    categories: List[Category] = Field(default_factory=list)


class DailySeriesRequest(BaseModel):
    outcomes: List[Outcome] = Field(default_factory=list)
    window_start: date
    window_end: date
    as_of: Optional[date] = None


class WeeklySeriesRequest(BaseModel):
    outcomes: List[Outcome] = Field(default_factory=list)
    weeks: Optional[int] = Field(None, ge=1, le=104)
    as_of: Optional[date] = None


class MonthlyTrendRequest(BaseModel):
    transactions: List[Transaction] = Field(default_factory=list)
    months: Optional[int] = Field(None, ge=1, le=60)
    as_of: Optional[date] = None


class CurrencyDistributionRequest(BaseModel):
    transactions: List[Transaction] = Field(default_factory=list)
    limit: int = Field(10, ge=1, le=50)


class TripSpent(BaseModel):
    trip: Trip
    spent: Money = Field(Decimal("0"), ge=0)


class BudgetComparisonRequest(BaseModel):
    trips: List[TripSpent] = Field(default_factory=list)


class TransactionFrequencyRequest(BaseModel):
    transactions: List[Transaction] = Field(default_factory=list)
    period: Literal["daily", "weekly", "monthly"] = "daily"


class CategoryBreakdownOut(BaseModel):
    category_id: str
    name: str
    icon: Optional[str]
    color: Optional[str]
    total_amount: Decimal
    transaction_count: int
    percent: Decimal


class SeriesPointOut(BaseModel):
    date: date
    label: str
    total_amount: Decimal
    transaction_count: int
    cumulative_amount: Decimal


class MonthlyTrendOut(BaseModel):
    month: str
    label: str
    income: Decimal
    outcome: Decimal


class BudgetComparisonOut(BaseModel):
    trip_id: str
    name: str
    currency: str
    budget: Decimal
    spent: Decimal
    remaining: Decimal


class FrequencyBucketOut(BaseModel):
    label: str
    transaction_count: int


class CurrencyDistributionOut(BaseModel):
    currency: str
    total_amount: Decimal
    transaction_count: int


@router.post(
    "/category-breakdown",
    response_model=List[CategoryBreakdownOut],
    summary="Spending per category, largest first",
)
async def category_breakdown_endpoint(payload: CategoryBreakdownRequest):
    items = spending_by_category(payload.outcomes, payload.categories)
    return [CategoryBreakdownOut.model_validate(i, from_attributes=True) for i in items]


@router.post(
    "/daily-series",
    response_model=List[SeriesPointOut],
    summary="Dense daily spending with cumulative totals",
)
async def daily_series_endpoint(payload: DailySeriesRequest):
    """One point per day from window_start up to the earlier of window_end and as_of."""
    if payload.window_start > payload.window_end:
        raise HTTPException(status_code=400, detail="window_start cannot be after window_end")
    points = daily_series(payload.outcomes, payload.window_start, payload.window_end, payload.as_of)
    return [SeriesPointOut.model_validate(p, from_attributes=True) for p in points]


@router.post(
    "/weekly-series",
    response_model=List[SeriesPointOut],
    summary="Spending per ISO week for the last N weeks",
)
async def weekly_series_endpoint(payload: WeeklySeriesRequest):
    weeks = payload.weeks or get_settings().weekly_series_weeks
    points = weekly_series(payload.outcomes, weeks, payload.as_of)
    return [SeriesPointOut.model_validate(p, from_attributes=True) for p in points]


@router.post(
    "/monthly-trend",
    response_model=List[MonthlyTrendOut],
    summary="Income vs outcome per calendar month",
)
async def monthly_trend_endpoint(payload: MonthlyTrendRequest):
    months = payload.months or get_settings().monthly_trend_months
    points = monthly_trend(payload.transactions, months, payload.as_of)
    return [MonthlyTrendOut.model_validate(p, from_attributes=True) for p in points]


@router.post(
    "/currency-distribution",
    response_model=List[CurrencyDistributionOut],
    summary="Totals per original currency",
)
async def currency_distribution_endpoint(payload: CurrencyDistributionRequest):
    items = currency_distribution(
        payload.transactions,
        limit=payload.limit,
        default_currency=get_settings().base_currency,
    )
    return [CurrencyDistributionOut.model_validate(i, from_attributes=True) for i in items]


@router.post(
    "/budget-comparison",
    response_model=List[BudgetComparisonOut],
    summary="Budget vs spent per trip",
)
async def budget_comparison_endpoint(payload: BudgetComparisonRequest):
    items = budget_comparison((t.trip, t.spent) for t in payload.trips)
    return [BudgetComparisonOut.model_validate(i, from_attributes=True) for i in items]


@router.post(
    "/transaction-frequency",
    response_model=List[FrequencyBucketOut],
    summary="Transaction counts per weekday, ISO week or month",
)
async def transaction_frequency_endpoint(payload: TransactionFrequencyRequest):
    buckets = transaction_frequency(payload.transactions, payload.period)
    return [FrequencyBucketOut.model_validate(b, from_attributes=True) for b in buckets]
