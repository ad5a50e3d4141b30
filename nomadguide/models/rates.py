from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import MAX_AMOUNT
from .fields import CurrencyCode, normalize_currency


class ExchangeRateTable(BaseModel):
    """Rates expressed as units of each currency per 1 unit of `base`."""

    base: CurrencyCode = "USD"
    rates: Dict[str, Decimal]
    fetched_at: datetime
    source: Literal["live", "fallback"] = "live"

    @field_validator("rates")
    def _normalize_codes(cls, rates: Dict[str, Decimal]) -> Dict[str, Decimal]:
        return {normalize_currency(code): value for code, value in rates.items()}

    def rate_for(self, currency: str) -> Optional[Decimal]:
        """Return the rate for `currency`, or None when unknown or non-positive."""
        currency = normalize_currency(currency)
        if currency == self.base:
            return self.rates.get(currency, Decimal("1"))
        rate = self.rates.get(currency)
        if rate is None or rate <= 0:
            return None
        return rate

    def age_hours(self, now: datetime) -> float:
        return (now - self.fetched_at).total_seconds() / 3600

    def is_stale(self, now: datetime, max_age_seconds: int) -> bool:
        return self.age_hours(now) > max_age_seconds / 3600


class RatesResult(BaseModel):
    table: ExchangeRateTable
    success: bool
    cached: bool = False
    stale: bool = False
    error: Optional[str] = None


class ConversionRequest(BaseModel):
    amount: Decimal = Field(..., allow_inf_nan=False, ge=0, le=MAX_AMOUNT)
    source: CurrencyCode
    target: CurrencyCode
