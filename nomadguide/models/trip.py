from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import MAX_AMOUNT, ZERO_DECIMAL_CURRENCIES
from .fields import CurrencyCode, Money


class Trip(BaseModel):
    """A bounded travel period with its own budget, as read from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    start_date: date
    end_date: date
    initial_budget: Money = Field(Decimal("0"), ge=0)
    currency: CurrencyCode
    is_active: bool = False
    description: Optional[str] = None

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "Trip":
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class TripIn(BaseModel):
    """Validation boundary for user-entered trips."""

    name: str = Field(..., min_length=2, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    start_date: date
    end_date: date
    initial_budget: Money = Field(..., ge=0, le=MAX_AMOUNT)
    currency: CurrencyCode
    location: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("name must be at least 2 characters long")
        return value

    @model_validator(mode="after")
    def _cross_field_rules(self) -> "TripIn":
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        if (
            self.currency in ZERO_DECIMAL_CURRENCIES
            and self.initial_budget != self.initial_budget.to_integral_value()
        ):
            raise ValueError(f"initial_budget cannot have decimal places for {self.currency}")
        return self

    def to_record(self, record_id: str, *, is_active: bool = False) -> Trip:
        return Trip(
            id=record_id,
            name=self.name,
            start_date=self.start_date,
            end_date=self.end_date,
            initial_budget=self.initial_budget,
            currency=self.currency,
            is_active=is_active,
            description=self.description,
        )
