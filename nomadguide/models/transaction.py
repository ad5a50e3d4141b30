from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import MAX_AMOUNT, ZERO_DECIMAL_CURRENCIES
from .fields import CurrencyCode, Money

TransactionKind = Literal["income", "outcome"]


class Transaction(BaseModel):
    """Stored income/outcome record.

    `amount` is optional because store documents written by older clients can
    lack it; the balance engine counts such records as 0 and logs a warning.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    trip_id: Optional[str] = None
    kind: TransactionKind
    amount: Optional[Money] = None
    currency: Optional[CurrencyCode] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    date: dt.date
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class Income(Transaction):
    kind: Literal["income"] = "income"


class Outcome(Transaction):
    kind: Literal["outcome"] = "outcome"


class TransactionIn(BaseModel):
    """Validation boundary for user-entered transactions.

    Nothing reaches the engine through this model with a non-positive or
    non-finite amount.
    """

    kind: TransactionKind
    amount: Money = Field(..., gt=0, le=MAX_AMOUNT)
    currency: CurrencyCode
    category_id: Optional[str] = None
    description: str = Field(..., min_length=2, max_length=50)
    notes: Optional[str] = Field(None, max_length=300)
    date: dt.date

    @field_validator("description")
    def _description_not_blank(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("description must be at least 2 characters long")
        return value

    @model_validator(mode="after")
    def _cross_field_rules(self) -> "TransactionIn":
        # Category optional for income, required for outcome
        if self.kind == "outcome" and not self.category_id:
            raise ValueError("category_id is required for outcomes")
        if self.currency in ZERO_DECIMAL_CURRENCIES:
            if self.amount != self.amount.to_integral_value():
                raise ValueError(f"amount cannot have decimal places for {self.currency}")
        elif self.amount.as_tuple().exponent < -2:
            raise ValueError("amount cannot have more than 2 decimal places")
        return self

    def to_record(self, record_id: str, trip_id: str) -> Transaction:
        model = Income if self.kind == "income" else Outcome
        now = dt.datetime.now(dt.timezone.utc)
        return model(
            id=record_id,
            trip_id=trip_id,
            amount=self.amount,
            currency=self.currency,
            category_id=self.category_id,
            description=self.description,
            date=self.date,
            created_at=now,
            updated_at=now,
        )
