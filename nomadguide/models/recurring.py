from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import Frequency
from .fields import CurrencyCode, Money


class RecurringTransaction(BaseModel):
    """Projection template for a periodic income/outcome.

    Never materialized into transactions; the balance engine derives its
    contribution analytically (occurrences x amount).
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    trip_id: Optional[str] = None
    amount: Optional[Money] = Field(None, ge=0)
    currency: Optional[CurrencyCode] = None
    type: Literal["income", "outcome"]
    frequency: Frequency
    start_date: date
    end_date: date
    last_applied_date: Optional[date] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _start_not_after_end(self) -> "RecurringTransaction":
        if self.start_date > self.end_date:
            raise ValueError("start_date cannot be after end_date")
        return self
