"""Reusable annotated field types shared by the domain models."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field


def normalize_currency(value: str) -> str:
    normalized = value.strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValueError("Currency must be a 3-letter ISO 4217 code.")
    return normalized


CurrencyCode = Annotated[str, AfterValidator(normalize_currency)]

# Finite decimal; NaN and infinity are rejected by pydantic for Decimal.
Money = Annotated[Decimal, Field(allow_inf_nan=False)]
