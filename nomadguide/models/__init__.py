"""Pydantic domain models for the NomadGuide budget engine."""

from .constants import (
    Frequency,
    FREQUENCY_DAYS,
    ZERO_DECIMAL_CURRENCIES,
    DEFAULT_INCOME_CATEGORIES,
    DEFAULT_OUTCOME_CATEGORIES,
)  # re-export
from .trip import Trip, TripIn
from .transaction import Transaction, Income, Outcome, TransactionIn
from .recurring import RecurringTransaction
from .category import Category
from .rates import ExchangeRateTable, RatesResult, ConversionRequest

__all__ = [
    "Frequency",
    "FREQUENCY_DAYS",
    "ZERO_DECIMAL_CURRENCIES",
    "DEFAULT_INCOME_CATEGORIES",
    "DEFAULT_OUTCOME_CATEGORIES",
    "Trip",
    "TripIn",
    "Transaction",
    "Income",
    "Outcome",
    "TransactionIn",
    "RecurringTransaction",
    "Category",
    "ExchangeRateTable",
    "RatesResult",
    "ConversionRequest",
]
