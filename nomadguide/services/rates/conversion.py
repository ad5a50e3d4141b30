from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Sequence, TypeVar

from nomadguide.core.errors import MissingRateError
from nomadguide.models import ExchangeRateTable, RecurringTransaction, Transaction
from nomadguide.services.money import normalize_currency, round_for_currency, to_decimal

"""Currency conversion through the rate table's base currency.

Responsibilities:
    - Look up both legs in an injected ExchangeRateTable (no ambient cache).
    - Pivot through the base currency for cross conversions.
    - Refuse to guess: a missing rate raises MissingRateError.

Results are never rounded here; `round_for_currency` is applied only to the
display fields of ConversionResult so chained conversions do not compound
rounding error.
"""

T = TypeVar("T", Transaction, RecurringTransaction)


def _rate(table: ExchangeRateTable, currency: str) -> Decimal:
    rate = table.rate_for(currency)
    if rate is None:
        raise MissingRateError(currency)
    return rate


def convert(
    amount: Any, source: str, target: str, table: ExchangeRateTable
) -> Decimal:
    source = normalize_currency(source)
    target = normalize_currency(target)
    amount = to_decimal(amount)
    if source == target:
        return amount
    if source == table.base:
        return amount * _rate(table, target)
    if target == table.base:
        return amount / _rate(table, source)
    return amount / _rate(table, source) * _rate(table, target)


@dataclass(frozen=True)
class ConversionResult:
    original_amount: Decimal
    source: str
    target: str
    converted_amount: Decimal
    rate: Decimal
    is_converted: bool

    @property
    def display_amount(self) -> Decimal:
        return round_for_currency(self.converted_amount, self.target)


def conversion_preview(
    amount: Any, source: str, target: str, table: ExchangeRateTable
) -> ConversionResult:
    source = normalize_currency(source)
    target = normalize_currency(target)
    amount = to_decimal(amount)
    if source == target:
        return ConversionResult(
            original_amount=amount,
            source=source,
            target=target,
            converted_amount=amount,
            rate=Decimal("1"),
            is_converted=False,
        )
    return ConversionResult(
        original_amount=amount,
        source=source,
        target=target,
        converted_amount=convert(amount, source, target, table),
        rate=convert(Decimal("1"), source, target, table),
        is_converted=True,
    )


def convert_transactions(
    transactions: Sequence[T], target: str, table: ExchangeRateTable
) -> List[T]:
    """Copies of `transactions` (or recurring templates) expressed in `target`.

    Records already in `target`, without a currency, or without an amount are
    returned unchanged.
    """
    target = normalize_currency(target)
    converted: List[T] = []
    for txn in transactions:
        if txn.currency is None or txn.currency == target or txn.amount is None:
            converted.append(txn)
            continue
        converted.append(
            txn.model_copy(
                update={
                    "amount": convert(txn.amount, txn.currency, target, table),
                    "currency": target,
                }
            )
        )
    return converted
