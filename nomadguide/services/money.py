"""Money / rounding helpers.

Centralized so balances, conversion previews and chart payloads use identical
rounding semantics. Rounding happens here, at display time, never inside the
engine arithmetic.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from nomadguide.models.constants import (
    CURRENCY_SYMBOLS,
    SUFFIX_SYMBOL_CURRENCIES,
    ZERO_DECIMAL_CURRENCIES,
)
from nomadguide.models.fields import normalize_currency  # noqa: F401  re-export

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


def round2(value: Any) -> Decimal:
    return to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def currency_precision(currency: str) -> int:
    return 0 if currency.upper() in ZERO_DECIMAL_CURRENCIES else 2


def round_for_currency(amount: Any, currency: str) -> Decimal:
    places = currency_precision(currency)
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)


def format_amount(
    amount: Any,
    currency: str = "USD",
    *,
    show_symbol: bool = True,
    show_code: bool = False,
) -> str:
    """Render an amount with the currency's precision and symbol.

    Negative amounts keep their sign in front of the symbol ("-$12.00").
    """
    if amount is None:
        return ""
    currency = currency.upper()
    rounded = round_for_currency(amount, currency)
    sign = "-" if rounded < 0 else ""
    body = f"{abs(rounded):,.{currency_precision(currency)}f}"
    if show_symbol:
        symbol = CURRENCY_SYMBOLS.get(currency, currency)
        if currency in SUFFIX_SYMBOL_CURRENCIES:
            body = f"{body} {symbol}"
        else:
            body = f"{symbol}{body}"
    result = f"{sign}{body}"
    if show_code:
        result = f"{result} {currency}"
    return result


def format_exchange_rate(
    source: str, target: str, rate: Any, precision: int = 4, show_currencies: bool = True
) -> str:
    rate = to_decimal(rate)
    if rate <= 0:
        return ""
    formatted = f"{rate:.{precision}f}"
    if show_currencies:
        return f"1 {source} = {formatted} {target}"
    return formatted


def rate_change_percent(current: Any, previous: Any) -> Decimal:
    current, previous = to_decimal(current), to_decimal(previous)
    if current == 0 or previous == 0:
        return ZERO
    return (current - previous) / previous * HUNDRED


_NON_NUMERIC = re.compile(r"[^\d.\-]")


def parse_amount(text: Any) -> Optional[Decimal]:
    """Parse user input such as "$1,234.50" into a Decimal; None if unparseable."""
    if isinstance(text, (int, float, Decimal)):
        return to_decimal(text)
    if not text or not isinstance(text, str):
        return None
    cleaned = _NON_NUMERIC.sub("", text)
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None
