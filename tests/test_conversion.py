from datetime import datetime, timezone
from decimal import Decimal

import pytest

from nomadguide.core.errors import ConversionError, MissingRateError
from nomadguide.models import ExchangeRateTable
from nomadguide.services import money
from nomadguide.services.rates.conversion import (
    conversion_preview,
    convert,
    convert_transactions,
)

from conftest import outcome, recurring


def test_same_currency_is_identity(table):
    assert convert(Decimal("12.345"), "usd", "USD", table) == Decimal("12.345")


def test_eur_to_usd_display(table):
    result = convert(Decimal("100"), "EUR", "USD", table)
    assert money.round_for_currency(result, "USD") == Decimal("117.65")


def test_round_trip_through_base(table):
    there = convert(Decimal("100"), "USD", "EUR", table)
    assert there == Decimal("85")
    assert convert(there, "EUR", "USD", table) == Decimal("100")


def test_cross_conversion_pivots_through_base(table):
    result = convert(Decimal("100"), "EUR", "GBP", table)
    assert money.round_for_currency(result, "GBP") == Decimal("85.88")


def test_zero_decimal_target(table):
    result = conversion_preview(Decimal("10.01"), "USD", "JPY", table)
    assert result.is_converted
    assert result.converted_amount == Decimal("1101.1")
    assert result.display_amount == Decimal("1101")
    assert result.rate == Decimal("110.0")


def test_preview_same_currency(table):
    result = conversion_preview(5, "EUR", "eur", table)
    assert not result.is_converted
    assert result.rate == Decimal("1")
    assert result.converted_amount == Decimal("5")


def test_missing_rate_raises(table):
    with pytest.raises(MissingRateError) as exc_info:
        convert(Decimal("1"), "USD", "XYZ", table)
    assert exc_info.value.currency == "XYZ"
    assert isinstance(exc_info.value, ConversionError)


def test_non_positive_rate_is_missing():
    table = ExchangeRateTable(
        base="USD",
        rates={"EUR": Decimal("0")},
        fetched_at=datetime(2026, 10, 17, tzinfo=timezone.utc),
    )
    with pytest.raises(MissingRateError):
        convert(Decimal("1"), "EUR", "USD", table)


def test_base_has_implicit_rate():
    table = ExchangeRateTable(
        base="EUR",
        rates={"USD": Decimal("1.25")},
        fetched_at=datetime(2026, 10, 17, tzinfo=timezone.utc),
    )
    assert convert(Decimal("4"), "EUR", "USD", table) == Decimal("5.00")


def test_invalid_currency_code(table):
    with pytest.raises(ValueError):
        convert(Decimal("1"), "EURO", "USD", table)


def test_convert_transactions(table):
    records = [
        outcome("o1", "85", currency="EUR"),
        outcome("o2", "10"),
    ]
    converted = convert_transactions(records, "USD", table)
    assert converted[0].amount == Decimal("100")
    assert converted[0].currency == "USD"
    assert converted[1] is records[1]
    # originals untouched
    assert records[0].currency == "EUR"


def test_convert_recurring_templates(table):
    from datetime import date

    items = [recurring("r1", "110", "outcome", "daily", date(2026, 10, 1), date(2026, 10, 2), currency="JPY")]
    converted = convert_transactions(items, "USD", table)
    assert converted[0].amount == Decimal("1")
    assert converted[0].frequency == items[0].frequency


def test_format_amount():
    assert money.format_amount(Decimal("1234.5"), "USD") == "$1,234.50"
    assert money.format_amount(Decimal("-12"), "USD") == "-$12.00"
    assert money.format_amount(Decimal("1234.5"), "EUR") == "1,234.50 €"
    assert money.format_amount(Decimal("1500.4"), "JPY", show_code=True) == "¥1,500 JPY"
    assert money.format_amount(Decimal("5"), "XYZ") == "XYZ5.00"


def test_format_exchange_rate():
    assert money.format_exchange_rate("USD", "EUR", Decimal("0.85")) == "1 USD = 0.8500 EUR"
    assert money.format_exchange_rate("USD", "EUR", 0) == ""


def test_parse_amount():
    assert money.parse_amount("$1,234.50") == Decimal("1234.50")
    assert money.parse_amount("abc") is None
    assert money.parse_amount(None) is None


def test_rate_change_percent():
    assert money.rate_change_percent(Decimal("1.1"), Decimal("1.0")) == Decimal("10")
    assert money.rate_change_percent(Decimal("1.1"), Decimal("0")) == Decimal("0")
