from __future__ import annotations

"""Concrete rate providers and factory.

'static' serves the fixed offline table (USD base); it is also the last-resort
fallback when nothing has been cached yet. 'external-http' fetches the latest
table from an exchangerate-api style endpoint: GET {base_url}/{BASE} returning
{"rates": {"EUR": 0.85, ...}}.
"""
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from nomadguide.core.config import Settings, get_settings
from nomadguide.core.errors import RateProviderUnavailable
from nomadguide.services.http_client import HttpError, get_json
from nomadguide.services.money import normalize_currency
from .base import RateProvider

OFFLINE_BASE = "USD"

OFFLINE_RATES: Dict[str, Decimal] = {
    "USD": Decimal("1.0"),
    "EUR": Decimal("0.85"),
    "GBP": Decimal("0.73"),
    "JPY": Decimal("110.0"),
    "CAD": Decimal("1.25"),
    "AUD": Decimal("1.35"),
    "CHF": Decimal("0.92"),
    "CNY": Decimal("6.45"),
    "BRL": Decimal("5.20"),
    "MXN": Decimal("20.0"),
    "INR": Decimal("74.5"),
    "KRW": Decimal("1180.0"),
    "SGD": Decimal("1.35"),
    "NOK": Decimal("8.5"),
    "SEK": Decimal("8.8"),
    "DKK": Decimal("6.3"),
    "PLN": Decimal("3.9"),
    "CZK": Decimal("21.5"),
    "HUF": Decimal("295.0"),
    "RUB": Decimal("73.5"),
}


class StaticRateProvider(RateProvider):
    name = "static"

    def __init__(self, rates: Optional[Dict[str, Decimal]] = None, base: str = OFFLINE_BASE):
        self._rates = dict(rates or OFFLINE_RATES)
        self._base = normalize_currency(base)

    def fetch_rates(self, base: str) -> Dict[str, Decimal]:  # type: ignore[override]
        base = normalize_currency(base)
        if base == self._base:
            return dict(self._rates)
        pivot = self._rates.get(base)
        if not pivot:
            raise RateProviderUnavailable(f"offline table has no rate for base {base}")
        # Re-express every rate relative to the requested base
        return {code: rate / pivot for code, rate in self._rates.items()}


class ExternalHTTPRateProvider(RateProvider):
    name = "external-http"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def fetch_rates(self, base: str) -> Dict[str, Decimal]:  # type: ignore[override]
        base = normalize_currency(base)
        url = f"{str(self._settings.exchange_api_base_url).rstrip('/')}/{base}"
        try:
            data = get_json(
                url,
                timeout=self._settings.http_timeout_seconds,
                retries=self._settings.http_retries,
            )
        except HttpError as exc:
            raise RateProviderUnavailable(str(exc)) from exc
        rates = data.get("rates")
        if not isinstance(rates, dict) or not rates:
            raise RateProviderUnavailable("rate response missing 'rates'")
        parsed: Dict[str, Decimal] = {}
        for code, value in rates.items():
            try:
                rate = Decimal(str(value))
                code = normalize_currency(code)
            except (ValueError, InvalidOperation):
                # skip malformed entries rather than reject the whole table
                continue
            if rate.is_finite() and rate > 0:
                parsed[code] = rate
        parsed[base] = Decimal("1")
        return parsed


_PROVIDER_REGISTRY = {
    "static": StaticRateProvider,
    "external-http": ExternalHTTPRateProvider,
}


def make_rate_provider(kind: str) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    return cls()
