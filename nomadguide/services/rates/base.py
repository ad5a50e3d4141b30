from __future__ import annotations

"""Rate provider abstraction.

A provider returns a whole table of rates relative to a base currency, or
raises RateProviderUnavailable. Caching, staleness and fallback are handled
one level up by CentralRateCacheService.
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict


class RateProvider(ABC):
    name: str = "abstract"

    @abstractmethod
    def fetch_rates(self, base: str) -> Dict[str, Decimal]:
        """Return units of each currency per 1 unit of `base`."""
        raise NotImplementedError
