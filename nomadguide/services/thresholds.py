"""Budget status thresholds.

Percent of the initial budget that must still be available:
  - good_pct (default 20): at or above -> "good"
  - warning_pct (default 5): at or above -> "warning", below -> "critical"

Constrained to 0 <= warning < good <= 100.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from nomadguide.core.config import Settings, get_settings

DEFAULT_BUDGET_GOOD = Decimal("20")
DEFAULT_BUDGET_WARNING = Decimal("5")


@dataclass(frozen=True)
class BudgetThresholds:
    good_pct: Decimal = DEFAULT_BUDGET_GOOD
    warning_pct: Decimal = DEFAULT_BUDGET_WARNING

    def __post_init__(self) -> None:
        good = Decimal(str(self.good_pct))
        warning = Decimal(str(self.warning_pct))
        if not (0 <= warning < good <= 100):
            raise ValueError("Invalid budget thresholds: require 0 <= warning < good <= 100")
        object.__setattr__(self, "good_pct", good)
        object.__setattr__(self, "warning_pct", warning)


def get_thresholds(settings: Optional[Settings] = None) -> BudgetThresholds:
    settings = settings or get_settings()
    return BudgetThresholds(
        good_pct=Decimal(str(settings.budget_good_pct)),
        warning_pct=Decimal(str(settings.budget_warning_pct)),
    )


__all__ = [
    "BudgetThresholds",
    "get_thresholds",
    "DEFAULT_BUDGET_GOOD",
    "DEFAULT_BUDGET_WARNING",
]
