"""Alert aggregation service.

Consolidates the budget status, the day's spending and rate-table freshness
into a list of alert dicts with a consistent shape, ready to hand to a
notification sink.

Alert schema (dict):
  type: 'budget' | 'daily_summary' | 'rates'
  level: 'info' | 'warning' | 'critical'
  title: short heading
  message: human readable string
  body: (budget alerts only) remaining share of the budget, when it has one

Thresholds stay in the thresholds module; this module only orchestrates and
formats.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from nomadguide.models import RatesResult, Trip
from nomadguide.services.balance import BalanceSummary
from nomadguide.services.money import ZERO, format_amount


def budget_body(summary: BalanceSummary) -> Optional[str]:
    """E.g. "15% budget remaining ($150.00 of $1,000.00)"; None for a zero budget."""
    if summary.budget_percentage is None:
        return None
    remaining = max(ZERO, summary.budget_percentage).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return (
        f"{remaining}% budget remaining "
        f"({format_amount(summary.current_balance, summary.currency)} of "
        f"{format_amount(summary.initial_budget, summary.currency)})"
    )


def daily_summary_message(summary: BalanceSummary) -> str:
    count = summary.transactions_today
    return (
        f"Today: {format_amount(summary.spent_today, summary.currency)} in "
        f"{count} transaction{'' if count == 1 else 's'}. "
        f"Remaining: {format_amount(summary.current_balance, summary.currency)}"
    )


def collect_alerts(
    trip: Trip,
    summary: BalanceSummary,
    rates: Optional[RatesResult] = None,
    *,
    daily_summary: bool = False,
) -> List[Dict[str, Any]]:
    alerts: List[Dict[str, Any]] = []

    if summary.status in ("warning", "critical"):
        if summary.status == "critical":
            alert = {
                "type": "budget",
                "level": "critical",
                "title": "Budget Alert - Critical",
                "message": f"Your {trip.name} budget is critically low! Consider reviewing your expenses.",
            }
        else:
            alert = {
                "type": "budget",
                "level": "warning",
                "title": "Budget Alert - Warning",
                "message": f"You're getting close to your {trip.name} budget limit.",
            }
        body = budget_body(summary)
        if body:
            alert["body"] = body
        alerts.append(alert)

    if daily_summary:
        alerts.append(
            {
                "type": "daily_summary",
                "level": "info",
                "title": "Daily Spending Summary",
                "message": daily_summary_message(summary),
            }
        )

    if rates is not None:
        if not rates.success:
            source = "cached" if rates.cached else "offline"
            alerts.append(
                {
                    "type": "rates",
                    "level": "warning",
                    "title": "Exchange rates unavailable",
                    "message": f"Using {source} exchange rates: {rates.error or 'refresh failed'}",
                }
            )
        elif rates.stale:
            alerts.append(
                {
                    "type": "rates",
                    "level": "warning",
                    "title": "Exchange rates outdated",
                    "message": f"Rates last refreshed {rates.table.fetched_at.isoformat()}",
                }
            )

    return alerts


__all__ = ["budget_body", "collect_alerts", "daily_summary_message"]
