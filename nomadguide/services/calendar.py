"""Calendar-day arithmetic for trips and recurring transactions.

Every function works on `datetime.date`. Datetimes are truncated to their
calendar date first (`as_date`), so time-of-day never leaks into a day count.
Out-of-range inputs (end before start) clamp to 0 or a boundary value instead
of raising; these numbers feed display code that must not crash.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union
from zoneinfo import ZoneInfo

from nomadguide.models.constants import FREQUENCY_DAYS, Frequency

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def today(tz: Optional[ZoneInfo] = None) -> date:
    """Current calendar date in `tz` (settings timezone by default)."""
    if tz is None:
        from nomadguide.core.config import get_settings

        tz = get_settings().tz
    return datetime.now(tz).date()


def days_between(start: DateLike, end: DateLike) -> int:
    """Signed number of calendar days from `start` to `end`."""
    return (as_date(end) - as_date(start)).days


def occurrences_between(
    frequency: Union[Frequency, str], window_start: DateLike, window_end: DateLike
) -> int:
    """Number of recurrences of `frequency` that fit in the window.

    Each step is a fixed number of days (monthly = 30), counted with floor
    division over the day span. A reversed window yields 0.
    """
    days = days_between(window_start, window_end)
    if days <= 0:
        return 0
    step = FREQUENCY_DAYS[Frequency(frequency)]
    return days // step


def trip_progress_percent(start: DateLike, end: DateLike, as_of: DateLike) -> int:
    start, end, as_of = as_date(start), as_date(end), as_date(as_of)
    if as_of < start:
        return 0
    if as_of > end:
        return 100
    total = (end - start).days
    if total <= 0:
        # single-day trip already started
        return 100
    elapsed = (as_of - start).days
    ratio = Decimal(100 * elapsed) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_active_today(start: DateLike, end: DateLike, as_of: DateLike) -> bool:
    return as_date(start) <= as_date(as_of) <= as_date(end)


def trip_duration_days(start: DateLike, end: DateLike) -> int:
    """Inclusive length of a trip; both start and end day count."""
    return abs(days_between(start, end)) + 1


def days_remaining(end: DateLike, as_of: DateLike) -> int:
    return max(0, days_between(as_of, end))


def next_recurrence_date(last: DateLike, frequency: Union[Frequency, str]) -> date:
    return as_date(last) + timedelta(days=FREQUENCY_DAYS[Frequency(frequency)])


def is_today(value: DateLike, as_of: DateLike) -> bool:
    return as_date(value) == as_date(as_of)


def time_ago_label(value: DateLike, as_of: DateLike) -> str:
    days = days_between(value, as_of)
    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        weeks = days // 7
        return f"{weeks} week{'s' if weeks > 1 else ''} ago"
    if days < 365:
        months = days // 30
        return f"{months} month{'s' if months > 1 else ''} ago"
    years = days // 365
    return f"{years} year{'s' if years > 1 else ''} ago"
