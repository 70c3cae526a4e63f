"""Date utilities for safespend.

Pure functions for month keys, day counts and formatting. Nothing here reads
the system clock: callers pass ``today`` in.
"""

import calendar
from datetime import date, datetime

from safespend.domain.models import Month


def month_key_of(value: date) -> Month:
    """Format a date (or datetime) as a zero-padded YYYY-MM month key."""
    return Month(f"{value.year:04d}-{value.month:02d}")


def parse_month_key(month: str) -> date | None:
    """Parse a YYYY-MM month key to the first day of that month.

    Returns:
        First day of the month, or None if the key is malformed.
    """
    try:
        return datetime.strptime(month.strip(), "%Y-%m").date()
    except (AttributeError, ValueError):
        return None


def parse_iso_date(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD date or ISO timestamp string to a date.

    Returns:
        The calendar date, or None if the value is empty or unparseable.
    """
    if not value:
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def next_month_key(month: Month, today: date) -> Month:
    """Get the month key following ``month``.

    Args:
        month: Month in YYYY-MM format.
        today: Used as the answer when ``month`` can't be parsed.

    Returns:
        Next month key (December rolls into January of the next year).
    """
    first = parse_month_key(month)
    if first is None:
        return month_key_of(today)
    if first.month == 12:
        return month_key_of(first.replace(year=first.year + 1, month=1))
    return month_key_of(first.replace(month=first.month + 1))


def month_label(month: Month) -> str:
    """Human-readable month (e.g., "January 2025"); malformed keys are returned unchanged."""
    first = parse_month_key(month)
    if first is None:
        return month
    return first.strftime("%B %Y")


def remaining_days_in_month(today: date) -> int:
    """Days left in today's month, counting today. Never less than 1."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return max(last_day - today.day + 1, 1)
