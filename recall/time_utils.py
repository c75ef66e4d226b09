"""
Time helpers shared by the engine and the review driver.

All timestamps in recall are timezone-aware UTC datetimes. Only the end of
the review day depends on a local time zone.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def end_of_day(moment: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Last representable instant of the calendar day containing `moment`.

    Args:
        moment: Any aware or naive-UTC datetime
        tz: Zone whose calendar day counts (defaults to the system local zone)

    Returns:
        That instant, in UTC
    """
    local = ensure_utc(moment).astimezone(tz)
    return local.replace(hour=23, minute=59, second=59, microsecond=999999).astimezone(timezone.utc)


def format_time_difference(future: datetime, now: Optional[datetime] = None) -> str:
    """
    Human-readable time left until `future`.

    Used to label rating buttons with their preview ("10 mins", "4 days").
    Anything under an hour is shown in minutes, never less than "1 min".

    Args:
        future: The moment to describe
        now: Reference time (defaults to now)

    Returns:
        String such as "1 min", "3 hours", "2 weeks"
    """
    if now is None:
        now = utc_now()

    seconds = int((ensure_utc(future) - ensure_utc(now)).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    weeks = days // 7
    months = int(days // 30.44)
    years = int(days // 365.25)

    for amount, singular, plural in (
        (years, "year", "years"),
        (months, "month", "months"),
        (weeks, "week", "weeks"),
        (days, "day", "days"),
        (hours, "hour", "hours"),
    ):
        if amount > 0:
            return f"{amount} {singular if amount == 1 else plural}"

    printed_minutes = max(1, minutes)
    return f"{printed_minutes} {'min' if printed_minutes == 1 else 'mins'}"
