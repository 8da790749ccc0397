# habit_engine/utils/datetime_utils.py

from datetime import datetime, date, timedelta, tzinfo
from typing import Optional, Union

import pytz

DEFAULT_TIMEZONE = "UTC"

WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

DateLike = Union[date, datetime, str]


def get_timezone(name: Optional[str] = None) -> tzinfo:
    return pytz.timezone(name or DEFAULT_TIMEZONE)


def weekday_key(day: date) -> str:
    """'mon'..'sun' for the given calendar day"""
    return WEEKDAY_KEYS[day.weekday()]


def week_start(day: date) -> date:
    """Most recent Sunday at or before `day`"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def parse_iso(value: str) -> Union[date, datetime]:
    """Parse an ISO-8601 date or date-time string.

    Accepts the trailing 'Z' produced by JavaScript's toISOString().
    """
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def to_calendar_date(value: DateLike, tz: Optional[tzinfo] = None) -> date:
    """Reduce a date, datetime or ISO string to its calendar day.

    Aware datetimes are converted into `tz` first so that a completion
    stamped late in the evening lands on the local day it was made.
    """
    if isinstance(value, str):
        value = parse_iso(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Cannot interpret {value!r} as a calendar date")


def ensure_aware(value: datetime, tz: tzinfo) -> datetime:
    """Attach tz to a naive datetime, leaving aware ones alone"""
    if value.tzinfo is not None:
        return value
    if hasattr(tz, "localize"):
        return tz.localize(value)
    return value.replace(tzinfo=tz)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, rounded up"""
    seconds = abs((end - start).total_seconds())
    days, remainder = divmod(seconds, 86400)
    return int(days) + (1 if remainder else 0)
