"""Clock-time and pay-week helpers.

Dates reach the cost engine as ISO strings, ``date``/``datetime`` objects or
timestamp wrappers exposing ``to_date()``. ``to_datetime`` is the only place
that tells them apart; everything else works on naive datetimes.
"""

from datetime import date, datetime, time, timedelta
from typing import Protocol

_REFERENCE_DAY = date(2000, 1, 1)
_CLOCK_FORMATS = ("%H:%M", "%H:%M:%S")
_SECONDS_PER_HOUR = 3600
_DAYS_PER_WEEK = 7


class TimestampLike(Protocol):
    """Timestamp wrapper as returned by document stores."""

    def to_date(self) -> datetime:
        """Return the wrapped value as a datetime."""


DateLike = str | date | datetime | TimestampLike


def to_datetime(value: object) -> datetime | None:
    """Normalize a date-like value to a naive datetime.

    Date-only strings are read as local midnight. Aware datetimes keep their
    wall-clock value. Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    unwrap = getattr(value, "to_date", None)
    if callable(unwrap):
        value = unwrap()
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).replace(tzinfo=None)
        except ValueError:
            return None
    return None


def to_date(value: object) -> date | None:
    """Normalize a date-like value to a calendar date."""
    moment = to_datetime(value)
    return moment.date() if moment else None


def _parse_clock(value: str) -> datetime | None:
    for fmt in _CLOCK_FORMATS:
        try:
            parsed = datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
        return datetime.combine(_REFERENCE_DAY, parsed)
    return None


def calculate_hours(start_time: str | None, end_time: str | None) -> float:
    """Return decimal hours between two ``HH:MM`` times on the same day.

    An end time at or before the start time yields 0; spans never wrap past
    midnight.
    """
    if not start_time or not end_time:
        return 0.0
    start = _parse_clock(start_time)
    end = _parse_clock(end_time)
    if start is None or end is None:
        return 0.0
    hours = (end - start).total_seconds() / _SECONDS_PER_HOUR
    return hours if hours > 0 else 0.0


def get_week_start(value: object) -> datetime | None:
    """Return Sunday 00:00:00.000 of the week containing ``value``."""
    moment = to_datetime(value)
    if moment is None:
        return None
    # datetime.weekday() counts from Monday; pay weeks start on Sunday.
    days_since_sunday = (moment.weekday() + 1) % _DAYS_PER_WEEK
    return datetime.combine(moment.date() - timedelta(days=days_since_sunday), time.min)


def get_week_end(value: object) -> datetime | None:
    """Return Saturday 23:59:59.999 of the week containing ``value``."""
    week_start = get_week_start(value)
    if week_start is None:
        return None
    return (week_start + timedelta(days=_DAYS_PER_WEEK - 1)).replace(
        hour=23, minute=59, second=59, microsecond=999000
    )


def format_clock_time(value: object) -> str | None:
    """Format a date-like value as a wall-clock ``HH:MM`` string."""
    moment = to_datetime(value)
    if moment is None:
        return None
    return f"{moment.hour:02d}:{moment.minute:02d}"
