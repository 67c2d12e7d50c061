"""Parse Supabase rows into domain models."""

from datetime import datetime
from zoneinfo import ZoneInfo

from session_costs.domain.models import Photographer, School, Session, TimeEntry
from session_costs.domain.timekeeping import to_date


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def parse_session_row(row: dict[str, object]) -> Session:
    """Build a session from a ``sessions`` row."""
    return Session(
        id=str(row.get("id", "")),
        photographer_id=_optional_str(row.get("photographer_id")),
        school_id=_optional_str(row.get("school_id")),
        date=to_date(row.get("date")),
        start_time=_optional_str(row.get("start_time")),
        end_time=_optional_str(row.get("end_time")),
        is_time_off=bool(row.get("is_time_off") or False),
        organization_id=_optional_str(row.get("organization_id")),
        cost=_optional_float(row.get("cost")),
    )


def parse_photographer_row(row: dict[str, object]) -> Photographer:
    """Build a photographer from a ``users`` row."""
    return Photographer(
        id=str(row.get("id", "")),
        compensation_type=_optional_str(row.get("compensation_type")),
        hourly_rate=_optional_float(row.get("hourly_rate")),
        salary_amount=_optional_float(row.get("salary_amount")),
        overtime_threshold=_optional_float(row.get("overtime_threshold")),
        amount_per_mile=_optional_float(row.get("amount_per_mile")),
        home_address=_optional_str(row.get("home_address")),
        display_name=_optional_str(row.get("display_name")),
        first_name=_optional_str(row.get("first_name")),
        last_name=_optional_str(row.get("last_name")),
    )


def parse_school_row(row: dict[str, object]) -> School:
    """Build a school from a ``schools`` row."""
    return School(
        id=str(row.get("id", "")),
        coordinates=_optional_str(row.get("coordinates")),
        school_address=_optional_str(row.get("school_address")),
    )


def parse_time_entry_row(row: dict[str, object], tz: ZoneInfo) -> TimeEntry:
    """Build a time entry, moving clock times to local wall-clock time."""
    return TimeEntry(
        id=str(row.get("id", "")),
        user_id=_optional_str(row.get("user_id")),
        photographer_id=_optional_str(row.get("photographer_id")),
        session_id=_optional_str(row.get("session_id")),
        date=to_date(row.get("date")),
        clock_in_time=_local_clock(row.get("clock_in_time"), tz),
        clock_out_time=_local_clock(row.get("clock_out_time"), tz),
    )


def _local_clock(value: object, tz: ZoneInfo) -> datetime | None:
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    elif isinstance(value, datetime):
        parsed = value
    else:
        return None
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(tz).replace(tzinfo=None)
