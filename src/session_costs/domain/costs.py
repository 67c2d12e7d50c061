"""Session cost engine: labor, overtime apportionment and mileage.

All functions here are pure. Missing or malformed inputs produce zeroed
results instead of errors, since callers run inside write triggers.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from session_costs.domain.geo import calculate_distance, parse_coordinates
from session_costs.domain.models import (
    CompensationType,
    Photographer,
    School,
    Session,
    Shift,
    TimeEntry,
)
from session_costs.domain.timekeeping import (
    calculate_hours,
    format_clock_time,
    get_week_end,
    get_week_start,
    to_date,
)

DEFAULT_OVERTIME_THRESHOLD = 40
SALARY_NOTE = "Salaried - included in base pay"
WITHIN_THRESHOLD_NOTE = "Within salary threshold"


@dataclass(frozen=True)
class LaborCost:
    """Labor cost of a single session."""

    hours: float = 0.0
    regular_pay: float = 0.0
    overtime_pay: float = 0.0
    is_overtime_shift: bool = False
    total_cost: float = 0.0
    overtime_hours: float | None = None
    regular_hours: float | None = None
    weekly_hours_before: float | None = None
    note: str | None = None


@dataclass(frozen=True)
class CostBreakdown:
    """Labor plus mileage cost for one session/photographer pairing."""

    distance: float
    mileage_rate: float
    mileage_cost: float
    hours: float
    labor_cost: float
    regular_pay: float
    overtime_pay: float
    is_overtime_shift: bool
    compensation_type: str | None
    hourly_rate: float | None
    salary_amount: float | None
    total_cost: float

    def legacy_summary(self) -> dict[str, object]:
        """Return the single-photographer ``cost_breakdown`` mirror."""
        return {
            "labor_cost": self.labor_cost,
            "mileage_cost": self.mileage_cost,
            "distance": self.distance,
            "hours": self.hours,
            "is_overtime_shift": self.is_overtime_shift,
        }


@dataclass(frozen=True)
class CostEntry:
    """Cost breakdown stamped with who it belongs to and when it was made."""

    photographer_id: str
    photographer_name: str
    breakdown: CostBreakdown
    calculated_at: datetime
    calculated_by: str

    def to_dict(self) -> dict[str, object]:
        """Serialize for the append-only ``costs`` history."""
        return {
            "photographer_id": self.photographer_id,
            "photographer_name": self.photographer_name,
            **asdict(self.breakdown),
            "calculated_at": self.calculated_at.isoformat(),
            "calculated_by": self.calculated_by,
        }


def round_to(value: float, places: int) -> float:
    """Round half away from zero to ``places`` decimals."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_session_distance(
    photographer: Photographer | None, school: School | None, unit: str = "miles"
) -> float:
    """Return the round-trip distance from home to school, or 0."""
    if photographer is None or school is None:
        return 0.0
    home = parse_coordinates(photographer.home_address)
    if home is None:
        return 0.0
    destination = parse_coordinates(school.location)
    if destination is None:
        return 0.0
    one_way = calculate_distance(
        home.lat, home.lng, destination.lat, destination.lng, unit
    )
    return round_to(one_way * 2, 1)


def calculate_session_mileage_cost(
    distance: float | None, mileage_rate: float | None
) -> float:
    """Return the mileage reimbursement in dollars."""
    if not distance or not mileage_rate:
        return 0.0
    return round_to(distance * mileage_rate, 2)


def calculate_session_cost(
    session: Session | None,
    employee: Photographer | None,
    sessions_in_period: Iterable[Session | Shift] = (),
) -> LaborCost:
    """Return the labor cost of a session for the employee's pay model.

    ``sessions_in_period`` holds the employee's other shifts. Only
    ``salary_with_overtime`` looks at them: shifts in the same Sunday-Saturday
    week on an earlier calendar date count toward the overtime threshold.
    Shifts on the same date as the session never do.
    """
    if session is None or employee is None:
        return LaborCost()

    session_hours = calculate_hours(session.start_time, session.end_time)
    compensation = employee.compensation_type
    rate = employee.hourly_rate or 0

    if compensation == CompensationType.HOURLY.value:
        cost = session_hours * rate
        return LaborCost(hours=session_hours, regular_pay=cost, total_cost=cost)

    if compensation == CompensationType.SALARY.value:
        return LaborCost(hours=session_hours, note=SALARY_NOTE)

    if compensation != CompensationType.SALARY_WITH_OVERTIME.value:
        return LaborCost(hours=session_hours)

    threshold = employee.overtime_threshold or DEFAULT_OVERTIME_THRESHOLD
    hours_before = _hours_before_session(session, employee.id, sessions_in_period)
    hours_after = hours_before + session_hours

    if hours_before >= threshold:
        overtime_pay = session_hours * rate
        return LaborCost(
            hours=session_hours,
            overtime_pay=overtime_pay,
            is_overtime_shift=True,
            total_cost=overtime_pay,
            overtime_hours=session_hours,
            regular_hours=0.0,
            weekly_hours_before=hours_before,
        )
    if hours_after > threshold:
        # Hours up to the threshold are covered by the base salary.
        regular_hours = threshold - hours_before
        overtime_hours = session_hours - regular_hours
        overtime_pay = overtime_hours * rate
        return LaborCost(
            hours=session_hours,
            overtime_pay=overtime_pay,
            is_overtime_shift=True,
            total_cost=overtime_pay,
            overtime_hours=overtime_hours,
            regular_hours=regular_hours,
            weekly_hours_before=hours_before,
        )
    return LaborCost(
        hours=session_hours,
        overtime_hours=0.0,
        regular_hours=session_hours,
        weekly_hours_before=hours_before,
        note=WITHIN_THRESHOLD_NOTE,
    )


def _hours_before_session(
    session: Session, employee_id: str, shifts: Iterable[Session | Shift]
) -> float:
    session_day = to_date(session.date)
    week_start = get_week_start(session.date)
    week_end = get_week_end(session.date)
    if session_day is None or week_start is None or week_end is None:
        return 0.0

    total = 0.0
    for shift in shifts:
        if shift.photographer_id != employee_id:
            continue
        shift_day = to_date(shift.date)
        if shift_day is None:
            continue
        if week_start.date() <= shift_day < session_day:
            total += calculate_hours(shift.start_time, shift.end_time)
    return total


def time_entry_to_shift(entry: TimeEntry | None) -> Shift | None:
    """Convert a clock-in/clock-out record to a ``HH:MM`` shift."""
    if entry is None or not entry.clock_in_time or not entry.clock_out_time:
        return None
    start_time = format_clock_time(entry.clock_in_time)
    end_time = format_clock_time(entry.clock_out_time)
    if start_time is None or end_time is None:
        return None
    return Shift(
        photographer_id=entry.owner_id,
        date=entry.date,
        start_time=start_time,
        end_time=end_time,
        source_id=entry.id,
    )


def calculate_session_labor_cost(
    session: Session | None,
    photographer: Photographer | None,
    time_entries: Iterable[TimeEntry] = (),
) -> LaborCost:
    """Return labor cost using the photographer's time entries for the week.

    Entries recorded against the session itself are ignored so a session
    never counts toward its own overtime.
    """
    if session is None or photographer is None:
        return LaborCost()

    shifts = []
    for entry in time_entries:
        if entry.owner_id != photographer.id or entry.session_id == session.id:
            continue
        shift = time_entry_to_shift(entry)
        if shift is not None:
            shifts.append(shift)
    return calculate_session_cost(session, photographer, shifts)


def calculate_total_session_cost(
    session: Session | None,
    photographer: Photographer | None,
    school: School | None,
    time_entries: Iterable[TimeEntry] = (),
) -> CostBreakdown:
    """Compose mileage and labor cost into one breakdown."""
    distance = calculate_session_distance(photographer, school)
    mileage_rate = (photographer.amount_per_mile if photographer else None) or 0.0
    mileage_cost = calculate_session_mileage_cost(distance, mileage_rate)
    labor = calculate_session_labor_cost(session, photographer, time_entries)
    hours = calculate_hours(session.start_time, session.end_time) if session else 0.0

    return CostBreakdown(
        distance=distance,
        mileage_rate=mileage_rate,
        mileage_cost=mileage_cost,
        hours=hours,
        labor_cost=labor.total_cost,
        regular_pay=labor.regular_pay,
        overtime_pay=labor.overtime_pay,
        is_overtime_shift=labor.is_overtime_shift,
        compensation_type=photographer.compensation_type if photographer else None,
        hourly_rate=photographer.hourly_rate if photographer else None,
        salary_amount=photographer.salary_amount if photographer else None,
        total_cost=round_to(labor.total_cost + mileage_cost, 2),
    )
