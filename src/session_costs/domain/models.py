"""Domain models for sessions, photographers, schools and time entries."""

from dataclasses import dataclass
from enum import Enum

from session_costs.domain.timekeeping import DateLike

REQUIRED_SESSION_FIELDS = (
    "photographer_id",
    "school_id",
    "date",
    "start_time",
    "end_time",
)

# Fields whose change invalidates previously computed costs.
SESSION_COST_FIELDS = REQUIRED_SESSION_FIELDS + ("is_time_off",)
PHOTOGRAPHER_COST_FIELDS = (
    "hourly_rate",
    "salary_amount",
    "compensation_type",
    "overtime_threshold",
    "amount_per_mile",
    "home_address",
)
SCHOOL_LOCATION_FIELDS = ("coordinates", "school_address")


class CompensationType(Enum):
    """Supported photographer pay models."""

    HOURLY = "hourly"
    SALARY = "salary"
    SALARY_WITH_OVERTIME = "salary_with_overtime"


def first_present(*values: object) -> object | None:
    """Return the first value that is neither None nor an empty string.

    Every legacy field fallback goes through this helper, in the order
    listed on the owning model:

    * ``School.location``: ``coordinates`` then ``school_address``.
    * ``Photographer.name``: ``display_name`` then ``first_name last_name``.
    * ``TimeEntry.owner_id``: ``user_id`` then ``photographer_id``.
    """
    for value in values:
        if value is not None and value != "":
            return value
    return None


def changed_fields(
    before: object, after: object, fields: tuple[str, ...]
) -> list[str]:
    """Return the names of ``fields`` whose values differ between two records."""
    return [
        name
        for name in fields
        if getattr(before, name, None) != getattr(after, name, None)
    ]


@dataclass(frozen=True)
class Session:
    """A scheduled unit of work for one photographer at one school."""

    id: str
    photographer_id: str | None
    school_id: str | None
    date: DateLike | None
    start_time: str | None
    end_time: str | None
    is_time_off: bool = False
    organization_id: str | None = None
    cost: float | None = None

    def missing_fields(self) -> list[str]:
        """Return required fields that are empty."""
        return [name for name in REQUIRED_SESSION_FIELDS if not getattr(self, name)]

    def skip_reason(self) -> str | None:
        """Return why this session cannot be costed, if it cannot."""
        if self.is_time_off:
            return "time-off"
        if self.missing_fields():
            return "missing-fields"
        return None


@dataclass(frozen=True)
class Photographer:
    """Compensation profile of a photographer."""

    id: str
    compensation_type: str | None = None
    hourly_rate: float | None = None
    salary_amount: float | None = None
    overtime_threshold: float | None = None
    amount_per_mile: float | None = None
    home_address: str | None = None
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @property
    def name(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return str(first_present(self.display_name, full_name) or "")


@dataclass(frozen=True)
class School:
    """School location used as the mileage destination."""

    id: str
    coordinates: str | None = None
    school_address: str | None = None

    @property
    def location(self) -> str | None:
        location = first_present(self.coordinates, self.school_address)
        return None if location is None else str(location)


@dataclass(frozen=True)
class TimeEntry:
    """Raw time-clock record competing for the weekly hour budget."""

    id: str
    date: DateLike | None
    clock_in_time: DateLike | None
    clock_out_time: DateLike | None
    user_id: str | None = None
    photographer_id: str | None = None
    session_id: str | None = None

    @property
    def owner_id(self) -> str | None:
        owner = first_present(self.user_id, self.photographer_id)
        return None if owner is None else str(owner)


@dataclass(frozen=True)
class Shift:
    """Worked interval normalized to wall-clock ``HH:MM`` strings."""

    photographer_id: str | None
    date: DateLike | None
    start_time: str
    end_time: str
    source_id: str | None = None
