"""Fetch, calculate and persist the cost of a single session."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum
from typing import Protocol

from session_costs.domain.costs import (
    CostBreakdown,
    CostEntry,
    calculate_total_session_cost,
)
from session_costs.domain.models import Photographer, School, Session, TimeEntry
from session_costs.domain.timekeeping import get_week_end, get_week_start

_logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for sessions and their cost history."""

    def get_session(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""

    def list_sessions_for_photographer(
        self, photographer_id: str, since: date
    ) -> list[Session]:
        """Return the photographer's sessions dated on or after ``since``."""

    def list_sessions_for_school(self, school_id: str, since: date) -> list[Session]:
        """Return the school's sessions dated on or after ``since``."""

    def list_sessions_for_organization(
        self, organization_id: str, start: date, end: date
    ) -> list[Session]:
        """Return an organization's sessions dated within ``[start, end]``."""

    def record_cost(self, session_id: str, entry: CostEntry) -> None:
        """Append a cost entry and refresh the legacy cost mirror."""


class PhotographerRepository(Protocol):
    """Read access to photographer compensation profiles."""

    def get_photographer(self, photographer_id: str) -> Photographer | None:
        """Return a photographer by id, if present."""


class SchoolRepository(Protocol):
    """Read access to school locations."""

    def get_school(self, school_id: str) -> School | None:
        """Return a school by id, if present."""


class TimeEntryRepository(Protocol):
    """Read access to time-clock entries."""

    def list_time_entries(
        self, user_id: str, week_start: datetime, week_end: datetime
    ) -> list[TimeEntry]:
        """Return the user's entries dated within the week."""


class SessionNotFoundError(LookupError):
    """Raised when a session id does not exist."""


class PhotographerNotFoundError(LookupError):
    """Raised when a session references a missing photographer."""


class SchoolNotFoundError(LookupError):
    """Raised when a session references a missing school."""


class SessionNotCostableError(ValueError):
    """Raised when a session lacks the fields needed for costing."""


class CostStatus(Enum):
    """Result of processing one session."""

    UPDATED = "updated"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class CostOutcome:
    """Outcome of processing one session."""

    session_id: str
    status: CostStatus
    reason: str | None = None
    breakdown: CostBreakdown | None = None
    dry_run: bool = False


@dataclass
class SessionCostService:
    """Application service that costs sessions through injected repositories."""

    session_repository: SessionRepository
    photographer_repository: PhotographerRepository
    school_repository: SchoolRepository
    time_entry_repository: TimeEntryRepository

    def calculate(
        self, session: Session, photographer: Photographer, school: School
    ) -> CostBreakdown:
        """Compute the cost breakdown using the photographer's week of entries."""
        week_start = get_week_start(session.date)
        week_end = get_week_end(session.date)
        time_entries: list[TimeEntry] = []
        if week_start is not None and week_end is not None:
            time_entries = self.time_entry_repository.list_time_entries(
                photographer.id, week_start, week_end
            )
            _logger.info(
                "Found time entries: session_id=%s count=%s week_start=%s",
                session.id,
                len(time_entries),
                week_start.date().isoformat(),
            )
        return calculate_total_session_cost(session, photographer, school, time_entries)

    def process_session(
        self,
        session: Session,
        calculated_by: str,
        *,
        photographer: Photographer | None = None,
        school: School | None = None,
        dry_run: bool = False,
    ) -> CostOutcome:
        """Cost a session and persist the result, never raising.

        ``photographer`` or ``school`` may be supplied when the caller already
        holds the fresh record, as the dependency-change triggers do.
        """
        reason = session.skip_reason()
        if reason is not None:
            _logger.info(
                "Skipping session: session_id=%s reason=%s missing=%s",
                session.id,
                reason,
                session.missing_fields(),
            )
            return CostOutcome(session.id, CostStatus.SKIPPED, reason=reason)

        try:
            if photographer is None:
                photographer = self.photographer_repository.get_photographer(
                    str(session.photographer_id)
                )
            if photographer is None:
                _logger.error(
                    "Photographer not found: session_id=%s photographer_id=%s",
                    session.id,
                    session.photographer_id,
                )
                return CostOutcome(
                    session.id, CostStatus.ERROR, reason="photographer-not-found"
                )
            if school is None:
                school = self.school_repository.get_school(str(session.school_id))
            if school is None:
                _logger.error(
                    "School not found: session_id=%s school_id=%s",
                    session.id,
                    session.school_id,
                )
                return CostOutcome(
                    session.id, CostStatus.ERROR, reason="school-not-found"
                )
            breakdown = self._calculate_and_record(
                session, photographer, school, calculated_by, dry_run=dry_run
            )
        except Exception as exc:
            _logger.exception(
                "Failed to calculate session cost: session_id=%s", session.id
            )
            return CostOutcome(
                session.id, CostStatus.ERROR, reason=str(exc) or type(exc).__name__
            )
        return CostOutcome(
            session.id, CostStatus.UPDATED, breakdown=breakdown, dry_run=dry_run
        )

    def recalculate_session(self, session_id: str) -> CostOutcome:
        """Recalculate one session on request, raising for bad references."""
        session = self.session_repository.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        if session.is_time_off:
            return CostOutcome(session.id, CostStatus.SKIPPED, reason="time-off")
        missing = session.missing_fields()
        if missing:
            raise SessionNotCostableError(
                f"Session missing required fields: {', '.join(missing)}"
            )
        photographer = self.photographer_repository.get_photographer(
            str(session.photographer_id)
        )
        if photographer is None:
            raise PhotographerNotFoundError(
                f"Photographer {session.photographer_id} not found"
            )
        school = self.school_repository.get_school(str(session.school_id))
        if school is None:
            raise SchoolNotFoundError(f"School {session.school_id} not found")

        breakdown = self._calculate_and_record(
            session, photographer, school, "server-manual-recalculate"
        )
        return CostOutcome(session.id, CostStatus.UPDATED, breakdown=breakdown)

    def _calculate_and_record(
        self,
        session: Session,
        photographer: Photographer,
        school: School,
        calculated_by: str,
        *,
        dry_run: bool = False,
    ) -> CostBreakdown:
        breakdown = self.calculate(session, photographer, school)
        _logger.info(
            "Calculated session cost: session_id=%s total=%s labor=%s mileage=%s "
            "overtime=%s",
            session.id,
            breakdown.total_cost,
            breakdown.labor_cost,
            breakdown.mileage_cost,
            breakdown.is_overtime_shift,
        )
        if dry_run:
            return breakdown
        entry = CostEntry(
            photographer_id=photographer.id,
            photographer_name=photographer.name,
            breakdown=breakdown,
            calculated_at=datetime.now(tz=UTC),
            calculated_by=calculated_by,
        )
        self.session_repository.record_cost(session.id, entry)
        return breakdown
