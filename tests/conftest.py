"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from session_costs.config import Settings
from session_costs.containers import AppContainer
from session_costs.domain.costs import CostEntry
from session_costs.domain.models import Photographer, School, Session, TimeEntry
from session_costs.domain.timekeeping import to_date
from session_costs.services.backfill import BackfillService
from session_costs.services.costing import (
    PhotographerRepository,
    SchoolRepository,
    SessionCostService,
    SessionRepository,
    TimeEntryRepository,
)
from session_costs.services.triggers import CostTriggerService


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[str, Session] = field(default_factory=dict)
    recorded: list[tuple[str, CostEntry]] = field(default_factory=list)
    fail_listing: bool = False

    def add(self, session: Session) -> Session:
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self.sessions.get(session_id)

    def list_sessions_for_photographer(
        self, photographer_id: str, since: date
    ) -> list[Session]:
        self._check_listing()
        return [
            session
            for session in self.sessions.values()
            if session.photographer_id == photographer_id
            and _on_or_after(session, since)
        ]

    def list_sessions_for_school(self, school_id: str, since: date) -> list[Session]:
        self._check_listing()
        return [
            session
            for session in self.sessions.values()
            if session.school_id == school_id and _on_or_after(session, since)
        ]

    def list_sessions_for_organization(
        self, organization_id: str, start: date, end: date
    ) -> list[Session]:
        self._check_listing()
        return [
            session
            for session in self.sessions.values()
            if session.organization_id == organization_id
            and (session_day := to_date(session.date)) is not None
            and start <= session_day <= end
        ]

    def record_cost(self, session_id: str, entry: CostEntry) -> None:
        self.recorded.append((session_id, entry))

    def _check_listing(self) -> None:
        if self.fail_listing:
            raise RuntimeError("database unavailable")


def _on_or_after(session: Session, since: date) -> bool:
    session_day = to_date(session.date)
    return session_day is not None and session_day >= since


@dataclass
class InMemoryPhotographerRepository(PhotographerRepository):
    """In-memory photographer repository for tests."""

    photographers: dict[str, Photographer] = field(default_factory=dict)

    def add(self, photographer: Photographer) -> Photographer:
        self.photographers[photographer.id] = photographer
        return photographer

    def get_photographer(self, photographer_id: str) -> Photographer | None:
        return self.photographers.get(photographer_id)


@dataclass
class InMemorySchoolRepository(SchoolRepository):
    """In-memory school repository; ids in ``broken`` raise on lookup."""

    schools: dict[str, School] = field(default_factory=dict)
    broken: set[str] = field(default_factory=set)

    def add(self, school: School) -> School:
        self.schools[school.id] = school
        return school

    def get_school(self, school_id: str) -> School | None:
        if school_id in self.broken:
            raise RuntimeError(f"lookup failed for {school_id}")
        return self.schools.get(school_id)


@dataclass
class InMemoryTimeEntryRepository(TimeEntryRepository):
    """In-memory time entry repository for tests."""

    entries: list[TimeEntry] = field(default_factory=list)
    queries: list[tuple[str, datetime, datetime]] = field(default_factory=list)

    def list_time_entries(
        self, user_id: str, week_start: datetime, week_end: datetime
    ) -> list[TimeEntry]:
        self.queries.append((user_id, week_start, week_end))
        return [
            entry
            for entry in self.entries
            if entry.owner_id == user_id
            and (entry_day := to_date(entry.date)) is not None
            and week_start.date() <= entry_day <= week_end.date()
        ]


HOME = "40.0,-75.0"
SCHOOL_COORDINATES = "40.1,-75.0"


def make_photographer(**overrides: object) -> Photographer:
    values: dict[str, object] = {
        "id": "photographer-1",
        "compensation_type": "hourly",
        "hourly_rate": 20.0,
        "amount_per_mile": 0.5,
        "home_address": HOME,
        "display_name": "Pat Lee",
    }
    values.update(overrides)
    return Photographer(**values)  # type: ignore[arg-type]


def make_school(**overrides: object) -> School:
    values: dict[str, object] = {"id": "school-1", "coordinates": SCHOOL_COORDINATES}
    values.update(overrides)
    return School(**values)  # type: ignore[arg-type]


def make_session(**overrides: object) -> Session:
    values: dict[str, object] = {
        "id": "session-1",
        "photographer_id": "photographer-1",
        "school_id": "school-1",
        "date": date(2024, 3, 8),
        "start_time": "08:00",
        "end_time": "12:00",
        "organization_id": "org-1",
    }
    values.update(overrides)
    return Session(**values)  # type: ignore[arg-type]


def make_time_entry(
    entry_id: str,
    day: date,
    clock_in: str,
    clock_out: str,
    **overrides: object,
) -> TimeEntry:
    values: dict[str, object] = {
        "id": entry_id,
        "user_id": "photographer-1",
        "date": day,
        "clock_in_time": datetime.fromisoformat(f"{day.isoformat()}T{clock_in}"),
        "clock_out_time": datetime.fromisoformat(f"{day.isoformat()}T{clock_out}"),
    }
    values.update(overrides)
    return TimeEntry(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        webhook_secret="webhook-secret",
    )


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def photographer_repository() -> InMemoryPhotographerRepository:
    return InMemoryPhotographerRepository()


@pytest.fixture
def school_repository() -> InMemorySchoolRepository:
    return InMemorySchoolRepository()


@pytest.fixture
def time_entry_repository() -> InMemoryTimeEntryRepository:
    return InMemoryTimeEntryRepository()


@pytest.fixture
def cost_service(
    session_repository: InMemorySessionRepository,
    photographer_repository: InMemoryPhotographerRepository,
    school_repository: InMemorySchoolRepository,
    time_entry_repository: InMemoryTimeEntryRepository,
) -> SessionCostService:
    return SessionCostService(
        session_repository=session_repository,
        photographer_repository=photographer_repository,
        school_repository=school_repository,
        time_entry_repository=time_entry_repository,
    )


@pytest.fixture
def container(settings: Settings, cost_service: SessionCostService) -> AppContainer:
    return AppContainer(
        settings=settings,
        cost_service=cost_service,
        trigger_service=CostTriggerService(cost_service),
        backfill_service=BackfillService(cost_service),
    )
