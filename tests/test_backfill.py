"""Tests for the cost backfill service."""

from datetime import UTC, date, datetime, timedelta

import pytest

from session_costs.services.backfill import BackfillRequest, BackfillService
from tests.conftest import make_photographer, make_school, make_session


@pytest.fixture
def backfill(cost_service) -> BackfillService:
    return BackfillService(cost_service, batch_size=2)


@pytest.fixture
def seeded(session_repository, photographer_repository, school_repository) -> None:
    photographer_repository.add(make_photographer())
    school_repository.add(make_school())
    session_repository.add(make_session(id="s1", date=date(2024, 3, 4)))
    session_repository.add(make_session(id="s2", date=date(2024, 3, 5), cost=10.0))
    session_repository.add(
        make_session(id="s3", date=date(2024, 3, 6), is_time_off=True)
    )
    session_repository.add(
        make_session(id="s4", date=date(2024, 3, 7), start_time=None)
    )
    session_repository.add(
        make_session(id="s5", date=date(2024, 3, 8), school_id="missing-school")
    )
    session_repository.add(make_session(id="s6", date=date(2024, 4, 20)))


def _request(**overrides) -> BackfillRequest:
    values = {
        "organization_id": "org-1",
        "start_date": date(2024, 3, 1),
        "end_date": date(2024, 3, 31),
    }
    values.update(overrides)
    return BackfillRequest(**values)


def test_backfill_dry_run_counts_without_writing(
    backfill, session_repository, seeded
) -> None:
    result = backfill.backfill(_request())

    assert result.success is True
    assert result.dry_run is True
    assert result.processed == 5
    assert result.updated == 1
    assert result.skipped == 3
    assert result.errors == 1
    assert session_repository.recorded == []
    assert result.details[0] == "Found 5 sessions in date range"
    assert "Errors: 1" in result.details


def test_backfill_writes_and_tags_entries(backfill, session_repository, seeded) -> None:
    result = backfill.backfill(_request(dry_run=False))

    assert result.updated == 1
    assert [session_id for session_id, _ in session_repository.recorded] == ["s1"]
    assert session_repository.recorded[0][1].calculated_by == "server-backfill"


def test_backfill_force_recalculates_existing_costs(
    backfill, session_repository, seeded
) -> None:
    result = backfill.backfill(_request(dry_run=False, force_recalculate=True))

    assert result.updated == 2
    assert {session_id for session_id, _ in session_repository.recorded} == {"s1", "s2"}


def test_backfill_with_no_sessions(backfill) -> None:
    result = backfill.backfill(_request(organization_id="org-empty"))

    assert result.success is True
    assert result.processed == 0
    assert result.details == [
        "Found 0 sessions in date range",
        "No sessions to process",
    ]


def test_backfill_defaults_to_last_thirty_days(
    backfill, session_repository, photographer_repository, school_repository
) -> None:
    photographer_repository.add(make_photographer())
    school_repository.add(make_school())
    today = datetime.now(tz=UTC).date()
    session_repository.add(make_session(id="recent", date=today - timedelta(days=5)))
    session_repository.add(make_session(id="stale", date=today - timedelta(days=45)))

    result = backfill.backfill(BackfillRequest(organization_id="org-1"))

    assert result.processed == 1
    assert result.updated == 1


def test_backfill_reports_fatal_listing_failure(backfill, session_repository) -> None:
    session_repository.fail_listing = True

    result = backfill.backfill(_request())

    assert result.success is False
    assert result.details == ["Fatal error: database unavailable"]
