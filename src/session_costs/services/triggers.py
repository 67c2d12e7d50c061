"""Recalculate session costs when sessions or their dependencies change."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from session_costs.domain.models import (
    PHOTOGRAPHER_COST_FIELDS,
    SCHOOL_LOCATION_FIELDS,
    SESSION_COST_FIELDS,
    Photographer,
    School,
    Session,
    changed_fields,
)
from session_costs.services.costing import CostOutcome, CostStatus, SessionCostService

_logger = logging.getLogger(__name__)


@dataclass
class RecalculationSummary:
    """Tally of a batch recalculation."""

    total: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0

    def add(self, outcome: CostOutcome) -> None:
        """Count one session outcome."""
        self.total += 1
        if outcome.status is CostStatus.UPDATED:
            self.updated += 1
        elif outcome.status is CostStatus.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1


@dataclass
class CostTriggerService:
    """Entry points invoked by record-change notifications."""

    cost_service: SessionCostService
    active_window_days: int = 30

    def on_session_created(self, session: Session) -> CostOutcome:
        """Cost a newly created session."""
        _logger.info("Session created: session_id=%s", session.id)
        return self.cost_service.process_session(session, "server")

    def on_session_updated(self, before: Session, after: Session) -> CostOutcome | None:
        """Recost a session when a cost-relevant field changed."""
        changed = changed_fields(before, after, SESSION_COST_FIELDS)
        if not changed:
            _logger.info("Session %s updated without cost-relevant changes", after.id)
            return None
        _logger.info("Session updated: session_id=%s changed=%s", after.id, changed)
        return self.cost_service.process_session(after, "server")

    def on_photographer_updated(
        self, before: Photographer, after: Photographer
    ) -> RecalculationSummary | None:
        """Recost the photographer's active sessions after a compensation change."""
        changed = changed_fields(before, after, PHOTOGRAPHER_COST_FIELDS)
        if not changed:
            _logger.info(
                "Photographer %s updated without compensation changes", after.id
            )
            return None
        sessions = self.cost_service.session_repository.list_sessions_for_photographer(
            after.id, self._active_since()
        )
        _logger.info(
            "Photographer compensation changed: photographer_id=%s changed=%s "
            "sessions=%s",
            after.id,
            changed,
            len(sessions),
        )
        summary = self._recalculate(
            sessions, "server-photographer-update", photographer=after
        )
        _logger.info(
            "Recalculated %s/%s sessions for photographer %s",
            summary.updated,
            summary.total,
            after.id,
        )
        return summary

    def on_school_updated(
        self, before: School, after: School
    ) -> RecalculationSummary | None:
        """Recost the school's active sessions after a location change."""
        changed = changed_fields(before, after, SCHOOL_LOCATION_FIELDS)
        if not changed:
            _logger.info("School %s updated without location changes", after.id)
            return None
        sessions = self.cost_service.session_repository.list_sessions_for_school(
            after.id, self._active_since()
        )
        _logger.info(
            "School location changed: school_id=%s sessions=%s", after.id, len(sessions)
        )
        summary = self._recalculate(sessions, "server-school-update", school=after)
        _logger.info(
            "Recalculated %s/%s sessions for school %s",
            summary.updated,
            summary.total,
            after.id,
        )
        return summary

    def _recalculate(
        self,
        sessions: Iterable[Session],
        calculated_by: str,
        *,
        photographer: Photographer | None = None,
        school: School | None = None,
    ) -> RecalculationSummary:
        summary = RecalculationSummary()
        for session in sessions:
            summary.add(
                self.cost_service.process_session(
                    session, calculated_by, photographer=photographer, school=school
                )
            )
        return summary

    def _active_since(self) -> date:
        return (datetime.now(tz=UTC) - timedelta(days=self.active_window_days)).date()
