"""Backfill session costs for an organization over a date range."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

from session_costs.domain.models import Session
from session_costs.services.costing import CostOutcome, CostStatus, SessionCostService

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackfillRequest:
    """Parameters of a backfill run."""

    organization_id: str
    start_date: date | None = None
    end_date: date | None = None
    dry_run: bool = True
    force_recalculate: bool = False


@dataclass
class BackfillResult:
    """Counters and log lines of a backfill run."""

    success: bool = True
    processed: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    dry_run: bool = True
    details: list[str] = field(default_factory=list)

    def record(self, outcome: CostOutcome) -> None:
        """Count one session outcome."""
        self.processed += 1
        if outcome.status is CostStatus.UPDATED:
            self.updated += 1
        elif outcome.status is CostStatus.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1


@dataclass
class BackfillService:
    """Recompute costs for existing sessions in batches."""

    cost_service: SessionCostService
    batch_size: int = 50
    default_window_days: int = 30

    def backfill(self, request: BackfillRequest) -> BackfillResult:
        """Run a backfill; per-session failures are counted, not raised."""
        start, end = self._resolve_range(request)
        result = BackfillResult(dry_run=request.dry_run)
        _logger.info(
            "Starting backfill: organization_id=%s start=%s end=%s dry_run=%s",
            request.organization_id,
            start.isoformat(),
            end.isoformat(),
            request.dry_run,
        )
        try:
            sessions = (
                self.cost_service.session_repository.list_sessions_for_organization(
                    request.organization_id, start, end
                )
            )
        except Exception as exc:
            _logger.exception(
                "Backfill failed: organization_id=%s", request.organization_id
            )
            result.success = False
            result.details.append(f"Fatal error: {exc}")
            return result

        result.details.append(f"Found {len(sessions)} sessions in date range")
        if not sessions:
            result.details.append("No sessions to process")
            return result

        batch_count = (len(sessions) + self.batch_size - 1) // self.batch_size
        for batch_number, offset in enumerate(
            range(0, len(sessions), self.batch_size), start=1
        ):
            for session in sessions[offset : offset + self.batch_size]:
                result.record(self._process(session, request))
            _logger.info("Processed backfill batch %s/%s", batch_number, batch_count)

        result.details.extend(
            [
                f"Processed: {result.processed}",
                f"Updated: {result.updated}",
                f"Skipped: {result.skipped}",
                f"Errors: {result.errors}",
            ]
        )
        _logger.info(
            "Completed backfill: processed=%s updated=%s skipped=%s errors=%s",
            result.processed,
            result.updated,
            result.skipped,
            result.errors,
        )
        return result

    def _process(self, session: Session, request: BackfillRequest) -> CostOutcome:
        reason = session.skip_reason()
        has_cost = session.cost is not None and not request.force_recalculate
        if reason is None and has_cost:
            reason = "has-cost"
        if reason is not None:
            return CostOutcome(session.id, CostStatus.SKIPPED, reason=reason)
        return self.cost_service.process_session(
            session, "server-backfill", dry_run=request.dry_run
        )

    def _resolve_range(self, request: BackfillRequest) -> tuple[date, date]:
        today = datetime.now(tz=UTC).date()
        start = request.start_date or today - timedelta(days=self.default_window_days)
        end = request.end_date or today
        return start, end
