"""Supabase-backed session repository."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime

from supabase import Client

from session_costs.adapters.supabase_rows import parse_session_row
from session_costs.domain.costs import CostEntry
from session_costs.domain.models import Session
from session_costs.services.costing import SessionRepository

_SESSION_COLUMNS = (
    "id, photographer_id, school_id, date, start_time, end_time, is_time_off, "
    "organization_id, cost"
)
_logger = logging.getLogger(__name__)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for sessions and their cost history."""

    client: Client
    max_write_attempts: int = 3

    def get_session(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_session_row(response.data[0])

    def list_sessions_for_photographer(
        self, photographer_id: str, since: date
    ) -> list[Session]:
        """Return the photographer's sessions on or after a date."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("photographer_id", photographer_id)
            .gte("date", since.isoformat())
            .execute()
        )
        return [parse_session_row(row) for row in response.data or []]

    def list_sessions_for_school(self, school_id: str, since: date) -> list[Session]:
        """Return the school's sessions on or after a date."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("school_id", school_id)
            .gte("date", since.isoformat())
            .execute()
        )
        return [parse_session_row(row) for row in response.data or []]

    def list_sessions_for_organization(
        self, organization_id: str, start: date, end: date
    ) -> list[Session]:
        """Return an organization's sessions within an inclusive date range."""
        response = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("organization_id", organization_id)
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [parse_session_row(row) for row in response.data or []]

    def record_cost(self, session_id: str, entry: CostEntry) -> None:
        """Append the entry to ``costs`` and mirror it into the legacy columns.

        The update is conditioned on ``last_cost_calculation`` still holding the
        value that was read. A lost race re-reads the row and tries again.
        """
        for _ in range(self.max_write_attempts):
            response = (
                self.client.table("sessions")
                .select("id, costs, last_cost_calculation")
                .eq("id", session_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                raise RuntimeError(f"Session {session_id} not found")
            row = response.data[0]
            existing = row.get("costs")
            costs = list(existing) if isinstance(existing, list) else []
            costs.append(entry.to_dict())
            query = (
                self.client.table("sessions")
                .update(
                    {
                        "cost": entry.breakdown.total_cost,
                        "cost_breakdown": entry.breakdown.legacy_summary(),
                        "costs": costs,
                        "last_cost_calculation": datetime.now(tz=UTC).isoformat(),
                    }
                )
                .eq("id", session_id)
            )
            previous = row.get("last_cost_calculation")
            if previous is None:
                query = query.is_("last_cost_calculation", "null")
            else:
                query = query.eq("last_cost_calculation", previous)
            if query.execute().data:
                return
            _logger.warning(
                "Concurrent cost write detected, retrying: session_id=%s", session_id
            )
        raise RuntimeError(
            f"Failed to record cost for session {session_id} after "
            f"{self.max_write_attempts} attempts"
        )
