"""Supabase-backed time entry repository."""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from supabase import Client

from session_costs.adapters.supabase_rows import parse_time_entry_row
from session_costs.domain.models import TimeEntry
from session_costs.services.costing import TimeEntryRepository


@dataclass
class SupabaseTimeEntryRepository(TimeEntryRepository):
    """Supabase implementation for weekly time entry queries."""

    client: Client
    timezone: ZoneInfo

    def list_time_entries(
        self, user_id: str, week_start: datetime, week_end: datetime
    ) -> list[TimeEntry]:
        """Return the user's entries dated within the week."""
        response = (
            self.client.table("time_entries")
            .select("id, user_id, session_id, date, clock_in_time, clock_out_time")
            .eq("user_id", user_id)
            .gte("date", week_start.date().isoformat())
            .lte("date", week_end.date().isoformat())
            .execute()
        )
        return [
            parse_time_entry_row(row, self.timezone) for row in response.data or []
        ]
