"""Supabase-backed school repository."""

from dataclasses import dataclass

from supabase import Client

from session_costs.adapters.supabase_rows import parse_school_row
from session_costs.domain.models import School
from session_costs.services.costing import SchoolRepository


@dataclass
class SupabaseSchoolRepository(SchoolRepository):
    """Supabase implementation for school lookups."""

    client: Client

    def get_school(self, school_id: str) -> School | None:
        """Return a school by id, if present."""
        response = (
            self.client.table("schools")
            .select("id, coordinates, school_address")
            .eq("id", school_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_school_row(response.data[0])
