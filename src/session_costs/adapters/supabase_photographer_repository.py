"""Supabase-backed photographer repository."""

from dataclasses import dataclass

from supabase import Client

from session_costs.adapters.supabase_rows import parse_photographer_row
from session_costs.domain.models import Photographer
from session_costs.services.costing import PhotographerRepository


@dataclass
class SupabasePhotographerRepository(PhotographerRepository):
    """Read photographer compensation profiles from the ``users`` table."""

    client: Client

    def get_photographer(self, photographer_id: str) -> Photographer | None:
        """Return a photographer by id, if present."""
        response = (
            self.client.table("users")
            .select(
                "id, compensation_type, hourly_rate, salary_amount, "
                "overtime_threshold, amount_per_mile, home_address, display_name, "
                "first_name, last_name"
            )
            .eq("id", photographer_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_photographer_row(response.data[0])
