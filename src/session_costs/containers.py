"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from session_costs.adapters.supabase_photographer_repository import (
    SupabasePhotographerRepository,
)
from session_costs.adapters.supabase_school_repository import (
    SupabaseSchoolRepository,
)
from session_costs.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from session_costs.adapters.supabase_time_entry_repository import (
    SupabaseTimeEntryRepository,
)
from session_costs.config import Settings, parse_timezone
from session_costs.services.backfill import BackfillService
from session_costs.services.costing import SessionCostService
from session_costs.services.triggers import CostTriggerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    cost_service: SessionCostService
    trigger_service: CostTriggerService
    backfill_service: BackfillService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    cost_service = SessionCostService(
        session_repository=SupabaseSessionRepository(supabase_client),
        photographer_repository=SupabasePhotographerRepository(supabase_client),
        school_repository=SupabaseSchoolRepository(supabase_client),
        time_entry_repository=SupabaseTimeEntryRepository(
            supabase_client, parse_timezone(resolved_settings.business_timezone)
        ),
    )
    trigger_service = CostTriggerService(
        cost_service=cost_service,
        active_window_days=resolved_settings.active_window_days,
    )
    backfill_service = BackfillService(
        cost_service=cost_service,
        batch_size=resolved_settings.backfill_batch_size,
    )
    return AppContainer(
        settings=resolved_settings,
        cost_service=cost_service,
        trigger_service=trigger_service,
        backfill_service=backfill_service,
    )
