"""Pydantic request models and response serializers."""

from dataclasses import asdict
from datetime import date

from pydantic import BaseModel, Field

from session_costs.services.costing import CostOutcome
from session_costs.services.triggers import RecalculationSummary


class DatabaseWebhookPayload(BaseModel):
    """Supabase database webhook payload."""

    type: str
    table: str
    db_schema: str | None = Field(default=None, alias="schema")
    record: dict[str, object] | None = None
    old_record: dict[str, object] | None = None


class BackfillRequestBody(BaseModel):
    """Admin backfill request."""

    organization_id: str = Field(min_length=1)
    start_date: date | None = None
    end_date: date | None = None
    dry_run: bool = True
    force_recalculate: bool = False


def serialize_outcome(outcome: CostOutcome) -> dict[str, object]:
    """Return a JSON-friendly view of a session outcome."""
    payload: dict[str, object] = {
        "session_id": outcome.session_id,
        "status": outcome.status.value,
        "dry_run": outcome.dry_run,
    }
    if outcome.reason is not None:
        payload["reason"] = outcome.reason
    if outcome.breakdown is not None:
        payload["cost"] = asdict(outcome.breakdown)
    return payload


def serialize_summary(summary: RecalculationSummary) -> dict[str, object]:
    """Return a JSON-friendly view of a batch recalculation."""
    return asdict(summary)
