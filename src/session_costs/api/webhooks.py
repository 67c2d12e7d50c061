"""Supabase database webhook receiver."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from session_costs.adapters.supabase_rows import (
    parse_photographer_row,
    parse_school_row,
    parse_session_row,
)
from session_costs.api.payloads import (
    DatabaseWebhookPayload,
    serialize_outcome,
    serialize_summary,
)

if TYPE_CHECKING:
    from session_costs.containers import AppContainer

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
_logger = logging.getLogger(__name__)


def _get_webhook_secret(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.webhook_secret


async def require_webhook_secret(
    x_webhook_secret: str | None = Header(default=None),
    webhook_secret: str = Depends(_get_webhook_secret),
) -> None:
    """Ensure webhook calls carry the shared secret."""
    if not x_webhook_secret or x_webhook_secret != webhook_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/supabase", dependencies=[Depends(require_webhook_secret)])
async def supabase_webhook(
    payload: DatabaseWebhookPayload, request: Request
) -> dict[str, object]:
    """Dispatch row changes to the matching cost trigger."""
    container: AppContainer = request.app.state.container
    triggers = container.trigger_service
    event = payload.type.upper()
    record = payload.record
    old_record = payload.old_record

    if record is None or (event == "UPDATE" and old_record is None):
        return {"status": "ignored"}

    try:
        if payload.table == "sessions" and event == "INSERT":
            outcome = triggers.on_session_created(parse_session_row(record))
            return {"status": "ok", "result": serialize_outcome(outcome)}
        if payload.table == "sessions" and event == "UPDATE":
            outcome = triggers.on_session_updated(
                parse_session_row(old_record or {}), parse_session_row(record)
            )
            result = serialize_outcome(outcome) if outcome else None
            return {"status": "ok", "result": result}
        if payload.table == "users" and event == "UPDATE":
            summary = triggers.on_photographer_updated(
                parse_photographer_row(old_record or {}),
                parse_photographer_row(record),
            )
            result = serialize_summary(summary) if summary else None
            return {"status": "ok", "result": result}
        if payload.table == "schools" and event == "UPDATE":
            summary = triggers.on_school_updated(
                parse_school_row(old_record or {}), parse_school_row(record)
            )
            result = serialize_summary(summary) if summary else None
            return {"status": "ok", "result": result}
    except Exception as exc:
        _logger.exception(
            "Cost trigger failed: table=%s type=%s", payload.table, payload.type
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Cost recalculation failed",
        ) from exc
    return {"status": "ignored"}
