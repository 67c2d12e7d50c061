"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from session_costs.api.payloads import BackfillRequestBody
from session_costs.services.backfill import BackfillRequest
from session_costs.services.costing import CostStatus, SessionNotCostableError

if TYPE_CHECKING:
    from session_costs.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/backfill", dependencies=[Depends(require_admin)])
async def backfill_session_costs(
    body: BackfillRequestBody, request: Request
) -> dict[str, object]:
    """Backfill costs for an organization's sessions."""
    container: AppContainer = request.app.state.container
    result = container.backfill_service.backfill(
        BackfillRequest(
            organization_id=body.organization_id,
            start_date=body.start_date,
            end_date=body.end_date,
            dry_run=body.dry_run,
            force_recalculate=body.force_recalculate,
        )
    )
    return {
        "success": result.success,
        "processed": result.processed,
        "updated": result.updated,
        "skipped": result.skipped,
        "errors": result.errors,
        "dry_run": result.dry_run,
        "details": result.details,
    }


@router.post(
    "/sessions/{session_id}/recalculate", dependencies=[Depends(require_admin)]
)
async def recalculate_session_cost(
    session_id: str, request: Request
) -> dict[str, object]:
    """Recalculate and store the cost of one session."""
    container: AppContainer = request.app.state.container
    try:
        outcome = container.cost_service.recalculate_session(session_id)
    except LookupError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except SessionNotCostableError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc

    if outcome.status is not CostStatus.UPDATED or outcome.breakdown is None:
        return {
            "success": False,
            "message": "Cannot calculate cost for time-off session",
        }
    breakdown = outcome.breakdown
    return {
        "success": True,
        "session_id": session_id,
        "cost_data": {
            "total_cost": breakdown.total_cost,
            "labor_cost": breakdown.labor_cost,
            "mileage_cost": breakdown.mileage_cost,
            "hours": breakdown.hours,
            "distance": breakdown.distance,
            "is_overtime_shift": breakdown.is_overtime_shift,
        },
    }
