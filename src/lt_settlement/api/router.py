"""lt_settlement REST endpoints.

GET /draws/{draw_id}/winners     — winning records with owner and upline
GET /draws/{draw_id}/scan        — read-only re-scoring of a settled draw
GET /results/dashboard           — winners and payouts over the last N days
GET /admin/payout-config         — effective multipliers
PUT /admin/payout-config         — replace one wager type's multipliers
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.response import ApiResponse, success_response
from src.lt_gateway.auth.dependencies import (
    ADMINS,
    RESULT_POSTERS,
    Actor,
    get_current_actor,
    require_roles,
)
from src.lt_settlement.application.schemas import (
    DashboardResponse,
    PayoutConfigRequest,
    PayoutConfigResponse,
    SettlementSummaryResponse,
    WinnerItem,
    WinnersResponse,
)
from src.lt_settlement.application.service import SettlementService

router = APIRouter(tags=["settlement"])

_service = SettlementService()


@router.get("/draws/{draw_id}/winners")
async def list_winners(
    draw_id: int,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    records = await _service.list_winners(db, draw_id)
    data = WinnersResponse(draw_id=draw_id, items=[WinnerItem.from_domain(r) for r in records])
    return success_response(data.model_dump(), request)


@router.get("/draws/{draw_id}/scan")
async def scan_draw(
    draw_id: int,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*RESULT_POSTERS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    summary = await _service.scan(db, draw_id)
    return success_response(SettlementSummaryResponse.from_domain(summary).model_dump(), request)


@router.get("/results/dashboard")
async def results_dashboard(
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*RESULT_POSTERS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    days: int = Query(7, ge=1, le=90),
) -> ApiResponse:
    dashboard = await _service.results_dashboard(db, days)
    return success_response(DashboardResponse.from_domain(dashboard).model_dump(), request)


@router.get("/admin/payout-config")
async def get_payout_config(
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*ADMINS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    config = await _service.get_payout_config(db)
    return success_response(PayoutConfigResponse.from_domain(config).model_dump(), request)


@router.put("/admin/payout-config")
async def set_payout_config(
    body: PayoutConfigRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*ADMINS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    config = await _service.set_payout_config(
        db, body.wager_type, body.multiplier, body.double_multiplier, actor.id
    )
    return success_response(PayoutConfigResponse.from_domain(config).model_dump(), request)
