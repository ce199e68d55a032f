"""lt_exposure REST endpoints.

GET /exposure/{draw_id}/sold-out                      — sold-out numbers for a draw
GET /exposure/{draw_id}/{wager_type}/{combination}    — current total, limit, remaining
PUT /admin/bet-limits                                 — global per-type limit
PUT /admin/bet-limits/per-number                      — per-draw, per-number override
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.enums import WagerType
from src.lt_common.response import ApiResponse, success_response
from src.lt_exposure.application.schemas import (
    GlobalLimitRequest,
    LimitResponse,
    NumberExposureResponse,
    NumberLimitRequest,
    SoldOutItem,
    SoldOutResponse,
)
from src.lt_exposure.application.service import ExposureLedger
from src.lt_gateway.auth.dependencies import ADMINS, Actor, get_current_actor, require_roles

router = APIRouter(tags=["exposure"])

_ledger = ExposureLedger()


@router.get("/exposure/{draw_id}/sold-out")
async def list_sold_out(
    draw_id: int,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    totals = await _ledger.list_sold_out(db, draw_id)
    data = SoldOutResponse(
        draw_id=draw_id, items=[SoldOutItem.from_domain(t) for t in totals]
    )
    return success_response(data.model_dump(), request)


@router.get("/exposure/{draw_id}/{wager_type}/{combination}")
async def get_number_status(
    draw_id: int,
    wager_type: WagerType,
    combination: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    status = await _ledger.get_number_status(db, draw_id, wager_type.value, combination)
    return success_response(NumberExposureResponse.from_domain(status).model_dump(), request)


@router.put("/admin/bet-limits")
async def set_global_limit(
    body: GlobalLimitRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*ADMINS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    amount = await _ledger.set_global_limit(
        db, body.wager_type.value, body.limit_amount, actor.id
    )
    data = LimitResponse(wager_type=body.wager_type.value, limit_amount=str(amount))
    return success_response(data.model_dump(), request)


@router.put("/admin/bet-limits/per-number")
async def set_number_limit(
    body: NumberLimitRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*ADMINS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    amount = await _ledger.set_number_limit(
        db, body.draw_id, body.wager_type.value, body.combination, body.limit_amount, actor.id
    )
    data = LimitResponse(
        wager_type=body.wager_type.value,
        limit_amount=str(amount),
        draw_id=body.draw_id,
        combination=body.combination,
    )
    return success_response(data.model_dump(), request)
