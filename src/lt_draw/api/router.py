"""lt_draw REST endpoints.

GET  /draws                          — list, filter by date range and status
GET  /draws/available                — draws accepting wagers right now
GET  /draws/{draw_id}                — one draw
GET  /draws/{draw_id}/statistics     — tickets and stake per number (cached)
POST /draws/{draw_id}/result         — post the winning number and settle
POST /admin/draws/monthly            — materialize a month (default: current + next)
POST /admin/draws/ensure             — materialize the rolling horizon now
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.enums import DrawStatus
from src.lt_common.response import ApiResponse, success_response
from src.lt_draw.application.lifecycle import DrawLifecycle
from src.lt_draw.application.queries import DrawQueryService
from src.lt_draw.application.schemas import (
    DrawCreationResponse,
    DrawListResponse,
    DrawResponse,
    DrawStatisticsResponse,
    EnsureDrawsRequest,
    MonthlyDrawsRequest,
    PostResultRequest,
)
from src.lt_gateway.auth.dependencies import (
    ADMINS,
    RESULT_POSTERS,
    Actor,
    get_current_actor,
    require_roles,
)
from src.lt_settlement.application.schemas import SettlementSummaryResponse

router = APIRouter(tags=["draws"])

_queries = DrawQueryService()
_lifecycle = DrawLifecycle()


@router.get("/draws")
async def list_draws(
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    status: DrawStatus | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    draws = await _queries.list_draws(
        db, date_from, date_to, status.value if status else None, limit
    )
    data = DrawListResponse(items=[DrawResponse.from_domain(d) for d in draws])
    return success_response(data.model_dump(), request)


@router.get("/draws/available")
async def available_draws(
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    draws = await _queries.available_draws(db)
    data = DrawListResponse(items=[DrawResponse.from_domain(d) for d in draws])
    return success_response(data.model_dump(), request)


@router.get("/draws/{draw_id}")
async def get_draw(
    draw_id: int,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    draw = await _queries.get_draw(db, draw_id)
    return success_response(DrawResponse.from_domain(draw).model_dump(), request)


@router.get("/draws/{draw_id}/statistics")
async def get_statistics(
    draw_id: int,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*RESULT_POSTERS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    stats = await _queries.get_statistics(db, draw_id)
    return success_response(DrawStatisticsResponse.from_domain(stats).model_dump(), request)


@router.post("/draws/{draw_id}/result")
async def post_result(
    draw_id: int,
    body: PostResultRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*RESULT_POSTERS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    summary = await _lifecycle.post_result(db, draw_id, body.winning_number, actor.id)
    return success_response(SettlementSummaryResponse.from_domain(summary).model_dump(), request)


@router.post("/admin/draws/monthly")
async def create_monthly_draws(
    body: MonthlyDrawsRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*ADMINS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    if body.year is not None and body.month is not None:
        summary = await _lifecycle.create_draws_for_month(db, body.year, body.month)
    else:
        summary = await _lifecycle.create_draws_for_current_and_next_month(db)
    return success_response(DrawCreationResponse.from_domain(summary).model_dump(), request)


@router.post("/admin/draws/ensure")
async def ensure_draws(
    body: EnsureDrawsRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*ADMINS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    summary = await _lifecycle.ensure_horizon(db, body.horizon_days)
    return success_response(DrawCreationResponse.from_domain(summary).model_dump(), request)
