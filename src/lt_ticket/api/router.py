"""lt_ticket REST endpoints.

POST /tickets                              — submit a multi-wager ticket
GET  /tickets/{ticket_number}              — ticket with wagers
POST /tickets/{ticket_number}/refund       — cancel a pending ticket and credit the stake
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.database import get_db_session
from src.lt_common.enums import AccountRole
from src.lt_common.errors import ForbiddenError
from src.lt_common.response import ApiResponse, success_response
from src.lt_gateway.auth.dependencies import (
    RESULT_POSTERS,
    Actor,
    get_current_actor,
    require_roles,
)
from src.lt_ticket.application.schemas import (
    RefundRequest,
    RefundResponse,
    SubmitTicketRequest,
    TicketResponse,
)
from src.lt_ticket.application.service import TicketIntake

router = APIRouter(prefix="/tickets", tags=["tickets"])

_intake = TicketIntake()


@router.post("")
async def submit_ticket(
    body: SubmitTicketRequest,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    wagers = [w.to_domain() for w in body.wagers]
    ticket = await _intake.submit(db, actor.id, body.draw_id, wagers)
    return success_response(TicketResponse.from_domain(ticket).model_dump(), request)


@router.get("/{ticket_number}")
async def get_ticket(
    ticket_number: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    ticket = await _intake.get_ticket(db, ticket_number)
    # Agents only see their own tickets
    if actor.role is AccountRole.AGENT and ticket.owner_id != actor.id:
        raise ForbiddenError(actor.role.value)
    return success_response(TicketResponse.from_domain(ticket).model_dump(), request)


@router.post("/{ticket_number}/refund")
async def refund_ticket(
    ticket_number: str,
    body: RefundRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_roles(*RESULT_POSTERS))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    ticket, entry = await _intake.refund_ticket(db, ticket_number, actor.id, body.reason)
    return success_response(RefundResponse.from_domain(ticket, entry).model_dump(), request)
