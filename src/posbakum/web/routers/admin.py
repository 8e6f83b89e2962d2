from uuid import UUID

from fastapi import APIRouter

from posbakum.core.modules.staff.models import StaffView
from posbakum.core.modules.sync.models import AdminQueue
from posbakum.core.modules.ticket.models import TicketView
from posbakum.web.deps import AppDep, AuthTokenDep
from posbakum.web.openapi import ErrorResponse

router = APIRouter(prefix="/admin", tags=["admin"])

TICKET_ACTION_RESPONSES: dict[int | str, dict[str, object]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Ticket is outside the staff member's service scope"},
    404: {"model": ErrorResponse, "description": "Ticket not found"},
    409: {"model": ErrorResponse, "description": "Ticket is not in the required status"},
}


@router.get("/me", summary="Current staff", operation_id="getCurrentStaff")
async def get_current_staff(app: AppDep, auth_token: AuthTokenDep) -> StaffView:
    return await app.get_current_staff(auth_token)


@router.get(
    "/queue",
    summary="Staff queue",
    description="The ticket being served and the waiting line (FIFO), limited to the staff member's service scope.",
    operation_id="getAdminQueue",
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def get_admin_queue(app: AppDep, auth_token: AuthTokenDep) -> AdminQueue:
    return await app.get_admin_queue(auth_token)


@router.post(
    "/tickets/{ticket_id}/call",
    summary="Call ticket",
    description=(
        "Call a waiting ticket to the counter. Any ticket still being served in the same scope is "
        "completed first. Triggers an announcement."
    ),
    operation_id="callTicket",
    responses=TICKET_ACTION_RESPONSES,
)
async def call_ticket(ticket_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> TicketView:
    return await app.call_ticket(auth_token, ticket_id)


@router.post(
    "/tickets/{ticket_id}/complete",
    summary="Complete ticket",
    description="Mark the called ticket as served.",
    operation_id="completeTicket",
    responses=TICKET_ACTION_RESPONSES,
)
async def complete_ticket(ticket_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> TicketView:
    return await app.complete_ticket(auth_token, ticket_id)


@router.post(
    "/tickets/{ticket_id}/recall",
    summary="Recall ticket",
    description="Announce the called ticket again. The ticket status does not change.",
    operation_id="recallTicket",
    responses=TICKET_ACTION_RESPONSES,
)
async def recall_ticket(ticket_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> TicketView:
    return await app.recall_ticket(auth_token, ticket_id)
