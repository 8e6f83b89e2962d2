from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from posbakum.core.modules.ticket.models import ServiceCategory, TicketView
from posbakum.web.deps import AppDep, VisitorSessionDep
from posbakum.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["tickets"])


class RegisterTicketRequest(BaseModel):
    """Request to take a queue number."""

    name: str = Field(..., description="Visitor name")
    phone: str = Field(..., description="Visitor phone number")
    category: ServiceCategory = Field(..., description="Requested service")
    note: str = Field("", description="Short description of the matter")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Siti Aminah",
                    "phone": "081234567890",
                    "category": "CONSULTATION",
                    "note": "Konsultasi gugatan cerai prodeo",
                }
            ]
        }
    }


@router.post(
    "/tickets",
    summary="Register for the queue",
    description=(
        "Issue the next queue number for the chosen service and create a waiting ticket. "
        "A visitor session can hold only one waiting or called ticket at a time."
    ),
    operation_id="registerTicket",
    status_code=201,
    responses={
        201: {"description": "Ticket created"},
        400: {"model": ErrorResponse, "description": "Invalid input or an active ticket already exists"},
        401: {"model": ErrorResponse, "description": "Missing visitor session"},
        503: {"model": ErrorResponse, "description": "Ticket could not be stored"},
    },
)
async def register_ticket(request: RegisterTicketRequest, app: AppDep, session: VisitorSessionDep) -> TicketView:
    return await app.register_ticket(session, request.name, request.phone, request.category, request.note)


@router.get(
    "/tickets/active",
    summary="Get my active ticket",
    description="Get the visitor's waiting or called ticket, or null when there is none.",
    operation_id="getActiveTicket",
    responses={401: {"model": ErrorResponse, "description": "Missing visitor session"}},
)
async def get_active_ticket(app: AppDep, session: VisitorSessionDep) -> TicketView | None:
    return await app.get_active_ticket(session)


@router.get(
    "/tickets/{ticket_id}",
    summary="Get ticket",
    description="Get a ticket by ID, e.g. after scanning its code.",
    operation_id="getTicket",
    responses={404: {"model": ErrorResponse, "description": "Ticket not found"}},
)
async def get_ticket(ticket_id: UUID, app: AppDep) -> TicketView:
    return await app.get_ticket(ticket_id)


@router.post(
    "/tickets/{ticket_id}/cancel",
    summary="Cancel ticket",
    description="Cancel the visitor's own ticket. Only waiting tickets can be cancelled.",
    operation_id="cancelTicket",
    responses={
        200: {"description": "Ticket cancelled"},
        401: {"model": ErrorResponse, "description": "Missing visitor session"},
        403: {"model": ErrorResponse, "description": "Ticket belongs to another visitor"},
        404: {"model": ErrorResponse, "description": "Ticket not found"},
        409: {"model": ErrorResponse, "description": "Ticket is no longer waiting"},
    },
)
async def cancel_ticket(ticket_id: UUID, app: AppDep, session: VisitorSessionDep) -> TicketView:
    return await app.cancel_ticket(session, ticket_id)
