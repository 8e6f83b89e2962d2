from pydantic import BaseModel, Field

from posbakum.core.modules.ticket.models import TicketView

NO_CURRENT_NUMBER = "-"


class QueueStatus(BaseModel):
    """Public board: the number being served and the head of the waiting line."""

    current_number: str = Field(NO_CURRENT_NUMBER, description="Most recently called queue number, or '-'")
    pending: list[TicketView] = Field(default_factory=list, description="Next waiting tickets in FIFO order")


class AdminQueue(BaseModel):
    """Staff console view of one scope."""

    active: TicketView | None = Field(None, description="Ticket currently being served in scope")
    waiting: list[TicketView] = Field(default_factory=list, description="Waiting tickets in scope, FIFO")
