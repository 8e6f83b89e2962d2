from enum import StrEnum
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from posbakum.core.db import MongoModel
from posbakum.utils import now_millis


class ServiceCategory(StrEnum):
    """Service types a visitor can queue for."""

    CONSULTATION = "CONSULTATION"
    CRIMINAL = "CRIMINAL"
    CIVIL = "CIVIL"

    @property
    def prefix(self) -> str:
        """One-letter queue number prefix."""
        return CATEGORY_PREFIXES[self]

    @property
    def label(self) -> str:
        """Display name shown to visitors."""
        return CATEGORY_LABELS[self]


CATEGORY_PREFIXES: dict[ServiceCategory, str] = {
    ServiceCategory.CONSULTATION: "A",
    ServiceCategory.CRIMINAL: "B",
    ServiceCategory.CIVIL: "C",
}

CATEGORY_LABELS: dict[ServiceCategory, str] = {
    ServiceCategory.CONSULTATION: "Konsultasi Hukum",
    ServiceCategory.CRIMINAL: "Pidana",
    ServiceCategory.CIVIL: "Perdata",
}


class TicketStatus(StrEnum):
    WAITING = "WAITING"
    CALLED = "CALLED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


STATUS_LABELS: dict[TicketStatus, str] = {
    TicketStatus.WAITING: "Menunggu",
    TicketStatus.CALLED: "Dipanggil",
    TicketStatus.COMPLETED: "Selesai",
    TicketStatus.CANCELLED: "Dibatalkan",
}

ACTIVE_STATUSES = frozenset({TicketStatus.WAITING, TicketStatus.CALLED})
TERMINAL_STATUSES = frozenset({TicketStatus.COMPLETED, TicketStatus.CANCELLED})

# Staff scope: every category, or a single one
ALL_CATEGORIES = "ALL"
CategoryScope = ServiceCategory | Literal["ALL"]


def scope_query(scope: CategoryScope) -> dict[str, Any]:
    """MongoDB filter restricting tickets to a staff scope."""
    if scope == ALL_CATEGORIES:
        return {}
    return {"service_type": scope}


def in_scope(category: ServiceCategory, scope: CategoryScope) -> bool:
    return scope == ALL_CATEGORIES or category == scope


class StatusChange(BaseModel):
    status: TicketStatus
    timestamp: int = Field(default_factory=now_millis)


class Ticket(MongoModel):
    """One registration in the queue.

    Indexed on active_session - unique, sparse (at most one active ticket per visitor),
    (status, timestamp) for FIFO listings, and (service_type, day) for daily lookups.
    """

    queue_number: str  # e.g. A-007, unique per (service_type, day) unless degraded
    sequence: int
    day: str  # Local calendar day of issuance, YYYY-MM-DD
    name: str
    phone: str = ""
    case_number: str = ""  # Visitor's free-text description of the matter
    service_type: ServiceCategory
    status: TicketStatus = TicketStatus.WAITING
    estimated_time: int  # Advisory wait in minutes, fixed at registration
    timestamp: int = Field(default_factory=now_millis)  # Creation time, epoch milliseconds
    session_id: str
    active_session: str | None = None  # Mirrors session_id while the ticket is active
    call_seq: int | None = None  # Global call order, set when called
    degraded: bool = False  # Number came from the randomized fallback and may collide
    history: list[StatusChange] = Field(default_factory=list)


class TicketView(BaseModel):
    """Ticket as returned to visitors and staff (API representation)."""

    id: UUID = Field(..., description="Ticket ID, also encoded in the ticket's QR code")
    queue_number: str = Field(..., description="Queue number, e.g. A-007")
    name: str = Field(..., description="Visitor name")
    case_number: str = Field(..., description="Purpose of the visit")
    service_type: ServiceCategory = Field(..., description="Service category")
    service_label: str = Field(..., description="Display name of the service category")
    status: TicketStatus = Field(..., description="Current status")
    status_label: str = Field(..., description="Display name of the status")
    estimated_time: int = Field(..., description="Estimated wait in minutes at registration time")
    timestamp: int = Field(..., description="Creation time, epoch milliseconds")

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketView":
        """Create view model from domain model."""
        return cls(
            id=ticket.id,
            queue_number=ticket.queue_number,
            name=ticket.name,
            case_number=ticket.case_number,
            service_type=ticket.service_type,
            service_label=ticket.service_type.label,
            status=ticket.status,
            status_label=ticket.status.label,
            estimated_time=ticket.estimated_time,
            timestamp=ticket.timestamp,
        )
