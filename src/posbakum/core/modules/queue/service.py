from datetime import datetime
from uuid import UUID

import structlog
from pymongo.errors import DuplicateKeyError, PyMongoError

from posbakum.core.core import Service
from posbakum.core.modules.counter.models import UNDATED, CounterType
from posbakum.core.modules.session.models import VisitorSession
from posbakum.core.modules.staff.models import Staff
from posbakum.core.modules.ticket.models import ServiceCategory, StatusChange, Ticket, TicketStatus
from posbakum.errors import ConflictError, StoreUnavailableError, ValidationError
from posbakum.utils import local_now, to_millis

logger = structlog.get_logger(__name__)

ACTIVE_TICKET_MESSAGE = "You still have an active ticket. Please finish or cancel it before taking a new one"


class QueueService(Service):
    """Ticket lifecycle: registration, calling, completion, cancellation and recall.

    Status moves only forward:
        WAITING -> CALLED -> COMPLETED
        WAITING -> CANCELLED
    Every transition is a compare-and-set against the store, so the precondition is
    always checked against current data rather than a client's cached copy.
    """

    async def register(
        self,
        session: VisitorSession,
        name: str,
        phone: str,
        category: ServiceCategory,
        note: str = "",
        at: datetime | None = None,
    ) -> Ticket:
        """Create a WAITING ticket with a freshly issued queue number."""
        name, phone, note = name.strip(), phone.strip(), note.strip()
        if not name:
            raise ValidationError("Name is required")
        if not phone:
            raise ValidationError("Phone number is required")

        at = at or local_now(self.core.config.timezone)
        tickets = self.core.services.ticket
        try:
            # Guard before burning a number; the unique index re-checks at insert
            if await tickets.find_active_by_session(session) is not None:
                raise ValidationError(ACTIVE_TICKET_MESSAGE)

            issued = await self.core.services.sequencer.issue(category, at)
            waiting = await tickets.count_waiting()
            timestamp = to_millis(at)
            ticket = Ticket(
                queue_number=issued.queue_number,
                sequence=issued.sequence,
                day=issued.day,
                name=name,
                phone=phone,
                case_number=note,
                service_type=category,
                estimated_time=(waiting + 1) * self.core.config.minutes_per_ticket,
                timestamp=timestamp,
                session_id=session,
                active_session=session,
                degraded=issued.degraded,
                history=[StatusChange(status=TicketStatus.WAITING, timestamp=timestamp)],
            )
            ticket = await tickets.insert_ticket(ticket)
        except DuplicateKeyError as e:
            logger.info("ticket_register_rejected", reason="active_ticket_exists", category=category)
            raise ValidationError(ACTIVE_TICKET_MESSAGE) from e
        except PyMongoError as e:
            logger.exception("ticket_register_failed", category=category)
            raise StoreUnavailableError from e

        logger.info(
            "ticket_registered",
            ticket_id=ticket.id,
            queue_number=ticket.queue_number,
            category=category,
            degraded=ticket.degraded,
        )
        return ticket

    async def call(self, staff: Staff, ticket_id: UUID) -> Ticket:
        """Call a WAITING ticket, completing whichever ticket was being served in the staff's scope.

        Calls are ordered by a global call sequence that keeps increasing across days, so
        a ticket left CALLED overnight still counts as called earlier. After the target is
        CALLED, every ticket in scope called earlier is completed, and the target itself is
        completed if a later call already landed. Whichever of two concurrent calls commits
        second resolves the pair, so several consoles still leave exactly one CALLED ticket.
        """
        tickets = self.core.services.ticket
        try:
            ticket = await tickets.get_ticket(ticket_id)
            self.core.services.access.ensure_in_scope(staff, ticket)
            if ticket.status != TicketStatus.WAITING:
                raise ConflictError(f"Ticket {ticket.queue_number} is not waiting (currently {ticket.status.label.lower()})")

            call_seq = await self.core.services.counter.get_next_sequence(CounterType.CALL, UNDATED)
            ticket = await tickets.transition(ticket_id, TicketStatus.WAITING, TicketStatus.CALLED, {"call_seq": call_seq})
            completed = await tickets.complete_called_before(call_seq, staff.scope)
            superseded = await tickets.complete_if_superseded(ticket_id, call_seq, staff.scope)
            if superseded:
                ticket = await tickets.get_ticket(ticket_id)
        except PyMongoError as e:
            logger.exception("ticket_call_failed", ticket_id=ticket_id)
            raise StoreUnavailableError from e

        if superseded:
            logger.info("ticket_call_superseded", ticket_id=ticket.id, queue_number=ticket.queue_number, staff=staff.username)
            return ticket

        logger.info(
            "ticket_called",
            ticket_id=ticket.id,
            queue_number=ticket.queue_number,
            staff=staff.username,
            scope=staff.scope,
            auto_completed=completed,
        )
        await self.core.services.announcement.announce(ticket)
        return ticket

    async def complete(self, staff: Staff, ticket_id: UUID) -> Ticket:
        """Mark a CALLED ticket as served."""
        tickets = self.core.services.ticket
        try:
            ticket = await tickets.get_ticket(ticket_id)
            self.core.services.access.ensure_in_scope(staff, ticket)
            ticket = await tickets.transition(ticket_id, TicketStatus.CALLED, TicketStatus.COMPLETED)
        except PyMongoError as e:
            logger.exception("ticket_complete_failed", ticket_id=ticket_id)
            raise StoreUnavailableError from e

        logger.info("ticket_completed", ticket_id=ticket.id, queue_number=ticket.queue_number, staff=staff.username)
        return ticket

    async def cancel(self, session: VisitorSession, ticket_id: UUID) -> Ticket:
        """Cancel the visitor's own WAITING ticket. Called tickets must be completed instead."""
        tickets = self.core.services.ticket
        try:
            ticket = await tickets.get_ticket(ticket_id)
            self.core.services.access.ensure_ticket_owner(session, ticket)
            ticket = await tickets.transition(ticket_id, TicketStatus.WAITING, TicketStatus.CANCELLED)
        except PyMongoError as e:
            logger.exception("ticket_cancel_failed", ticket_id=ticket_id)
            raise StoreUnavailableError from e

        logger.info("ticket_cancelled", ticket_id=ticket.id, queue_number=ticket.queue_number)
        return ticket

    async def recall(self, staff: Staff, ticket_id: UUID) -> Ticket:
        """Announce the currently called ticket again without changing its status."""
        try:
            ticket = await self.core.services.ticket.get_ticket(ticket_id)
        except PyMongoError as e:
            logger.exception("ticket_recall_failed", ticket_id=ticket_id)
            raise StoreUnavailableError from e

        self.core.services.access.ensure_in_scope(staff, ticket)
        if ticket.status != TicketStatus.CALLED:
            raise ConflictError(f"Ticket {ticket.queue_number} is not being called (currently {ticket.status.label.lower()})")

        logger.info("ticket_recalled", ticket_id=ticket.id, queue_number=ticket.queue_number, staff=staff.username)
        await self.core.services.announcement.announce(ticket, recall=True)
        return ticket
