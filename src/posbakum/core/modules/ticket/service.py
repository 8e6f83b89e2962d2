from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from posbakum.core.core import Service
from posbakum.core.modules.ticket.models import CategoryScope, StatusChange, Ticket, TicketStatus, scope_query
from posbakum.errors import ConflictError, NotFoundError
from posbakum.utils import now_millis

logger = structlog.get_logger(__name__)


def _status_update(target: TicketStatus, timestamp: int, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the update document for moving a ticket to `target`."""
    update: dict[str, Any] = {
        "$set": {"status": target, **(extra or {})},
        "$push": {"history": StatusChange(status=target, timestamp=timestamp).model_dump()},
    }
    if target.is_terminal:
        update["$unset"] = {"active_session": ""}
    return update


class TicketService(Service):
    """Durable ticket records and their status history."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("tickets")

    async def on_start(self) -> None:
        """Create indexes for active-ticket guard, FIFO listing and daily lookups."""
        await self._collection.create_index([("active_session", 1)], unique=True, sparse=True)
        await self._collection.create_index([("status", 1), ("timestamp", 1)])
        await self._collection.create_index([("service_type", 1), ("day", 1)])
        await self._collection.create_index([("timestamp", 1)])

    async def insert_ticket(self, ticket: Ticket) -> Ticket:
        """Persist a new ticket. Raises DuplicateKeyError if its session already has an active ticket."""
        res = await self._collection.insert_one(ticket.to_mongo())
        return await self.get_ticket(res.inserted_id)

    async def get_ticket(self, ticket_id: UUID) -> Ticket:
        """Get ticket by ID."""
        doc = await self._collection.find_one({"_id": ticket_id})
        if not doc:
            raise NotFoundError(f"Ticket not found: {ticket_id}")
        return Ticket.model_validate(doc)

    async def find_active_by_session(self, session_id: str) -> Ticket | None:
        """Get the visitor's ticket that is still WAITING or CALLED, if any."""
        doc = await self._collection.find_one({"active_session": session_id})
        if doc is None:
            return None
        return Ticket.model_validate(doc)

    async def list_by_status(self, status: TicketStatus, scope: CategoryScope, limit: int = 0) -> list[Ticket]:
        """List tickets with a status in creation order (FIFO)."""
        cursor = self._collection.find({"status": status, **scope_query(scope)}).sort("timestamp", 1)
        if limit:
            cursor = cursor.limit(limit)
        return await Ticket.list_cursor(cursor)

    async def find_latest_called(self, scope: CategoryScope) -> Ticket | None:
        """Get the most recently called ticket within a scope."""
        cursor = self._collection.find({"status": TicketStatus.CALLED, **scope_query(scope)}).sort("call_seq", -1).limit(1)
        tickets = await Ticket.list_cursor(cursor)
        return tickets[0] if tickets else None

    async def list_created_between(self, start: int, end: int) -> list[Ticket]:
        """List tickets created in `[start, end)` (epoch milliseconds)."""
        cursor = self._collection.find({"timestamp": {"$gte": start, "$lt": end}}).sort("timestamp", 1)
        return await Ticket.list_cursor(cursor)

    async def count_waiting(self) -> int:
        return await self._collection.count_documents({"status": TicketStatus.WAITING})

    async def transition(
        self, ticket_id: UUID, expected: TicketStatus, target: TicketStatus, extra: dict[str, Any] | None = None
    ) -> Ticket:
        """Atomically move a ticket from `expected` to `target` status.

        The precondition is checked by the store in the same operation as the write,
        so two concurrent transitions of one ticket cannot both succeed.
        """
        doc = await self._collection.find_one_and_update(
            {"_id": ticket_id, "status": expected},
            _status_update(target, now_millis(), extra),
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            current = await self.get_ticket(ticket_id)
            logger.info(
                "ticket_transition_rejected",
                ticket_id=ticket_id,
                queue_number=current.queue_number,
                status=current.status,
                expected=expected,
                target=target,
            )
            raise ConflictError(
                f"Ticket {current.queue_number} is no longer {expected.label.lower()} (currently {current.status.label.lower()})"
            )
        ticket = Ticket.model_validate(doc)
        logger.debug("ticket_transitioned", ticket_id=ticket_id, queue_number=ticket.queue_number, status=target)
        return ticket

    async def complete_called_before(self, call_seq: int, scope: CategoryScope) -> int:
        """Complete every CALLED ticket in scope that was called before `call_seq`.

        Returns the number of tickets completed.
        """
        result = await self._collection.update_many(
            {"status": TicketStatus.CALLED, "call_seq": {"$lt": call_seq}, **scope_query(scope)},
            _status_update(TicketStatus.COMPLETED, now_millis()),
        )
        return result.modified_count

    async def complete_if_superseded(self, ticket_id: UUID, call_seq: int, scope: CategoryScope) -> bool:
        """Complete a CALLED ticket if a later call already exists in scope.

        Returns True if the ticket was completed.
        """
        newer = await self._collection.count_documents(
            {"status": TicketStatus.CALLED, "call_seq": {"$gt": call_seq}, **scope_query(scope)}
        )
        if not newer:
            return False
        result = await self._collection.update_one(
            {"_id": ticket_id, "status": TicketStatus.CALLED},
            _status_update(TicketStatus.COMPLETED, now_millis()),
        )
        return result.modified_count > 0
