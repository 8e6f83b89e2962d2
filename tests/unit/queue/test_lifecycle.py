"""Tests for ticket registration and status transitions."""

import asyncio
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from posbakum.core.modules.session.models import VisitorSession
from posbakum.core.modules.ticket.models import ServiceCategory, TicketStatus
from posbakum.errors import AccessDeniedError, ConflictError, NotFoundError, StoreUnavailableError, ValidationError

VALID_PATHS = [
    [TicketStatus.WAITING],
    [TicketStatus.WAITING, TicketStatus.CANCELLED],
    [TicketStatus.WAITING, TicketStatus.CALLED],
    [TicketStatus.WAITING, TicketStatus.CALLED, TicketStatus.COMPLETED],
]


def status_path(ticket) -> list[TicketStatus]:
    return [change.status for change in ticket.history]


@pytest.fixture
def set_clock(monkeypatch):
    """Pin the office-local clock used by the queue and announcement services."""

    def _set_clock(moment: datetime) -> None:
        for module in ("queue", "announcement"):
            monkeypatch.setattr(f"posbakum.core.modules.{module}.service.local_now", lambda tz: moment)

    return _set_clock


class TestRegister:
    async def test_creates_waiting_ticket(self, register):
        ticket = await register(ServiceCategory.CONSULTATION)

        assert ticket.queue_number == "A-001"
        assert ticket.status == TicketStatus.WAITING
        assert ticket.day == "2025-03-14"
        assert ticket.active_session == ticket.session_id
        assert status_path(ticket) == [TicketStatus.WAITING]

    async def test_numbers_follow_submission_order(self, register):
        numbers = [(await register(ServiceCategory.CONSULTATION)).queue_number for _ in range(3)]
        assert numbers == ["A-001", "A-002", "A-003"]

    async def test_estimated_wait_grows_with_queue(self, register):
        first = await register()
        second = await register(ServiceCategory.CIVIL)
        assert first.estimated_time == 15
        assert second.estimated_time == 30

    @pytest.mark.parametrize(("name", "phone"), [("", "0812"), ("  ", "0812"), ("Budi", ""), ("Budi", "   ")])
    async def test_name_and_phone_required(self, core, name, phone):
        with pytest.raises(ValidationError):
            await core.services.queue.register(VisitorSession("v"), name, phone, ServiceCategory.CIVIL)

    async def test_one_active_ticket_per_visitor(self, register):
        await register(session="device-1")
        with pytest.raises(ValidationError, match="active ticket"):
            await register(ServiceCategory.CIVIL, session="device-1")

    async def test_rejected_registration_does_not_consume_a_number(self, register):
        await register(session="device-1")
        with pytest.raises(ValidationError):
            await register(session="device-1")
        other = await register(session="device-2")
        assert other.queue_number == "A-002"

    async def test_new_ticket_allowed_after_cancel(self, core, register):
        ticket = await register(session="device-1")
        await core.services.queue.cancel(VisitorSession("device-1"), ticket.id)
        again = await register(session="device-1")
        assert again.queue_number == "A-002"

    async def test_simultaneous_registrations_from_one_visitor(self, register):
        results = await asyncio.gather(
            register(session="device-1"),
            register(ServiceCategory.CRIMINAL, session="device-1"),
            return_exceptions=True,
        )
        created = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, ValidationError)]
        assert len(created) == 1
        assert len(rejected) == 1

    async def test_concurrent_visitors_get_unique_numbers(self, register):
        tickets = await asyncio.gather(*(register(ServiceCategory.CRIMINAL) for _ in range(15)))
        numbers = sorted(t.queue_number for t in tickets)
        assert numbers == [f"B-{n:03d}" for n in range(1, 16)]

    async def test_store_failure_is_reported(self, database, register):
        database["tickets"].fail(ServerSelectionTimeoutError("no servers"))
        with pytest.raises(StoreUnavailableError):
            await register()


class TestCall:
    async def test_call_completes_previous_ticket(self, core, admin, register):
        first = await register()
        second = await register()

        await core.services.queue.call(admin, first.id)
        await core.services.queue.call(admin, second.id)

        first = await core.services.ticket.get_ticket(first.id)
        second = await core.services.ticket.get_ticket(second.id)
        assert first.status == TicketStatus.COMPLETED
        assert second.status == TicketStatus.CALLED
        assert status_path(first) == [TicketStatus.WAITING, TicketStatus.CALLED, TicketStatus.COMPLETED]
        assert first.active_session is None

    async def test_calling_non_waiting_ticket_fails(self, core, admin, register):
        ticket = await register()
        await core.services.queue.call(admin, ticket.id)
        with pytest.raises(ConflictError):
            await core.services.queue.call(admin, ticket.id)

    async def test_calling_unknown_ticket_fails(self, core, admin):
        with pytest.raises(NotFoundError):
            await core.services.queue.call(admin, uuid4())

    async def test_ticket_outside_scope_is_denied(self, core, criminal_staff, register):
        ticket = await register(ServiceCategory.CONSULTATION)
        with pytest.raises(AccessDeniedError):
            await core.services.queue.call(criminal_staff, ticket.id)
        assert (await core.services.ticket.get_ticket(ticket.id)).status == TicketStatus.WAITING

    async def test_scopes_serve_independently(self, core, consultation_staff, criminal_staff, register):
        consult = await register(ServiceCategory.CONSULTATION)
        criminal = await register(ServiceCategory.CRIMINAL)

        await core.services.queue.call(consultation_staff, consult.id)
        await core.services.queue.call(criminal_staff, criminal.id)

        assert (await core.services.ticket.get_ticket(consult.id)).status == TicketStatus.CALLED
        assert (await core.services.ticket.get_ticket(criminal.id)).status == TicketStatus.CALLED

    async def test_all_scope_call_completes_every_called_ticket(self, core, admin, consultation_staff, criminal_staff, register):
        consult = await register(ServiceCategory.CONSULTATION)
        criminal = await register(ServiceCategory.CRIMINAL)
        civil = await register(ServiceCategory.CIVIL)
        await core.services.queue.call(consultation_staff, consult.id)
        await core.services.queue.call(criminal_staff, criminal.id)

        await core.services.queue.call(admin, civil.id)

        called = await core.services.ticket.list_by_status(TicketStatus.CALLED, "ALL")
        assert [t.id for t in called] == [civil.id]

    async def test_concurrent_calls_leave_one_called_ticket(self, core, admin, register):
        tickets = [await register() for _ in range(4)]

        await asyncio.gather(*(core.services.queue.call(admin, t.id) for t in tickets))

        called = await core.services.ticket.list_by_status(TicketStatus.CALLED, "ALL")
        completed = await core.services.ticket.list_by_status(TicketStatus.COMPLETED, "ALL")
        assert len(called) == 1
        assert len(completed) == 3

    async def test_concurrent_calls_of_same_ticket(self, core, admin, register):
        ticket = await register()
        results = await asyncio.gather(
            core.services.queue.call(admin, ticket.id),
            core.services.queue.call(admin, ticket.id),
            return_exceptions=True,
        )
        assert sum(1 for r in results if isinstance(r, ConflictError)) == 1
        ticket = await core.services.ticket.get_ticket(ticket.id)
        assert status_path(ticket) == [TicketStatus.WAITING, TicketStatus.CALLED]

    async def test_call_announces_ticket(self, core, admin, register):
        ticket = await register()
        await core.services.queue.call(admin, ticket.id)

        announcements = await core.services.announcement.list_announcements()
        assert [(a.queue_number, a.recall) for a in announcements] == [("A-001", False)]
        assert announcements[0].text == "Nomor Antrian... A... 1... Silakan menuju loket satu"

    async def test_ticket_left_called_overnight_is_completed_by_next_call(self, core, admin, register, today, set_clock):
        yesterday = today - timedelta(days=1)
        set_clock(yesterday)
        leftovers = [await register(at=yesterday) for _ in range(3)]
        for ticket in leftovers:
            await core.services.queue.call(admin, ticket.id)

        set_clock(today)
        fresh = await register(at=today)
        called = await core.services.queue.call(admin, fresh.id)

        assert called.status == TicketStatus.CALLED
        assert (await core.services.ticket.get_ticket(leftovers[-1].id)).status == TicketStatus.COMPLETED
        assert [t.id for t in await core.services.ticket.list_by_status(TicketStatus.CALLED, "ALL")] == [fresh.id]
        assert (await core.services.sync.get_queue_status()).current_number == fresh.queue_number == "A-001"
        announcements = await core.services.announcement.list_announcements()
        assert [a.ticket_id for a in announcements] == [fresh.id]

    async def test_call_survives_counter_upsert_contention(self, core, database, admin, register):
        ticket = await register()
        database["counters"].fail(DuplicateKeyError("E11000 duplicate key error", 11000), times=1)

        called = await core.services.queue.call(admin, ticket.id)

        assert called.status == TicketStatus.CALLED
        assert called.call_seq == 1
        assert len(await core.services.announcement.list_announcements()) == 1


class TestComplete:
    async def test_complete_called_ticket(self, core, admin, register):
        ticket = await register()
        await core.services.queue.call(admin, ticket.id)
        ticket = await core.services.queue.complete(admin, ticket.id)
        assert ticket.status == TicketStatus.COMPLETED

    async def test_complete_requires_called(self, core, admin, register):
        ticket = await register()
        with pytest.raises(ConflictError):
            await core.services.queue.complete(admin, ticket.id)
        assert (await core.services.ticket.get_ticket(ticket.id)).status == TicketStatus.WAITING


class TestCancel:
    async def test_cancel_twice_fails_and_stays_cancelled(self, core, register):
        ticket = await register(session="device-1")
        visitor = VisitorSession("device-1")

        cancelled = await core.services.queue.cancel(visitor, ticket.id)
        assert cancelled.status == TicketStatus.CANCELLED

        with pytest.raises(ConflictError):
            await core.services.queue.cancel(visitor, ticket.id)
        ticket = await core.services.ticket.get_ticket(ticket.id)
        assert ticket.status == TicketStatus.CANCELLED
        assert status_path(ticket) == [TicketStatus.WAITING, TicketStatus.CANCELLED]

    async def test_called_ticket_cannot_be_cancelled(self, core, admin, register):
        ticket = await register(session="device-1")
        await core.services.queue.call(admin, ticket.id)
        with pytest.raises(ConflictError):
            await core.services.queue.cancel(VisitorSession("device-1"), ticket.id)

    async def test_only_owner_can_cancel(self, core, register):
        ticket = await register(session="device-1")
        with pytest.raises(AccessDeniedError):
            await core.services.queue.cancel(VisitorSession("device-2"), ticket.id)

    async def test_cancelled_numbers_are_not_reused(self, core, register):
        first = await register(session="device-1")
        await core.services.queue.cancel(VisitorSession("device-1"), first.id)
        second = await register(session="device-2")
        assert second.queue_number == "A-002"


class TestRecall:
    async def test_recall_reannounces_without_state_change(self, core, admin, register):
        ticket = await register()
        await core.services.queue.call(admin, ticket.id)

        recalled = await core.services.queue.recall(admin, ticket.id)

        assert recalled.status == TicketStatus.CALLED
        assert len(recalled.history) == 2
        announcements = await core.services.announcement.list_announcements()
        assert [a.recall for a in announcements] == [False, True]

    async def test_recall_requires_called(self, core, admin, register):
        ticket = await register()
        with pytest.raises(ConflictError):
            await core.services.queue.recall(admin, ticket.id)

    async def test_announcement_failure_does_not_fail_call(self, core, database, admin, register):
        ticket = await register()
        database["announcements"].fail(ServerSelectionTimeoutError("no servers"))
        called = await core.services.queue.call(admin, ticket.id)
        assert called.status == TicketStatus.CALLED


class TestStatusPaths:
    async def test_every_ticket_follows_a_valid_path(self, core, admin, register):
        tickets = [await register(session=f"device-{i}") for i in range(6)]
        queue = core.services.queue
        await queue.cancel(VisitorSession("device-0"), tickets[0].id)
        await queue.call(admin, tickets[1].id)
        await queue.call(admin, tickets[2].id)
        await queue.complete(admin, tickets[2].id)
        await queue.call(admin, tickets[3].id)

        for ticket in tickets:
            stored = await core.services.ticket.get_ticket(ticket.id)
            assert status_path(stored) in VALID_PATHS
            assert status_path(stored)[-1] == stored.status
