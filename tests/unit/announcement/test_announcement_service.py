"""Tests for announcement polling."""

from posbakum.core.modules.ticket.models import ServiceCategory


async def test_polling_after_seq(core, admin, register):
    first = await register(ServiceCategory.CONSULTATION)
    second = await register(ServiceCategory.CIVIL)
    await core.services.queue.call(admin, first.id)
    await core.services.queue.call(admin, second.id)
    await core.services.queue.recall(admin, second.id)

    service = core.services.announcement
    everything = await service.list_announcements()
    assert [(a.seq, a.queue_number, a.recall) for a in everything] == [
        (1, "A-001", False),
        (2, "C-001", False),
        (3, "C-001", True),
    ]
    newer = await service.list_announcements(after_seq=2)
    assert [a.seq for a in newer] == [3]


async def test_telegram_forwarding_disabled_by_default(core, admin, register):
    ticket = await register()
    announcement = await core.services.announcement.announce(ticket)
    assert announcement is not None
    assert not core.services.announcement._forward_tasks
