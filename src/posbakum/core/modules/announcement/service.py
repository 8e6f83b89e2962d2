import asyncio
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from posbakum.core.core import Service
from posbakum.core.modules.announcement.models import Announcement
from posbakum.core.modules.announcement.rendering import render_announcement
from posbakum.core.modules.announcement.sender import send_telegram_message
from posbakum.core.modules.counter.models import CounterType
from posbakum.core.modules.ticket.models import Ticket
from posbakum.utils import day_key, local_now

logger = structlog.get_logger(__name__)


class AnnouncementService(Service):
    """Emits call-out events for the audio/visual announcer."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("announcements")
        self._forward_tasks: set[asyncio.Task[None]] = set()

    async def on_start(self) -> None:
        await self._collection.create_index([("day", 1), ("seq", 1)], unique=True)
        logger.debug("announcement_service_started", telegram_enabled=self._telegram_enabled)

    async def on_stop(self) -> None:
        if self._forward_tasks:
            await asyncio.gather(*self._forward_tasks, return_exceptions=True)

    @property
    def _telegram_enabled(self) -> bool:
        return bool(self.core.config.telegram_bot_token and self.core.config.telegram_chat_id)

    async def announce(self, ticket: Ticket, recall: bool = False) -> Announcement | None:
        """Record an announcement for a called ticket and forward it.

        Announcing is fire-and-forget: failures are logged and None is returned,
        the staff action that triggered it has already been committed.
        """
        day = day_key(local_now(self.core.config.timezone))
        try:
            seq = await self.core.services.counter.get_next_sequence(CounterType.ANNOUNCEMENT, day)
            announcement = Announcement(
                seq=seq,
                day=day,
                ticket_id=ticket.id,
                queue_number=ticket.queue_number,
                service_type=ticket.service_type,
                text=render_announcement(ticket.queue_number),
                recall=recall,
            )
            await self._collection.insert_one(announcement.to_mongo())
        except PyMongoError:
            logger.exception("announcement_failed", ticket_id=ticket.id, queue_number=ticket.queue_number)
            return None

        logger.info("ticket_announced", queue_number=ticket.queue_number, seq=seq, recall=recall)
        self._forward(announcement)
        return announcement

    async def list_announcements(self, after_seq: int = 0, limit: int = 20) -> list[Announcement]:
        """Today's announcements with seq greater than `after_seq`, oldest first."""
        day = day_key(local_now(self.core.config.timezone))
        cursor = self._collection.find({"day": day, "seq": {"$gt": after_seq}}).sort("seq", 1).limit(limit)
        return await Announcement.list_cursor(cursor)

    def _forward(self, announcement: Announcement) -> None:
        """Forward the announcement to Telegram in the background, if configured."""
        if not self._telegram_enabled:
            return
        task = asyncio.create_task(self._forward_async(announcement))
        self._forward_tasks.add(task)
        task.add_done_callback(self._forward_tasks.discard)

    async def _forward_async(self, announcement: Announcement) -> None:
        token = self.core.config.telegram_bot_token
        chat_id = self.core.config.telegram_chat_id
        if token is None or chat_id is None:
            return
        text = f"🔔 {announcement.queue_number} ({announcement.service_type.label})\n{announcement.text}"
        await send_telegram_message(token, chat_id, text)
