import structlog
from pymongo.errors import PyMongoError

from posbakum.core.core import Service
from posbakum.core.modules.announcement.models import Announcement
from posbakum.core.modules.session.models import VisitorSession
from posbakum.core.modules.stats.models import DailyStats
from posbakum.core.modules.sync.models import NO_CURRENT_NUMBER, AdminQueue, QueueStatus
from posbakum.core.modules.ticket.models import ALL_CATEGORIES, CategoryScope, TicketStatus, TicketView

logger = structlog.get_logger(__name__)


class SyncService(Service):
    """Polling surface for visitor and staff clients.

    Every method is a side-effect-free read. When the store is unreachable the
    result degrades to an empty default instead of failing the poll.
    """

    async def get_queue_status(self) -> QueueStatus:
        tickets = self.core.services.ticket
        try:
            current = await tickets.find_latest_called(ALL_CATEGORIES)
            pending = await tickets.list_by_status(TicketStatus.WAITING, ALL_CATEGORIES, self.core.config.pending_limit)
        except PyMongoError as e:
            logger.warning("queue_status_unavailable", error=str(e))
            return QueueStatus()
        return QueueStatus(
            current_number=current.queue_number if current else NO_CURRENT_NUMBER,
            pending=[TicketView.from_domain(t) for t in pending],
        )

    async def get_active_ticket(self, session: VisitorSession) -> TicketView | None:
        try:
            ticket = await self.core.services.ticket.find_active_by_session(session)
        except PyMongoError as e:
            logger.warning("active_ticket_unavailable", error=str(e))
            return None
        return TicketView.from_domain(ticket) if ticket else None

    async def get_daily_stats(self) -> DailyStats:
        try:
            return await self.core.services.stats.get_daily_stats()
        except PyMongoError as e:
            logger.warning("daily_stats_unavailable", error=str(e))
            return DailyStats()

    async def get_admin_queue(self, scope: CategoryScope) -> AdminQueue:
        tickets = self.core.services.ticket
        try:
            active = await tickets.find_latest_called(scope)
            waiting = await tickets.list_by_status(TicketStatus.WAITING, scope)
        except PyMongoError as e:
            logger.warning("admin_queue_unavailable", scope=scope, error=str(e))
            return AdminQueue()
        return AdminQueue(
            active=TicketView.from_domain(active) if active else None,
            waiting=[TicketView.from_domain(t) for t in waiting],
        )

    async def get_announcements(self, after_seq: int = 0) -> list[Announcement]:
        try:
            return await self.core.services.announcement.list_announcements(after_seq)
        except PyMongoError as e:
            logger.warning("announcements_unavailable", error=str(e))
            return []
