from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from posbakum.config import Config
from posbakum.core.core import Core
from posbakum.core.modules.announcement.models import Announcement
from posbakum.core.modules.assistant.models import ChatTurn
from posbakum.core.modules.session.models import AuthToken, VisitorSession
from posbakum.core.modules.settings.models import AppSettings
from posbakum.core.modules.staff.models import StaffView
from posbakum.core.modules.stats.models import DailyStats
from posbakum.core.modules.sync.models import AdminQueue, QueueStatus
from posbakum.core.modules.ticket.models import ServiceCategory, TicketView
from posbakum.errors import AuthenticationError


class App:
    """Facade for all application operations, validates sessions and scopes before delegating to Core."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Visitor ===
    def create_visitor_session(self) -> VisitorSession:
        """Mint a session token identifying the visitor's device."""
        return self._core.services.session.create_visitor_session()

    async def register_ticket(
        self, session: VisitorSession | None, name: str, phone: str, category: ServiceCategory, note: str
    ) -> TicketView:
        """Take a queue number (one active ticket per visitor session)."""
        session = self._core.services.access.ensure_visitor(session)
        ticket = await self._core.services.queue.register(session, name, phone, category, note)
        return TicketView.from_domain(ticket)

    async def get_active_ticket(self, session: VisitorSession | None) -> TicketView | None:
        """Get the visitor's WAITING or CALLED ticket."""
        session = self._core.services.access.ensure_visitor(session)
        return await self._core.services.sync.get_active_ticket(session)

    async def get_ticket(self, ticket_id: UUID) -> TicketView:
        """Get a ticket by ID, e.g. from its scanned code."""
        ticket = await self._core.services.ticket.get_ticket(ticket_id)
        return TicketView.from_domain(ticket)

    async def cancel_ticket(self, session: VisitorSession | None, ticket_id: UUID) -> TicketView:
        """Cancel the visitor's own waiting ticket."""
        session = self._core.services.access.ensure_visitor(session)
        ticket = await self._core.services.queue.cancel(session, ticket_id)
        return TicketView.from_domain(ticket)

    # === Public board ===
    async def get_queue_status(self) -> QueueStatus:
        return await self._core.services.sync.get_queue_status()

    async def get_daily_stats(self) -> DailyStats:
        return await self._core.services.sync.get_daily_stats()

    async def get_announcements(self, after_seq: int = 0) -> list[Announcement]:
        return await self._core.services.sync.get_announcements(after_seq)

    async def get_settings(self) -> AppSettings:
        return await self._core.services.settings.get_settings()

    async def chat(self, message: str, history: list[ChatTurn]) -> str:
        return await self._core.services.assistant.chat(message, history)

    # === Staff ===
    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return await self._core.services.session.is_auth_token_valid(auth_token)

    async def login(self, username: str, password: str) -> tuple[AuthToken, StaffView]:
        """Authenticate staff and create session."""
        if not self._core.services.staff.verify_password(username, password):
            raise AuthenticationError
        staff = self._core.services.staff.get_staff_by_username(username)
        token = await self._core.services.session.create_session(staff.id)
        return token, StaffView.from_domain(staff)

    async def logout(self, auth_token: AuthToken) -> None:
        """Invalidate staff session."""
        await self._core.services.access.ensure_staff(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    async def get_current_staff(self, auth_token: AuthToken) -> StaffView:
        staff = await self._core.services.access.ensure_staff(auth_token)
        return StaffView.from_domain(staff)

    async def get_admin_queue(self, auth_token: AuthToken) -> AdminQueue:
        """Get the called ticket and the waiting line within the staff member's scope."""
        staff = await self._core.services.access.ensure_staff(auth_token)
        return await self._core.services.sync.get_admin_queue(staff.scope)

    async def call_ticket(self, auth_token: AuthToken, ticket_id: UUID) -> TicketView:
        """Call a waiting ticket; the previously called ticket in scope is completed."""
        staff = await self._core.services.access.ensure_staff(auth_token)
        ticket = await self._core.services.queue.call(staff, ticket_id)
        return TicketView.from_domain(ticket)

    async def complete_ticket(self, auth_token: AuthToken, ticket_id: UUID) -> TicketView:
        staff = await self._core.services.access.ensure_staff(auth_token)
        ticket = await self._core.services.queue.complete(staff, ticket_id)
        return TicketView.from_domain(ticket)

    async def recall_ticket(self, auth_token: AuthToken, ticket_id: UUID) -> TicketView:
        """Announce the called ticket again."""
        staff = await self._core.services.access.ensure_staff(auth_token)
        ticket = await self._core.services.queue.recall(staff, ticket_id)
        return TicketView.from_domain(ticket)
