import secrets
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from posbakum.core.core import Service
from posbakum.core.modules.session.models import AuthToken, StaffSession, VisitorSession
from posbakum.core.modules.staff.models import Staff
from posbakum.errors import AuthenticationError


class SessionService(Service):
    """Service for managing staff sessions and minting visitor sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("staff_sessions")
        self._authenticated_staff: dict[AuthToken, Staff] = {}

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("staff_id", 1)])
        # TTL index for automatic session cleanup
        ttl = self.core.config.staff_session_ttl_hours * 60 * 60
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=ttl)

    async def create_session(self, staff_id: UUID) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        new_session = StaffSession(staff_id=staff_id, auth_token=auth_token)
        await self._collection.insert_one(new_session.to_mongo())
        return auth_token

    def create_visitor_session(self) -> VisitorSession:
        """Mint a new opaque visitor session token."""
        return VisitorSession(secrets.token_urlsafe(24))

    async def get_authenticated_staff(self, auth_token: AuthToken) -> Staff:
        if auth_token in self._authenticated_staff:
            return self._authenticated_staff[auth_token]

        session = await self._collection.find_one({"auth_token": auth_token})
        if session is None:
            raise AuthenticationError("Invalid or expired session")

        if not self.core.services.staff.has_staff(session["staff_id"]):
            raise AuthenticationError("Invalid or expired session")

        staff = self.core.services.staff.get_staff(session["staff_id"])
        self._authenticated_staff[auth_token] = staff
        return staff

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_staff(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        self._authenticated_staff.pop(auth_token, None)
        await self._collection.delete_one({"auth_token": auth_token})
