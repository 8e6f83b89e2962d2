from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from posbakum.core.core import Service
from posbakum.core.modules.staff.models import Staff
from posbakum.core.modules.ticket.models import ALL_CATEGORIES, CategoryScope
from posbakum.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class StaffService(Service):
    """Manages staff accounts with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("staff")
        self._staff: dict[UUID, Staff] = {}

    def get_staff(self, staff_id: UUID) -> Staff:
        """Get staff by ID from cache."""
        if staff_id not in self._staff:
            raise NotFoundError(f"Staff '{staff_id}' not found")
        return self._staff[staff_id]

    def get_staff_by_username(self, username: str) -> Staff:
        staff = next((s for s in self._staff.values() if s.username == username), None)
        if staff is None:
            raise NotFoundError(f"Staff '{username}' not found")
        return staff

    def has_staff(self, staff_id: UUID) -> bool:
        return staff_id in self._staff

    def has_username(self, username: str) -> bool:
        return any(staff.username == username for staff in self._staff.values())

    async def create_staff(self, username: str, password: str, name: str, scope: CategoryScope) -> Staff:
        """Create staff account with hashed password."""
        if self.has_username(username):
            raise ValidationError(f"Staff '{username}' already exists")
        if not password:
            raise ValidationError("Password cannot be empty")

        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        res = await self._collection.insert_one(
            Staff(username=username, name=name, password_hash=password_hash, scope=scope).to_mongo()
        )
        return await self.update_staff_cache(res.inserted_id)

    def verify_password(self, username: str, password: str) -> bool:
        """Verify password against stored hash."""
        staff = next((s for s in self._staff.values() if s.username == username), None)
        if staff is None:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), staff.password_hash.encode("utf-8"))

    async def ensure_admin_exists(self) -> None:
        """Create default admin account serving all categories if not exists."""
        if not self.has_username("admin"):
            await self.create_staff("admin", self.core.config.admin_password, "Administrator", ALL_CATEGORIES)

    async def update_all_staff_cache(self) -> None:
        """Reload all staff cache from database."""
        staff = await Staff.list_cursor(self._collection.find())
        self._staff = {s.id: s for s in staff}

    async def update_staff_cache(self, staff_id: UUID) -> Staff:
        """Reload a specific staff cache entry from database."""
        doc = await self._collection.find_one({"_id": staff_id})
        if doc is None:
            raise NotFoundError(f"Staff '{staff_id}' not found")
        self._staff[staff_id] = Staff.model_validate(doc)
        return self._staff[staff_id]

    async def on_start(self) -> None:
        """Initialize indexes, cache, and admin account."""
        await self._collection.create_index([("username", 1)], unique=True)
        await self.update_all_staff_cache()
        await self.ensure_admin_exists()
        logger.debug("staff_service_started", staff_count=len(self._staff))
