from uuid import UUID

from pydantic import BaseModel, Field

from posbakum.core.db import MongoModel
from posbakum.core.modules.ticket.models import CategoryScope


class Staff(MongoModel):
    """Staff account bound to the categories it may see and act on."""

    username: str
    name: str
    password_hash: str  # bcrypt hash
    scope: CategoryScope  # "ALL" or a single service category


class StaffView(BaseModel):
    """Staff account information (API representation)."""

    id: UUID = Field(..., description="Staff ID")
    username: str = Field(..., description="Username")
    name: str = Field(..., description="Display name")
    scope: CategoryScope = Field(..., description="Service category this account serves, or ALL")

    @classmethod
    def from_domain(cls, staff: Staff) -> "StaffView":
        """Create view model from domain model."""
        return cls(id=staff.id, username=staff.username, name=staff.name, scope=staff.scope)
