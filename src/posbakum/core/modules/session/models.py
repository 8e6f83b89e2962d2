"""Session models for staff logins and visitor devices."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import Field

from posbakum.core.db import MongoModel
from posbakum.utils import now

AuthToken = NewType("AuthToken", str)

# Opaque per-device token held by the visitor's browser; never stored server-side on its own
VisitorSession = NewType("VisitorSession", str)


class StaffSession(MongoModel):
    """Staff authentication session.

    Indexed on auth_token - unique, staff_id, created_at (TTL).
    """

    staff_id: UUID
    auth_token: str
    created_at: datetime = Field(default_factory=now)
