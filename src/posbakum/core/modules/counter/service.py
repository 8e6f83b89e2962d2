from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from posbakum.core.core import Service
from posbakum.core.modules.counter.models import CounterType

logger = structlog.get_logger(__name__)

# A lost upsert race leaves the row in place, so the next attempt finds it
UPSERT_ATTEMPTS = 3


class CounterService(Service):
    """Service for managing auto-incrementing counters bucketed by type, scope and day."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("counter_type", 1), ("scope", 1), ("day", 1)], unique=True)

    async def get_next_sequence(self, counter_type: CounterType, day: str, scope: str = "") -> int:
        """Atomically increment and return the next sequence number for a bucket.

        Two concurrent first-use upserts can race on the unique index. The loser's
        DuplicateKeyError is retried here; it is raised only if every attempt loses.
        """
        attempt = 1
        while True:
            try:
                result = await self._collection.find_one_and_update(
                    {"counter_type": counter_type, "scope": scope, "day": day},
                    {"$inc": {"seq": 1}},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                if attempt >= UPSERT_ATTEMPTS:
                    raise
                logger.debug("counter_upsert_contention", counter_type=counter_type, scope=scope, day=day, attempt=attempt)
                attempt += 1
            else:
                return int(result["seq"])

    async def get_current_sequence(self, counter_type: CounterType, day: str, scope: str = "") -> int:
        """Get the last issued sequence number without incrementing."""
        doc = await self._collection.find_one({"counter_type": counter_type, "scope": scope, "day": day})
        if doc:
            return int(doc["seq"])
        return 0
