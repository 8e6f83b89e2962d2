from typing import Annotated

from fastapi import APIRouter, Query

from posbakum.core.modules.announcement.models import Announcement
from posbakum.core.modules.stats.models import DailyStats
from posbakum.core.modules.sync.models import QueueStatus
from posbakum.web.deps import AppDep

router = APIRouter(prefix="/queue", tags=["queue"])


@router.get(
    "/status",
    summary="Public queue board",
    description="Number currently being served across all services and the next waiting tickets in FIFO order.",
    operation_id="getQueueStatus",
)
async def get_queue_status(app: AppDep) -> QueueStatus:
    return await app.get_queue_status()


@router.get(
    "/stats",
    summary="Daily statistics",
    description="Counts of tickets created since local midnight, by status and service.",
    operation_id="getDailyStats",
)
async def get_daily_stats(app: AppDep) -> DailyStats:
    return await app.get_daily_stats()


@router.get(
    "/announcements",
    summary="Poll announcements",
    description="Today's call-outs with a sequence number greater than `after`, oldest first.",
    operation_id="listAnnouncements",
)
async def list_announcements(
    app: AppDep,
    after: Annotated[int, Query(ge=0, description="Last announcement seq already played")] = 0,
) -> list[Announcement]:
    return await app.get_announcements(after)
