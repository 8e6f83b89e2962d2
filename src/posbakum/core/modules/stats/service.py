from datetime import datetime

from posbakum.core.core import Service
from posbakum.core.modules.stats.models import DailyStats
from posbakum.utils import day_bounds_millis, day_key, local_now


class StatsService(Service):
    """Read-only daily statistics, recomputed on every request."""

    async def get_daily_stats(self, at: datetime | None = None) -> DailyStats:
        """Aggregate the tickets created on the local day of `at`."""
        at = at or local_now(self.core.config.timezone)
        tickets = await self.core.services.ticket.list_created_between(*day_bounds_millis(at))
        return DailyStats.aggregate(tickets, day=day_key(at))
