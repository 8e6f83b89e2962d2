import secrets
from datetime import datetime

import structlog
from pymongo.errors import DuplicateKeyError, PyMongoError

from posbakum.core.core import Service
from posbakum.core.modules.counter.models import CounterType
from posbakum.core.modules.sequencer.models import IssuedNumber, format_queue_number
from posbakum.core.modules.ticket.models import ServiceCategory
from posbakum.utils import day_key, local_now

logger = structlog.get_logger(__name__)


class SequencerService(Service):
    """Turns a registration into a per-category, per-day queue number."""

    async def issue(self, category: ServiceCategory, at: datetime | None = None) -> IssuedNumber:
        """Issue the next queue number for `category` on the local day of `at`.

        Uniqueness comes from the counter's atomic increment. If the counter cannot be
        advanced after the configured number of attempts, a random three-digit suffix is
        issued instead so registration stays available; such numbers may collide.
        """
        at = at or local_now(self.core.config.timezone)
        day = day_key(at)
        attempts = max(1, self.core.config.sequence_max_attempts)

        for attempt in range(1, attempts + 1):
            try:
                sequence = await self.core.services.counter.get_next_sequence(CounterType.TICKET, day, category)
            except DuplicateKeyError:
                # Lost a first-of-day upsert race; the row exists now
                logger.debug("queue_counter_contention", category=category, day=day, attempt=attempt)
            except PyMongoError as e:
                logger.warning("queue_counter_failed", category=category, day=day, attempt=attempt, error=str(e))
            else:
                return IssuedNumber(
                    category=category,
                    day=day,
                    sequence=sequence,
                    queue_number=format_queue_number(category, sequence),
                )

        sequence = secrets.randbelow(1000)
        queue_number = format_queue_number(category, sequence)
        logger.warning(
            "queue_number_degraded",
            category=category,
            day=day,
            attempts=attempts,
            queue_number=queue_number,
        )
        return IssuedNumber(category=category, day=day, sequence=sequence, queue_number=queue_number, degraded=True)
