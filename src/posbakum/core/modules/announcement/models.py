from uuid import UUID

from pydantic import Field

from posbakum.core.db import MongoModel
from posbakum.core.modules.ticket.models import ServiceCategory
from posbakum.utils import now_millis

# Spoken phrase for the audio announcer, e.g. "Nomor Antrian... A... 7... Silakan menuju loket satu"
ANNOUNCEMENT_TEMPLATE = "Nomor Antrian... {{ letter }}... {{ number }}... Silakan menuju loket {{ counter_name }}"


class Announcement(MongoModel):
    """A one-shot call-out of a queue number.

    Indexed on (day, seq) - unique. Display boards poll for announcements
    with a higher seq than the last one they played.
    """

    seq: int
    day: str
    ticket_id: UUID
    queue_number: str
    service_type: ServiceCategory
    text: str  # Phrase to speak
    recall: bool = False  # Re-announcement of an already called ticket
    timestamp: int = Field(default_factory=now_millis)
