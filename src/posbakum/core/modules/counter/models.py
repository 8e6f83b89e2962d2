"""Monotonic counters backing queue numbers and call ordering."""

from enum import StrEnum

from posbakum.core.db import MongoModel


# Day bucket for counters that must keep increasing across days
UNDATED = ""


class CounterType(StrEnum):
    """Kinds of sequences kept in the counters collection."""

    TICKET = "ticket"  # Queue number sequence, scoped per service category
    CALL = "call"  # Global order in which tickets were called, never restarts (day is UNDATED)
    ANNOUNCEMENT = "announcement"  # Order of announcement events for display boards


class Counter(MongoModel):
    """Atomic counter for one (type, scope, day) bucket.

    Uses MongoDB atomic operations to prevent duplicates.
    Indexed on (counter_type, scope, day) - unique.
    Rows are created lazily on first use and never decremented or deleted.
    """

    counter_type: CounterType
    scope: str = ""  # Service category for ticket counters, empty otherwise
    day: str  # Local calendar day, YYYY-MM-DD, or UNDATED
    seq: int = 0  # Last issued value; next value will be seq + 1
