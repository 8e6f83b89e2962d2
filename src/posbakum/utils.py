from datetime import UTC, datetime, time, timedelta
from zoneinfo import ZoneInfo


def now() -> datetime:
    return datetime.now(UTC)


def to_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def now_millis() -> int:
    return to_millis(now())


def local_now(tz: str) -> datetime:
    return datetime.now(ZoneInfo(tz))


def day_key(at: datetime) -> str:
    """Calendar day of an aware local datetime, e.g. `2025-03-14`."""
    return at.date().isoformat()


def day_bounds_millis(at: datetime) -> tuple[int, int]:
    """Epoch milliseconds of local midnight starting and ending the day containing `at`."""
    start = datetime.combine(at.date(), time.min, tzinfo=at.tzinfo)
    end = datetime.combine(at.date() + timedelta(days=1), time.min, tzinfo=at.tzinfo)
    return to_millis(start), to_millis(end)
