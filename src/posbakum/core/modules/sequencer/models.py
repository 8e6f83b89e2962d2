from pydantic import BaseModel

from posbakum.core.modules.ticket.models import ServiceCategory


class IssuedNumber(BaseModel):
    """Result of issuing a queue number."""

    category: ServiceCategory
    day: str
    sequence: int
    queue_number: str
    degraded: bool = False  # Randomized fallback; may duplicate another ticket's number


def format_queue_number(category: ServiceCategory, sequence: int) -> str:
    """Format a queue number as `<prefix>-<sequence>`, padded to three digits."""
    return f"{category.prefix}-{sequence:03d}"


def parse_queue_number(queue_number: str) -> tuple[str, int] | None:
    """Split `A-007` into `("A", 7)`. Returns None for malformed values."""
    prefix, sep, digits = queue_number.partition("-")
    if not sep or not prefix or not digits.isdigit():
        return None
    return prefix, int(digits)
