from collections.abc import Iterable

from pydantic import BaseModel, Field, computed_field

from posbakum.core.modules.ticket.models import ServiceCategory, Ticket, TicketStatus


def _empty_by_category() -> dict[ServiceCategory, int]:
    return dict.fromkeys(ServiceCategory, 0)


class DailyStats(BaseModel):
    """Ticket counts for the current local day."""

    day: str = Field("", description="Local calendar day, YYYY-MM-DD")
    total: int = Field(0, description="Tickets created today")
    completed: int = Field(0, description="Tickets completed")
    cancelled: int = Field(0, description="Tickets cancelled")
    waiting: int = Field(0, description="Tickets still waiting")
    called: int = Field(0, description="Tickets currently being served")
    by_category: dict[ServiceCategory, int] = Field(default_factory=_empty_by_category)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def waiting_displayed(self) -> int:
        """Tickets not yet finished, as shown on the public board."""
        return max(0, self.total - self.completed - self.cancelled)

    def percent(self, category: ServiceCategory) -> float:
        """Share of today's tickets in `category`, 0-100."""
        return self.by_category.get(category, 0) / max(self.total, 1) * 100

    @classmethod
    def aggregate(cls, tickets: Iterable[Ticket], day: str = "") -> "DailyStats":
        """Count tickets by status and category."""
        stats = cls(day=day)
        for ticket in tickets:
            stats.total += 1
            match ticket.status:
                case TicketStatus.COMPLETED:
                    stats.completed += 1
                case TicketStatus.CANCELLED:
                    stats.cancelled += 1
                case TicketStatus.WAITING:
                    stats.waiting += 1
                case TicketStatus.CALLED:
                    stats.called += 1
            stats.by_category[ticket.service_type] += 1
        return stats
