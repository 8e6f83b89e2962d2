from posbakum.core.core import Service
from posbakum.core.modules.session.models import AuthToken, VisitorSession
from posbakum.core.modules.staff.models import Staff
from posbakum.core.modules.ticket.models import Ticket, in_scope
from posbakum.errors import AccessDeniedError, AuthenticationError


class AccessService(Service):
    async def ensure_staff(self, auth_token: AuthToken) -> Staff:
        """Ensure the caller is a logged-in staff member."""
        return await self.core.services.session.get_authenticated_staff(auth_token)

    def ensure_in_scope(self, staff: Staff, ticket: Ticket) -> None:
        """Ensure the ticket belongs to a category the staff member serves."""
        if not in_scope(ticket.service_type, staff.scope):
            raise AccessDeniedError(f"Access denied: ticket {ticket.queue_number} is outside scope '{staff.scope}'")

    def ensure_visitor(self, session: VisitorSession | None) -> VisitorSession:
        """Ensure a visitor session token was provided."""
        if not session:
            raise AuthenticationError("Visitor session required")
        return session

    def ensure_ticket_owner(self, session: VisitorSession, ticket: Ticket) -> None:
        """Ensure the visitor session registered the ticket."""
        if ticket.session_id != session:
            raise AccessDeniedError("Access denied: ticket belongs to another visitor")
