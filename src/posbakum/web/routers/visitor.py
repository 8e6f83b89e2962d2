from fastapi import APIRouter
from pydantic import BaseModel, Field

from posbakum.web.deps import AppDep

router = APIRouter(tags=["visitor"])


class VisitorSessionResponse(BaseModel):
    session: str = Field(..., description="Token to send as X-Visitor-Session on visitor requests")


@router.post(
    "/visitor/session",
    summary="Start visitor session",
    description=(
        "Mint a session token identifying the visitor's device. The client stores it and sends it "
        "in the `X-Visitor-Session` header when registering, cancelling, or checking its ticket."
    ),
    operation_id="createVisitorSession",
    status_code=201,
)
async def create_visitor_session(app: AppDep) -> VisitorSessionResponse:
    return VisitorSessionResponse(session=app.create_visitor_session())
