from fastapi import APIRouter
from pydantic import BaseModel, Field

from posbakum.core.modules.assistant.models import ChatReply, ChatTurn
from posbakum.web.deps import AppDep
from posbakum.web.openapi import ErrorResponse

router = APIRouter(prefix="/assistant", tags=["assistant"])


class ChatRequest(BaseModel):
    message: str = Field(..., description="Visitor question")
    history: list[ChatTurn] = Field(default_factory=list, description="Earlier messages, oldest first")


@router.post(
    "/chat",
    summary="Ask the assistant",
    description="Ask about service requirements and queue procedures. Each call is stateless; send the history.",
    operation_id="chat",
    responses={400: {"model": ErrorResponse, "description": "Empty message"}},
)
async def chat(request: ChatRequest, app: AppDep) -> ChatReply:
    return ChatReply(text=await app.chat(request.message, request.history))
