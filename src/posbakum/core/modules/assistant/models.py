from typing import Literal

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    """One earlier message of the conversation, sent back by the client."""

    role: Literal["user", "model"] = Field(..., description="Who wrote the message")
    text: str = Field(..., description="Message text")


class ChatReply(BaseModel):
    text: str = Field(..., description="Assistant reply")
