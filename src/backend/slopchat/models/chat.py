from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

from slopchat.conversation.state import ConversationState


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content must not be empty")
        return value


class ChatRequest(BaseModel):
    # Oldest first; the whole transcript is resent on every turn.
    messages: List[ConversationTurn] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    message: str
    state: ConversationState = ConversationState.GATHERING
