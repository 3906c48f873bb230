"""DTOs for the reality chat endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.database.reality import ChatMessageRead


class ChatMessageCreate(BaseModel):
    text: str


class ConversationRead(BaseModel):
    """Active conversation with its messages in ascending order."""

    id: UUID
    timestamp: datetime
    is_archived: bool
    messages: list[ChatMessageRead] = Field(default_factory=list)


class ChatReply(BaseModel):
    """Outcome of one chat turn.

    failed is set when the assistant gave no usable answer; model_message
    then holds the stored fallback text.
    """

    conversation_id: UUID
    user_message: ChatMessageRead
    model_message: ChatMessageRead
    image_url: str | None = None
    failed: bool = False
