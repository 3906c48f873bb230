"""Reality API endpoints - daily events and the AI chat.

Pattern: Async routes + Sync domain operations.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from app.api.deps import get_llm, get_user_scope
from app.api.streaming import live_query
from app.core.config import settings
from app.core.database import get_db
from app.domain.persistence import CHAT, EVENTS, UserScope
from app.domain.reality_operations import RealityOperations
from app.models.database.reality import (
    ChatMessageRead,
    Conversation,
    DailyEventCreate,
    DailyEventRead,
)
from app.models.dto.reality import ChatMessageCreate, ChatReply, ConversationRead
from app.services import reality_chat
from app.services.llm import BaseLLMClient

router = APIRouter(prefix="/reality", tags=["reality"])


def _conversation_read(session: Session, conversation: Conversation) -> ConversationRead:
    messages = RealityOperations.list_messages(session, conversation.id)
    return ConversationRead(
        id=conversation.id,
        timestamp=conversation.timestamp,
        is_archived=conversation.is_archived,
        messages=[ChatMessageRead.model_validate(m) for m in messages],
    )


# ─── Daily events ──────────────────────────────────────────────


@router.get("/events/stream", summary="Stream recent daily events")
async def stream_events(request: Request, scope: UserScope = Depends(get_user_scope)):
    def fetch(session: Session):
        events = RealityOperations.list_events(session, scope, limit=settings.DAILY_EVENTS_LIMIT)
        return [DailyEventRead.model_validate(e).model_dump(mode="json") for e in events]
    return live_query(request, scope.topic(EVENTS), fetch)


@router.post(
    "/events",
    response_model=DailyEventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Log daily event"
)
async def create_event(
    data: DailyEventCreate,
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> DailyEventRead:
    event = RealityOperations.create_event(db, scope, data)  # No await!
    return DailyEventRead.model_validate(event)


@router.get("/events", response_model=List[DailyEventRead], summary="Recent daily events")
async def list_events(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> List[DailyEventRead]:
    """The most recent events (DAILY_EVENTS_LIMIT), newest first."""
    events = RealityOperations.list_events(db, scope, limit=settings.DAILY_EVENTS_LIMIT)
    return [DailyEventRead.model_validate(e) for e in events]


# ─── Chat ──────────────────────────────────────────────────────


@router.get("/chat/stream", summary="Stream active conversation")
async def stream_chat(request: Request, scope: UserScope = Depends(get_user_scope)):
    def fetch(session: Session):
        conversation = RealityOperations.get_active_conversation(session, scope)
        if conversation is None:
            return []
        return [
            ChatMessageRead.model_validate(m).model_dump(mode="json")
            for m in RealityOperations.list_messages(session, conversation.id)
        ]
    return live_query(request, scope.topic(CHAT), fetch)


@router.get("/chat", response_model=ConversationRead, summary="Active conversation")
async def get_active_chat(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> ConversationRead:
    """Most recent unarchived conversation; one is started if none exists."""
    conversation = RealityOperations.get_or_create_active_conversation(db, scope)
    return _conversation_read(db, conversation)


@router.post("/chat/messages", response_model=ChatReply, summary="Send chat message")
async def send_chat_message(
    data: ChatMessageCreate,
    scope: UserScope = Depends(get_user_scope),
    llm: BaseLLMClient = Depends(get_llm),
    db: Session = Depends(get_db)
) -> ChatReply:
    """
    Store the message, ask the assistant and store its reply.

    `image of ...` / `generate image of ...` requests an image instead.
    When the assistant gives nothing, the stored fallback text is returned
    with failed=true.
    """
    turn = await reality_chat.send_message(db, scope, llm, data.text)
    return ChatReply(
        conversation_id=turn.conversation.id,
        user_message=ChatMessageRead.model_validate(turn.user_message),
        model_message=ChatMessageRead.model_validate(turn.model_message),
        image_url=turn.image_url,
        failed=turn.failed,
    )


@router.post("/chat/archive", response_model=ConversationRead, summary="Archive active conversation")
async def archive_chat(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> ConversationRead:
    """404 when there is no active conversation."""
    conversation = RealityOperations.archive_active_conversation(db, scope)
    return _conversation_read(db, conversation)
