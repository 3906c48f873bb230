"""Domain operations for the reality log and the AI chat record.

Daily events are append-only. Each user has at most one unarchived
conversation; it is resolved from the database on every call.

Pattern: Sync operations, no commits.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlmodel import Session

from app.domain.exceptions import DomainValidationError, EntityNotFoundError
from app.domain.persistence import (
    CHAT,
    EVENTS,
    UserScope,
    get_scoped,
    mark_changed,
    scoped_select,
)
from app.models.database.reality import (
    ChatMessage,
    ChatRole,
    Conversation,
    DailyEvent,
    DailyEventCreate,
)

logger = logging.getLogger(__name__)

EMPTY_EVENT_MESSAGE = "Please enter some text for your daily event."
NO_ACTIVE_CONVERSATION_MESSAGE = "No active conversation to archive."


class RealityOperations:
    """
    Daily event and conversation logic. Static methods, no commits.
    """

    # ─── Daily events ───────────────────────────────────────

    @staticmethod
    def create_event(session: Session, scope: UserScope, data: DailyEventCreate) -> DailyEvent:
        if not data.event_text or not data.event_text.strip():
            raise DomainValidationError(EMPTY_EVENT_MESSAGE)

        event = DailyEvent(
            app_id=scope.app_id,
            user_id=scope.user_id,
            event_text=data.event_text.strip(),
        )
        session.add(event)
        session.flush()
        mark_changed(session, scope.topic(EVENTS))
        return event

    @staticmethod
    def list_events(session: Session, scope: UserScope, limit: Optional[int] = None) -> List[DailyEvent]:
        """Events newest first, optionally capped."""
        query = scoped_select(DailyEvent, scope).order_by(DailyEvent.timestamp.desc())
        if limit is not None:
            query = query.limit(limit)
        return list(session.execute(query).scalars().all())

    @staticmethod
    def get_event(session: Session, scope: UserScope, event_id: UUID) -> DailyEvent:
        return get_scoped(session, DailyEvent, scope, event_id, "Daily event")

    # ─── Conversations ──────────────────────────────────────

    @staticmethod
    def get_active_conversation(session: Session, scope: UserScope) -> Optional[Conversation]:
        """Most recent unarchived conversation, if any."""
        query = (
            scoped_select(Conversation, scope)
            .where(Conversation.is_archived.is_(False))
            .order_by(Conversation.timestamp.desc())
            .limit(1)
        )
        return session.execute(query).scalars().first()

    @staticmethod
    def get_or_create_active_conversation(session: Session, scope: UserScope) -> Conversation:
        conversation = RealityOperations.get_active_conversation(session, scope)
        if conversation is not None:
            return conversation

        conversation = Conversation(app_id=scope.app_id, user_id=scope.user_id)
        session.add(conversation)
        session.flush()
        mark_changed(session, scope.topic(CHAT))
        logger.info("Started conversation %s", conversation.id)
        return conversation

    @staticmethod
    def archive_active_conversation(session: Session, scope: UserScope) -> Conversation:
        conversation = RealityOperations.get_active_conversation(session, scope)
        if conversation is None:
            raise EntityNotFoundError("Conversation", detail=NO_ACTIVE_CONVERSATION_MESSAGE)

        conversation.is_archived = True
        session.add(conversation)
        session.flush()
        mark_changed(session, scope.topic(CHAT))
        logger.info("Archived conversation %s", conversation.id)
        return conversation

    @staticmethod
    def list_messages(session: Session, conversation_id: UUID) -> List[ChatMessage]:
        """Messages in ascending timestamp order."""
        query = (
            select(ChatMessage)
            .where(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.timestamp.asc())
        )
        return list(session.execute(query).scalars().all())

    @staticmethod
    def add_message(
        session: Session,
        scope: UserScope,
        conversation: Conversation,
        text: str,
        role: ChatRole
    ) -> ChatMessage:
        message = ChatMessage(conversation_id=conversation.id, text=text, role=role)
        session.add(message)
        session.flush()
        mark_changed(session, scope.topic(CHAT))
        return message

    @staticmethod
    def recent_history(
        session: Session,
        conversation_id: UUID,
        limit: int,
        exclude_id: Optional[UUID] = None
    ) -> List[ChatMessage]:
        """Last `limit` messages (ascending), optionally skipping one message."""
        query = select(ChatMessage).where(ChatMessage.conversation_id == conversation_id)
        if exclude_id is not None:
            query = query.where(ChatMessage.id != exclude_id)
        query = query.order_by(ChatMessage.timestamp.desc()).limit(limit)

        messages = list(session.execute(query).scalars().all())
        messages.reverse()
        return messages
