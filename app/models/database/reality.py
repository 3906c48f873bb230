"""Reality models - waking-life events and the AI chat log."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, Enum as SAEnum, ForeignKey, Index, Text, Uuid
from sqlmodel import Field, SQLModel

from app.models.database.dreams import ScopedRecord
from app.models.database.mixins.timestamp import utc_now


class DailyEventBase(SQLModel):
    """Shared fields for DailyEvent model."""
    event_text: str = Field(sa_type=Text)


class DailyEvent(DailyEventBase, ScopedRecord, table=True):
    """Logged waking-life event. Immutable once written."""
    __tablename__ = "daily_events"
    __table_args__ = (
        Index("ix_daily_events_scope_timestamp", "app_id", "user_id", "timestamp"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    timestamp: datetime = Field(default_factory=utc_now, nullable=False, sa_type=DateTime(timezone=True))


class DailyEventCreate(DailyEventBase):
    """Data required to create a DailyEvent."""
    pass


class DailyEventRead(DailyEventBase):
    """Data returned when reading a DailyEvent."""
    id: UUID
    timestamp: datetime


class Conversation(ScopedRecord, table=True):
    """Chat thread with the assistant. At most one unarchived per user."""
    __tablename__ = "conversations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    timestamp: datetime = Field(default_factory=utc_now, nullable=False, sa_type=DateTime(timezone=True))
    is_archived: bool = Field(default=False, index=True)


class ChatRole(str, Enum):
    """Who wrote a chat message."""
    USER = "user"
    MODEL = "model"


class ChatMessage(SQLModel, table=True):
    """Single message inside a Conversation."""
    __tablename__ = "chat_messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    conversation_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
    )
    text: str = Field(sa_type=Text)
    role: ChatRole = Field(
        sa_type=SAEnum(
            ChatRole,
            values_callable=lambda obj: [e.value for e in obj],
            native_enum=False,
            create_constraint=False,
        ),
    )
    timestamp: datetime = Field(default_factory=utc_now, nullable=False, sa_type=DateTime(timezone=True))


class ChatMessageRead(SQLModel):
    """Data returned when reading a ChatMessage."""
    id: UUID
    text: str
    role: ChatRole
    timestamp: datetime
