"""Dream models - drafts awaiting analysis and the analyzed archive.

A dream starts life as a DraftDream. Analysis moves it to ArchivedDream
(the draft row is deleted in the same transaction). Matching later fills
matched_reality_event; an empty string means "unmatched".
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index, Text
from sqlmodel import Field, SQLModel

from app.models.database.mixins.timestamp import utc_now


class ScopedRecord(SQLModel):
    """Namespace columns shared by every per-user journal table."""
    app_id: str = Field(max_length=255, index=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)


class DraftDreamBase(SQLModel):
    """Shared fields for DraftDream model."""
    dream_text: str = Field(sa_type=Text, description="Transcribed or typed dream")
    dream_title: str = Field(default="", max_length=255)
    is_pre_analyzed: bool = Field(default=False)


class DraftDream(DraftDreamBase, ScopedRecord, table=True):
    """Unanalyzed, editable dream entry."""
    __tablename__ = "draft_dreams"
    __table_args__ = (
        Index("ix_draft_dreams_scope_timestamp", "app_id", "user_id", "timestamp"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    timestamp: datetime = Field(default_factory=utc_now, nullable=False, sa_type=DateTime(timezone=True))


class DraftDreamCreate(DraftDreamBase):
    """Data required to create a DraftDream."""
    pass


class DraftDreamRead(DraftDreamBase):
    """Data returned when reading a DraftDream."""
    id: UUID
    timestamp: datetime


class DraftDreamUpdate(SQLModel):
    """Fields that can be updated."""
    dream_text: str | None = None
    dream_title: str | None = Field(default=None, max_length=255)
    is_pre_analyzed: bool | None = None


class ArchivedDreamBase(SQLModel):
    """Shared fields for ArchivedDream model."""
    dream_text: str = Field(sa_type=Text)
    analysis_text: str = Field(sa_type=Text, description="JSON-encoded structured analysis (opaque)")
    dream_title: str = Field(default="", max_length=255)
    matched_reality_event: str = Field(default="", sa_type=Text, description="Empty string means unmatched")


class ArchivedDream(ArchivedDreamBase, ScopedRecord, table=True):
    """Dream with completed analysis. Text is immutable, match is not."""
    __tablename__ = "archived_dreams"
    __table_args__ = (
        Index("ix_archived_dreams_scope_timestamp", "app_id", "user_id", "timestamp"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    timestamp: datetime = Field(default_factory=utc_now, nullable=False, sa_type=DateTime(timezone=True))


class ArchivedDreamRead(ArchivedDreamBase):
    """Data returned when reading an ArchivedDream."""
    id: UUID
    timestamp: datetime


class MatchUpdate(SQLModel):
    """Free-text link from an archived dream to a waking-life event."""
    matched_reality_event: str
