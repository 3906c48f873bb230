"""DTOs for search and manual match selection."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.database.dreams import ArchivedDreamRead
from app.models.database.reality import DailyEventRead


class SearchResults(BaseModel):
    dreams: list[ArchivedDreamRead] = Field(default_factory=list)
    events: list[DailyEventRead] = Field(default_factory=list)


class SelectionKind(str, Enum):
    DREAM = "dream"
    EVENT = "event"


class SelectionUpdate(BaseModel):
    """Checkbox toggle from a search result row."""

    kind: SelectionKind
    id: UUID
    checked: bool = True


class SelectionState(BaseModel):
    dream_id: UUID | None = None
    event_id: UUID | None = None
    can_match: bool = False
