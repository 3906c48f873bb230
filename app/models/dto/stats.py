"""DTOs for statistics endpoints."""

from pydantic import BaseModel, Field


class StatsTotals(BaseModel):
    total_dreams: int = 0
    total_events: int = 0
    total_chats: int = 0
    matched_dreams: int = 0


class DreamFieldStats(BaseModel):
    """Per-field presence counts across parsable archived dreams."""

    presence: dict[str, int] = Field(default_factory=dict)
    analyzed_dreams: int = 0
    unparsable_dreams: int = 0


class TermCount(BaseModel):
    term: str
    count: int


class InsightStats(BaseModel):
    """Top five terms per insight field."""

    fields: dict[str, list[TermCount]] = Field(default_factory=dict)
    unparsable_dreams: int = 0
