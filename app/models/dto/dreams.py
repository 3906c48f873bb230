"""DTOs for dream detail, analysis and suggestion endpoints."""

from enum import Enum

from pydantic import BaseModel, Field

from app.domain.time_scope import TimeScope
from app.models.database.dreams import ArchivedDreamRead


class AnalysisFormat(str, Enum):
    EXPANDED = "expanded"
    SUMMARY = "summary"


# ─────────────────────────────────────────────────────────────
# Request DTOs
# ─────────────────────────────────────────────────────────────


class HolisticAnalysisRequest(BaseModel):
    """Analyze every archived dream in a time scope as one text."""

    scope: TimeScope = TimeScope.LAST_7_DAYS
    format: AnalysisFormat = AnalysisFormat.EXPANDED


class AdHocAnalysisRequest(BaseModel):
    """Analyze text without archiving it."""

    dream_text: str
    dream_title: str = ""
    format: AnalysisFormat = AnalysisFormat.EXPANDED


# ─────────────────────────────────────────────────────────────
# Response DTOs
# ─────────────────────────────────────────────────────────────


class AnalysisSection(BaseModel):
    key: str
    heading: str
    text: str


class AnalysisView(BaseModel):
    """Rendered analysis. Never fails: parse errors land in raw_text."""

    format: AnalysisFormat
    sections: list[AnalysisSection] = Field(default_factory=list)
    summary: str | None = None
    message: str | None = None
    error: bool = False
    raw_text: str | None = None


class ArchivedDreamDetail(BaseModel):
    dream: ArchivedDreamRead
    analysis: AnalysisView


class AnalysisResult(BaseModel):
    """Display-only analysis (holistic or ad-hoc). Nothing is persisted."""

    dream_count: int
    analysis_text: str
    analysis: AnalysisView


class SuggestionResponse(BaseModel):
    suggestion: str
