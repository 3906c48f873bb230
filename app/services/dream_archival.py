"""
Dream archival and display-only analysis.

archive_draft is the analyze-and-archive step: analysis first, then the
archive write and draft delete inside the caller's transaction. A failed
analysis leaves the draft untouched.
"""

import logging
from typing import Tuple
from uuid import UUID

from sqlmodel import Session

from app.domain.dream_operations import DreamOperations, EMPTY_DREAM_MESSAGE
from app.domain.exceptions import DomainValidationError, ExternalServiceError
from app.domain.persistence import UserScope
from app.domain.time_scope import TimeScope
from app.models.database.dreams import ArchivedDream
from app.services.analysis import analyze_dream
from app.services.llm import BaseLLMClient

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Analysis failed, dream not archived."
ANALYSIS_UNAVAILABLE_MESSAGE = "Analysis failed. Please try again."
LAST_NIGHT_HOLISTIC_MESSAGE = (
    'For "Last Night" analysis, please view the analysis of each dream individually.'
)


async def archive_draft(
    session: Session,
    scope: UserScope,
    llm: BaseLLMClient,
    draft_id: UUID,
) -> ArchivedDream:
    draft = DreamOperations.get_draft(session, scope, draft_id)

    analysis_text = await analyze_dream(llm, draft.dream_text, draft.dream_title)
    if analysis_text is None:
        logger.warning("Draft %s kept: analysis unavailable", draft_id)
        raise ExternalServiceError("gemini", ANALYSIS_FAILED_MESSAGE)

    return DreamOperations.archive_draft(session, scope, draft, analysis_text)


async def analyze_scope(
    session: Session,
    scope: UserScope,
    llm: BaseLLMClient,
    time_scope: TimeScope,
) -> Tuple[int, str]:
    """Holistic analysis of every archived dream in a window. Returns (count, analysis_text)."""
    if time_scope == TimeScope.LAST_NIGHT:
        raise DomainValidationError(LAST_NIGHT_HOLISTIC_MESSAGE)

    dreams = DreamOperations.list_archived_in_scope(session, scope, time_scope)
    if not dreams:
        raise DomainValidationError(
            f"No archived dreams found for {time_scope.value} to analyze."
        )

    combined = DreamOperations.combine_for_analysis(dreams)
    analysis_text = await analyze_dream(llm, combined)
    if analysis_text is None:
        raise ExternalServiceError("gemini", ANALYSIS_UNAVAILABLE_MESSAGE)
    return len(dreams), analysis_text


async def analyze_text(llm: BaseLLMClient, dream_text: str, dream_title: str = "") -> str:
    """Analyze text for display without storing anything."""
    if not dream_text or not dream_text.strip():
        raise DomainValidationError(EMPTY_DREAM_MESSAGE)

    analysis_text = await analyze_dream(llm, dream_text, dream_title)
    if analysis_text is None:
        raise ExternalServiceError("gemini", ANALYSIS_UNAVAILABLE_MESSAGE)
    return analysis_text
