"""Domain operations for Dreams - business logic layer.

Drafts are editable, archived dreams carry an analysis and an optional
match. No transaction management - routes handle commits/rollbacks.

Pattern: Sync operations (FastAPI handles thread pool automatically).
"""

import logging
import random
from typing import List, Sequence
from uuid import UUID

from sqlmodel import Session

from app.domain.exceptions import DomainValidationError
from app.domain.persistence import (
    ARCHIVE,
    DRAFTS,
    UserScope,
    get_scoped,
    mark_changed,
    scoped_select,
)
from app.domain.time_scope import TimeScope, filter_by_scope
from app.models.database.dreams import (
    ArchivedDream,
    DraftDream,
    DraftDreamCreate,
    DraftDreamUpdate,
)
from app.models.database.mixins.timestamp import utc_now

logger = logging.getLogger(__name__)

EMPTY_DREAM_MESSAGE = "Please enter some text for your dream."
EMPTY_MATCH_MESSAGE = "Please describe the matched reality event."

DREAM_SUGGESTIONS = (
    "I will give special attention to the nature of time and space.",
    "I may dream of myself in dependent positions. I SUGGEST THAT MY SUBCONSCIOUS MAINTAINS THE ORGANIC INTEGRITY OF MY PHYSICAL ORGANISM.",
    "Constructive suggestions are given free reign, and only those will be reacted to.",
    "Suggestions are those that are in harmony with all levels of the personality structure.",
    "I suggest to wake up the moment my conscious Self finishes with the dream and record it.",
    "I remember my dreams from the more deeper levels of my subconsciousness.",
    "I ask my subconsciousness to recall my dreams.",
    "I will (wake up) after each of my first 5 dreams (and) record each one immediately.",
    "As I fall asleep, I awaken into another kind of wakefulness; Imagine I am awakening the 'next morning'.",
    "I am free of negative influences.",
)


def format_dream_text(dream_text: str, dream_title: str = "") -> str:
    """Text sent for analysis: title header only when a title exists."""
    if dream_title:
        return f"Title: {dream_title}\nDream: {dream_text}"
    return dream_text


class DreamOperations:
    """
    Dream business logic. Static methods, sync session-based, no commits.

    CRITICAL: All methods are SYNC (no async/await).
    FastAPI handles thread pool execution automatically.
    """

    # ─── Drafts ─────────────────────────────────────────────

    @staticmethod
    def create_draft(session: Session, scope: UserScope, data: DraftDreamCreate) -> DraftDream:
        if not data.dream_text or not data.dream_text.strip():
            raise DomainValidationError(EMPTY_DREAM_MESSAGE)

        draft = DraftDream(
            app_id=scope.app_id,
            user_id=scope.user_id,
            dream_text=data.dream_text,
            dream_title=data.dream_title or "",
            is_pre_analyzed=data.is_pre_analyzed,
        )
        session.add(draft)
        session.flush()
        mark_changed(session, scope.topic(DRAFTS))
        return draft

    @staticmethod
    def list_drafts(session: Session, scope: UserScope) -> List[DraftDream]:
        """Drafts newest first."""
        query = scoped_select(DraftDream, scope).order_by(DraftDream.timestamp.desc())
        return list(session.execute(query).scalars().all())

    @staticmethod
    def get_draft(session: Session, scope: UserScope, draft_id: UUID) -> DraftDream:
        return get_scoped(session, DraftDream, scope, draft_id, "Draft dream")

    @staticmethod
    def update_draft(
        session: Session,
        scope: UserScope,
        draft_id: UUID,
        data: DraftDreamUpdate
    ) -> DraftDream:
        """Partial update. Any edit refreshes the draft timestamp."""
        draft = DreamOperations.get_draft(session, scope, draft_id)
        update_dict = data.model_dump(exclude_unset=True)

        if "dream_text" in update_dict:
            text = update_dict["dream_text"]
            if text is None or not text.strip():
                raise DomainValidationError(EMPTY_DREAM_MESSAGE)
        if update_dict.get("dream_title") is None:
            update_dict.pop("dream_title", None)
        if update_dict.get("is_pre_analyzed") is None:
            update_dict.pop("is_pre_analyzed", None)

        for key, value in update_dict.items():
            setattr(draft, key, value)
        draft.timestamp = utc_now()

        session.add(draft)
        session.flush()
        mark_changed(session, scope.topic(DRAFTS))
        return draft

    @staticmethod
    def delete_draft(session: Session, scope: UserScope, draft_id: UUID) -> None:
        draft = DreamOperations.get_draft(session, scope, draft_id)
        session.delete(draft)
        session.flush()
        mark_changed(session, scope.topic(DRAFTS))

    # ─── Archive ────────────────────────────────────────────

    @staticmethod
    def archive_draft(
        session: Session,
        scope: UserScope,
        draft: DraftDream,
        analysis_text: str
    ) -> ArchivedDream:
        """
        Move a draft into the archive with its analysis.

        Writes the archived row and deletes the draft in the caller's
        transaction, so a failed commit leaves neither change behind.
        """
        archived = ArchivedDream(
            app_id=scope.app_id,
            user_id=scope.user_id,
            dream_text=draft.dream_text,
            dream_title=draft.dream_title or "",
            analysis_text=analysis_text,
            matched_reality_event="",
        )
        session.add(archived)
        session.delete(draft)
        session.flush()

        mark_changed(session, scope.topic(ARCHIVE))
        mark_changed(session, scope.topic(DRAFTS))
        logger.info("Archived draft %s as %s", draft.id, archived.id)
        return archived

    @staticmethod
    def list_archived(session: Session, scope: UserScope) -> List[ArchivedDream]:
        """Archived dreams newest first."""
        query = scoped_select(ArchivedDream, scope).order_by(ArchivedDream.timestamp.desc())
        return list(session.execute(query).scalars().all())

    @staticmethod
    def list_archived_in_scope(
        session: Session,
        scope: UserScope,
        time_scope: TimeScope
    ) -> List[ArchivedDream]:
        return filter_by_scope(DreamOperations.list_archived(session, scope), time_scope)

    @staticmethod
    def get_archived(session: Session, scope: UserScope, dream_id: UUID) -> ArchivedDream:
        return get_scoped(session, ArchivedDream, scope, dream_id, "Archived dream")

    @staticmethod
    def delete_archived(session: Session, scope: UserScope, dream_id: UUID) -> None:
        dream = DreamOperations.get_archived(session, scope, dream_id)
        session.delete(dream)
        session.flush()
        mark_changed(session, scope.topic(ARCHIVE))

    @staticmethod
    def set_match(
        session: Session,
        scope: UserScope,
        dream_id: UUID,
        matched_reality_event: str
    ) -> ArchivedDream:
        """Attach or replace the free-text reality match of an archived dream."""
        if not matched_reality_event or not matched_reality_event.strip():
            raise DomainValidationError(EMPTY_MATCH_MESSAGE)

        dream = DreamOperations.get_archived(session, scope, dream_id)
        dream.matched_reality_event = matched_reality_event.strip()
        session.add(dream)
        session.flush()
        mark_changed(session, scope.topic(ARCHIVE))
        return dream

    @staticmethod
    def list_matched(session: Session, scope: UserScope) -> List[ArchivedDream]:
        """Archived dreams with a non-empty match, newest first."""
        query = (
            scoped_select(ArchivedDream, scope)
            .where(ArchivedDream.matched_reality_event != "")
            .order_by(ArchivedDream.timestamp.desc())
        )
        return list(session.execute(query).scalars().all())

    # ─── Helpers ────────────────────────────────────────────

    @staticmethod
    def combine_for_analysis(dreams: Sequence[ArchivedDream]) -> str:
        """Join dreams into one analysis input, one titled block per dream."""
        return "\n\n---\n\n".join(
            format_dream_text(dream.dream_text, dream.dream_title) for dream in dreams
        )

    @staticmethod
    def random_suggestion() -> str:
        return random.choice(DREAM_SUGGESTIONS)
