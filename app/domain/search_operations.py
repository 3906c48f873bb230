"""Keyword search across archived dreams and daily events.

All of the user's rows are fetched and filtered in Python: lowercase
substring match first, then the time window, newest first.
"""

from dataclasses import dataclass, field
from typing import List

from sqlmodel import Session

from app.domain.dream_operations import DreamOperations
from app.domain.exceptions import DomainValidationError
from app.domain.persistence import UserScope
from app.domain.reality_operations import RealityOperations
from app.domain.time_scope import TimeScope, filter_by_scope
from app.models.database.dreams import ArchivedDream
from app.models.database.mixins.timestamp import as_utc
from app.models.database.reality import DailyEvent

EMPTY_TERM_MESSAGE = "Please enter a search term."


@dataclass
class SearchHits:
    dreams: List[ArchivedDream] = field(default_factory=list)
    events: List[DailyEvent] = field(default_factory=list)


def dream_matches(dream: ArchivedDream, term: str) -> bool:
    return term in (dream.dream_text or "").lower() or term in (dream.dream_title or "").lower()


def event_matches(event: DailyEvent, term: str) -> bool:
    return term in (event.event_text or "").lower()


class SearchOperations:
    """Search logic. Static methods, read-only."""

    @staticmethod
    def search(
        session: Session,
        scope: UserScope,
        term: str,
        time_scope: TimeScope = TimeScope.ALL_TIME
    ) -> SearchHits:
        if not term or not term.strip():
            raise DomainValidationError(EMPTY_TERM_MESSAGE)
        needle = term.strip().lower()

        dreams = [
            dream for dream in DreamOperations.list_archived(session, scope)
            if dream_matches(dream, needle)
        ]
        events = [
            event for event in RealityOperations.list_events(session, scope)
            if event_matches(event, needle)
        ]

        dreams = filter_by_scope(dreams, time_scope)
        events = filter_by_scope(events, time_scope)

        dreams.sort(key=lambda d: as_utc(d.timestamp), reverse=True)
        events.sort(key=lambda e: as_utc(e.timestamp), reverse=True)
        return SearchHits(dreams=dreams, events=events)
