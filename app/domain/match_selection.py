"""Manual dream/event match selection.

Selection is per signed-in session and holds at most one dream and one
event. Checking a second item of the same kind replaces the first.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional
from uuid import UUID

from sqlmodel import Session

from app.core.config import settings
from app.domain.dream_operations import DreamOperations
from app.domain.exceptions import DomainValidationError
from app.domain.persistence import UserScope
from app.domain.reality_operations import RealityOperations
from app.models.database.dreams import ArchivedDream
from app.models.database.mixins.timestamp import utc_now

SELECTION_INCOMPLETE_MESSAGE = "Please select exactly one dream and one daily event to match."


def match_text_for_event(event_text: str) -> str:
    return f'Matched with daily event: "{event_text}"'


@dataclass
class MatchSelection:
    dream_id: Optional[UUID] = None
    event_id: Optional[UUID] = None

    @property
    def can_match(self) -> bool:
        return self.dream_id is not None and self.event_id is not None

    def toggle_dream(self, dream_id: UUID, checked: bool) -> None:
        if checked:
            self.dream_id = dream_id
        elif self.dream_id == dream_id:
            self.dream_id = None

    def toggle_event(self, event_id: UUID, checked: bool) -> None:
        if checked:
            self.event_id = event_id
        elif self.event_id == event_id:
            self.event_id = None

    def clear(self) -> None:
        self.dream_id = None
        self.event_id = None


@dataclass
class SessionState:
    """Client-interaction state owned by one auth session."""
    selection: MatchSelection = field(default_factory=MatchSelection)
    last_seen: datetime = field(default_factory=utc_now)


class SessionStateRegistry:
    """
    In-process SessionState store keyed by auth session id.

    Sign-out and rejected tokens drop their entry. Entries idle longer
    than max_idle are pruned on access.
    """

    def __init__(self, max_idle: Optional[timedelta] = None):
        self._lock = threading.Lock()
        self._states: Dict[UUID, SessionState] = {}
        self.max_idle = max_idle

    def get(self, auth_session_id: UUID, now: Optional[datetime] = None) -> SessionState:
        now = now or utc_now()
        with self._lock:
            self._prune(now)
            state = self._states.get(auth_session_id)
            if state is None:
                state = SessionState()
                self._states[auth_session_id] = state
            state.last_seen = now
            return state

    def _prune(self, now: datetime) -> None:
        if self.max_idle is None:
            return
        cutoff = now - self.max_idle
        stale = [sid for sid, state in self._states.items() if state.last_seen < cutoff]
        for sid in stale:
            del self._states[sid]

    def discard(self, auth_session_id: UUID) -> None:
        with self._lock:
            self._states.pop(auth_session_id, None)


# A session idle longer than a token lifetime can no longer be used
session_states = SessionStateRegistry(max_idle=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


class MatchOperations:
    """Apply a completed selection. Static methods, no commits."""

    @staticmethod
    def apply(session: Session, scope: UserScope, selection: MatchSelection) -> ArchivedDream:
        if not selection.can_match:
            raise DomainValidationError(SELECTION_INCOMPLETE_MESSAGE)

        event = RealityOperations.get_event(session, scope, selection.event_id)
        dream = DreamOperations.set_match(
            session, scope, selection.dream_id, match_text_for_event(event.event_text)
        )
        selection.clear()
        return dream
