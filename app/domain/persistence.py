"""Scoped persistence helpers shared by the domain operations.

Every journal row lives under an (app_id, user_id) namespace. UserScope
carries that namespace explicitly into each operation, so no operation
reads identity from global state.

Writes that affect a live list call mark_changed(). The topic is parked
on session.info and published by the change feed after commit.
"""

from dataclasses import dataclass
from typing import Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlmodel import Session, SQLModel

from app.domain.exceptions import EntityNotFoundError

PENDING_TOPICS_KEY = "pending_change_topics"

# Live list names
DRAFTS = "drafts"
ARCHIVE = "archive"
EVENTS = "events"
CHAT = "chat"

ModelT = TypeVar("ModelT", bound=SQLModel)


@dataclass(frozen=True)
class UserScope:
    """(app_id, user_id) namespace for one user's journal."""
    app_id: str
    user_id: UUID

    def topic(self, name: str) -> str:
        return f"{self.app_id}:{self.user_id}:{name}"


def session_topic(auth_session_id: UUID) -> str:
    """Topic for sign-in state changes of one auth session."""
    return f"auth:{auth_session_id}"


def mark_changed(session: Session, topic: str) -> None:
    """Record that a live list must re-query once this transaction commits."""
    session.info.setdefault(PENDING_TOPICS_KEY, set()).add(topic)


def scoped_select(model: Type[ModelT], scope: UserScope):
    return select(model).where(
        model.app_id == scope.app_id,
        model.user_id == scope.user_id,
    )


def get_scoped(
    session: Session,
    model: Type[ModelT],
    scope: UserScope,
    entity_id: UUID,
    entity_name: str,
) -> ModelT:
    """Load a row by id, raising EntityNotFoundError when outside the scope."""
    row = session.get(model, entity_id)
    if row is None or row.app_id != scope.app_id or row.user_id != scope.user_id:
        raise EntityNotFoundError(entity_name, entity_id)
    return row


def count_scoped(session: Session, model: Type[ModelT], scope: UserScope, *criteria) -> int:
    query = (
        select(func.count())
        .select_from(model)
        .where(model.app_id == scope.app_id, model.user_id == scope.user_id, *criteria)
    )
    return session.execute(query).scalar_one()
