"""Tests for keyword search across dreams and events."""

from datetime import timedelta
from uuid import uuid4

import pytest

from app.domain.exceptions import DomainValidationError
from app.domain.persistence import UserScope
from app.domain.search_operations import EMPTY_TERM_MESSAGE, SearchOperations
from app.domain.time_scope import TimeScope
from app.models.database.dreams import ArchivedDream
from app.models.database.mixins.timestamp import utc_now
from app.models.database.reality import DailyEvent


def _dream(scope, text, title="", age_days=0):
    return ArchivedDream(
        app_id=scope.app_id,
        user_id=scope.user_id,
        dream_text=text,
        dream_title=title,
        analysis_text="{}",
        timestamp=utc_now() - timedelta(days=age_days),
    )


def _event(scope, text, age_days=0):
    return DailyEvent(
        app_id=scope.app_id,
        user_id=scope.user_id,
        event_text=text,
        timestamp=utc_now() - timedelta(days=age_days),
    )


def test_case_insensitive_match_on_text_and_title(db_session, scope):
    db_session.add_all([
        _dream(scope, "I saw a big OCEAN", age_days=2),
        _dream(scope, "Nothing relevant", title="Ocean voyage", age_days=1),
        _dream(scope, "A mountain"),
        _event(scope, "Went to the ocean with friends"),
        _event(scope, "Worked late"),
    ])
    db_session.flush()

    hits = SearchOperations.search(db_session, scope, "  ocean ")

    assert [d.dream_title for d in hits.dreams] == ["Ocean voyage", ""]
    assert [e.event_text for e in hits.events] == ["Went to the ocean with friends"]


def test_time_scope_applies_after_match(db_session, scope):
    db_session.add_all([
        _dream(scope, "ocean today"),
        _dream(scope, "ocean last month", age_days=20),
    ])
    db_session.flush()

    hits = SearchOperations.search(db_session, scope, "ocean", TimeScope.LAST_7_DAYS)

    assert [d.dream_text for d in hits.dreams] == ["ocean today"]


def test_blank_term_rejected(db_session, scope):
    with pytest.raises(DomainValidationError) as exc_info:
        SearchOperations.search(db_session, scope, "   ")
    assert str(exc_info.value) == EMPTY_TERM_MESSAGE


def test_other_users_rows_not_returned(db_session, scope):
    other = UserScope(app_id=scope.app_id, user_id=uuid4())
    db_session.add_all([_dream(other, "ocean"), _event(other, "ocean")])
    db_session.flush()

    hits = SearchOperations.search(db_session, scope, "ocean")

    assert hits.dreams == []
    assert hits.events == []
