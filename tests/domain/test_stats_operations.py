"""Tests for journal statistics."""

import json
from collections import Counter

from app.domain.stats_operations import (
    INSIGHT_FIELDS,
    StatsOperations,
    tokenize,
    top_terms,
)
from app.models.database.dreams import ArchivedDream
from app.models.database.reality import Conversation, DailyEvent


def _archive(db_session, scope, analysis: str, matched: str = "") -> ArchivedDream:
    dream = ArchivedDream(
        app_id=scope.app_id,
        user_id=scope.user_id,
        dream_text="A dream",
        analysis_text=analysis,
        matched_reality_event=matched,
    )
    db_session.add(dream)
    db_session.flush()
    return dream


class TestTokenize:
    def test_drops_stop_words_and_single_characters(self):
        assert tokenize("I was walking in the Forest, a b c") == ["walking", "forest"]

    def test_splits_on_punctuation(self):
        assert tokenize("fear/anxiety; joy!") == ["fear", "anxiety", "joy"]


def test_top_terms_caps_at_five_and_keeps_first_seen_on_ties():
    counter = Counter(["b", "a", "c", "d", "e", "f", "a"])
    assert top_terms(counter) == [("a", 2), ("b", 1), ("c", 1), ("d", 1), ("e", 1)]


def test_totals(db_session, scope):
    _archive(db_session, scope, "{}", matched='Matched with daily event: "Lunch"')
    _archive(db_session, scope, "{}")
    db_session.add(DailyEvent(app_id=scope.app_id, user_id=scope.user_id, event_text="Lunch"))
    db_session.add(Conversation(app_id=scope.app_id, user_id=scope.user_id))
    db_session.flush()

    totals = StatsOperations.totals(db_session, scope)

    assert totals == {
        "total_dreams": 2,
        "total_events": 1,
        "total_chats": 1,
        "matched_dreams": 1,
    }


def test_field_presence_skips_unparsable(db_session, scope):
    _archive(db_session, scope, json.dumps({"location": "Beach", "timeInDream": "  "}))
    _archive(db_session, scope, json.dumps({"location": "Forest", "emotionalContent": "Fear"}))
    _archive(db_session, scope, "garbage")

    stats = StatsOperations.field_presence(db_session, scope)

    assert stats["presence"]["location"] == 2
    assert stats["presence"]["emotionalContent"] == 1
    assert stats["presence"]["timeInDream"] == 0
    assert stats["analyzed_dreams"] == 2
    assert stats["unparsable_dreams"] == 1


def test_insights_top_terms_per_field(db_session, scope):
    _archive(db_session, scope, json.dumps({"emotionalContent": "Fear and joy"}))
    _archive(db_session, scope, json.dumps({"emotionalContent": "fear, sadness"}))

    insights = StatsOperations.insights(db_session, scope)

    assert set(insights["fields"]) == set(INSIGHT_FIELDS)
    assert insights["fields"]["emotionalContent"][0] == {"term": "fear", "count": 2}
    assert len(insights["fields"]["emotionalContent"]) == 3
    assert insights["fields"]["location"] == []
