"""Statistics over the user's journal.

Every call recomputes from all archived dreams; nothing is cached.
Dreams whose analysis does not parse are skipped and counted.
"""

import logging
import re
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from sqlmodel import Session

from app.domain.analysis_rendering import ANALYSIS_FIELDS, field_text, parse_analysis
from app.domain.dream_operations import DreamOperations
from app.domain.persistence import UserScope, count_scoped
from app.models.database.dreams import ArchivedDream
from app.models.database.reality import Conversation, DailyEvent

logger = logging.getLogger(__name__)

TOP_TERMS_LIMIT = 5

INSIGHT_FIELDS = (
    "emotionalContent",
    "location",
    "familiarPersonsSpokenTo",
    "actionsPerformed",
    "surfacePsychologicalContent",
    "messagesReceived",
)

STOP_WORDS = frozenset([
    "a", "an", "the", "and", "but", "or", "for", "nor", "on", "at", "to", "from", "by", "with",
    "in", "out", "into", "through", "over", "under", "of", "about", "above", "below", "up", "down",
    "then", "now", "here", "there", "when", "where", "why", "how", "all", "any", "both", "each",
    "few", "more", "most", "other", "some", "such", "no", "not", "only", "own", "same", "so",
    "than", "too", "very", "s", "t", "can", "will", "just", "don", "should", "ve", "ll",
    "m", "re", "d", "this", "that", "these", "those", "is", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "doing", "would", "could", "shall", "may", "might",
    "must", "it", "its", "i", "me", "my", "myself", "we", "us", "our", "ours", "ourselves", "you",
    "your", "yours", "yourself", "yourselves", "he", "him", "his", "himself", "she", "her", "hers",
    "herself", "itself", "they", "them", "their", "theirs", "themselves", "what",
    "which", "who", "whom", "whose", "am", "are", "having", "go", "went",
    "gone", "goes", "going", "come", "came", "comes", "coming", "say", "says", "said", "saying",
    "make", "makes", "made", "making", "get", "gets", "got", "getting", "see", "sees", "saw", "seeing",
    "know", "knows", "knew", "knowing", "take", "takes", "took", "taking", "think", "thinks", "thought",
    "thinking", "look", "looks", "looked", "looking", "want", "wants", "wanted", "wanting", "give",
    "gives", "gave", "giving", "use", "uses", "used", "using", "find", "finds", "found", "finding",
    "tell", "tells", "told", "telling", "ask", "asks", "asked", "asking", "work", "works", "worked",
    "working", "seem", "seems", "seemed", "seeming", "feel", "feels", "felt", "feeling", "try",
    "tries", "tried", "trying", "leave", "leaves", "left", "leaving", "call", "calls", "called",
    "calling", "also", "much", "often", "always", "never", "sometimes", "usually",
    "really", "even", "still", "yet", "already", "almost", "around", "away", "back",
    "forward", "off", "beneath", "beside", "between", "beyond", "despite", "during", "except",
    "inside", "like", "near", "onto", "opposite", "outside", "past", "per", "plus", "round",
    "save", "since", "toward", "underneath", "until", "upon", "within", "without",
    "i'm", "you're", "he's", "she's", "it's", "we're", "they're", "i've", "you've", "we've",
    "they've", "i'd", "you'd", "he'd", "she'd", "we'd", "they'd", "i'll", "you'll", "he'll",
    "she'll", "it'll", "we'll", "they'll", "isn't", "aren't", "wasn't", "weren't", "hasn't",
    "haven't", "hadn't", "doesn't", "don't", "didn't", "won't", "wouldn't", "shan't", "shouldn't",
    "can't", "cannot", "couldn't", "mustn't", "here's", "there's", "what's", "where's", "when's",
    "why's", "how's", "let's", "that's", "who's", "whom's", "whose's", "this's", "these's",
    "those's", "mr", "mrs", "ms", "dr", "prof", "etc", "e.g.", "i.e.", "vs", "via", "eg", "ie",
    "fig", "figs", "cf", "viz",
])

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


def tokenize(text: str) -> List[str]:
    """Lowercase, split on non-alphanumerics, drop short tokens and stop words."""
    return [
        word for word in _TOKEN_SPLIT.split(text.lower())
        if len(word) > 1 and word not in STOP_WORDS
    ]


def top_terms(counter: Counter, limit: int = TOP_TERMS_LIMIT) -> List[Tuple[str, int]]:
    # Counter keeps insertion order and sorted() is stable, so ties stay first-seen
    return sorted(counter.items(), key=lambda item: item[1], reverse=True)[:limit]


def parsed_analyses(dreams: Iterable[ArchivedDream]) -> Tuple[List[Dict], int]:
    """Parse each dream's analysis, returning (analyses, skipped_count)."""
    analyses = []
    skipped = 0
    for dream in dreams:
        try:
            analyses.append(parse_analysis(dream.analysis_text))
        except (ValueError, TypeError) as e:
            skipped += 1
            logger.warning("Skipping dream %s with unparsable analysis: %s", dream.id, e)
    return analyses, skipped


class StatsOperations:
    """Aggregations. Static methods, read-only."""

    @staticmethod
    def totals(session: Session, scope: UserScope) -> Dict[str, int]:
        return {
            "total_dreams": count_scoped(session, ArchivedDream, scope),
            "total_events": count_scoped(session, DailyEvent, scope),
            "total_chats": count_scoped(session, Conversation, scope),
            "matched_dreams": count_scoped(
                session, ArchivedDream, scope, ArchivedDream.matched_reality_event != ""
            ),
        }

    @staticmethod
    def field_presence(session: Session, scope: UserScope) -> Dict:
        """Count of dreams with each analysis field non-empty after trimming."""
        analyses, skipped = parsed_analyses(DreamOperations.list_archived(session, scope))

        presence = {key: 0 for key in ANALYSIS_FIELDS}
        for analysis in analyses:
            for key in ANALYSIS_FIELDS:
                if field_text(analysis, key).strip():
                    presence[key] += 1

        return {
            "presence": presence,
            "analyzed_dreams": len(analyses),
            "unparsable_dreams": skipped,
        }

    @staticmethod
    def insights(session: Session, scope: UserScope) -> Dict:
        """Top terms per insight field."""
        analyses, skipped = parsed_analyses(DreamOperations.list_archived(session, scope))

        frequencies = {key: Counter() for key in INSIGHT_FIELDS}
        for analysis in analyses:
            for key in INSIGHT_FIELDS:
                text = field_text(analysis, key)
                if text:
                    frequencies[key].update(tokenize(text))

        return {
            "fields": {
                key: [{"term": term, "count": count} for term, count in top_terms(counter)]
                for key, counter in frequencies.items()
            },
            "unparsable_dreams": skipped,
        }
