"""In-process change feed behind the live-list streams.

Domain writes park topic names on session.info (see mark_changed). After
a successful commit the topics are published here; rollbacks discard
them. Subscribers wake on their topic and re-query. Several notifications
arriving before a subscriber wakes collapse into one re-query.

Commits usually happen in FastAPI's worker threads, so publish() hands
notifications to each subscriber's event loop thread-safely.
"""

import asyncio
import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

from sqlalchemy import event
from sqlmodel import Session

from app.domain.persistence import PENDING_TOPICS_KEY

logger = logging.getLogger(__name__)


class Subscription:
    """One listener on one topic, bound to the loop that created it."""

    def __init__(self, topic: str):
        self.topic = topic
        self._loop = asyncio.get_running_loop()
        self._event = asyncio.Event()

    def notify(self) -> None:
        try:
            self._loop.call_soon_threadsafe(self._event.set)
        except RuntimeError:
            # Loop already closed; the stream is gone
            pass

    async def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for a notification. Returns False on timeout."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        self._event.clear()
        return True


class ChangeFeed:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, Set[Subscription]] = defaultdict(set)

    def subscribe(self, topic: str) -> Subscription:
        subscription = Subscription(topic)
        with self._lock:
            self._subscribers[topic].add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscribers.get(subscription.topic)
            if subscribers is None:
                return
            subscribers.discard(subscription)
            if not subscribers:
                del self._subscribers[subscription.topic]

    @contextmanager
    def subscription(self, topic: str) -> Iterator[Subscription]:
        subscription = self.subscribe(topic)
        try:
            yield subscription
        finally:
            self.unsubscribe(subscription)

    def subscriber_count(self, topic: Optional[str] = None) -> int:
        """Open subscriptions on one topic, or on all topics when none is given."""
        with self._lock:
            if topic is None:
                return sum(len(subs) for subs in self._subscribers.values())
            return len(self._subscribers.get(topic, ()))

    def publish(self, topics: Iterable[str]) -> None:
        with self._lock:
            targets = [sub for topic in topics for sub in self._subscribers.get(topic, ())]
        for subscription in targets:
            subscription.notify()
        if targets:
            logger.debug("Published %d notification(s)", len(targets))


def diff_snapshots(
    previous: List[Dict[str, Any]],
    current: List[Dict[str, Any]],
    key: str = "id"
) -> Optional[Dict[str, Any]]:
    """
    Describe how a list changed between two snapshots.

    Returns {added, changed, removed, order} or None when nothing changed.
    added/changed hold full items, removed holds keys, order holds the
    keys of the current snapshot in display order.
    """
    before = {item[key]: item for item in previous}
    after = {item[key]: item for item in current}

    added = [item for item in current if item[key] not in before]
    changed = [item for item in current if item[key] in before and before[item[key]] != item]
    removed = [item[key] for item in previous if item[key] not in after]
    order = [item[key] for item in current]

    if not added and not changed and not removed and order == [item[key] for item in previous]:
        return None

    return {"added": added, "changed": changed, "removed": removed, "order": order}


change_feed = ChangeFeed()


@event.listens_for(Session, "after_commit")
def _publish_after_commit(session) -> None:
    topics = session.info.pop(PENDING_TOPICS_KEY, None)
    if topics:
        change_feed.publish(topics)


@event.listens_for(Session, "after_rollback")
def _discard_after_rollback(session) -> None:
    session.info.pop(PENDING_TOPICS_KEY, None)
