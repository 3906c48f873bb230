"""Server-Sent Event streams for live lists.

A stream subscribes to its change topic, sends the full list once as a
`snapshot` event, then re-queries whenever the topic fires and sends a
`diff` event only if the list actually changed.
"""

import json
import logging
from typing import Any, Callable, Dict, List

from fastapi import Request
from sse_starlette.sse import EventSourceResponse
from starlette.concurrency import run_in_threadpool
from sqlmodel import Session

from app.core.config import settings
from app.core.database import get_db_session
from app.services.change_feed import change_feed, diff_snapshots

logger = logging.getLogger(__name__)

SnapshotQuery = Callable[[Session], List[Dict[str, Any]]]


def _run_query(fetch: SnapshotQuery) -> List[Dict[str, Any]]:
    with get_db_session() as session:
        return fetch(session)


def live_query(request: Request, topic: str, fetch: SnapshotQuery) -> EventSourceResponse:
    """
    Stream a list as snapshot + diffs.

    Args:
        request: Incoming request (used for disconnect detection)
        topic: Change topic that invalidates the list
        fetch: Sync query returning JSON-ready items with an "id" key
    """
    async def event_generator():
        # Subscribe before the first read so no commit slips between them
        with change_feed.subscription(topic) as subscription:
            snapshot = await run_in_threadpool(_run_query, fetch)
            yield {"event": "snapshot", "data": json.dumps(snapshot)}

            while True:
                if await request.is_disconnected():
                    logger.debug("Stream on %s closed by client", topic)
                    return

                notified = await subscription.wait(settings.STREAM_KEEPALIVE_SECONDS)
                if not notified:
                    continue

                current = await run_in_threadpool(_run_query, fetch)
                delta = diff_snapshots(snapshot, current)
                snapshot = current
                if delta is not None:
                    yield {"event": "diff", "data": json.dumps(delta)}

    return EventSourceResponse(event_generator(), ping=int(settings.STREAM_KEEPALIVE_SECONDS))
