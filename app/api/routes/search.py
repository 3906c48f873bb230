"""Search API endpoints - keyword search and manual match selection."""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.api.deps import get_session_state, get_user_scope
from app.core.database import get_db
from app.domain.match_selection import MatchOperations, SessionState
from app.domain.persistence import UserScope
from app.domain.search_operations import SearchOperations
from app.domain.time_scope import TimeScope
from app.models.database.dreams import ArchivedDreamRead
from app.models.database.reality import DailyEventRead
from app.models.dto.search import SearchResults, SelectionKind, SelectionState, SelectionUpdate

router = APIRouter(prefix="/search", tags=["search"])


def _selection_state(state: SessionState) -> SelectionState:
    selection = state.selection
    return SelectionState(
        dream_id=selection.dream_id,
        event_id=selection.event_id,
        can_match=selection.can_match,
    )


@router.get("", response_model=SearchResults, summary="Search dreams and daily events")
async def search(
    q: str = Query("", description="Search term (case-insensitive substring)"),
    time_scope: TimeScope = Query(TimeScope.ALL_TIME, alias="scope"),
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> SearchResults:
    """Dreams match on text or title, events on text. Newest first. Blank term is 400."""
    hits = SearchOperations.search(db, scope, q, time_scope)
    return SearchResults(
        dreams=[ArchivedDreamRead.model_validate(d) for d in hits.dreams],
        events=[DailyEventRead.model_validate(e) for e in hits.events],
    )


@router.get("/selection", response_model=SelectionState, summary="Current match selection")
async def get_selection(state: SessionState = Depends(get_session_state)) -> SelectionState:
    return _selection_state(state)


@router.post("/selection", response_model=SelectionState, summary="Check or uncheck a result")
async def update_selection(
    data: SelectionUpdate,
    state: SessionState = Depends(get_session_state)
) -> SelectionState:
    """Checking a second item of the same kind replaces the first."""
    if data.kind == SelectionKind.DREAM:
        state.selection.toggle_dream(data.id, data.checked)
    else:
        state.selection.toggle_event(data.id, data.checked)
    return _selection_state(state)


@router.post("/selection/match", response_model=ArchivedDreamRead, summary="Match selected dream and event")
async def match_selection(
    scope: UserScope = Depends(get_user_scope),
    state: SessionState = Depends(get_session_state),
    db: Session = Depends(get_db)
) -> ArchivedDreamRead:
    """Write the event onto the selected dream and clear the selection."""
    dream = MatchOperations.apply(db, scope, state.selection)
    return ArchivedDreamRead.model_validate(dream)
