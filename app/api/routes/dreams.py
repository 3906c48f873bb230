"""Dreams API endpoints - drafts, archive, matches and analysis.

Pattern: Async routes + Sync domain operations.
Analysis calls are awaited; everything else is plain session work.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlmodel import Session

from app.api.deps import get_llm, get_user_scope
from app.api.streaming import live_query
from app.core.database import get_db
from app.domain.analysis_rendering import render_analysis
from app.domain.dream_operations import DreamOperations
from app.domain.persistence import ARCHIVE, DRAFTS, UserScope
from app.domain.time_scope import TimeScope
from app.models.database.dreams import (
    ArchivedDreamRead,
    DraftDreamCreate,
    DraftDreamRead,
    DraftDreamUpdate,
    MatchUpdate,
)
from app.models.dto.dreams import (
    AdHocAnalysisRequest,
    AnalysisFormat,
    AnalysisResult,
    ArchivedDreamDetail,
    HolisticAnalysisRequest,
    SuggestionResponse,
)
from app.services import dream_archival
from app.services.llm import BaseLLMClient

router = APIRouter(prefix="/dreams", tags=["dreams"])


# ─── Live streams (declared before /{id} routes) ───────────────


@router.get("/drafts/stream", summary="Stream draft list")
async def stream_drafts(request: Request, scope: UserScope = Depends(get_user_scope)):
    def fetch(session: Session):
        return [
            DraftDreamRead.model_validate(d).model_dump(mode="json")
            for d in DreamOperations.list_drafts(session, scope)
        ]
    return live_query(request, scope.topic(DRAFTS), fetch)


@router.get("/archive/stream", summary="Stream archived dream list")
async def stream_archive(request: Request, scope: UserScope = Depends(get_user_scope)):
    def fetch(session: Session):
        return [
            ArchivedDreamRead.model_validate(d).model_dump(mode="json")
            for d in DreamOperations.list_archived(session, scope)
        ]
    return live_query(request, scope.topic(ARCHIVE), fetch)


@router.get("/matches/stream", summary="Stream matched dream list")
async def stream_matches(request: Request, scope: UserScope = Depends(get_user_scope)):
    def fetch(session: Session):
        return [
            ArchivedDreamRead.model_validate(d).model_dump(mode="json")
            for d in DreamOperations.list_matched(session, scope)
        ]
    return live_query(request, scope.topic(ARCHIVE), fetch)


# ─── Drafts ────────────────────────────────────────────────────


@router.post(
    "/drafts",
    response_model=DraftDreamRead,
    status_code=status.HTTP_201_CREATED,
    summary="Save draft dream"
)
async def create_draft(
    data: DraftDreamCreate,
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> DraftDreamRead:
    """Save a recorded or typed dream as a draft. Blank text is rejected (400)."""
    draft = DreamOperations.create_draft(db, scope, data)  # No await!
    return DraftDreamRead.model_validate(draft)


@router.get("/drafts", response_model=List[DraftDreamRead], summary="List drafts")
async def list_drafts(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> List[DraftDreamRead]:
    """Drafts, newest first."""
    return [DraftDreamRead.model_validate(d) for d in DreamOperations.list_drafts(db, scope)]


@router.get("/drafts/{draft_id}", response_model=DraftDreamRead, summary="Get draft")
async def get_draft(
    draft_id: UUID,
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> DraftDreamRead:
    return DraftDreamRead.model_validate(DreamOperations.get_draft(db, scope, draft_id))


@router.patch("/drafts/{draft_id}", response_model=DraftDreamRead, summary="Edit draft")
async def update_draft(
    draft_id: UUID,
    data: DraftDreamUpdate,
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> DraftDreamRead:
    """Partial update. Refreshes the draft timestamp."""
    draft = DreamOperations.update_draft(db, scope, draft_id, data)
    return DraftDreamRead.model_validate(draft)


@router.delete("/drafts/{draft_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete draft")
async def delete_draft(
    draft_id: UUID,
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> Response:
    DreamOperations.delete_draft(db, scope, draft_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/drafts/{draft_id}/archive",
    response_model=ArchivedDreamRead,
    status_code=status.HTTP_201_CREATED,
    summary="Analyze and archive draft"
)
async def archive_draft(
    draft_id: UUID,
    scope: UserScope = Depends(get_user_scope),
    llm: BaseLLMClient = Depends(get_llm),
    db: Session = Depends(get_db)
) -> ArchivedDreamRead:
    """
    Analyze the draft, write the archived dream and delete the draft.

    The archive write and draft delete commit together. When analysis
    yields nothing the draft is kept and the response is 502.
    """
    archived = await dream_archival.archive_draft(db, scope, llm, draft_id)
    return ArchivedDreamRead.model_validate(archived)


# ─── Archive ───────────────────────────────────────────────────


@router.get("/archive", response_model=List[ArchivedDreamRead], summary="List archived dreams")
async def list_archived(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> List[ArchivedDreamRead]:
    return [ArchivedDreamRead.model_validate(d) for d in DreamOperations.list_archived(db, scope)]


@router.get("/archive/{dream_id}", response_model=ArchivedDreamDetail, summary="Get archived dream detail")
async def get_archived(
    dream_id: UUID,
    format: AnalysisFormat = Query(AnalysisFormat.EXPANDED, description="expanded or summary"),
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> ArchivedDreamDetail:
    """Dream plus rendered analysis. Unparsable analysis falls back to raw text."""
    dream = DreamOperations.get_archived(db, scope, dream_id)
    return ArchivedDreamDetail(
        dream=ArchivedDreamRead.model_validate(dream),
        analysis=render_analysis(dream.analysis_text, format),
    )


@router.delete("/archive/{dream_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete archived dream")
async def delete_archived(
    dream_id: UUID,
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> Response:
    DreamOperations.delete_archived(db, scope, dream_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/archive/{dream_id}/match", response_model=ArchivedDreamRead, summary="Attach reality match")
async def set_match(
    dream_id: UUID,
    data: MatchUpdate,
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> ArchivedDreamRead:
    dream = DreamOperations.set_match(db, scope, dream_id, data.matched_reality_event)
    return ArchivedDreamRead.model_validate(dream)


@router.get("/matches", response_model=List[ArchivedDreamRead], summary="List matched dreams")
async def list_matched(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> List[ArchivedDreamRead]:
    return [ArchivedDreamRead.model_validate(d) for d in DreamOperations.list_matched(db, scope)]


# ─── Analysis ──────────────────────────────────────────────────


@router.get("/analysis", response_model=List[ArchivedDreamRead], summary="Archived dreams in a time scope")
async def list_for_analysis(
    scope_name: TimeScope = Query(TimeScope.LAST_NIGHT, alias="scope"),
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> List[ArchivedDreamRead]:
    dreams = DreamOperations.list_archived_in_scope(db, scope, scope_name)
    return [ArchivedDreamRead.model_validate(d) for d in dreams]


@router.post("/analysis", response_model=AnalysisResult, summary="Holistic analysis of a time scope")
async def analyze_time_scope(
    data: HolisticAnalysisRequest,
    scope: UserScope = Depends(get_user_scope),
    llm: BaseLLMClient = Depends(get_llm),
    db: Session = Depends(get_db)
) -> AnalysisResult:
    """Analyze all archived dreams in the window as one text. Nothing is stored."""
    count, analysis_text = await dream_archival.analyze_scope(db, scope, llm, data.scope)
    return AnalysisResult(
        dream_count=count,
        analysis_text=analysis_text,
        analysis=render_analysis(analysis_text, data.format),
    )


@router.post("/analyze", response_model=AnalysisResult, summary="Analyze text without archiving")
async def analyze_ad_hoc(
    data: AdHocAnalysisRequest,
    scope: UserScope = Depends(get_user_scope),
    llm: BaseLLMClient = Depends(get_llm)
) -> AnalysisResult:
    analysis_text = await dream_archival.analyze_text(llm, data.dream_text, data.dream_title)
    return AnalysisResult(
        dream_count=1,
        analysis_text=analysis_text,
        analysis=render_analysis(analysis_text, data.format),
    )


@router.get("/suggestions/random", response_model=SuggestionResponse, summary="Random pre-sleep suggestion")
async def random_suggestion(scope: UserScope = Depends(get_user_scope)) -> SuggestionResponse:
    return SuggestionResponse(suggestion=DreamOperations.random_suggestion())
