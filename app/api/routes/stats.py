"""Statistics API endpoints. Every call recomputes from stored data."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.deps import get_user_scope
from app.core.database import get_db
from app.domain.persistence import UserScope
from app.domain.stats_operations import StatsOperations
from app.models.dto.stats import DreamFieldStats, InsightStats, StatsTotals

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/totals", response_model=StatsTotals, summary="Journal totals")
async def totals(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> StatsTotals:
    return StatsTotals(**StatsOperations.totals(db, scope))


@router.get("/dreams", response_model=DreamFieldStats, summary="Analysis field presence")
async def dream_field_stats(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> DreamFieldStats:
    """Dreams whose analysis does not parse are skipped and counted in unparsable_dreams."""
    return DreamFieldStats(**StatsOperations.field_presence(db, scope))


@router.get("/insights", response_model=InsightStats, summary="Top terms per insight field")
async def insights(
    scope: UserScope = Depends(get_user_scope),
    db: Session = Depends(get_db)
) -> InsightStats:
    return InsightStats(**StatsOperations.insights(db, scope))
