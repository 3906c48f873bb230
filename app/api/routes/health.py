from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlmodel import Session

from app.core.config import settings
from app.core.database import get_db
from app.models.database.mixins.timestamp import utc_now
from app.services.change_feed import change_feed

router = APIRouter()


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """
    Readiness check.

    Reports database connectivity, whether the AI key is configured and
    how many live-list streams are open. A database failure degrades the
    status; a missing AI key does not (journaling still works without it).
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "timestamp": utc_now().isoformat(),
        "checks": {
            "database": db_status,
            "ai": "configured" if settings.GEMINI_API_KEY else "missing_api_key",
            "live_streams": change_feed.subscriber_count(),
        }
    }


@router.get("/healthz")
async def healthz():
    """Liveness probe, no database access."""
    return {"status": "healthy"}
