"""Main API router aggregation."""

from fastapi import APIRouter

from app.api.routes import auth, dreams, health, reality, search, stats

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(dreams.router, tags=["dreams"])
api_router.include_router(reality.router, tags=["reality"])
api_router.include_router(search.router, tags=["search"])
api_router.include_router(stats.router, tags=["stats"])
