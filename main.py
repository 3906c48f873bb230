from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.router import api_router
from app.core.auth_cache import auth_cache
from app.core.config import settings
from app.core.database import verify_migrations
from app.domain.exceptions import (
    AuthenticationError,
    EntityNotFoundError,
    DuplicateEntityError,
    DomainValidationError,
    ExternalServiceError,
)
from app.core.logging_config import configure_logging
from app.middleware.rate_limit import get_rate_limiter, rate_limit_exceeded_handler
from app.services.llm import close_llm_clients

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    Configures logging, optionally checks migrations, and closes the
    shared HTTP clients on shutdown.
    """
    configure_logging()

    logger.info("FastAPI application starting up...")

    if settings.VERIFY_MIGRATIONS:
        verify_migrations()

    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set; analysis and chat will return 502")

    yield  # Application runs

    logger.info("FastAPI application shutting down...")
    await close_llm_clients()
    await auth_cache.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Set up rate limiter
limiter = get_rate_limiter()
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# Domain exception → HTTP response mapping
@app.exception_handler(EntityNotFoundError)
async def entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(DuplicateEntityError)
async def duplicate_entity_handler(request: Request, exc: DuplicateEntityError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(DomainValidationError)
async def domain_validation_handler(request: Request, exc: DomainValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(
        status_code=401,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(ExternalServiceError)
async def external_service_handler(request: Request, exc: ExternalServiceError):
    logger.warning(f"{exc.service} failed on {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Dream Weaver API",
        "version": settings.VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    # Must disable uvicorn's default access handlers and let our lifespan event handle it
    log_config = uvicorn.config.LOGGING_CONFIG.copy()
    log_config["loggers"]["uvicorn.access"] = {
        "handlers": [],  # Empty - handlers added by our filter in lifespan
        "level": "INFO",
        "propagate": False
    }

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_config=log_config
    )
