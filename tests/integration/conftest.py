"""
Integration test fixtures for FastAPI TestClient.

Provides:
- Test app mirroring main.py's exception handlers (no lifespan)
- A signed-up user and an authenticated TestClient
- FakeLLM standing in for the Gemini client via dependency override

Strategy:
- Real routes, real domain operations, real session tokens
- In-memory SQLite schema recreated per test (tests/conftest.py)
"""

import json
import pytest
from contextlib import asynccontextmanager
from typing import Any, Dict, Generator, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from app.api.deps import get_llm, session_states
from app.api.router import api_router
from app.core.config import settings
from app.domain.exceptions import (
    AuthenticationError,
    DomainValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
    ExternalServiceError,
)
from app.services.llm import BaseLLMClient


SAMPLE_ANALYSIS = {
    "actionsPerformed": "Flying over the ocean",
    "location": "A lighthouse by the sea",
    "timeInDream": "Dusk",
    "movementsThroughTime": "",
    "emotionalContent": "Calm, then anxious",
    "surfacePsychologicalContent": "Desire for freedom",
    "workDoneInDream": "",
    "familiarPersonsSpokenTo": "My sister",
    "relationToPastEvents": "Childhood holidays",
    "relationToFutureEvents": "",
    "messagesReceived": "Keep going",
    "awarenessOfSpace": "Vast open sky",
}


class FakeLLM(BaseLLMClient):
    """Records requests and replies with canned text (None = failure)."""

    def __init__(self):
        self.text_reply: Optional[str] = json.dumps(SAMPLE_ANALYSIS)
        self.image_reply: Optional[str] = "aW1hZ2U="
        self.content_calls: List[Dict[str, Any]] = []
        self.image_calls: List[str] = []

    async def generate_content(self, contents, generation_config=None):
        self.content_calls.append({"contents": contents, "generation_config": generation_config})
        return self.text_reply

    async def generate_image(self, prompt):
        self.image_calls.append(prompt)
        return self.image_reply


# ---------------------------------------------------------------------------
# App Factory (no lifespan)
# ---------------------------------------------------------------------------

@asynccontextmanager
async def test_lifespan(app: FastAPI):
    """Minimal lifespan with no startup checks."""
    yield


def create_test_app() -> FastAPI:
    """Create FastAPI app for testing.

    Registers domain exception handlers to match production behavior (main.py).
    """
    app = FastAPI(
        title="Dream Weaver Test API",
        lifespan=test_lifespan,
    )

    # Domain exception → HTTP response mapping (mirrors main.py)
    @app.exception_handler(EntityNotFoundError)
    async def _not_found(request, exc):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DuplicateEntityError)
    async def _duplicate(request, exc):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(DomainValidationError)
    async def _validation(request, exc):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AuthenticationError)
    async def _unauthenticated(request, exc):
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.exception_handler(ExternalServiceError)
    async def _upstream(request, exc):
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


# ---------------------------------------------------------------------------
# Client Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def app(fake_llm: FakeLLM) -> Generator[FastAPI, None, None]:
    test_app = create_test_app()
    test_app.dependency_overrides[get_llm] = lambda: fake_llm
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
def anon_client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Client without credentials."""
    with TestClient(app) as c:
        yield c


def _sign_up(client: TestClient, email: str, password: str) -> dict:
    response = client.post("/api/auth/sign-up", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def sign_up(anon_client: TestClient):
    """Register a password user through the API; returns the token response."""
    def _register(email: str = "dreamer@example.com", password: str = "secret123") -> dict:
        return _sign_up(anon_client, email, password)
    return _register


@pytest.fixture
def auth_token(sign_up) -> str:
    return sign_up()["access_token"]


@pytest.fixture
def client(app: FastAPI, auth_token: str) -> Generator[TestClient, None, None]:
    """Client authenticated as a freshly signed-up user."""
    with TestClient(app, headers={"Authorization": f"Bearer {auth_token}"}) as c:
        yield c
    session_states._states.clear()


@pytest.fixture
def archive_dream(client: TestClient):
    """Save a draft and archive it through the API; returns the archived dream."""
    def _archive(text: str, title: str = "") -> dict:
        draft = client.post("/api/dreams/drafts", json={"dream_text": text, "dream_title": title})
        assert draft.status_code == 201, draft.text
        archived = client.post(f"/api/dreams/drafts/{draft.json()['id']}/archive")
        assert archived.status_code == 201, archived.text
        return archived.json()
    return _archive
