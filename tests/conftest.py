"""
Pytest configuration and fixtures for testing.

Tests run against an in-memory SQLite database. The environment is set
before any app module is imported, since settings and the engine are
built at import time.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["VERIFY_MIGRATIONS"] = "false"

import pytest
from sqlmodel import SQLModel

from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.domain.persistence import UserScope

# Import all models so their tables are registered on the metadata
from app.models.database.user import AuthProvider, User, AuthSession
from app.models.database.dreams import DraftDream, ArchivedDream
from app.models.database.reality import DailyEvent, Conversation, ChatMessage


@pytest.fixture(autouse=True)
def create_tables():
    """Fresh schema for every test."""
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="db_session", scope="function")
def db_session_fixture():
    """
    Provides a database session for each test.

    Rolls back whatever the test left uncommitted.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_user(db_session) -> User:
    user = User(email="dreamer@example.com", provider=AuthProvider.PASSWORD)
    db_session.add(user)
    db_session.flush()
    return user


@pytest.fixture
def scope(test_user) -> UserScope:
    """Journal namespace of test_user."""
    return UserScope(app_id=settings.APP_ID, user_id=test_user.id)
