"""
Database connection and session management.

Uses synchronous SQLAlchemy. PostgreSQL runs with NullPool (pooling delegated
to pgBouncer at infrastructure level); SQLite runs on a single shared
connection so in-memory databases survive across sessions.
"""

from typing import Generator
from contextlib import contextmanager
from urllib.parse import urlparse
from sqlmodel import Session, create_engine
from sqlalchemy.pool import NullPool, StaticPool
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Ensure PostgreSQL URLs use the psycopg (v3) driver."""
    if not url:
        raise ValueError("DATABASE_URL could not be constructed from settings")

    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql+psycopg://") or url.startswith("sqlite"):
        return url
    raise ValueError("DATABASE_URL must start with postgresql://, postgresql+psycopg:// or sqlite")


DATABASE_URL = normalize_database_url(settings.DATABASE_URL)
IS_SQLITE = DATABASE_URL.startswith("sqlite")

db_url = urlparse(DATABASE_URL)
if IS_SQLITE:
    logger.info("Database driver: sqlite (StaticPool, single connection)")
    engine = create_engine(
        DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False
    )
else:
    logger.info(f"Database driver: postgresql+psycopg, host: {db_url.hostname}, port: {db_url.port}")
    engine = create_engine(
        DATABASE_URL,
        poolclass=NullPool,       # Let pgBouncer handle all pooling
        connect_args={
            "prepare_threshold": None,  # pgBouncer transaction mode breaks prepared statements
        },
        pool_pre_ping=True,
        echo=False
    )

# expire_on_commit=False so objects stay readable after the request commits
SessionLocal = sessionmaker(
    bind=engine,
    class_=Session,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False
)


def verify_migrations() -> None:
    # Verify that database migrations have been applied.
    logger.info("Verifying database migrations...")
    with Session(engine) as session:
        try:
            current_version = session.execute(text("SELECT version_num FROM alembic_version")).scalar()
        except Exception as e:
            logger.error(f"Failed to read alembic_version: {e}")
            raise RuntimeError(
                "Database schema not initialized. "
                "Please run 'alembic upgrade head' before starting the application."
            ) from e

    if current_version:
        logger.info(f"Database migrations verified (current: {current_version})")
    else:
        logger.warning("No migration version found in alembic_version table")


def get_db() -> Generator[Session, None, None]:
    # Request-scoped session: commit on success, rollback on any exception.
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions in non-request contexts.
    Used by live-list streams re-querying after a change notification.
    Auto-commits on success, auto-rolls back on exception.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
