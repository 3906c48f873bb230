"""Application configuration via Pydantic Settings."""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API Settings
    PROJECT_NAME: str = "Dream Weaver API"
    VERSION: str = "0.3.0"
    API_PREFIX: str = "/api"

    # Database Settings
    # Plain PostgreSQL URLs get the +psycopg driver added in database.py
    # sqlite:// is accepted for local runs and tests
    DATABASE_URL: str
    MIGRATION_DATABASE_URL: str = ""  # Falls back to DATABASE_URL when empty
    VERIFY_MIGRATIONS: bool = False

    # Namespace every user record lives under
    APP_ID: str = "default-app-id"

    # Session tokens (HS256 JWT)
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Federated sign-in (OpenID Connect ID tokens, e.g. Google)
    FEDERATED_JWKS_URL: str = ""
    FEDERATED_ISSUER: str = ""
    FEDERATED_CLIENT_ID: str = ""

    # Generative AI
    LLM_PROVIDER: str = "gemini"
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.0-flash"
    IMAGEN_MODEL: str = "imagen-3.0-generate-002"
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Reality log / chat
    CHAT_HISTORY_LIMIT: int = 5
    DAILY_EVENTS_LIMIT: int = 10

    # Live list streams
    STREAM_KEEPALIVE_SECONDS: float = 15.0

    # CORS Settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:8080"]

    # Rate limiting (slowapi)
    RATE_LIMIT: str = "100/second"
    RATE_LIMIT_ENABLED: bool = True

    def get_migration_database_url(self) -> str:
        """Direct connection for Alembic; defaults to the runtime URL."""
        return self.MIGRATION_DATABASE_URL or self.DATABASE_URL


# Global settings instance
settings = Settings()
