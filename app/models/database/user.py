"""User and auth session models - identities behind every journal namespace."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Enum as SAEnum, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.database.mixins.timestamp import TimestampMixin, utc_now


class AuthProvider(str, Enum):
    """How the user signed in."""
    PASSWORD = "password"
    FEDERATED = "federated"
    ANONYMOUS = "anonymous"


class UserBase(SQLModel):
    """Shared fields for User model."""
    email: str | None = Field(default=None, max_length=255, unique=True, index=True, nullable=True, description="Sign-in email (password users)")
    provider: AuthProvider = Field(
        sa_type=SAEnum(
            AuthProvider,
            values_callable=lambda obj: [e.value for e in obj],
            native_enum=False,
            create_constraint=False,
        ),
    )
    provider_subject: str | None = Field(default=None, max_length=255, nullable=True, description="Federated 'sub' claim")


class User(UserBase, TimestampMixin, table=True):
    """User entity - owner of drafts, archives, events and conversations."""
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("provider", "provider_subject", name="uq_users_provider_subject"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    password_hash: str | None = Field(default=None, max_length=255, nullable=True)

    @property
    def is_anonymous(self) -> bool:
        return self.provider == AuthProvider.ANONYMOUS


class UserRead(UserBase):
    """Data returned when reading a User."""
    id: UUID
    is_anonymous: bool
    created_at: datetime


class AuthSession(SQLModel, table=True):
    """One signed-in session. Access tokens carry its id in the 'sid' claim."""
    __tablename__ = "auth_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, nullable=False, sa_type=DateTime(timezone=True))
    expires_at: datetime = Field(nullable=False, sa_type=DateTime(timezone=True))
    revoked_at: datetime | None = Field(default=None, nullable=True, sa_type=DateTime(timezone=True))
