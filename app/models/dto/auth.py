"""DTOs for sign-up, sign-in and auth state endpoints."""

from uuid import UUID

from pydantic import BaseModel, Field

from app.models.database.user import UserRead


# ─────────────────────────────────────────────────────────────
# Request DTOs
# ─────────────────────────────────────────────────────────────


class SignUpRequest(BaseModel):
    """Email/password registration."""

    email: str = Field(min_length=3, max_length=255)
    password: str


class SignInRequest(BaseModel):
    email: str
    password: str


class FederatedSignInRequest(BaseModel):
    """ID token issued by the federated identity provider."""

    id_token: str = Field(min_length=1)


# ─────────────────────────────────────────────────────────────
# Response DTOs
# ─────────────────────────────────────────────────────────────


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class AuthState(BaseModel):
    """Sign-in state as seen by the client shell."""

    is_auth_ready: bool = True
    is_authenticated: bool = False
    user_id: UUID | None = None
    is_anonymous: bool = False
