"""Authentication API endpoints.

Sign-up/sign-in variants return a session token. Sign-out revokes the
session behind the token immediately.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sse_starlette.sse import EventSourceResponse
from starlette.concurrency import run_in_threadpool
from sqlmodel import Session

from app.api.deps import session_states
from app.core.auth import (
    TokenClaims,
    create_access_token,
    get_current_claims,
    require_current_claims,
    verify_federated_token,
)
from app.core.config import settings
from app.core.database import get_db, get_db_session
from app.domain.auth_operations import AuthOperations
from app.domain.persistence import session_topic
from app.models.database.user import AuthSession, User, UserRead
from app.models.dto.auth import (
    AuthState,
    FederatedSignInRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from app.services.change_feed import change_feed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User, auth_session: AuthSession) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, auth_session.id, auth_session.expires_at),
        user=UserRead.model_validate(user),
    )


@router.post(
    "/sign-up",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register with email and password"
)
async def sign_up(data: SignUpRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Create a password account and sign it in. 409 if the email is taken."""
    user, auth_session = AuthOperations.sign_up(db, data.email, data.password)  # No await!
    return _token_response(user, auth_session)


@router.post("/sign-in", response_model=TokenResponse, summary="Sign in with email and password")
async def sign_in(data: SignInRequest, db: Session = Depends(get_db)) -> TokenResponse:
    user, auth_session = AuthOperations.sign_in(db, data.email, data.password)
    return _token_response(user, auth_session)


@router.post("/sign-in/federated", response_model=TokenResponse, summary="Sign in with an identity provider")
async def sign_in_federated(
    data: FederatedSignInRequest,
    db: Session = Depends(get_db)
) -> TokenResponse:
    """Verify the provider's ID token; the user is created on first sign-in."""
    payload = await verify_federated_token(data.id_token)
    user, auth_session = AuthOperations.sign_in_federated(db, payload["sub"], payload.get("email"))
    return _token_response(user, auth_session)


@router.post(
    "/sign-in/anonymous",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign in anonymously"
)
async def sign_in_anonymous(db: Session = Depends(get_db)) -> TokenResponse:
    user, auth_session = AuthOperations.sign_in_anonymous(db)
    return _token_response(user, auth_session)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT, summary="Sign out")
async def sign_out(
    claims: TokenClaims = Depends(require_current_claims),
    db: Session = Depends(get_db)
) -> Response:
    AuthOperations.revoke_session(db, claims.session_id)
    session_states.discard(claims.session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/state", response_model=AuthState, summary="Current sign-in state")
async def auth_state(
    claims: Optional[TokenClaims] = Depends(get_current_claims),
    db: Session = Depends(get_db)
) -> AuthState:
    """Never fails: a missing or invalid token reads as signed out."""
    if claims is None:
        return AuthState()

    user = AuthOperations.get_user(db, claims.user_id)
    if user is None:
        return AuthState()

    return AuthState(is_authenticated=True, user_id=user.id, is_anonymous=user.is_anonymous)


def _signed_in_state(claims: TokenClaims) -> AuthState:
    with get_db_session() as session:
        user = AuthOperations.get_user(session, claims.user_id)
        return AuthState(
            is_authenticated=True,
            user_id=claims.user_id,
            is_anonymous=bool(user and user.is_anonymous),
        )


def _still_signed_in(claims: TokenClaims) -> bool:
    with get_db_session() as session:
        return AuthOperations.get_active_session(session, claims.session_id, claims.user_id) is not None


@router.get("/state/stream", summary="Stream sign-in state changes")
async def auth_state_stream(
    request: Request,
    claims: TokenClaims = Depends(require_current_claims)
) -> EventSourceResponse:
    """Sends `signed_in` on connect and `signed_out` once the session ends."""
    # Own short-lived session: the stream outlives the request
    signed_in = await run_in_threadpool(_signed_in_state, claims)

    async def event_generator():
        with change_feed.subscription(session_topic(claims.session_id)) as subscription:
            yield {"event": "signed_in", "data": signed_in.model_dump_json()}

            while True:
                if await request.is_disconnected():
                    return

                await subscription.wait(settings.STREAM_KEEPALIVE_SECONDS)
                if not await run_in_threadpool(_still_signed_in, claims):
                    yield {"event": "signed_out", "data": AuthState().model_dump_json()}
                    return

    return EventSourceResponse(event_generator(), ping=int(settings.STREAM_KEEPALIVE_SECONDS))
