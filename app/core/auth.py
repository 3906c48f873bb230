"""Authentication utilities for session tokens and federated ID tokens.

Session tokens:
- HS256 JWT signed with JWT_SECRET_KEY
- Claims: sub (user id), sid (auth session id), iat, exp
- Every request re-checks that the named session is still active, so
  sign-out takes effect immediately

Federated ID tokens:
- RS256, verified against the provider's JWKS (auth_cache)
- Audience FEDERATED_CLIENT_ID, issuer FEDERATED_ISSUER
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import httpx
from jose import jwt, JWTError
from fastapi import Header, HTTPException, status

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.auth_cache import auth_cache
from app.domain.auth_operations import AuthOperations
from app.domain.exceptions import AuthenticationError, DomainValidationError, ExternalServiceError
from app.domain.match_selection import session_states

logger = logging.getLogger(__name__)

FEDERATED_NOT_CONFIGURED = "Federated sign-in is not configured."


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity behind a session token."""
    user_id: UUID
    session_id: UUID


def create_access_token(user_id: UUID, session_id: UUID, expires_at: datetime) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "sid": str(session_id),
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[TokenClaims]:
    """
    Verify signature and expiry of a session token.

    Returns:
        TokenClaims, or None if the token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={
                "verify_exp": True,
                "require_exp": True,
                "require_iat": True,
                "require_sub": True,
            }
        )
        return TokenClaims(user_id=UUID(payload["sub"]), session_id=UUID(payload["sid"]))
    except jwt.ExpiredSignatureError:
        logger.info("Session token expired")
        return None
    except JWTError as e:
        logger.warning("JWT error: %s", e)
        return None
    except (KeyError, ValueError) as e:
        # Missing sid or malformed UUID claims
        logger.warning("Malformed session token claims: %s", e)
        return None


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization.replace("Bearer ", "", 1)


def _session_is_active(claims: TokenClaims) -> bool:
    db = SessionLocal()
    try:
        return AuthOperations.get_active_session(db, claims.session_id, claims.user_id) is not None
    finally:
        db.close()


async def get_current_claims(
    authorization: Optional[str] = Header(None)
) -> Optional[TokenClaims]:
    """
    Extract verified claims from the Authorization header.

    Returns None when the header is missing, the token is invalid, or its
    session was revoked or expired.
    """
    token = _bearer_token(authorization)
    if token is None:
        return None

    claims = decode_access_token(token)
    if claims is None:
        return None

    if not _session_is_active(claims):
        logger.info("Token for inactive session %s rejected", claims.session_id)
        session_states.discard(claims.session_id)
        return None

    return claims


async def require_current_claims(
    authorization: Optional[str] = Header(None)
) -> TokenClaims:
    """
    Extract and require verified claims.

    Raises:
        HTTPException: 401 if not authenticated
    """
    claims = await get_current_claims(authorization)

    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return claims


async def require_current_user_id(
    authorization: Optional[str] = Header(None)
) -> UUID:
    """
    Extract and require user_id from the session token.

    Raises:
        HTTPException: 401 if not authenticated
    """
    claims = await require_current_claims(authorization)
    return claims.user_id


async def verify_federated_token(id_token: str) -> Dict[str, Any]:
    """
    Verify an identity-provider ID token.

    Returns:
        Verified payload (contains at least 'sub')

    Raises:
        DomainValidationError: Federated sign-in not configured
        AuthenticationError: Token invalid, expired, or signed by an unknown key
    """
    if not (settings.FEDERATED_JWKS_URL and settings.FEDERATED_CLIENT_ID and settings.FEDERATED_ISSUER):
        raise DomainValidationError(FEDERATED_NOT_CONFIGURED)

    try:
        # kid tells us which provider key signed this token
        unverified_header = jwt.get_unverified_header(id_token)
        kid = unverified_header.get("kid")
        if not kid:
            raise AuthenticationError("Identity token has no key id.")

        public_key = await auth_cache.get_key(kid)
        if not public_key:
            raise AuthenticationError("Identity token signed by an unknown key.")

        payload = jwt.decode(
            id_token,
            public_key,
            algorithms=["RS256"],
            audience=settings.FEDERATED_CLIENT_ID,
            issuer=settings.FEDERATED_ISSUER,
            options={
                "verify_exp": True,
                "verify_aud": True,
                "require_exp": True,
                "require_sub": True,
            }
        )
    except JWTError as e:
        logger.warning("Federated token rejected: %s", e)
        raise AuthenticationError("Invalid identity token.") from e
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Could not load identity provider keys: %s", e)
        raise ExternalServiceError("identity provider", "Identity provider unavailable.") from e

    if not payload.get("sub"):
        raise AuthenticationError("Identity token has no subject.")
    return payload
