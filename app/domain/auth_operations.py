"""Domain operations for users and sign-in sessions.

Passwords are bcrypt-hashed. Every successful sign-in opens an
AuthSession; access tokens name it so sign-out can revoke them.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID

import bcrypt
from sqlalchemy import select
from sqlmodel import Session

from app.core.config import settings
from app.domain.exceptions import (
    AuthenticationError,
    DomainValidationError,
    DuplicateEntityError,
)
from app.domain.persistence import mark_changed, session_topic
from app.models.database.mixins.timestamp import as_utc, utc_now
from app.models.database.user import AuthProvider, AuthSession, User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthOperations:
    """
    User and session logic. Static methods, sync session-based, no commits.
    """

    @staticmethod
    def sign_up(session: Session, email: str, password: str) -> Tuple[User, AuthSession]:
        email = normalize_email(email)
        if "@" not in email:
            raise DomainValidationError("Please enter a valid email address.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise DomainValidationError(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters."
            )
        if AuthOperations.get_by_email(session, email) is not None:
            raise DuplicateEntityError("User", "email already registered")

        user = User(
            email=email,
            provider=AuthProvider.PASSWORD,
            password_hash=hash_password(password),
        )
        session.add(user)
        session.flush()
        logger.info("Registered user %s", user.id)
        return user, AuthOperations.open_session(session, user)

    @staticmethod
    def sign_in(session: Session, email: str, password: str) -> Tuple[User, AuthSession]:
        user = AuthOperations.get_by_email(session, normalize_email(email))
        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password.")
        return user, AuthOperations.open_session(session, user)

    @staticmethod
    def sign_in_federated(
        session: Session,
        subject: str,
        email: Optional[str] = None
    ) -> Tuple[User, AuthSession]:
        """Sign in by identity-provider subject, creating the user on first use."""
        user = session.execute(
            select(User).where(
                User.provider == AuthProvider.FEDERATED,
                User.provider_subject == subject,
            )
        ).scalars().first()

        if user is None:
            # Email is only kept when no other account claims it
            claimed = email and AuthOperations.get_by_email(session, normalize_email(email))
            user = User(
                email=normalize_email(email) if email and not claimed else None,
                provider=AuthProvider.FEDERATED,
                provider_subject=subject,
            )
            session.add(user)
            session.flush()
            logger.info("Registered federated user %s", user.id)

        return user, AuthOperations.open_session(session, user)

    @staticmethod
    def sign_in_anonymous(session: Session) -> Tuple[User, AuthSession]:
        user = User(provider=AuthProvider.ANONYMOUS)
        session.add(user)
        session.flush()
        logger.info("Registered anonymous user %s", user.id)
        return user, AuthOperations.open_session(session, user)

    @staticmethod
    def get_by_email(session: Session, email: str) -> Optional[User]:
        return session.execute(select(User).where(User.email == email)).scalars().first()

    @staticmethod
    def get_user(session: Session, user_id: UUID) -> Optional[User]:
        return session.get(User, user_id)

    # ─── Sessions ───────────────────────────────────────────

    @staticmethod
    def open_session(session: Session, user: User) -> AuthSession:
        auth_session = AuthSession(
            user_id=user.id,
            expires_at=utc_now() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        session.add(auth_session)
        session.flush()
        return auth_session

    @staticmethod
    def get_active_session(
        session: Session,
        auth_session_id: UUID,
        user_id: UUID,
        now: Optional[datetime] = None
    ) -> Optional[AuthSession]:
        """Session if it belongs to the user, is unrevoked and unexpired."""
        auth_session = session.get(AuthSession, auth_session_id)
        if auth_session is None or auth_session.user_id != user_id:
            return None
        if auth_session.revoked_at is not None:
            return None
        now = now or datetime.now(timezone.utc)
        if as_utc(auth_session.expires_at) <= now:
            return None
        return auth_session

    @staticmethod
    def revoke_session(session: Session, auth_session_id: UUID) -> None:
        auth_session = session.get(AuthSession, auth_session_id)
        if auth_session is None or auth_session.revoked_at is not None:
            return
        auth_session.revoked_at = utc_now()
        session.add(auth_session)
        session.flush()
        mark_changed(session, session_topic(auth_session_id))
        logger.info("Revoked auth session %s", auth_session_id)
