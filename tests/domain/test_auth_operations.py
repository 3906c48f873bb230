"""Tests for users and sign-in sessions."""

from datetime import timedelta

import pytest

from app.domain.auth_operations import AuthOperations, hash_password, verify_password
from app.domain.exceptions import AuthenticationError, DomainValidationError, DuplicateEntityError
from app.domain.persistence import PENDING_TOPICS_KEY, session_topic
from app.models.database.mixins.timestamp import utc_now
from app.models.database.user import AuthProvider


def test_password_hash_verifies():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


def test_malformed_hash_does_not_verify():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


class TestSignUp:
    def test_normalizes_email_and_opens_session(self, db_session):
        user, auth_session = AuthOperations.sign_up(db_session, "  Dreamer@Example.COM ", "secret123")

        assert user.email == "dreamer@example.com"
        assert user.provider == AuthProvider.PASSWORD
        assert auth_session.user_id == user.id

    def test_duplicate_email(self, db_session):
        AuthOperations.sign_up(db_session, "a@example.com", "secret123")
        with pytest.raises(DuplicateEntityError):
            AuthOperations.sign_up(db_session, "A@example.com", "secret456")

    def test_short_password(self, db_session):
        with pytest.raises(DomainValidationError):
            AuthOperations.sign_up(db_session, "a@example.com", "12345")

    def test_invalid_email(self, db_session):
        with pytest.raises(DomainValidationError):
            AuthOperations.sign_up(db_session, "not-an-email", "secret123")


class TestSignIn:
    def test_wrong_password(self, db_session):
        AuthOperations.sign_up(db_session, "a@example.com", "secret123")
        with pytest.raises(AuthenticationError):
            AuthOperations.sign_in(db_session, "a@example.com", "nope-nope")

    def test_unknown_email(self, db_session):
        with pytest.raises(AuthenticationError):
            AuthOperations.sign_in(db_session, "ghost@example.com", "secret123")

    def test_success_opens_new_session(self, db_session):
        user, first = AuthOperations.sign_up(db_session, "a@example.com", "secret123")
        signed_in, second = AuthOperations.sign_in(db_session, "a@example.com", "secret123")
        assert signed_in.id == user.id
        assert second.id != first.id


def test_federated_reuses_user_by_subject(db_session):
    first, _ = AuthOperations.sign_in_federated(db_session, "sub-1", "fed@example.com")
    again, _ = AuthOperations.sign_in_federated(db_session, "sub-1", "fed@example.com")

    assert again.id == first.id
    assert first.email == "fed@example.com"


def test_federated_skips_claimed_email(db_session):
    AuthOperations.sign_up(db_session, "taken@example.com", "secret123")

    user, _ = AuthOperations.sign_in_federated(db_session, "sub-2", "taken@example.com")

    assert user.email is None
    assert user.provider_subject == "sub-2"


def test_anonymous_user(db_session):
    user, _ = AuthOperations.sign_in_anonymous(db_session)
    assert user.is_anonymous
    assert user.email is None


class TestSessions:
    def test_active_session(self, db_session, test_user):
        auth_session = AuthOperations.open_session(db_session, test_user)
        assert AuthOperations.get_active_session(db_session, auth_session.id, test_user.id) is auth_session

    def test_expired_session(self, db_session, test_user):
        auth_session = AuthOperations.open_session(db_session, test_user)
        later = utc_now() + timedelta(days=365)
        assert AuthOperations.get_active_session(db_session, auth_session.id, test_user.id, now=later) is None

    def test_session_of_other_user(self, db_session, test_user):
        other, _ = AuthOperations.sign_in_anonymous(db_session)
        auth_session = AuthOperations.open_session(db_session, test_user)
        assert AuthOperations.get_active_session(db_session, auth_session.id, other.id) is None

    def test_revoke_marks_session_topic(self, db_session, test_user):
        auth_session = AuthOperations.open_session(db_session, test_user)

        AuthOperations.revoke_session(db_session, auth_session.id)

        assert auth_session.revoked_at is not None
        assert session_topic(auth_session.id) in db_session.info[PENDING_TOPICS_KEY]
        assert AuthOperations.get_active_session(db_session, auth_session.id, test_user.id) is None
