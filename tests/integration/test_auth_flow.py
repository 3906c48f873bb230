"""
Integration tests for Auth API.

Tests cover:
- Sign-up / sign-in / anonymous sign-in
- Auth state
- Sign-out revoking the token immediately
- Federated sign-in when not configured
"""

from fastapi.testclient import TestClient

from app.api.deps import session_states


class TestSignUp:
    def test_sign_up_returns_token(self, anon_client: TestClient):
        response = anon_client.post(
            "/api/auth/sign-up", json={"email": "New@Example.com", "password": "secret123"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["is_anonymous"] is False

    def test_duplicate_email(self, anon_client: TestClient, sign_up):
        sign_up(email="dup@example.com")
        response = anon_client.post(
            "/api/auth/sign-up", json={"email": "dup@example.com", "password": "secret123"}
        )
        assert response.status_code == 409

    def test_short_password(self, anon_client: TestClient):
        response = anon_client.post(
            "/api/auth/sign-up", json={"email": "a@example.com", "password": "123"}
        )
        assert response.status_code == 400


class TestSignIn:
    def test_sign_in(self, anon_client: TestClient, sign_up):
        sign_up(email="me@example.com", password="secret123")

        response = anon_client.post(
            "/api/auth/sign-in", json={"email": "me@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "me@example.com"

    def test_bad_credentials(self, anon_client: TestClient, sign_up):
        sign_up(email="me@example.com", password="secret123")

        response = anon_client.post(
            "/api/auth/sign-in", json={"email": "me@example.com", "password": "wrong-password"}
        )

        assert response.status_code == 401

    def test_anonymous(self, anon_client: TestClient):
        response = anon_client.post("/api/auth/sign-in/anonymous")

        assert response.status_code == 201
        token = response.json()["access_token"]
        state = anon_client.get("/api/auth/state", headers={"Authorization": f"Bearer {token}"}).json()
        assert state["is_authenticated"] is True
        assert state["is_anonymous"] is True

    def test_federated_not_configured(self, anon_client: TestClient):
        response = anon_client.post("/api/auth/sign-in/federated", json={"id_token": "abc.def.ghi"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Federated sign-in is not configured."


class TestState:
    def test_signed_out_state(self, anon_client: TestClient):
        state = anon_client.get("/api/auth/state").json()
        assert state == {
            "is_auth_ready": True,
            "is_authenticated": False,
            "user_id": None,
            "is_anonymous": False,
        }

    def test_signed_in_state(self, client: TestClient):
        state = client.get("/api/auth/state").json()
        assert state["is_authenticated"] is True
        assert state["user_id"] is not None

    def test_invalid_token_reads_as_signed_out(self, anon_client: TestClient):
        state = anon_client.get("/api/auth/state", headers={"Authorization": "Bearer nonsense"}).json()
        assert state["is_authenticated"] is False


def test_sign_out_revokes_token(client: TestClient):
    assert client.get("/api/dreams/drafts").status_code == 200

    response = client.post("/api/auth/sign-out")

    assert response.status_code == 204
    assert client.get("/api/dreams/drafts").status_code == 401
    assert client.get("/api/auth/state").json()["is_authenticated"] is False


def test_sign_out_discards_selection(client: TestClient, archive_dream):
    dream = archive_dream("Dream")
    client.post("/api/search/selection", json={"kind": "dream", "id": dream["id"]})

    client.post("/api/auth/sign-out")

    assert session_states._states == {}
