"""
Tests des endpoints /api/v1/auth (vrais tokens JWT, sans mock).
"""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models import User, UserRole
from conftest import TEST_PASSWORD, make_user

AUTH_URL = "/api/v1/auth"


def login(client: TestClient, email: str = "admin@cabinet.tn", password: str = TEST_PASSWORD):
    return client.post(f"{AUTH_URL}/login", json={"email": email, "password": password})


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestLogin:

    def test_login_success(self, anonymous_client: TestClient, user_admin: User):
        response = login(anonymous_client)

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "admin@cabinet.tn"
        assert data["user"]["role"] == "admin"
        assert data["user"]["is_admin"] is True
        assert data["tokens"]["token_type"] == "Bearer"
        assert data["tokens"]["access_token"]
        assert data["tokens"]["refresh_token"]

    def test_login_is_case_insensitive_on_email(self, anonymous_client: TestClient, user_admin: User):
        assert login(anonymous_client, email="Admin@Cabinet.TN").status_code == 200

    def test_login_sets_last_login(self, anonymous_client: TestClient, db_session: Session, user_admin: User):
        login(anonymous_client)
        db_session.refresh(user_admin)
        assert user_admin.last_login_at is not None

    def test_failures_share_one_message(self, anonymous_client: TestClient, db_session: Session, user_admin: User):
        make_user(db_session, "inactif@cabinet.tn", UserRole.ASSISTANT, is_active=False)

        wrong_password = login(anonymous_client, password="mauvais-mot-de-passe")
        unknown_user = login(anonymous_client, email="inconnu@cabinet.tn")
        inactive_user = login(anonymous_client, email="inactif@cabinet.tn")

        for response in (wrong_password, unknown_user, inactive_user):
            assert response.status_code == 401
            body = response.json()
            assert body["success"] is False
            assert body["error"] == "authentication_error"
            assert body["message"] == "Email ou mot de passe incorrect"

    def test_medecin_display_name(self, anonymous_client: TestClient, user_medecin: User):
        data = login(anonymous_client, email="dr.trabelsi@cabinet.tn").json()
        assert data["user"]["display_name"] == "Dr. Trabelsi"


class TestTokens:

    def test_me(self, anonymous_client: TestClient, user_medecin: User):
        tokens = login(anonymous_client, email="dr.trabelsi@cabinet.tn").json()["tokens"]

        response = anonymous_client.get(f"{AUTH_URL}/me", headers=bearer(tokens["access_token"]))

        assert response.status_code == 200
        assert response.json()["id"] == user_medecin.id
        assert response.json()["role"] == "medecin"

    def test_missing_token(self, anonymous_client: TestClient):
        response = anonymous_client.get("/api/v1/patients")

        assert response.status_code == 401
        assert response.json()["error"] == "authentication_error"

    def test_garbage_token(self, anonymous_client: TestClient):
        response = anonymous_client.get(f"{AUTH_URL}/me", headers=bearer("pas-un-jwt"))
        assert response.status_code == 401

    def test_refresh_token_cannot_be_used_as_access(self, anonymous_client: TestClient, user_admin: User):
        tokens = login(anonymous_client).json()["tokens"]
        response = anonymous_client.get(f"{AUTH_URL}/me", headers=bearer(tokens["refresh_token"]))
        assert response.status_code == 401

    def test_deactivated_user_rejected(self, anonymous_client: TestClient, db_session: Session, user_admin: User):
        tokens = login(anonymous_client).json()["tokens"]
        user_admin.is_active = False
        db_session.commit()

        response = anonymous_client.get(f"{AUTH_URL}/me", headers=bearer(tokens["access_token"]))
        assert response.status_code == 401

    def test_refresh_rotates_token(self, anonymous_client: TestClient, user_admin: User):
        old = login(anonymous_client).json()["tokens"]

        response = anonymous_client.post(f"{AUTH_URL}/refresh", json={"refresh_token": old["refresh_token"]})

        assert response.status_code == 200
        new = response.json()
        assert new["refresh_token"] != old["refresh_token"]

        replay = anonymous_client.post(f"{AUTH_URL}/refresh", json={"refresh_token": old["refresh_token"]})
        assert replay.status_code == 401
        assert replay.json()["message"] == "Refresh token invalide ou expiré"

        again = anonymous_client.post(f"{AUTH_URL}/refresh", json={"refresh_token": new["refresh_token"]})
        assert again.status_code == 200

    def test_logout_revokes_refresh_token(self, anonymous_client: TestClient, user_admin: User):
        tokens = login(anonymous_client).json()["tokens"]

        response = anonymous_client.post(
            f"{AUTH_URL}/logout",
            json={"refresh_token": tokens["refresh_token"]},
            headers=bearer(tokens["access_token"]),
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Déconnexion réussie"}

        replay = anonymous_client.post(f"{AUTH_URL}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert replay.status_code == 401


class TestRegister:

    def test_admin_registers_user(self, client: TestClient):
        response = client.post(f"{AUTH_URL}/register", json={
            "email": "nouvelle@cabinet.tn",
            "password": "Secret12345",
            "first_name": "Ines",
            "last_name": "Jaziri",
            "role": "assistant",
        })

        assert response.status_code == 201
        assert response.json()["email"] == "nouvelle@cabinet.tn"
        assert "password_hash" not in response.json()

    def test_non_admin_cannot_register(self, client_medecin: TestClient):
        response = client_medecin.post(f"{AUTH_URL}/register", json={
            "email": "x@cabinet.tn",
            "password": "Secret12345",
            "first_name": "X",
            "last_name": "Y",
        })

        assert response.status_code == 403
        assert response.json()["data"] == {"capability": "user.manage"}
