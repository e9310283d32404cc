"""
Tests des endpoints /api/v1/users (administration des comptes).
"""

from fastapi.testclient import TestClient

from app.models import User

USERS_URL = "/api/v1/users"

NEW_USER = {
    "email": "Sonia.Medecin@Cabinet.tn",
    "password": "Secret12345",
    "first_name": "Sonia",
    "last_name": "Haddad",
    "role": "medecin",
    "phone": "+216 20 111 222",
}


class TestUserCrud:

    def test_create_user(self, client: TestClient):
        response = client.post(USERS_URL, json=NEW_USER)

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "sonia.medecin@cabinet.tn"
        assert data["role"] == "medecin"
        assert data["display_name"] == "Dr. Haddad"
        assert data["is_active"] is True

    def test_duplicate_email(self, client: TestClient):
        client.post(USERS_URL, json=NEW_USER)
        response = client.post(USERS_URL, json={**NEW_USER, "email": "sonia.medecin@cabinet.tn"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert response.json()["message"] == "Cet email est déjà utilisé"

    def test_short_password_rejected(self, client: TestClient):
        response = client.post(USERS_URL, json={**NEW_USER, "password": "court"})
        assert response.status_code == 422

    def test_list_and_search(self, client: TestClient, user_medecin: User, user_assistant: User):
        everyone = client.get(USERS_URL).json()
        found = client.get(USERS_URL, params={"search": "trabel"}).json()

        assert everyone["total"] == 3
        assert found["total"] == 1
        assert found["items"][0]["id"] == user_medecin.id

    def test_update_other_user(self, client: TestClient, user_assistant: User):
        response = client.patch(f"{USERS_URL}/{user_assistant.id}", json={"role": "medecin", "is_active": False})

        assert response.status_code == 200
        assert response.json()["role"] == "medecin"
        assert response.json()["is_active"] is False

    def test_delete_other_user(self, client: TestClient, user_assistant: User):
        assert client.delete(f"{USERS_URL}/{user_assistant.id}").status_code == 204
        assert client.get(f"{USERS_URL}/{user_assistant.id}").status_code == 404


class TestSelfProtection:

    def test_cannot_change_own_role(self, client: TestClient, user_admin: User):
        response = client.patch(f"{USERS_URL}/{user_admin.id}", json={"role": "assistant"})

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"
        assert response.json()["message"] == "Vous ne pouvez pas modifier votre propre rôle"

    def test_cannot_deactivate_self(self, client: TestClient, user_admin: User):
        response = client.patch(f"{USERS_URL}/{user_admin.id}", json={"is_active": False})

        assert response.status_code == 403
        assert response.json()["message"] == "Vous ne pouvez pas désactiver votre propre compte"

    def test_cannot_delete_self(self, client: TestClient, user_admin: User):
        response = client.delete(f"{USERS_URL}/{user_admin.id}")

        assert response.status_code == 403
        assert response.json()["message"] == "Vous ne pouvez pas supprimer votre propre compte"

    def test_can_update_own_profile(self, client: TestClient, user_admin: User):
        response = client.patch(f"{USERS_URL}/{user_admin.id}", json={"phone": "+216 70 000 000"})
        assert response.status_code == 200


class TestUserPermissions:

    def test_medecin_forbidden(self, client_medecin: TestClient):
        response = client_medecin.get(USERS_URL)

        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "forbidden"
        assert body["data"] == {"capability": "user.manage"}

    def test_assistant_forbidden(self, client_assistant: TestClient):
        assert client_assistant.post(USERS_URL, json=NEW_USER).status_code == 403
