"""
Tests des endpoints /api/v1/patients (dossiers et consultations).
"""

from datetime import date

from fastapi.testclient import TestClient

from app.models import CareEpisode, Patient

PATIENTS_URL = "/api/v1/patients"

NEW_PATIENT = {
    "last_name": "Ben Salah",
    "first_name": "Hedi",
    "birth_date": "1990-02-01",
    "phone": "+216 55 000 111",
    "email": "Hedi.BenSalah@Example.com",
}


class TestPatientCrud:

    def test_create_assigns_sequential_numbers(self, client: TestClient):
        first = client.post(PATIENTS_URL, json=NEW_PATIENT)
        second = client.post(PATIENTS_URL, json={**NEW_PATIENT, "first_name": "Mouna"})

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["sequence_id"] == 1
        assert first.json()["patient_number"] == "P000001"
        assert second.json()["sequence_id"] == 2
        assert first.json()["email"] == "hedi.bensalah@example.com"

    def test_numbers_are_never_reused(self, client: TestClient):
        first = client.post(PATIENTS_URL, json=NEW_PATIENT).json()
        client.post(PATIENTS_URL, json=NEW_PATIENT)

        assert client.delete(f"{PATIENTS_URL}/{first['id']}").status_code == 204

        third = client.post(PATIENTS_URL, json=NEW_PATIENT).json()
        assert third["sequence_id"] == 3
        assert third["patient_number"] == "P000003"

    def test_new_patient_has_zero_totals(self, client: TestClient):
        data = client.post(PATIENTS_URL, json=NEW_PATIENT).json()
        assert data["total_billed"] == 0
        assert data["remaining_due"] == 0
        assert data["last_episode"] is None
        assert data["care_episodes"] == []

    def test_get_patient(self, client: TestClient, patient: Patient, care_episode: CareEpisode):
        response = client.get(f"{PATIENTS_URL}/{patient.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["last_name"] == "Mansour"
        assert data["total_billed"] == 80.0
        assert data["total_received"] == 50.0
        assert data["remaining_due"] == 30.0
        assert data["last_episode"]["id"] == care_episode.id

    def test_get_unknown_patient(self, client: TestClient):
        response = client.get(f"{PATIENTS_URL}/999")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "not_found"

    def test_update_patient(self, client: TestClient, patient: Patient):
        response = client.patch(f"{PATIENTS_URL}/{patient.id}", json={"phone": "+216 71 000 000"})

        assert response.status_code == 200
        assert response.json()["phone"] == "+216 71 000 000"
        assert response.json()["sequence_id"] == patient.sequence_id

    def test_update_rejects_null_required_field(self, client: TestClient, patient: Patient):
        response = client.patch(f"{PATIENTS_URL}/{patient.id}", json={"last_name": None})
        assert response.status_code == 422

    def test_create_missing_fields(self, client: TestClient):
        response = client.post(PATIENTS_URL, json={"last_name": "Seul"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "validation_error"
        assert body["message"] == "Données de requête invalides"
        assert isinstance(body["data"], list)


class TestPatientSearch:

    def test_list_sorted_by_number(self, client: TestClient, patient: Patient, other_patient: Patient):
        data = client.get(PATIENTS_URL).json()

        assert data["total"] == 2
        assert [p["patient_number"] for p in data["items"]] == ["P000001", "P000002"]

    def test_search_by_name(self, client: TestClient, patient: Patient, other_patient: Patient):
        data = client.get(PATIENTS_URL, params={"search": "gharb"}).json()

        assert data["total"] == 1
        assert data["items"][0]["id"] == other_patient.id

    def test_search_by_patient_number(self, client: TestClient, patient: Patient, other_patient: Patient):
        data = client.get(PATIENTS_URL, params={"search": "P000002"}).json()

        assert data["total"] == 1
        assert data["items"][0]["id"] == other_patient.id

    def test_pagination(self, client: TestClient, patient: Patient, other_patient: Patient):
        data = client.get(PATIENTS_URL, params={"page": 2, "size": 1}).json()

        assert data["total"] == 2
        assert data["pages"] == 2
        assert data["items"][0]["id"] == other_patient.id

    def test_invalid_sort_field(self, client: TestClient, patient: Patient):
        response = client.get(PATIENTS_URL, params={"sort_by": "medical_history"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestCareEpisodes:

    def test_add_care_episode(self, client: TestClient, patient: Patient):
        response = client.post(
            f"{PATIENTS_URL}/{patient.id}/care-episodes",
            json={"tooth": "11", "description": "Extraction", "billed_amount": "120.000", "received_amount": "100"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["total_billed"] == 120.0
        assert data["remaining_due"] == 20.0
        assert data["care_episodes"][0]["date"] is not None

    def test_episodes_are_chronological(self, client: TestClient, patient: Patient):
        url = f"{PATIENTS_URL}/{patient.id}/care-episodes"
        client.post(url, json={"date": "2024-03-10", "description": "Contrôle", "billed_amount": "20"})
        data = client.post(url, json={"date": "2024-01-05", "description": "Soin", "billed_amount": "40"}).json()

        assert [e["date"] for e in data["care_episodes"]] == ["2024-01-05", "2024-03-10"]
        assert data["last_episode"]["date"] == "2024-03-10"

    def test_negative_amount_rejected(self, client: TestClient, patient: Patient):
        response = client.post(
            f"{PATIENTS_URL}/{patient.id}/care-episodes",
            json={"description": "Soin", "billed_amount": "-5"},
        )
        assert response.status_code == 422

    def test_update_care_episode(self, client: TestClient, patient: Patient, care_episode: CareEpisode):
        response = client.patch(
            f"{PATIENTS_URL}/{patient.id}/care-episodes/{care_episode.id}",
            json={"received_amount": "80.000"},
        )

        assert response.status_code == 200
        assert response.json()["remaining_due"] == 0

    def test_delete_care_episode(self, client: TestClient, patient: Patient, care_episode: CareEpisode):
        response = client.delete(f"{PATIENTS_URL}/{patient.id}/care-episodes/{care_episode.id}")

        assert response.status_code == 200
        assert response.json()["care_episodes"] == []
        assert response.json()["total_billed"] == 0

    def test_episode_of_other_patient(self, client: TestClient, other_patient: Patient, care_episode: CareEpisode):
        response = client.delete(f"{PATIENTS_URL}/{other_patient.id}/care-episodes/{care_episode.id}")
        assert response.status_code == 404


class TestPatientPermissions:

    def test_assistant_can_create(self, client_assistant: TestClient):
        assert client_assistant.post(PATIENTS_URL, json=NEW_PATIENT).status_code == 201

    def test_assistant_can_delete(self, client_assistant: TestClient, patient: Patient):
        assert client_assistant.delete(f"{PATIENTS_URL}/{patient.id}").status_code == 204

    def test_assistant_can_add_care_episode(self, client_assistant: TestClient, patient: Patient):
        response = client_assistant.post(
            f"{PATIENTS_URL}/{patient.id}/care-episodes",
            json={"date": date.today().isoformat(), "description": "Soin", "billed_amount": "10"},
        )

        assert response.status_code == 201
        assert response.json()["total_billed"] == 10.0

    def test_medecin_can_delete(self, client_medecin: TestClient, patient: Patient):
        assert client_medecin.delete(f"{PATIENTS_URL}/{patient.id}").status_code == 204
