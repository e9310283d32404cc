"""
Tests des endpoints financiers : /charges, /bilan, /bilan-final, /stats.
"""

from datetime import timedelta

from fastapi.testclient import TestClient

from app.models import Appointment, CareEpisode, Charge
from app.services.finance.periods import today

API = "/api/v1"


class TestCharges:

    def test_create_defaults_to_today(self, client: TestClient):
        response = client.post(f"{API}/charges", json={"reason": "Fournitures", "amount": "45.500"})

        assert response.status_code == 201
        data = response.json()
        assert data["date"] == today().isoformat()
        assert data["amount"] == 45.5

    def test_negative_amount_rejected(self, client: TestClient):
        response = client.post(f"{API}/charges", json={"reason": "Erreur", "amount": "-1"})
        assert response.status_code == 422

    def test_update_and_delete(self, client: TestClient, charge: Charge):
        response = client.patch(f"{API}/charges/{charge.id}", json={"amount": "650"})
        assert response.status_code == 200
        assert response.json()["amount"] == 650.0

        assert client.delete(f"{API}/charges/{charge.id}").status_code == 204
        assert client.get(f"{API}/charges/{charge.id}").status_code == 404

    def test_list(self, client: TestClient, charge: Charge):
        data = client.get(f"{API}/charges").json()
        assert data["total"] == 1
        assert data["items"][0]["reason"] == "Loyer"

    def test_stats(self, client: TestClient, charge: Charge):
        data = client.get(f"{API}/charges/stats").json()

        assert data["day"] == {"total_amount": 600.0, "charge_count": 1}
        assert data["month"]["total_amount"] == 600.0

    def test_monthly_newest_first(self, client: TestClient, charge: Charge):
        rows = client.get(f"{API}/charges/monthly", params={"months_back": 3}).json()

        assert len(rows) == 3
        assert (rows[0]["year"], rows[0]["month"]) == (today().year, today().month)
        assert rows[0]["total_amount"] == 600.0
        assert rows[1]["charge_count"] == 0

    def test_assistant_can_manage_charges(self, client_assistant: TestClient, charge: Charge):
        assert client_assistant.get(f"{API}/charges").json()["total"] == 1

        response = client_assistant.post(f"{API}/charges", json={"reason": "Gants", "amount": "12"})
        assert response.status_code == 201


class TestBilan:

    def test_period_stats(self, client_medecin: TestClient, care_episode: CareEpisode):
        data = client_medecin.get(f"{API}/bilan/stats").json()

        assert data["day"]["total_billed"] == 80.0
        assert data["day"]["total_received"] == 50.0
        assert data["day"]["remaining_due"] == 30.0
        assert data["month"]["episode_count"] == 1

    def test_monthly(self, client_medecin: TestClient, care_episode: CareEpisode, charge: Charge):
        rows = client_medecin.get(f"{API}/bilan/monthly", params={"months_back": 2}).json()

        assert len(rows) == 2
        current = rows[-1]
        assert current["total_billed"] == 80.0
        assert current["patient_count"] == 1
        assert current["total_amount"] == 600.0
        assert current["profit"] == -550.0

    def test_months_back_bounds(self, client_medecin: TestClient):
        assert client_medecin.get(f"{API}/bilan/monthly", params={"months_back": 0}).status_code == 422

    def test_top_patients(self, client_medecin: TestClient, care_episode: CareEpisode):
        rows = client_medecin.get(f"{API}/bilan/top-patients").json()

        assert len(rows) == 1
        assert rows[0]["patient_number"] == "P000001"
        assert rows[0]["total_received"] == 50.0

    def test_overall(self, client_medecin: TestClient, care_episode: CareEpisode):
        data = client_medecin.get(f"{API}/bilan/overall").json()

        assert data["total_patients"] == 1
        assert data["total_remaining"] == 30.0

    def test_net_bilan(self, client_medecin: TestClient, care_episode: CareEpisode, charge: Charge):
        data = client_medecin.get(f"{API}/bilan-final/stats").json()

        assert data["revenue"] == 50.0
        assert data["billed"] == 80.0
        assert data["charges"] == 600.0
        assert data["profit"] == -550.0
        assert data["year"] == today().year

    def test_net_bilan_monthly(self, client_medecin: TestClient, charge: Charge):
        rows = client_medecin.get(f"{API}/bilan-final/monthly", params={"months_back": 2}).json()

        assert len(rows) == 2
        assert rows[0]["month"] == today().month
        assert rows[0]["charges"] == 600.0

    def test_assistant_can_read_bilan(self, client_assistant: TestClient, care_episode: CareEpisode):
        stats = client_assistant.get(f"{API}/bilan/stats")
        final = client_assistant.get(f"{API}/bilan-final/stats")

        assert stats.status_code == 200
        assert stats.json()["day"]["total_billed"] == 80.0
        assert final.status_code == 200
        assert final.json()["revenue"] == 50.0


class TestStats:

    def test_overview(
        self,
        client_assistant: TestClient,
        user_medecin,
        care_episode: CareEpisode,
        appointment: Appointment,
    ):
        data = client_assistant.get(f"{API}/stats/overview").json()

        assert data["total_patients"] == 1
        assert data["total_medecins"] == 1
        assert data["appointments_today"] == 0
        assert data["revenue_month"] == 50.0

    def test_revenue(self, client_assistant: TestClient, care_episode: CareEpisode):
        data = client_assistant.get(f"{API}/stats/revenue").json()

        assert data["end_date"] == today().isoformat()
        assert data["total_received"] == 50.0
        assert data["months"][-1]["total_received"] == 50.0

    def test_revenue_invalid_range(self, client_assistant: TestClient):
        response = client_assistant.get(
            f"{API}/stats/revenue", params={"start_date": "2024-05-01", "end_date": "2024-04-01"}
        )
        assert response.status_code == 400

    def test_appointment_counts(self, client_assistant: TestClient, appointment: Appointment):
        end = (today() + timedelta(days=2)).isoformat()
        data = client_assistant.get(
            f"{API}/stats/appointments", params={"start_date": today().isoformat(), "end_date": end}
        ).json()

        assert data["total"] == 1
        assert data["scheduled"] == 1
        assert data["cancelled"] == 0

    def test_top_patients(self, client_assistant: TestClient, care_episode: CareEpisode):
        rows = client_assistant.get(f"{API}/stats/top-patients", params={"limit": 5}).json()
        assert rows[0]["last_name"] == "Mansour"


class TestHealth:

    def test_api_health(self, anonymous_client: TestClient):
        data = anonymous_client.get(f"{API}/health").json()
        assert data["status"] == "healthy"
        assert data["api_version"] == "v1"
