"""
Tests unitaires pour les modèles Patient et CareEpisode.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Appointment, CareEpisode, Patient, format_patient_number


class TestPatient:
    """Tests pour le modèle Patient."""

    def test_create_patient(self, db_session: Session, patient: Patient):
        """Test création d'un patient."""
        assert patient.id is not None
        assert patient.sequence_id == 1
        assert patient.created_at is not None
        assert patient.care_episodes == []

    def test_patient_number_format(self, patient: Patient):
        assert patient.patient_number == "P000001"
        assert format_patient_number(42) == "P000042"
        assert format_patient_number(1234567) == "P1234567"

    def test_display_name(self, patient: Patient):
        assert patient.display_name == "Mansour Leila"

    def test_totals_without_episodes(self, patient: Patient):
        """Patient sans consultation : tous les totaux à 0."""
        assert patient.total_billed == Decimal("0.000")
        assert patient.total_received == Decimal("0.000")
        assert patient.remaining_due == Decimal("0.000")
        assert patient.last_episode is None

    def test_totals_are_sums_of_episodes(self, db_session: Session, patient: Patient):
        """Les totaux sont toujours recalculés depuis les consultations."""
        patient.care_episodes.extend([
            CareEpisode(date=date(2024, 5, 2), description="Soin", billed_amount=Decimal("100"),
                        received_amount=Decimal("40")),
            CareEpisode(date=date(2024, 5, 9), description="Soin", billed_amount=Decimal("60.5"),
                        received_amount=Decimal("60.5")),
        ])
        db_session.commit()
        db_session.refresh(patient)

        assert patient.total_billed == Decimal("160.500")
        assert patient.total_received == Decimal("100.500")
        assert patient.remaining_due == Decimal("60.000")

    def test_last_episode_is_most_recent(self, db_session: Session, patient: Patient):
        patient.care_episodes.extend([
            CareEpisode(date=date(2024, 6, 1), description="Récent", billed_amount=Decimal("10")),
            CareEpisode(date=date(2024, 1, 1), description="Ancien", billed_amount=Decimal("10")),
        ])
        db_session.commit()
        db_session.refresh(patient)

        assert patient.last_episode.description == "Récent"
        # Ordre chronologique de la relation
        assert [e.description for e in patient.care_episodes] == ["Ancien", "Récent"]

    def test_sequence_id_is_unique(self, db_session: Session, patient: Patient):
        duplicate = Patient(
            sequence_id=patient.sequence_id,
            last_name="Doublon",
            first_name="Test",
            birth_date=date(2000, 1, 1),
            phone="0",
        )
        db_session.add(duplicate)
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_delete_cascades(self, db_session: Session, patient: Patient, care_episode, appointment):
        """Supprimer un patient supprime ses consultations et rendez-vous."""
        db_session.delete(patient)
        db_session.commit()

        assert db_session.execute(select(CareEpisode)).scalars().all() == []
        assert db_session.execute(select(Appointment)).scalars().all() == []


class TestCareEpisode:
    """Tests pour le modèle CareEpisode."""

    def test_remaining_due(self, care_episode: CareEpisode):
        assert care_episode.remaining_due == Decimal("30.000")

    def test_received_defaults_to_zero(self, db_session: Session, patient: Patient):
        episode = CareEpisode(
            patient_id=patient.id,
            date=date(2024, 3, 1),
            description="Consultation",
            billed_amount=Decimal("35"),
        )
        db_session.add(episode)
        db_session.commit()

        assert episode.received_amount == Decimal("0")

    def test_negative_amount_rejected(self, db_session: Session, patient: Patient):
        episode = CareEpisode(
            patient_id=patient.id,
            date=date(2024, 3, 1),
            description="Erreur",
            billed_amount=Decimal("-1"),
        )
        db_session.add(episode)
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
