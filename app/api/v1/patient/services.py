"""
Services métier pour le module Patient.

Contient la logique CRUD pour :
- PatientService : dossiers patients et consultations (soins)

Le numéro séquentiel du patient est attribué à la création par le
générateur de séquences, dans la même transaction que l'insertion.
"""
import logging
import re
from typing import Optional, List, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.patient.schemas import (
    PatientCreate, PatientUpdate,
    CareEpisodeCreate, CareEpisodeUpdate,
)
from app.core.exceptions import NotFoundError, ValidationError
from app.models.patient.care_episode import CareEpisode
from app.models.patient.patient import Patient, PATIENT_SEQUENCE
from app.services.finance.periods import today
from app.services.sequence import next_value

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class PatientNotFoundError(NotFoundError):
    """Patient non trouvé."""
    default_message = "Patient non trouvé"


class CareEpisodeNotFoundError(NotFoundError):
    """Consultation non trouvée."""
    default_message = "Consultation non trouvée"


# =============================================================================
# PATIENT SERVICE
# =============================================================================

# "42", "P42", "p000042" -> recherche par numéro patient
PATIENT_NUMBER_PATTERN = re.compile(r"^P?(\d+)$", re.IGNORECASE)

SORTABLE_FIELDS = {
    "sequence_id": Patient.sequence_id,
    "last_name": Patient.last_name,
    "first_name": Patient.first_name,
    "birth_date": Patient.birth_date,
    "created_at": Patient.created_at,
}

REQUIRED_FIELDS = ("last_name", "first_name", "birth_date", "phone")


class PatientService:
    """Service pour la gestion des patients et de leurs consultations."""

    def __init__(self, db: Session):
        self.db = db

    def search(
            self,
            query: Optional[str] = None,
            page: int = 1,
            size: int = 20,
            sort_by: Optional[str] = None,
            sort_order: Optional[str] = None,
    ) -> Tuple[List[Patient], int]:
        """
        Recherche paginée.

        Sous-chaîne insensible à la casse sur nom, prénom et téléphone, ou
        correspondance exacte du numéro séquentiel si la recherche est un
        entier éventuellement préfixé par "P".
        """
        stmt = select(Patient)

        query = (query or "").strip()
        if query:
            conditions = [
                Patient.last_name.icontains(query, autoescape=True),
                Patient.first_name.icontains(query, autoescape=True),
                Patient.phone.icontains(query, autoescape=True),
            ]
            number = PATIENT_NUMBER_PATTERN.match(query)
            if number:
                conditions.append(Patient.sequence_id == int(number.group(1)))
            stmt = stmt.where(or_(*conditions))

        # Count
        count_query = select(func.count()).select_from(stmt.subquery())
        total = self.db.execute(count_query).scalar() or 0

        # Tri (ascendant par défaut)
        if sort_by is not None and sort_by not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Tri impossible sur '{sort_by}'",
                data={"allowed": sorted(SORTABLE_FIELDS)},
            )
        order_column = SORTABLE_FIELDS[sort_by or "sequence_id"]
        if sort_order == "desc":
            order_column = order_column.desc()
        stmt = stmt.order_by(order_column, Patient.id)

        # Pagination
        stmt = stmt.offset((page - 1) * size).limit(size)

        items = self.db.execute(stmt).scalars().all()
        return list(items), total

    def get_by_id(self, patient_id: int) -> Patient:
        """Récupère un patient par son ID."""
        patient = self.db.get(Patient, patient_id)
        if not patient:
            raise PatientNotFoundError(f"Patient {patient_id} non trouvé")
        return patient

    def create(self, data: PatientCreate) -> Patient:
        """
        Crée un nouveau patient.

        Le numéro séquentiel est tiré du compteur "patientId" dans la même
        transaction : si l'insertion échoue, l'incrément est annulé avec elle.
        """
        values = data.model_dump()
        self._check_required(values)

        try:
            sequence_id = next_value(self.db, PATIENT_SEQUENCE)
            patient = Patient(sequence_id=sequence_id, **values)
            self.db.add(patient)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("❌ Échec de création du patient")
            raise

        self.db.refresh(patient)
        logger.info(f"✅ Patient créé : {patient.patient_number} (id={patient.id})")
        return patient

    def update(self, patient_id: int, data: PatientUpdate) -> Patient:
        """Met à jour les informations administratives d'un patient."""
        patient = self.get_by_id(patient_id)

        update_data = data.model_dump(exclude_unset=True)
        self._check_required(update_data, partial=True)

        for field, value in update_data.items():
            setattr(patient, field, value)

        self.db.commit()
        self.db.refresh(patient)
        return patient

    def delete(self, patient_id: int) -> None:
        """
        Supprime définitivement un patient, ses consultations et ses
        rendez-vous. Le compteur n'est pas modifié : le numéro n'est
        jamais réattribué.
        """
        patient = self.get_by_id(patient_id)
        number = patient.patient_number
        self.db.delete(patient)
        self.db.commit()
        logger.info(f"🗑️ Patient supprimé : {number} (id={patient_id})")

    # --- Consultations ---

    def add_care_episode(self, patient_id: int, data: CareEpisodeCreate) -> Patient:
        """Ajoute une consultation ; les totaux sont recalculés à la lecture."""
        patient = self.get_by_id(patient_id)

        episode = CareEpisode(
            patient_id=patient.id,
            date=data.date or today(),
            tooth=data.tooth or None,
            description=data.description,
            billed_amount=data.billed_amount,
            received_amount=data.received_amount,
        )
        patient.care_episodes.append(episode)
        self.db.commit()
        self.db.refresh(patient)
        return patient

    def update_care_episode(
            self,
            patient_id: int,
            episode_id: int,
            data: CareEpisodeUpdate,
    ) -> Patient:
        """Modifie uniquement les champs fournis d'une consultation."""
        patient = self.get_by_id(patient_id)
        episode = self._get_episode(patient, episode_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(episode, field, value)

        self.db.commit()
        self.db.refresh(patient)
        return patient

    def remove_care_episode(self, patient_id: int, episode_id: int) -> Patient:
        """Supprime une consultation du dossier."""
        patient = self.get_by_id(patient_id)
        episode = self._get_episode(patient, episode_id)

        patient.care_episodes.remove(episode)
        self.db.commit()
        self.db.refresh(patient)
        return patient

    # --- Helpers ---

    def _get_episode(self, patient: Patient, episode_id: int) -> CareEpisode:
        episode = self.db.execute(
            select(CareEpisode).where(
                CareEpisode.id == episode_id,
                CareEpisode.patient_id == patient.id,
            )
        ).scalar_one_or_none()

        if episode is None:
            raise CareEpisodeNotFoundError(
                f"Consultation {episode_id} non trouvée pour le patient {patient.id}"
            )
        return episode

    @staticmethod
    def _check_required(values: dict, partial: bool = False) -> None:
        """Champs obligatoires présents et non vides après trim."""
        missing = []
        for field in REQUIRED_FIELDS:
            if partial and field not in values:
                continue
            value = values.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field)

        if missing:
            raise ValidationError(
                "Champs obligatoires manquants",
                data={"fields": missing},
            )
