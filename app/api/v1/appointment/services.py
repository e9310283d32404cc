"""
Services métier pour le module Appointment.

Règles vérifiées à chaque création / déplacement de rendez-vous :
    1. format HH:mm des deux heures
    2. début < fin, durée entre 15 et 180 minutes
    3. aucun rendez-vous non annulé du même patient, le même jour, dont
       l'intervalle [début, fin) intersecte le nouveau

La vérification 3 et l'écriture se font dans la même transaction, après
verrouillage de la ligne patient (SELECT ... FOR UPDATE) : deux créations
concurrentes pour un même patient sont sérialisées.
"""
import logging
from datetime import date
from typing import Optional, List, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.api.v1.appointment.schemas import (
    AppointmentCreate, AppointmentUpdate, AppointmentFilters, AppointmentSummary,
)
from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.appointment.appointment import Appointment
from app.models.enums import AppointmentStatus, APPOINTMENT_STATUS_TRANSITIONS
from app.models.patient.patient import Patient
from app.services.scheduling import TimeSlot, validate_slot

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class AppointmentNotFoundError(NotFoundError):
    """Rendez-vous non trouvé."""
    default_message = "Rendez-vous non trouvé"


class AppointmentPatientNotFoundError(NotFoundError):
    """Patient du rendez-vous non trouvé."""
    default_message = "Patient non trouvé"


class AppointmentOverlapError(ConflictError):
    """Le créneau chevauche un rendez-vous existant du patient."""
    default_message = "Ce créneau est déjà occupé"


class InvalidStatusTransitionError(ValidationError):
    """Changement de statut interdit (mode strict)."""
    pass


# =============================================================================
# APPOINTMENT SERVICE
# =============================================================================

class AppointmentService:
    """Service pour la gestion des rendez-vous."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
            self,
            filters: Optional[AppointmentFilters] = None,
            page: int = 1,
            size: int = 50,
    ) -> Tuple[List[Appointment], int]:
        """
        Liste les rendez-vous, triés par date puis heure de début.

        Les rendez-vous annulés sont exclus, sauf si include_cancelled est
        demandé ou si le filtre de statut vaut "cancelled".
        """
        filters = filters or AppointmentFilters()
        query = select(Appointment)

        if filters.date:
            query = query.where(Appointment.date == filters.date)
        if filters.start_date:
            query = query.where(Appointment.date >= filters.start_date)
        if filters.end_date:
            query = query.where(Appointment.date <= filters.end_date)
        if filters.patient_id:
            query = query.where(Appointment.patient_id == filters.patient_id)

        if filters.status:
            query = query.where(Appointment.status == filters.status)
        elif not filters.include_cancelled:
            query = query.where(Appointment.status != AppointmentStatus.CANCELLED)

        # Count
        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.execute(count_query).scalar() or 0

        query = (
            query.order_by(Appointment.date, Appointment.start_time, Appointment.id)
            .offset((page - 1) * size)
            .limit(size)
        )

        items = self.db.execute(query).scalars().unique().all()
        return list(items), total

    def get_by_id(self, appointment_id: int) -> Appointment:
        """Récupère un rendez-vous par son ID."""
        appointment = self.db.get(Appointment, appointment_id)
        if not appointment:
            raise AppointmentNotFoundError(f"Rendez-vous {appointment_id} non trouvé")
        return appointment

    def create(self, data: AppointmentCreate, created_by: Optional[int] = None) -> Appointment:
        """
        Crée un rendez-vous au statut "scheduled".

        Raises:
            AppointmentPatientNotFoundError: Patient inexistant
            ValidationError: Format d'heure ou durée invalide
            AppointmentOverlapError: Créneau déjà occupé (data = rendez-vous en conflit)
        """
        patient = self._lock_patient(data.patient_id)
        slot = validate_slot(data.start_time, data.end_time)
        self._ensure_available(patient.id, data.date, slot)

        appointment = Appointment(
            patient_id=patient.id,
            patient_display_name=patient.display_name,
            date=data.date,
            start_time=slot.start,
            end_time=slot.end,
            status=AppointmentStatus.SCHEDULED,
            reason=data.reason or None,
            notes=data.notes or None,
            created_by=created_by,
        )
        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"📅 Rendez-vous créé : id={appointment.id} patient={patient.id} "
            f"{appointment.date} {appointment.start_time}-{appointment.end_time}"
        )
        return appointment

    def update(self, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        """
        Met à jour un rendez-vous.

        Si la date ou les heures changent, ou si un rendez-vous annulé est
        réactivé, le créneau est revalidé et le chevauchement revérifié
        (en excluant le rendez-vous lui-même).
        """
        appointment = self.get_by_id(appointment_id)
        update_data = data.model_dump(exclude_unset=True)

        new_status = update_data.get("status", appointment.status)
        if new_status != appointment.status:
            self._check_transition(appointment.status, new_status)

        new_date = update_data.get("date", appointment.date)
        new_start = update_data.get("start_time", appointment.start_time)
        new_end = update_data.get("end_time", appointment.end_time)

        time_changed = (
            new_date != appointment.date
            or new_start != appointment.start_time
            or new_end != appointment.end_time
        )
        reactivated = appointment.is_cancelled and new_status != AppointmentStatus.CANCELLED

        if time_changed or reactivated:
            self._lock_patient(appointment.patient_id)
            slot = validate_slot(new_start, new_end)
            if new_status != AppointmentStatus.CANCELLED:
                self._ensure_available(
                    appointment.patient_id, new_date, slot, exclude_id=appointment.id
                )

        for field, value in update_data.items():
            setattr(appointment, field, value)

        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def delete(self, appointment_id: int) -> None:
        """Supprime définitivement un rendez-vous (différent de l'annulation)."""
        appointment = self.get_by_id(appointment_id)
        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"🗑️ Rendez-vous supprimé : id={appointment_id}")

    # --- Helpers ---

    def _lock_patient(self, patient_id: int) -> Patient:
        """Charge et verrouille la ligne patient jusqu'à la fin de la transaction."""
        patient = self.db.execute(
            select(Patient).where(Patient.id == patient_id).with_for_update()
        ).scalar_one_or_none()

        if patient is None:
            raise AppointmentPatientNotFoundError(f"Patient {patient_id} non trouvé")
        return patient

    def find_overlap(
            self,
            patient_id: int,
            day: date,
            slot: TimeSlot,
            exclude_id: Optional[int] = None,
    ) -> Optional[Appointment]:
        """
        Premier rendez-vous non annulé du patient ce jour-là qui chevauche
        le créneau. Les heures HH:mm étant de largeur fixe, la comparaison
        de chaînes suit l'ordre chronologique.
        """
        query = select(Appointment).where(
            Appointment.patient_id == patient_id,
            Appointment.date == day,
            Appointment.status != AppointmentStatus.CANCELLED,
            Appointment.start_time < slot.end,
            Appointment.end_time > slot.start,
        )
        if exclude_id is not None:
            query = query.where(Appointment.id != exclude_id)

        query = query.order_by(Appointment.start_time).limit(1)
        return self.db.execute(query).scalars().first()

    def _ensure_available(
            self,
            patient_id: int,
            day: date,
            slot: TimeSlot,
            exclude_id: Optional[int] = None,
    ) -> None:
        existing = self.find_overlap(patient_id, day, slot, exclude_id=exclude_id)
        if existing is not None:
            logger.warning(
                f"⚠️ Chevauchement refusé : patient={patient_id} {day} "
                f"{slot.start}-{slot.end} (existant id={existing.id})"
            )
            raise AppointmentOverlapError(
                data=AppointmentSummary.model_validate(existing).model_dump(mode="json"),
            )

    @staticmethod
    def _check_transition(current: AppointmentStatus, new: AppointmentStatus) -> None:
        if not settings.APPOINTMENT_STRICT_STATUS_TRANSITIONS:
            return
        if new not in APPOINTMENT_STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(
                f"Transition de statut interdite : {current.value} -> {new.value}",
                data={"from": current.value, "to": new.value},
            )
