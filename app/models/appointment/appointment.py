"""
Modèle Appointment - Rendez-vous.

Les heures sont stockées au format "HH:mm" (24h). Ce format à largeur
fixe garantit que la comparaison de chaînes suit l'ordre chronologique,
ce qui permet de tester le chevauchement directement en SQL.

`patient_display_name` est un instantané "Nom Prénom" pris à la création ;
il n'est pas resynchronisé si le patient est renommé ensuite.
"""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum as SQLEnum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.base_class import Base
from app.models.enums import AppointmentStatus
from app.models.mixins import TimestampMixin, AuditMixin

if TYPE_CHECKING:
    from app.models.patient.patient import Patient


class Appointment(TimestampMixin, AuditMixin, Base):
    """
    Représente un rendez-vous d'un patient.

    Invariants (vérifiés par AppointmentService) :
        - start_time < end_time, durée entre 15 et 180 minutes
        - pour un même patient et une même date, deux rendez-vous non
          annulés ne se chevauchent jamais sur [start_time, end_time)
    """

    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_patient_date", "patient_id", "date"),
        Index("ix_appointments_date_start", "date", "start_time"),
        {"comment": "Rendez-vous des patients"},
    )

    # === Colonnes ===

    id: Mapped[int] = mapped_column(
        primary_key=True,
        doc="Identifiant unique du rendez-vous",
    )

    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        doc="Patient concerné",
    )

    patient_display_name: Mapped[str] = mapped_column(
        String(201),
        nullable=False,
        doc="Instantané 'Nom Prénom' du patient",
        info={"description": "Non resynchronisé après renommage du patient"}
    )

    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        doc="Jour du rendez-vous",
    )

    start_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        doc="Heure de début (HH:mm)",
        info={"pattern": "^([01]\\d|2[0-3]):([0-5]\\d)$", "example": "09:00"}
    )

    end_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        doc="Heure de fin (HH:mm)",
        info={"pattern": "^([01]\\d|2[0-3]):([0-5]\\d)$", "example": "09:30"}
    )

    status: Mapped[AppointmentStatus] = mapped_column(
        SQLEnum(
            AppointmentStatus,
            name="appointment_status_enum",
            create_constraint=True,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        index=True,
        doc="Statut du rendez-vous",
    )

    reason: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Motif du rendez-vous",
        info={"example": "Contrôle"}
    )

    notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="Notes internes",
    )

    # === Relations ===

    patient: Mapped["Patient"] = relationship(
        "Patient",
        back_populates="appointments",
        lazy="joined",
    )

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, patient_id={self.patient_id}, "
            f"date={self.date}, {self.start_time}-{self.end_time}, status={self.status.value})>"
        )
