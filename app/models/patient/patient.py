"""
Modèle Patient - Dossiers patients.

Ce module définit la table `patients` qui contient les informations
administratives des patients du cabinet. Les consultations (soins) sont
rattachées au patient dans la table `care_episodes`.

Le numéro patient (P000042) est dérivé de `sequence_id`, attribué une
seule fois à la création depuis le compteur "patientId" et jamais réutilisé.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.base_class import Base
from app.models.mixins import TimestampMixin
from app.models.types import to_amount

if TYPE_CHECKING:
    from app.models.patient.care_episode import CareEpisode
    from app.models.appointment.appointment import Appointment


# Nom de la séquence utilisée pour numéroter les patients
PATIENT_SEQUENCE = "patientId"


def format_patient_number(sequence_id: int) -> str:
    """Formate un numéro patient : 42 -> 'P000042'."""
    return f"P{sequence_id:06d}"


class Patient(TimestampMixin, Base):
    """
    Représente un patient du cabinet.

    Attributes:
        id: Identifiant technique
        sequence_id: Numéro séquentiel lisible (immuable)
        last_name / first_name: Nom et prénom
        birth_date: Date de naissance
        phone: Téléphone
        email: Email (stocké en minuscules)
        address: Adresse postale
        insurer / insurer_number: Mutuelle et numéro d'adhérent
        medical_history: Antécédents médicaux
        care_episodes: Consultations, triées par date
    """

    __tablename__ = "patients"
    __table_args__ = {
        "comment": "Table des patients du cabinet"
    }

    # === Colonnes ===

    id: Mapped[int] = mapped_column(
        primary_key=True,
        doc="Identifiant unique du patient",
        info={"description": "Clé primaire auto-incrémentée"}
    )

    sequence_id: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
        index=True,
        doc="Numéro séquentiel du patient",
        info={
            "description": "Attribué depuis le compteur 'patientId', jamais réutilisé",
            "example": 42
        }
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        doc="Nom de famille",
        info={"description": "Nom", "pii": True, "example": "Ben Ali"}
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        doc="Prénom",
        info={"description": "Prénom", "pii": True, "example": "Fatma"}
    )

    birth_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        doc="Date de naissance",
        info={"description": "Date de naissance", "pii": True}
    )

    phone: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        index=True,
        doc="Téléphone",
        info={"description": "Numéro de téléphone", "pii": True, "example": "+216 20 123 456"}
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Email (minuscules)",
        info={"description": "Adresse email", "pii": True, "format": "email"}
    )

    address: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        doc="Adresse postale",
        info={"description": "Adresse", "pii": True}
    )

    insurer: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        doc="Mutuelle",
        info={"description": "Organisme de mutuelle", "example": "CNAM"}
    )

    insurer_number: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        doc="Numéro d'adhérent mutuelle",
        info={"description": "Numéro d'adhérent"}
    )

    medical_history: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="Antécédents médicaux",
        info={"description": "Antécédents, allergies, traitements", "sensitive": True}
    )

    # === Relations ===

    care_episodes: Mapped[List["CareEpisode"]] = relationship(
        "CareEpisode",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="(CareEpisode.date, CareEpisode.id)",
        lazy="selectin",
    )

    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )

    # === Propriétés calculées ===

    @property
    def patient_number(self) -> str:
        """Numéro patient affiché (P000042)."""
        return format_patient_number(self.sequence_id)

    @property
    def display_name(self) -> str:
        """'Nom Prénom', utilisé comme snapshot dans les rendez-vous."""
        return f"{self.last_name} {self.first_name}"

    @property
    def total_billed(self) -> Decimal:
        """Somme des honoraires de toutes les consultations."""
        return to_amount(sum((e.billed_amount for e in self.care_episodes), Decimal(0)))

    @property
    def total_received(self) -> Decimal:
        """Somme des montants encaissés."""
        return to_amount(sum((e.received_amount for e in self.care_episodes), Decimal(0)))

    @property
    def remaining_due(self) -> Decimal:
        """Reste à payer (peut être négatif en cas de trop-perçu)."""
        return self.total_billed - self.total_received

    @property
    def last_episode(self) -> Optional["CareEpisode"]:
        """Consultation la plus récente (par date)."""
        if not self.care_episodes:
            return None
        return max(self.care_episodes, key=lambda e: (e.date, e.id or 0))

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, number='{self.patient_number}')>"
