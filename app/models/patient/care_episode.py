"""
Modèle CareEpisode - Consultations (soins) d'un patient.

Une consultation appartient à un seul patient et disparaît avec lui.
Les montants alimentent les agrégats financiers (bilan).
"""

import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.base_class import Base
from app.models.mixins import TimestampMixin
from app.models.types import Money

if TYPE_CHECKING:
    from app.models.patient.patient import Patient


class CareEpisode(TimestampMixin, Base):
    """
    Représente une consultation / un acte réalisé pour un patient.

    Attributes:
        patient_id: Patient concerné
        date: Date de la consultation (défaut : aujourd'hui)
        tooth: Dent concernée (texte libre, ex: "36")
        description: Description de l'acte
        billed_amount: Honoraires (>= 0)
        received_amount: Montant encaissé (>= 0, défaut 0)
    """

    __tablename__ = "care_episodes"
    __table_args__ = (
        CheckConstraint("billed_amount >= 0", name="billed_positive"),
        CheckConstraint("received_amount >= 0", name="received_positive"),
        {"comment": "Consultations (soins) rattachées aux patients"},
    )

    # === Colonnes ===

    id: Mapped[int] = mapped_column(
        primary_key=True,
        doc="Identifiant unique de la consultation",
    )

    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Patient concerné",
    )

    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        doc="Date de la consultation",
        info={"description": "Utilisée pour les agrégats par période"}
    )

    tooth: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        doc="Dent concernée",
        info={"description": "Numérotation libre", "example": "36"}
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Description de l'acte",
        info={"example": "Détartrage"}
    )

    billed_amount: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        doc="Honoraires",
        info={"description": "Montant facturé (>= 0)", "unit": "TND"}
    )

    received_amount: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        default=Decimal("0"),
        doc="Montant encaissé",
        info={"description": "Montant reçu (>= 0)", "unit": "TND", "default": 0}
    )

    # === Relations ===

    patient: Mapped["Patient"] = relationship(
        "Patient",
        back_populates="care_episodes",
    )

    @property
    def remaining_due(self) -> Decimal:
        return self.billed_amount - self.received_amount

    def __repr__(self) -> str:
        return f"<CareEpisode(id={self.id}, patient_id={self.patient_id}, date={self.date})>"
