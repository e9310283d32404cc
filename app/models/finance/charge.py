"""
Modèle Charge - Dépenses du cabinet.

Entité indépendante, utilisée uniquement dans les agrégats financiers
(bilan final = encaissements - charges).
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import TimestampMixin
from app.models.types import Money


class Charge(TimestampMixin, Base):
    """
    Représente une dépense du cabinet.

    Attributes:
        date: Date de la dépense (défaut : aujourd'hui)
        reason: Motif (loyer, fournitures...)
        amount: Montant (>= 0)
    """

    __tablename__ = "charges"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="amount_positive"),
        {"comment": "Dépenses du cabinet"},
    )

    id: Mapped[int] = mapped_column(
        primary_key=True,
        doc="Identifiant unique de la charge",
    )

    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        doc="Date de la dépense",
    )

    reason: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Motif de la dépense",
        info={"example": "Loyer"}
    )

    amount: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        doc="Montant",
        info={"description": "Montant de la dépense (>= 0)", "unit": "TND"}
    )

    def __repr__(self) -> str:
        return f"<Charge(id={self.id}, date={self.date}, amount={self.amount})>"
