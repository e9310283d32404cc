"""
Modèle Counter - Séquences nommées.

Une ligne par séquence (ex: "patientId"). La valeur ne fait qu'augmenter :
elle n'est jamais décrémentée, même quand l'enregistrement numéroté est
supprimé. Les incréments passent exclusivement par
app.services.sequence.generator.next_value().
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base


class Counter(Base):
    """
    Compteur monotone identifié par son nom.

    Attributes:
        name: Nom de la séquence (clé primaire)
        value: Dernière valeur distribuée (0 = aucune)
    """

    __tablename__ = "counters"
    __table_args__ = {
        "comment": "Séquences nommées (numérotation des patients)"
    }

    name: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        doc="Nom de la séquence",
        info={"description": "Identifiant de la séquence", "example": "patientId"}
    )

    value: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Dernière valeur distribuée",
        info={"description": "Valeur courante, jamais décrémentée", "default": 0}
    )

    def __repr__(self) -> str:
        return f"<Counter(name='{self.name}', value={self.value})>"
