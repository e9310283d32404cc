"""
Types SQLAlchemy personnalisés et helpers monétaires.

Tous les montants (honoraires, encaissements, charges) sont stockés en
Numeric(12, 3) : dinars avec trois décimales (millimes), et arrondis à
trois décimales partout où ils sont calculés.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from sqlalchemy import Numeric


# Nombre de décimales des montants
AMOUNT_SCALE = 3

_QUANTUM = Decimal(1).scaleb(-AMOUNT_SCALE)

ZERO = Decimal(0).quantize(_QUANTUM)


# ============================================================================
# Money - Montant monétaire
# ============================================================================
#
# Usage dans les modèles:
#     from app.models.types import Money
#
#     class MyModel(Base):
#         amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
#
# ============================================================================

Money = Numeric(12, AMOUNT_SCALE, asdecimal=True)


def to_amount(value: Any) -> Decimal:
    """
    Convertit une valeur (Decimal, float, int, None) en montant arrondi.

    None (SUM sur un ensemble vide) vaut 0. Les float renvoyés par SQLite
    passent par leur représentation texte pour éviter les artefacts
    binaires (0.30000000000000004).
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
