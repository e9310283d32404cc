"""
Services métier pour le module Charge.

CRUD des dépenses du cabinet. Les agrégats (par période, par mois) sont
délégués à FinancialService.
"""
import logging
from typing import Optional, List, Tuple

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.api.v1.charge.schemas import ChargeCreate, ChargeUpdate
from app.core.exceptions import NotFoundError, ValidationError
from app.models.finance.charge import Charge
from app.services.finance.periods import today

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ChargeNotFoundError(NotFoundError):
    """Charge non trouvée."""
    default_message = "Charge non trouvée"


# =============================================================================
# CHARGE SERVICE
# =============================================================================

SORTABLE_FIELDS = {
    "date": Charge.date,
    "amount": Charge.amount,
    "reason": Charge.reason,
    "created_at": Charge.created_at,
}


class ChargeService:
    """Service pour la gestion des dépenses."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
            self,
            search: Optional[str] = None,
            page: int = 1,
            size: int = 20,
            sort_by: Optional[str] = None,
            sort_order: Optional[str] = None,
    ) -> Tuple[List[Charge], int]:
        """
        Liste les dépenses (recherche sur le motif).

        Tri par date décroissante par défaut.
        """
        query = select(Charge)

        if search and search.strip():
            query = query.where(Charge.reason.icontains(search.strip(), autoescape=True))

        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.execute(count_query).scalar() or 0

        if sort_by is not None and sort_by not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Tri impossible sur '{sort_by}'",
                data={"allowed": sorted(SORTABLE_FIELDS)},
            )
        order_column = SORTABLE_FIELDS[sort_by or "date"]
        if (sort_order or "desc") == "desc":
            order_column = order_column.desc()
        query = query.order_by(order_column, Charge.id.desc())

        query = query.offset((page - 1) * size).limit(size)

        items = self.db.execute(query).scalars().all()
        return list(items), total

    def get_by_id(self, charge_id: int) -> Charge:
        charge = self.db.get(Charge, charge_id)
        if not charge:
            raise ChargeNotFoundError(f"Charge {charge_id} non trouvée")
        return charge

    def create(self, data: ChargeCreate) -> Charge:
        """Enregistre une dépense (date du jour si non précisée)."""
        charge = Charge(
            date=data.date or today(),
            reason=data.reason,
            amount=data.amount,
        )
        self.db.add(charge)
        self.db.commit()
        self.db.refresh(charge)
        logger.info(f"💸 Charge créée : id={charge.id} {charge.reason} ({charge.amount})")
        return charge

    def update(self, charge_id: int, data: ChargeUpdate) -> Charge:
        charge = self.get_by_id(charge_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(charge, field, value)

        self.db.commit()
        self.db.refresh(charge)
        return charge

    def delete(self, charge_id: int) -> None:
        charge = self.get_by_id(charge_id)
        self.db.delete(charge)
        self.db.commit()
        logger.info(f"🗑️ Charge supprimée : id={charge_id}")
