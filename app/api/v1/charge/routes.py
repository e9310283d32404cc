"""
Routes FastAPI pour le module Charge.

Endpoints pour :
- /charges : Dépenses du cabinet (CRUD)
- /charges/stats : Dépenses du jour, de la semaine et du mois
- /charges/monthly : Dépenses des N derniers mois (du plus récent au plus ancien)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.api.v1.charge.schemas import (
    ChargeCreate, ChargeUpdate, ChargeResponse, ChargeList,
    ChargePeriodStats, ChargeMonthlyRow,
)
from app.api.v1.charge.services import ChargeService
from app.api.v1.dependencies import PaginationParams, page_count
from app.core.auth.permissions import Capability
from app.core.auth.user_auth import require_capability
from app.database.session import get_db
from app.models.user.user import User
from app.services.finance import FinancialService

router = APIRouter(prefix="/charges", tags=["Charges"])


# =============================================================================
# STATISTIQUES (déclarées avant /{charge_id})
# =============================================================================

@router.get("/stats", response_model=ChargePeriodStats)
def get_charge_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CHARGE_READ)),
):
    """Total et nombre de dépenses : aujourd'hui, cette semaine, ce mois."""
    return ChargePeriodStats.model_validate(FinancialService(db).period_charge_stats())


@router.get("/monthly", response_model=List[ChargeMonthlyRow])
def get_monthly_charges(
    months_back: int = Query(12, ge=1, le=60, description="Nombre de mois (mois courant inclus)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CHARGE_READ)),
):
    """Dépenses par mois, du plus récent au plus ancien (mois vides inclus)."""
    rows = FinancialService(db).monthly_breakdown(months_back, newest_first=True)
    return [ChargeMonthlyRow.model_validate(row) for row in rows]


# =============================================================================
# CHARGE ENDPOINTS
# =============================================================================

@router.get("", response_model=ChargeList)
def list_charges(
    pagination: PaginationParams = Depends(),
    search: Optional[str] = Query(None, description="Recherche sur le motif"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CHARGE_READ)),
):
    """Liste les dépenses, par date décroissante par défaut."""
    items, total = ChargeService(db).get_all(
        search=search,
        page=pagination.page,
        size=pagination.size,
        sort_by=pagination.sort_by,
        sort_order=pagination.sort_order,
    )
    return ChargeList(
        items=items,
        total=total,
        page=pagination.page,
        size=pagination.size,
        pages=page_count(total, pagination.size),
    )


@router.get("/{charge_id}", response_model=ChargeResponse)
def get_charge(
    charge_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CHARGE_READ)),
):
    return ChargeService(db).get_by_id(charge_id)


@router.post("", response_model=ChargeResponse, status_code=status.HTTP_201_CREATED)
def create_charge(
    data: ChargeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CHARGE_WRITE)),
):
    """Enregistre une dépense."""
    return ChargeService(db).create(data)


@router.patch("/{charge_id}", response_model=ChargeResponse)
def update_charge(
    charge_id: int,
    data: ChargeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CHARGE_WRITE)),
):
    return ChargeService(db).update(charge_id, data)


@router.delete("/{charge_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_charge(
    charge_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CHARGE_WRITE)),
):
    ChargeService(db).delete(charge_id)
