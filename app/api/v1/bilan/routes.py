"""
Routes FastAPI pour le reporting financier.

Endpoints pour :
- /bilan : Consultations (stats par période, ventilation mensuelle,
  meilleurs patients, totaux)
- /bilan-final : Bilan net (encaissements - charges)

Lecture seule : chaque appel recalcule depuis la base.
"""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.bilan.schemas import (
    RevenuePeriodStats, MonthlyBreakdownRow, TopPatientResponse,
    OverallStatsResponse, NetBilanResponse,
)
from app.core.auth.permissions import Capability
from app.core.auth.user_auth import require_capability
from app.database.session import get_db
from app.models.user.user import User
from app.services.finance import FinancialService

# =============================================================================
# ROUTERS
# =============================================================================

router = APIRouter()
bilan_router = APIRouter(prefix="/bilan", tags=["Bilan"])
bilan_final_router = APIRouter(prefix="/bilan-final", tags=["Bilan final"])


# =============================================================================
# BILAN (CONSULTATIONS)
# =============================================================================

@bilan_router.get("/stats", response_model=RevenuePeriodStats)
def get_revenue_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.BILAN_READ)),
):
    """Honoraires et encaissements : aujourd'hui, cette semaine, ce mois."""
    return RevenuePeriodStats.model_validate(FinancialService(db).period_revenue_stats())


@bilan_router.get("/monthly", response_model=List[MonthlyBreakdownRow])
def get_monthly_breakdown(
    months_back: int = Query(12, ge=1, le=60, description="Nombre de mois (mois courant inclus)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.BILAN_READ)),
):
    """Ventilation mensuelle, du plus ancien au plus récent (mois vides inclus)."""
    rows = FinancialService(db).monthly_breakdown(months_back)
    return [MonthlyBreakdownRow.model_validate(row) for row in rows]


@bilan_router.get("/top-patients", response_model=List[TopPatientResponse])
def get_top_patients(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.BILAN_READ)),
):
    """Patients classés par montant encaissé décroissant."""
    patients = FinancialService(db).top_patients_by_revenue(limit)
    return [TopPatientResponse.model_validate(p) for p in patients]


@bilan_router.get("/overall", response_model=OverallStatsResponse)
def get_overall_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.BILAN_READ)),
):
    """Totaux globaux : patients, facturé, encaissé, reste à payer, consultations."""
    return OverallStatsResponse.model_validate(FinancialService(db).overall())


# =============================================================================
# BILAN FINAL (ENCAISSEMENTS - CHARGES)
# =============================================================================

@bilan_final_router.get("/stats", response_model=NetBilanResponse)
def get_net_bilan(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.BILAN_READ)),
):
    """Bilan net du mois courant."""
    return NetBilanResponse.model_validate(FinancialService(db).current_net_bilan())


@bilan_final_router.get("/monthly", response_model=List[NetBilanResponse])
def get_net_bilan_monthly(
    months_back: int = Query(12, ge=1, le=60),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.BILAN_READ)),
):
    """Bilan net par mois, du plus récent au plus ancien."""
    rows = FinancialService(db).net_bilan_monthly(months_back)
    return [NetBilanResponse.model_validate(row) for row in rows]


# =============================================================================
# INCLUDE SUB-ROUTERS
# =============================================================================

router.include_router(bilan_router)
router.include_router(bilan_final_router)
