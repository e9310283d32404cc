"""
Routes FastAPI pour les statistiques du tableau de bord.

Endpoints pour :
- /stats/overview : Chiffres clés
- /stats/revenue : Encaissements par mois
- /stats/top-patients : Meilleurs patients
- /stats/appointments : Rendez-vous par statut
"""
import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.stats.schemas import (
    OverviewStats, MonthlyRevenueRow, RevenueReport,
    AppointmentStatusCounts, TopPatientResponse,
)
from app.api.v1.stats.services import StatsService
from app.core.auth.permissions import Capability
from app.core.auth.user_auth import require_capability
from app.database.session import get_db
from app.models.types import to_amount
from app.models.user.user import User

router = APIRouter(prefix="/stats", tags=["Statistiques"])


@router.get("/overview", response_model=OverviewStats)
def get_overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.STATS_READ)),
):
    """Patients, médecins, rendez-vous du jour et du mois, encaissements du mois."""
    return OverviewStats.model_validate(StatsService(db).overview())


@router.get("/revenue", response_model=RevenueReport)
def get_revenue(
    start_date: Optional[dt.date] = Query(None, description="Défaut : 1er janvier de l'année"),
    end_date: Optional[dt.date] = Query(None, description="Défaut : aujourd'hui"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.STATS_READ)),
):
    """Encaissements par mois (YYYY-MM) sur la période."""
    start, end, months = StatsService(db).revenue(start_date, end_date)
    return RevenueReport(
        start_date=start,
        end_date=end,
        months=[MonthlyRevenueRow.model_validate(m) for m in months],
        total_received=to_amount(sum(m.total_received for m in months)),
    )


@router.get("/top-patients", response_model=List[TopPatientResponse])
def get_top_patients(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.STATS_READ)),
):
    """Patients classés par montant encaissé."""
    return [TopPatientResponse.model_validate(p) for p in StatsService(db).top_patients(limit)]


@router.get("/appointments", response_model=AppointmentStatusCounts)
def get_appointment_stats(
    start_date: Optional[dt.date] = Query(None, description="Défaut : 1er du mois"),
    end_date: Optional[dt.date] = Query(None, description="Défaut : aujourd'hui"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.STATS_READ)),
):
    """Total et répartition des rendez-vous par statut."""
    counts = StatsService(db).appointment_counts(start_date, end_date)
    return AppointmentStatusCounts.model_validate(counts)
