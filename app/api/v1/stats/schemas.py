"""
Schémas Pydantic pour les statistiques du tableau de bord.
"""
import datetime as dt
from typing import List

from pydantic import BaseModel, ConfigDict

from app.api.v1.bilan.schemas import TopPatientResponse


class OverviewStats(BaseModel):
    """Chiffres clés du cabinet."""
    total_patients: int
    total_medecins: int
    appointments_today: int
    appointments_month: int
    patients_this_month: int
    revenue_month: float

    model_config = ConfigDict(from_attributes=True)


class MonthlyRevenueRow(BaseModel):
    """Encaissements d'un mois (période "YYYY-MM")."""
    period: str
    total_received: float
    episode_count: int

    model_config = ConfigDict(from_attributes=True)


class RevenueReport(BaseModel):
    start_date: dt.date
    end_date: dt.date
    months: List[MonthlyRevenueRow]
    total_received: float


class AppointmentStatusCounts(BaseModel):
    """Nombre de rendez-vous par statut (les quatre statuts toujours présents)."""
    start_date: dt.date
    end_date: dt.date
    total: int
    scheduled: int
    confirmed: int
    completed: int
    cancelled: int

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "OverviewStats",
    "MonthlyRevenueRow",
    "RevenueReport",
    "AppointmentStatusCounts",
    "TopPatientResponse",
]
