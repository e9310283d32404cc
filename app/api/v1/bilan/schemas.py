"""
Schémas Pydantic pour le reporting financier (bilan, bilan final).

Vocabulaire des champs :
- total_billed : honoraires facturés
- total_received : montants encaissés
- remaining_due : reste à payer (facturé - encaissé)
- revenue : encaissements (bilan final), `billed` donné à titre indicatif
- profit : encaissements - charges
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class RevenueStatsResponse(BaseModel):
    """Agrégats des consultations sur une période."""
    total_billed: float
    total_received: float
    remaining_due: float
    episode_count: int

    model_config = ConfigDict(from_attributes=True)


class RevenuePeriodStats(BaseModel):
    """Consultations du jour, de la semaine (dimanche -> samedi) et du mois."""
    day: RevenueStatsResponse
    week: RevenueStatsResponse
    month: RevenueStatsResponse

    model_config = ConfigDict(from_attributes=True)


class MonthlyBreakdownRow(BaseModel):
    """Ligne mensuelle (consultations et charges)."""
    year: int
    month: int
    month_name: str
    total_billed: float
    total_received: float
    remaining_due: float
    episode_count: int
    patient_count: int
    total_amount: float
    charge_count: int
    profit: float

    model_config = ConfigDict(from_attributes=True)


class TopPatientResponse(BaseModel):
    """Patient classé par montant encaissé."""
    patient_id: int
    sequence_id: int
    patient_number: str
    last_name: str
    first_name: str
    phone: str
    total_billed: float
    total_received: float
    remaining_due: float
    episode_count: int

    model_config = ConfigDict(from_attributes=True)


class OverallStatsResponse(BaseModel):
    """Totaux depuis l'ouverture du cabinet."""
    total_patients: int
    total_billed: float
    total_received: float
    total_remaining: float
    episode_count: int

    model_config = ConfigDict(from_attributes=True)


class NetBilanResponse(BaseModel):
    """Bilan net d'un mois : encaissements - charges."""
    year: Optional[int] = None
    month: Optional[int] = None
    month_name: Optional[str] = None
    revenue: float
    billed: float
    charges: float
    profit: float
    episode_count: int
    charge_count: int

    model_config = ConfigDict(from_attributes=True)
