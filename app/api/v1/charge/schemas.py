"""
Schémas Pydantic pour le module Charge (dépenses du cabinet).
"""
import datetime as dt
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChargeCreate(BaseModel):
    """Schéma pour enregistrer une dépense."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[dt.date] = Field(None, description="Date de la dépense (défaut : aujourd'hui)")
    reason: str = Field(..., min_length=1, max_length=255, description="Motif")
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=3, description="Montant")


class ChargeUpdate(BaseModel):
    """Schéma pour modifier une dépense."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[dt.date] = None
    reason: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=3)

    @field_validator("date", "reason", "amount")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Ce champ ne peut pas être vide")
        return v


class ChargeResponse(BaseModel):
    """Schéma de réponse pour une dépense."""
    id: int
    date: dt.date
    reason: str
    amount: float
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChargeList(BaseModel):
    """Liste paginée de dépenses."""
    items: List[ChargeResponse]
    total: int
    page: int
    size: int
    pages: int


class ChargeStatsResponse(BaseModel):
    """Total et nombre de dépenses sur une période."""
    total_amount: float
    charge_count: int

    model_config = ConfigDict(from_attributes=True)


class ChargePeriodStats(BaseModel):
    """Dépenses du jour, de la semaine (dimanche -> samedi) et du mois."""
    day: ChargeStatsResponse
    week: ChargeStatsResponse
    month: ChargeStatsResponse

    model_config = ConfigDict(from_attributes=True)


class ChargeMonthlyRow(BaseModel):
    """Dépenses d'un mois calendaire."""
    year: int
    month: int
    month_name: str
    total_amount: float
    charge_count: int

    model_config = ConfigDict(from_attributes=True)
