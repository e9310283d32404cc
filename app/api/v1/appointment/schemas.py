"""
Schémas Pydantic pour le module Appointment (rendez-vous).

Les heures sont transmises au format "HH:mm". Leur validation (format,
durée, chevauchement) est faite par AppointmentService afin de renvoyer
des messages métier explicites.
"""
import datetime as dt
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import AppointmentStatus


class AppointmentCreate(BaseModel):
    """Schéma pour créer un rendez-vous (statut initial : scheduled)."""
    model_config = ConfigDict(str_strip_whitespace=True)

    patient_id: int = Field(..., description="ID du patient")
    date: dt.date = Field(..., description="Jour du rendez-vous")
    start_time: str = Field(..., max_length=5, description="Heure de début (HH:mm)", examples=["09:00"])
    end_time: str = Field(..., max_length=5, description="Heure de fin (HH:mm)", examples=["09:30"])
    reason: Optional[str] = Field(None, max_length=255, description="Motif")
    notes: Optional[str] = None


class AppointmentUpdate(BaseModel):
    """
    Schéma pour modifier un rendez-vous.

    Le patient d'un rendez-vous n'est pas modifiable.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(None, max_length=5)
    end_time: Optional[str] = Field(None, max_length=5)
    status: Optional[AppointmentStatus] = None
    reason: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

    @field_validator("date", "start_time", "end_time", "status")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Ce champ ne peut pas être vide")
        return v


class AppointmentFilters(BaseModel):
    """Filtres de liste."""
    date: Optional[dt.date] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    patient_id: Optional[int] = None
    status: Optional[AppointmentStatus] = None
    include_cancelled: bool = False


class AppointmentPatient(BaseModel):
    """Résumé du patient affiché dans l'agenda."""
    id: int
    sequence_id: int
    patient_number: str
    last_name: str
    first_name: str
    phone: str

    model_config = ConfigDict(from_attributes=True)


class AppointmentSummary(BaseModel):
    """Rendez-vous sans le détail patient (payload des conflits)."""
    id: int
    patient_id: int
    patient_display_name: str
    date: dt.date
    start_time: str
    end_time: str
    status: AppointmentStatus

    model_config = ConfigDict(from_attributes=True)


class AppointmentResponse(AppointmentSummary):
    """Schéma de réponse complet pour un rendez-vous."""
    reason: Optional[str] = None
    notes: Optional[str] = None
    patient: Optional[AppointmentPatient] = None
    created_by: Optional[int] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None


class AppointmentList(BaseModel):
    """Liste paginée de rendez-vous."""
    items: List[AppointmentResponse]
    total: int
    page: int
    size: int
    pages: int
