"""
Schémas Pydantic pour le module Patient.

Contient les schémas pour :
- Patient (dossier administratif, numéro P000042)
- CareEpisode (consultations / soins et leurs montants)

Les montants sont reçus en Decimal et renvoyés en nombre (3 décimales).
"""
import datetime as dt
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# =============================================================================
# CARE EPISODE SCHEMAS
# =============================================================================

class CareEpisodeCreate(BaseModel):
    """Schéma pour ajouter une consultation."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[dt.date] = Field(None, description="Date de la consultation (défaut : aujourd'hui)")
    tooth: Optional[str] = Field(None, max_length=20, description="Dent concernée")
    description: str = Field(..., min_length=1, description="Description de l'acte")
    billed_amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=3, description="Honoraires")
    received_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=3, description="Montant encaissé")


class CareEpisodeUpdate(BaseModel):
    """Schéma pour modifier une consultation (champs fournis uniquement)."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[dt.date] = None
    tooth: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = Field(None, min_length=1)
    billed_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=3)
    received_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=3)

    @field_validator("date", "description", "billed_amount", "received_amount")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Ce champ ne peut pas être vide")
        return v


class CareEpisodeResponse(BaseModel):
    """Schéma de réponse pour une consultation."""
    id: int
    patient_id: int
    date: dt.date
    tooth: Optional[str] = None
    description: str
    billed_amount: float
    received_amount: float
    remaining_due: float
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# PATIENT SCHEMAS
# =============================================================================

class PatientBase(BaseModel):
    """Champs communs pour Patient."""
    model_config = ConfigDict(str_strip_whitespace=True)

    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=500)
    insurer: Optional[str] = Field(None, max_length=100, description="Mutuelle")
    insurer_number: Optional[str] = Field(None, max_length=50, description="N° d'adhérent mutuelle")
    medical_history: Optional[str] = Field(None, description="Antécédents médicaux")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class PatientCreate(PatientBase):
    """Schéma pour créer un patient."""
    last_name: str = Field(..., min_length=1, max_length=100, description="Nom")
    first_name: str = Field(..., min_length=1, max_length=100, description="Prénom")
    birth_date: dt.date = Field(..., description="Date de naissance")
    phone: str = Field(..., min_length=1, max_length=30, description="Téléphone")


class PatientUpdate(PatientBase):
    """
    Schéma pour mettre à jour un patient.

    Le numéro séquentiel n'est pas modifiable et les consultations ont
    leurs propres endpoints.
    """
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    birth_date: Optional[dt.date] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=30)

    @field_validator("last_name", "first_name", "birth_date", "phone")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Ce champ est obligatoire et ne peut pas être vide")
        return v


class PatientSummary(BaseModel):
    """Schéma résumé pour les listes."""
    id: int
    sequence_id: int
    patient_number: str
    last_name: str
    first_name: str
    birth_date: dt.date
    phone: str
    email: Optional[str] = None
    insurer: Optional[str] = None
    total_billed: float
    total_received: float
    remaining_due: float
    last_episode: Optional[CareEpisodeResponse] = None
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class PatientResponse(PatientSummary):
    """Schéma de réponse complet pour un patient."""
    address: Optional[str] = None
    insurer_number: Optional[str] = None
    medical_history: Optional[str] = None
    care_episodes: List[CareEpisodeResponse] = []
    updated_at: Optional[dt.datetime] = None


class PatientList(BaseModel):
    """Liste paginée de patients."""
    items: List[PatientSummary]
    total: int
    page: int
    size: int
    pages: int
