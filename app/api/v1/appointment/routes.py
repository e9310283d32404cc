"""
Routes FastAPI pour le module Appointment.

Endpoints pour :
- /appointments : Agenda (liste filtrée, CRUD)

Un créneau déjà occupé renvoie 409 avec le rendez-vous en conflit dans
`data`.
"""
import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.api.v1.appointment.schemas import (
    AppointmentCreate, AppointmentUpdate, AppointmentResponse, AppointmentList,
    AppointmentFilters,
)
from app.api.v1.appointment.services import AppointmentService
from app.api.v1.dependencies import page_count
from app.core.auth.permissions import Capability
from app.core.auth.user_auth import require_capability
from app.database.session import get_db
from app.models.enums import AppointmentStatus
from app.models.user.user import User

# =============================================================================
# ROUTERS
# =============================================================================

router = APIRouter(prefix="/appointments", tags=["Rendez-vous"])


# =============================================================================
# APPOINTMENT ENDPOINTS
# =============================================================================

@router.get("", response_model=AppointmentList)
def list_appointments(
    date: Optional[dt.date] = Query(None, description="Jour exact"),
    start_date: Optional[dt.date] = Query(None, description="Début de période (inclus)"),
    end_date: Optional[dt.date] = Query(None, description="Fin de période (incluse)"),
    patient_id: Optional[int] = Query(None, description="Filtrer par patient"),
    appointment_status: Optional[AppointmentStatus] = Query(None, alias="status", description="Filtrer par statut"),
    include_cancelled: bool = Query(False, description="Inclure les rendez-vous annulés"),
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPOINTMENT_READ)),
):
    """
    Liste les rendez-vous triés par date puis heure de début.

    Les rendez-vous annulés sont masqués par défaut.
    """
    filters = AppointmentFilters(
        date=date,
        start_date=start_date,
        end_date=end_date,
        patient_id=patient_id,
        status=appointment_status,
        include_cancelled=include_cancelled,
    )
    items, total = AppointmentService(db).get_all(filters=filters, page=page, size=size)
    return AppointmentList(
        items=items, total=total, page=page, size=size, pages=page_count(total, size)
    )


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPOINTMENT_READ)),
):
    """Récupère un rendez-vous par son ID."""
    return AppointmentService(db).get_by_id(appointment_id)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPOINTMENT_WRITE)),
):
    """Crée un rendez-vous (refusé si le créneau du patient est déjà occupé)."""
    return AppointmentService(db).create(data, created_by=current_user.id)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPOINTMENT_WRITE)),
):
    """Modifie un rendez-vous (date, heures, statut, motif, notes)."""
    return AppointmentService(db).update(appointment_id, data)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPOINTMENT_DELETE)),
):
    """Supprime définitivement un rendez-vous."""
    AppointmentService(db).delete(appointment_id)
