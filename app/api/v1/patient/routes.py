"""
Routes FastAPI pour le module Patient.

Endpoints pour :
- /patients : Gestion des dossiers patients (recherche, CRUD)
- /patients/{id}/care-episodes : Consultations (soins)

Les erreurs métier (PatientNotFoundError, ValidationError...) sont
converties en réponses JSON par le handler global de app/main.py.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.api.v1.dependencies import PaginationParams, page_count
from app.api.v1.patient.schemas import (
    PatientCreate, PatientUpdate, PatientResponse, PatientList,
    CareEpisodeCreate, CareEpisodeUpdate,
)
from app.api.v1.patient.services import PatientService
from app.core.auth.permissions import Capability
from app.core.auth.user_auth import require_capability
from app.database.session import get_db
from app.models.user.user import User

# =============================================================================
# ROUTERS
# =============================================================================

router = APIRouter(prefix="/patients", tags=["Patients"])


# =============================================================================
# PATIENT ENDPOINTS
# =============================================================================

@router.get("", response_model=PatientList)
def list_patients(
    pagination: PaginationParams = Depends(),
    search: Optional[str] = Query(None, description="Nom, prénom, téléphone ou numéro (P000042)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.PATIENT_READ)),
):
    """
    Liste les patients avec recherche et pagination.

    Tri par numéro patient croissant par défaut.
    """
    service = PatientService(db)
    items, total = service.search(
        query=search,
        page=pagination.page,
        size=pagination.size,
        sort_by=pagination.sort_by,
        sort_order=pagination.sort_order,
    )
    return PatientList(
        items=items,
        total=total,
        page=pagination.page,
        size=pagination.size,
        pages=page_count(total, pagination.size),
    )


@router.get("/{patient_id}", response_model=PatientResponse)
def get_patient(
    patient_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.PATIENT_READ)),
):
    """Récupère un patient avec ses consultations et ses totaux."""
    return PatientService(db).get_by_id(patient_id)


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(
    data: PatientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.PATIENT_WRITE)),
):
    """Crée un nouveau patient (numéro attribué automatiquement)."""
    return PatientService(db).create(data)


@router.patch("/{patient_id}", response_model=PatientResponse)
def update_patient(
    patient_id: int,
    data: PatientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.PATIENT_WRITE)),
):
    """Met à jour les informations administratives d'un patient."""
    return PatientService(db).update(patient_id, data)


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_patient(
    patient_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.PATIENT_DELETE)),
):
    """Supprime un patient, ses consultations et ses rendez-vous."""
    PatientService(db).delete(patient_id)


# =============================================================================
# CARE EPISODE ENDPOINTS
# =============================================================================

@router.post(
    "/{patient_id}/care-episodes",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_care_episode(
    patient_id: int,
    data: CareEpisodeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CARE_WRITE)),
):
    """Ajoute une consultation au dossier du patient."""
    return PatientService(db).add_care_episode(patient_id, data)


@router.patch("/{patient_id}/care-episodes/{episode_id}", response_model=PatientResponse)
def update_care_episode(
    patient_id: int,
    episode_id: int,
    data: CareEpisodeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CARE_WRITE)),
):
    """Modifie une consultation (champs fournis uniquement)."""
    return PatientService(db).update_care_episode(patient_id, episode_id, data)


@router.delete("/{patient_id}/care-episodes/{episode_id}", response_model=PatientResponse)
def delete_care_episode(
    patient_id: int,
    episode_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.CARE_WRITE)),
):
    """Supprime une consultation."""
    return PatientService(db).remove_care_episode(patient_id, episode_id)
