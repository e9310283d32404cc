"""
Routes FastAPI pour le module User.

Endpoints pour :
- /users : Administration des comptes du personnel (admin uniquement)
"""
from typing import Optional

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.api.v1.dependencies import PaginationParams, page_count
from app.api.v1.user.schemas import UserCreate, UserUpdate, UserResponse, UserList
from app.api.v1.user.services import UserService
from app.core.auth.permissions import Capability
from app.core.auth.user_auth import require_capability
from app.database.session import get_db
from app.models.user.user import User

router = APIRouter(prefix="/users", tags=["Utilisateurs"])


# =============================================================================
# USER ENDPOINTS
# =============================================================================

@router.get("", response_model=UserList)
def list_users(
    pagination: PaginationParams = Depends(),
    search: Optional[str] = Query(None, description="Nom, prénom, email ou téléphone"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.USER_MANAGE)),
):
    """Liste les utilisateurs avec recherche, tri et pagination."""
    items, total = UserService(db).get_all(
        search=search,
        page=pagination.page,
        size=pagination.size,
        sort_by=pagination.sort_by,
        sort_order=pagination.sort_order,
    )
    return UserList(
        items=items,
        total=total,
        page=pagination.page,
        size=pagination.size,
        pages=page_count(total, pagination.size),
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.USER_MANAGE)),
):
    """Récupère un utilisateur par son ID."""
    return UserService(db).get_by_id(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.USER_MANAGE)),
):
    """Crée un nouvel utilisateur."""
    return UserService(db).create(data)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.USER_MANAGE)),
):
    """Met à jour un utilisateur (rôle, statut, mot de passe...)."""
    return UserService(db).update(user_id, data, current_user=current_user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.USER_MANAGE)),
):
    """Supprime définitivement un utilisateur."""
    UserService(db).delete(user_id, current_user=current_user)
