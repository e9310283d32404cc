"""
Routes d'authentification.

Ce module expose les endpoints pour :
- Connexion (email/mot de passe)
- Refresh de tokens (avec rotation)
- Déconnexion (révocation du refresh token)
- Utilisateur courant
- Création de compte (administrateur uniquement)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth.schemas import (
    LoginRequest,
    LoginResponse,
    TokenResponse,
    RefreshTokenRequest,
    AuthenticatedUser,
    MessageResponse,
)
from app.api.v1.auth.services import get_auth_service
from app.api.v1.user.schemas import UserCreate, UserResponse
from app.api.v1.user.services import UserService
from app.core.auth.permissions import Capability
from app.core.auth.user_auth import get_current_user, require_capability
from app.core.config import settings
from app.database.session import get_db
from app.models.user.user import User

router = APIRouter(
    prefix="/auth",
    tags=["Authentification"],
)


# =============================================================================
# CONNEXION
# =============================================================================

@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Connexion email/mot de passe",
)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
):
    """Authentifie un utilisateur et retourne ses tokens."""
    return get_auth_service(db).login(credentials.email, credentials.password)


# =============================================================================
# REFRESH TOKEN
# =============================================================================

@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Renouveler les tokens",
    description=(
        "Renouvelle la paire de tokens à partir d'un refresh token valide. "
        "L'ancien refresh token est révoqué. "
        f"Access token : {settings.ACCESS_TOKEN_EXPIRE_DAYS} jours, "
        f"refresh token : {settings.REFRESH_TOKEN_EXPIRE_DAYS} jours."
    ),
)
def refresh_token(
    request: RefreshTokenRequest,
    db: Session = Depends(get_db),
):
    return get_auth_service(db).refresh(request.refresh_token)


# =============================================================================
# UTILISATEUR COURANT
# =============================================================================

@router.get(
    "/me",
    response_model=AuthenticatedUser,
    summary="Obtenir l'utilisateur courant",
)
def get_me(
    current_user: User = Depends(get_current_user),
):
    """Retourne les informations de l'utilisateur authentifié."""
    return AuthenticatedUser.model_validate(current_user)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Créer un compte (administrateur)",
)
def register(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.USER_MANAGE)),
):
    return UserService(db).create(data)


# =============================================================================
# DÉCONNEXION
# =============================================================================

@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Déconnexion",
)
def logout(
    request: RefreshTokenRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Révoque le refresh token fourni ; l'access token expire normalement."""
    get_auth_service(db).logout(current_user, request.refresh_token)
    return MessageResponse(message="Déconnexion réussie")
