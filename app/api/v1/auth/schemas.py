"""
Schémas Pydantic pour le module d'authentification.

Contient les schémas pour :
- Authentification locale (email/mot de passe)
- Tokens JWT (access + refresh)
- Utilisateur authentifié
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.enums import UserRole


# =============================================================================
# AUTHENTIFICATION (EMAIL/MOT DE PASSE)
# =============================================================================

class LoginRequest(BaseModel):
    """Requête de connexion avec email/mot de passe."""
    email: EmailStr = Field(..., description="Email de connexion")
    password: str = Field(..., min_length=1, description="Mot de passe")


# =============================================================================
# TOKENS JWT
# =============================================================================

class TokenResponse(BaseModel):
    """Réponse contenant les tokens JWT."""
    access_token: str = Field(..., description="Token JWT d'accès")
    refresh_token: str = Field(..., description="Token JWT de refresh")
    token_type: str = Field(default="Bearer", description="Type de token")
    expires_in: int = Field(..., description="Durée de validité en secondes")


class RefreshTokenRequest(BaseModel):
    """Requête de renouvellement ou de révocation d'un refresh token."""
    refresh_token: str = Field(..., description="Token de refresh")


# =============================================================================
# RÉPONSES D'AUTHENTIFICATION
# =============================================================================

class AuthenticatedUser(BaseModel):
    """Informations de l'utilisateur authentifié."""
    id: int = Field(..., description="ID utilisateur")
    email: str = Field(..., description="Email")
    first_name: str = Field(..., description="Prénom")
    last_name: str = Field(..., description="Nom")
    full_name: str = Field(..., description="Nom complet")
    display_name: str = Field(..., description="Nom d'affichage (Dr. pour les médecins)")
    role: UserRole = Field(..., description="Rôle")
    phone: Optional[str] = Field(None, description="Téléphone")
    is_admin: bool = Field(default=False, description="Est administrateur")

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Réponse complète après authentification réussie."""
    user: AuthenticatedUser = Field(..., description="Informations utilisateur")
    tokens: TokenResponse = Field(..., description="Tokens JWT")


class MessageResponse(BaseModel):
    """Réponse simple."""
    success: bool = True
    message: str
