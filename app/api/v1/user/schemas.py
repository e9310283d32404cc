"""
Schémas Pydantic pour le module User.

Contient les schémas pour :
- User (comptes du personnel : admin, medecin, assistant)

Le hash du mot de passe n'est jamais exposé.
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.config import settings
from app.models.enums import UserRole


# =============================================================================
# USER SCHEMAS
# =============================================================================

class UserBase(BaseModel):
    """Champs communs pour User."""
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr = Field(..., description="Email de connexion")
    first_name: str = Field(..., min_length=1, max_length=100, description="Prénom")
    last_name: str = Field(..., min_length=1, max_length=100, description="Nom")
    role: UserRole = Field(UserRole.ASSISTANT, description="admin, medecin ou assistant")
    phone: Optional[str] = Field(None, max_length=30, description="Téléphone")
    is_active: bool = Field(True, description="Compte actif")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UserCreate(UserBase):
    """Schéma pour créer un utilisateur."""
    password: str = Field(..., description="Mot de passe (min 8 caractères)")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Le mot de passe doit contenir au moins {settings.PASSWORD_MIN_LENGTH} caractères"
            )
        return v


class UserUpdate(BaseModel):
    """
    Schéma pour mettre à jour un utilisateur.

    Un mot de passe fourni est re-hashé ; absent, il reste inchangé.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    phone: Optional[str] = Field(None, max_length=30)
    is_active: Optional[bool] = None
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Le mot de passe doit contenir au moins {settings.PASSWORD_MIN_LENGTH} caractères"
            )
        return v

    @field_validator("email", "first_name", "last_name", "role", "is_active")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Ce champ ne peut pas être vide")
        return v


class UserResponse(BaseModel):
    """Schéma de réponse pour un utilisateur."""
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    display_name: str
    role: UserRole
    phone: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserList(BaseModel):
    """Liste paginée d'utilisateurs."""
    items: List[UserResponse]
    total: int
    page: int
    size: int
    pages: int
