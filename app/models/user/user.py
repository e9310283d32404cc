"""
Modèle User - Utilisateurs du cabinet.

Ce module définit la table `users` : comptes de connexion du personnel
(administrateur, médecins, assistants). Le rôle détermine les capacités
accordées (voir app/core/auth/permissions.py).
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, DateTime, Enum as SQLEnum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.base_class import Base
from app.models.enums import UserRole
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models.user.refresh_token import UserRefreshToken


class User(TimestampMixin, Base):
    """
    Représente un utilisateur (membre du personnel du cabinet).

    Attributes:
        id: Identifiant unique
        email: Email de connexion (unique, minuscules)
        password_hash: Hash bcrypt du mot de passe
        first_name / last_name: Identité
        role: admin, medecin ou assistant
        phone: Téléphone
        is_active: Compte actif (connexion impossible sinon)
        last_login_at: Dernière connexion réussie
        refresh_tokens: Refresh tokens en cours de validité (révocables)
    """

    __tablename__ = "users"
    __table_args__ = {
        "comment": "Table des utilisateurs du cabinet"
    }

    # === Colonnes ===

    id: Mapped[int] = mapped_column(
        primary_key=True,
        doc="Identifiant unique de l'utilisateur",
        info={"description": "Clé primaire auto-incrémentée"}
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Adresse email unique de connexion",
        info={
            "description": "Email (stocké en minuscules)",
            "format": "email",
            "pii": True,
            "example": "dr.trabelsi@cabinet.tn"
        }
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Hash bcrypt du mot de passe",
        info={"description": "Jamais renvoyé par l'API", "sensitive": True}
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Prénom de l'utilisateur",
        info={"description": "Prénom", "pii": True, "example": "Sami"}
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Nom de famille de l'utilisateur",
        info={"description": "Nom de famille", "pii": True, "example": "Trabelsi"}
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(
            UserRole,
            name="user_role_enum",
            create_constraint=True,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=UserRole.ASSISTANT,
        doc="Rôle de l'utilisateur",
        info={"description": "admin, medecin ou assistant", "default": "assistant"}
    )

    phone: Mapped[str | None] = mapped_column(
        String(30),
        nullable=True,
        doc="Téléphone",
        info={"pii": True}
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Le compte utilisateur est-il actif ?",
        info={"description": "False = compte désactivé, connexion impossible", "default": True}
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Date de dernière connexion",
    )

    # === Relations ===

    refresh_tokens: Mapped[List["UserRefreshToken"]] = relationship(
        "UserRefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # === Propriétés ===

    @property
    def full_name(self) -> str:
        """Nom complet (Prénom Nom)."""
        return f"{self.first_name} {self.last_name}"

    @property
    def display_name(self) -> str:
        """Nom d'affichage avec titre pour les médecins."""
        if self.role == UserRole.MEDECIN:
            return f"Dr. {self.last_name}"
        return self.full_name

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    # === Méthodes ===

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"

    def __str__(self) -> str:
        return self.full_name

    def has_capability(self, capability) -> bool:
        """Vérifie si le rôle de l'utilisateur accorde une capacité."""
        # Import local : permissions importe app.models.enums
        from app.core.auth.permissions import is_allowed

        return is_allowed(self.role, capability)
