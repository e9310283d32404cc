"""
Services métier pour le module User.

Contient la logique CRUD pour :
- UserService : administration des comptes du personnel

Un utilisateur ne peut ni changer son propre rôle, ni désactiver ni
supprimer son propre compte, quel que soit son rôle.
"""
import logging
from typing import Optional, List, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from app.api.v1.user.schemas import UserCreate, UserUpdate
from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.core.security import hash_password
from app.models.user.user import User

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class UserNotFoundError(NotFoundError):
    """Utilisateur non trouvé."""
    default_message = "Utilisateur non trouvé"


class DuplicateEmailError(ConflictError):
    """Email déjà utilisé par un autre compte."""
    default_message = "Cet email est déjà utilisé"


class SelfModificationError(ForbiddenError):
    """Action interdite sur son propre compte."""
    default_message = "Action interdite sur votre propre compte"


# =============================================================================
# USER SERVICE
# =============================================================================

SORTABLE_FIELDS = {
    "last_name": User.last_name,
    "first_name": User.first_name,
    "email": User.email,
    "role": User.role,
    "created_at": User.created_at,
    "last_login_at": User.last_login_at,
}


class UserService:
    """Service pour la gestion des utilisateurs."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
            self,
            search: Optional[str] = None,
            page: int = 1,
            size: int = 20,
            sort_by: Optional[str] = None,
            sort_order: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """Liste les utilisateurs (recherche sur nom, prénom, email, téléphone)."""
        query = select(User)

        search = (search or "").strip()
        if search:
            query = query.where(
                or_(
                    User.first_name.icontains(search, autoescape=True),
                    User.last_name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                    User.phone.icontains(search, autoescape=True),
                )
            )

        # Count
        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.execute(count_query).scalar() or 0

        # Tri
        if sort_by is not None and sort_by not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Tri impossible sur '{sort_by}'",
                data={"allowed": sorted(SORTABLE_FIELDS)},
            )
        order_column = SORTABLE_FIELDS[sort_by or "last_name"]
        if sort_order == "desc":
            order_column = order_column.desc()
        query = query.order_by(order_column, User.id)

        # Pagination
        query = query.offset((page - 1) * size).limit(size)

        items = self.db.execute(query).scalars().all()
        return list(items), total

    def get_by_id(self, user_id: int) -> User:
        """Récupère un utilisateur par son ID."""
        user = self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError(f"Utilisateur {user_id} non trouvé")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        """Récupère un utilisateur par son email (insensible à la casse)."""
        query = select(User).where(func.lower(User.email) == email.lower())
        return self.db.execute(query).scalar_one_or_none()

    def create(self, data: UserCreate) -> User:
        """
        Crée un nouvel utilisateur.

        Raises:
            DuplicateEmailError: Email déjà utilisé
        """
        if self.get_by_email(data.email):
            raise DuplicateEmailError(data={"email": data.email})

        user = User(**data.model_dump(exclude={"password"}))
        user.password_hash = hash_password(data.password)

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"✅ Utilisateur créé : {user.email} ({user.role.value}, id={user.id})")
        return user

    def update(self, user_id: int, data: UserUpdate, current_user: User) -> User:
        """
        Met à jour un utilisateur.

        Raises:
            SelfModificationError: Changement de son propre rôle ou
                désactivation de son propre compte
            DuplicateEmailError: Email déjà utilisé par un autre compte
        """
        user = self.get_by_id(user_id)
        update_data = data.model_dump(exclude_unset=True, exclude={"password"})

        if user.id == current_user.id:
            if "role" in update_data and update_data["role"] != user.role:
                self._refuse_self(current_user, "Vous ne pouvez pas modifier votre propre rôle")
            if update_data.get("is_active") is False:
                self._refuse_self(current_user, "Vous ne pouvez pas désactiver votre propre compte")

        if "email" in update_data and update_data["email"] != user.email:
            existing = self.get_by_email(update_data["email"])
            if existing and existing.id != user.id:
                raise DuplicateEmailError(data={"email": update_data["email"]})

        for field, value in update_data.items():
            setattr(user, field, value)

        if data.password:
            user.password_hash = hash_password(data.password)

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: int, current_user: User) -> None:
        """Supprime définitivement un utilisateur."""
        user = self.get_by_id(user_id)
        if user.id == current_user.id:
            self._refuse_self(current_user, "Vous ne pouvez pas supprimer votre propre compte")

        email = user.email
        self.db.delete(user)
        self.db.commit()
        logger.info(f"🗑️ Utilisateur supprimé : {email} (id={user_id})")

    @staticmethod
    def _refuse_self(current_user: User, message: str) -> None:
        logger.warning(f"⛔ Auto-modification refusée : user {current_user.id} : {message}")
        raise SelfModificationError(message)
