"""
Modèle UserRefreshToken - Refresh tokens émis par utilisateur.

Seule l'empreinte SHA-256 du token est stockée. Un refresh token n'est
accepté que s'il figure encore dans cette table : la rotation et la
déconnexion le suppriment.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.base_class import Base
from app.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models.user.user import User


class UserRefreshToken(TimestampMixin, Base):
    """Refresh token actif d'un utilisateur."""

    __tablename__ = "user_refresh_tokens"
    __table_args__ = (
        UniqueConstraint("user_id", "token_hash", name="uq_user_refresh_token"),
        {"comment": "Refresh tokens révocables (empreintes SHA-256)"},
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Propriétaire du token",
    )

    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        doc="Empreinte SHA-256 du refresh token",
        info={"sensitive": True}
    )

    user: Mapped["User"] = relationship("User", back_populates="refresh_tokens")

    def __repr__(self) -> str:
        return f"<UserRefreshToken(id={self.id}, user_id={self.user_id})>"
