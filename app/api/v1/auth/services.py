"""
Service d'authentification - Logique métier.

Ce module orchestre :
- L'authentification locale (email/mot de passe, bcrypt)
- La génération des tokens JWT (access + refresh)
- La rotation et la révocation des refresh tokens

Les refresh tokens émis sont enregistrés (empreinte SHA-256) dans
user_refresh_tokens : un token absent de cette table est refusé.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from jose import JWTError
from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session

from app.api.v1.auth.schemas import (
    TokenResponse,
    AuthenticatedUser,
    LoginResponse,
)
from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import (
    create_access_token,
    create_refresh_token,
    hash_token,
    verify_password,
    verify_token,
)
from app.models.user.refresh_token import UserRefreshToken
from app.models.user.user import User

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class InvalidCredentialsError(AuthenticationError):
    """Identifiants invalides (message identique quelle que soit la cause)."""
    default_message = "Email ou mot de passe incorrect"


class InvalidRefreshTokenError(AuthenticationError):
    """Refresh token invalide, expiré ou révoqué."""
    default_message = "Refresh token invalide ou expiré"


# =============================================================================
# SERVICE D'AUTHENTIFICATION
# =============================================================================

class AuthService:
    """Service d'authentification."""

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # CONNEXION
    # =========================================================================

    def authenticate_local(self, email: str, password: str) -> User:
        """
        Authentifie un utilisateur avec email/mot de passe.

        Compte inconnu, désactivé ou mot de passe erroné produisent la
        même erreur, pour ne pas révéler l'existence d'un compte.
        """
        user = self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        ).scalar_one_or_none()

        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            logger.warning(f"⚠️ Connexion refusée pour {email}")
            raise InvalidCredentialsError()

        user.last_login_at = datetime.now(timezone.utc)
        return user

    def login(self, email: str, password: str) -> LoginResponse:
        """Authentifie puis émet une paire de tokens."""
        user = self.authenticate_local(email, password)
        tokens = self.create_tokens_for_user(user)
        self.db.commit()

        logger.info(f"🔑 Connexion : {user.email} (id={user.id})")
        return self.build_login_response(user, tokens)

    # =========================================================================
    # REFRESH / LOGOUT
    # =========================================================================

    def refresh(self, refresh_token: str) -> TokenResponse:
        """
        Émet une nouvelle paire de tokens et révoque l'ancien refresh token.

        Raises:
            InvalidRefreshTokenError: Signature, type ou expiration invalide,
                token déjà révoqué, utilisateur inconnu ou désactivé
        """
        user_id = self._user_id_from(refresh_token)

        stored = self._find_stored_token(user_id, refresh_token)
        if stored is None:
            logger.warning(f"⚠️ Refresh token révoqué présenté pour user {user_id}")
            raise InvalidRefreshTokenError()

        user = self.db.get(User, user_id)
        if user is None or not user.is_active:
            raise InvalidRefreshTokenError()

        self.db.delete(stored)
        tokens = self.create_tokens_for_user(user)
        self.db.commit()
        return tokens

    def logout(self, user: User, refresh_token: str) -> None:
        """Révoque un refresh token de l'utilisateur courant."""
        token_hash = hash_token(refresh_token)
        self.db.execute(
            delete(UserRefreshToken).where(
                UserRefreshToken.user_id == user.id,
                UserRefreshToken.token_hash == token_hash,
            )
        )
        self.db.commit()
        logger.info(f"👋 Déconnexion : user {user.id}")

    # =========================================================================
    # GÉNÉRATION DE TOKENS JWT
    # =========================================================================

    def create_tokens_for_user(self, user: User) -> TokenResponse:
        """
        Génère les tokens JWT et enregistre le refresh token.

        Le commit est laissé à l'appelant.
        """
        access_token = create_access_token({
            "sub": str(user.id),
            "role": user.role.value,
        })
        refresh_token = create_refresh_token({"sub": str(user.id)})

        self.db.add(UserRefreshToken(user_id=user.id, token_hash=hash_token(refresh_token)))

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="Bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _user_id_from(refresh_token: str) -> int:
        try:
            payload = verify_token(refresh_token, token_type="refresh")
            return int(payload.get("sub"))
        except (JWTError, ValueError, TypeError):
            raise InvalidRefreshTokenError()

    def _find_stored_token(self, user_id: int, refresh_token: str) -> Optional[UserRefreshToken]:
        return self.db.execute(
            select(UserRefreshToken).where(
                UserRefreshToken.user_id == user_id,
                UserRefreshToken.token_hash == hash_token(refresh_token),
            )
        ).scalar_one_or_none()

    @staticmethod
    def build_authenticated_user(user: User) -> AuthenticatedUser:
        return AuthenticatedUser.model_validate(user)

    def build_login_response(self, user: User, tokens: TokenResponse) -> LoginResponse:
        return LoginResponse(
            user=self.build_authenticated_user(user),
            tokens=tokens,
        )


# =============================================================================
# FACTORY
# =============================================================================

def get_auth_service(db: Session) -> AuthService:
    """Factory pour créer un AuthService avec une session DB."""
    return AuthService(db)
