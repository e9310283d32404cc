"""
Dépendances d'authentification et d'autorisation des utilisateurs.

Flow:
    1. get_current_user() extrait le JWT (Bearer) et charge l'utilisateur
    2. require_capability() vérifie que son rôle accorde la capacité demandée

Les refus sont levés sous forme d'AuthenticationError (401) ou
ForbiddenError (403), convertis en enveloppe JSON par app/main.py.

Usage:
    @router.delete("/patients/{patient_id}")
    def delete_patient(
        patient_id: int,
        current_user: User = Depends(require_capability(Capability.PATIENT_DELETE)),
        db: Session = Depends(get_db)
    ):
        ...
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.auth.permissions import Capability
from app.core.exceptions import AuthenticationError, ForbiddenError
from app.core.security.jwt import verify_token
from app.database.session import get_db
from app.models.user.user import User

logger = logging.getLogger(__name__)

# Security scheme pour le token Bearer
bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# AUTHENTIFICATION UTILISATEUR
# =============================================================================

def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dépendance pour obtenir l'utilisateur courant depuis le JWT.

    Le rôle utilisé pour les autorisations est celui stocké en base
    (un changement de rôle s'applique sans attendre l'expiration du token).

    Raises:
        AuthenticationError: Token manquant, invalide, expiré,
            utilisateur inconnu ou désactivé

    Returns:
        User: L'utilisateur authentifié
    """
    if credentials is None:
        raise AuthenticationError("Token d'authentification requis")

    try:
        payload = verify_token(credentials.credentials, token_type="access")
    except JWTError:
        raise AuthenticationError("Token invalide ou expiré")

    # Le JWT stocke l'identifiant sous forme de string
    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise AuthenticationError("Token invalide: identifiant utilisateur manquant")

    user = db.get(User, user_id)

    if user is None:
        raise AuthenticationError("Utilisateur non trouvé")

    if not user.is_active:
        raise AuthenticationError("Compte utilisateur désactivé")

    request.state.user_id = user.id
    return user


# =============================================================================
# VÉRIFICATION DES CAPACITÉS
# =============================================================================

def require_capability(capability: Capability):
    """
    Factory de dépendance pour vérifier une capacité.

    Usage:
        @router.get("/bilan/stats")
        def get_stats(
            current_user: User = Depends(require_capability(Capability.BILAN_READ))
        ):
            ...
    """
    def capability_checker(
        current_user: User = Depends(get_current_user),
    ) -> User:
        if not current_user.has_capability(capability):
            logger.warning(
                f"⛔ Accès refusé : user {current_user.id} ({current_user.role.value}) "
                f"-> {capability.value}"
            )
            raise ForbiddenError(
                "Vous n'avez pas les droits nécessaires pour cette action",
                data={"capability": capability.value},
            )
        return current_user

    return capability_checker
