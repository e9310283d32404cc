"""
Taxonomie des erreurs métier.

Les services lèvent ces exceptions ; un handler FastAPI (app/main.py)
les convertit en enveloppe JSON :

    {"success": false, "error": "<kind>", "message": "...", "data": ...}

Chaque module métier dérive ses propres erreurs de ces classes
(ex: PatientNotFoundError(NotFoundError)) pour garder un statut HTTP
et un `kind` stables côté client.
"""
from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    """Erreur métier de base."""

    kind: str = "error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Erreur serveur"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.kind, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        return body


class ValidationError(AppError):
    """Données invalides (champ requis manquant, format horaire, durée...)."""
    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Données invalides"


class NotFoundError(AppError):
    """Ressource introuvable."""
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ressource non trouvée"


class ConflictError(AppError):
    """Conflit avec l'état courant (créneau occupé, email déjà utilisé)."""
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflit avec une ressource existante"


class AuthenticationError(AppError):
    """Identifiants ou token invalides."""
    kind = "authentication_error"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentification requise"


class ForbiddenError(AppError):
    """Action refusée pour l'utilisateur courant."""
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Accès refusé"
