"""
Module d'authentification.

Endpoints disponibles:
- POST /auth/login          - Login email/password
- POST /auth/refresh        - Refresh token (rotation)
- GET  /auth/me             - Utilisateur courant
- POST /auth/register       - Création de compte (admin)
- POST /auth/logout         - Déconnexion

Usage dans router.py:
    from app.api.v1.auth import router as auth_router
    api_router.include_router(auth_router)
"""

from app.api.v1.auth.routes import router
from app.api.v1.auth.services import (
    AuthService,
    get_auth_service,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
)

__all__ = [
    "router",
    "AuthService",
    "get_auth_service",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
]
