"""
Module User API.

Expose les routes d'administration des utilisateurs.
"""
from app.api.v1.user.routes import router

__all__ = ["router"]
