"""
Module Charge API.

Expose les routes de gestion des dépenses du cabinet.
"""
from app.api.v1.charge.routes import router

__all__ = ["router"]
