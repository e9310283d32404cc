"""
Module Stats API.

Expose les routes des statistiques du tableau de bord.
"""
from app.api.v1.stats.routes import router

__all__ = ["router"]
