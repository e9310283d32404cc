"""
Module Bilan API.

Expose les routes du reporting financier (/bilan et /bilan-final).
"""
from app.api.v1.bilan.routes import router

__all__ = ["router"]
