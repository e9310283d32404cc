"""
API MediCabinet v1.

Modules exposés sous /api/v1 : auth, users, patients (et leurs
consultations), appointments, charges, bilan, bilan-final, stats.

Usage:
    from app.api.v1 import api_router

    app.include_router(api_router)
"""
from .router import api_router
from .dependencies import PaginationParams, page_count

__all__ = [
    "api_router",
    "PaginationParams",
    "page_count",
]
