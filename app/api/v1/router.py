"""
Router principal API v1.

Agrège tous les routers des différents modules métier.

Usage dans main.py:
    from app.api.v1.router import api_router

    app = FastAPI(title="MediCabinet API")
    app.include_router(api_router)
"""
from fastapi import APIRouter

from app.core.config import settings

from .auth import router as auth_router
from .user import router as user_router
from .patient import router as patient_router
from .appointment import router as appointment_router
from .charge import router as charge_router
from .bilan import router as bilan_router
from .stats import router as stats_router


# =============================================================================
# ROUTER PRINCIPAL
# =============================================================================

api_router = APIRouter(prefix="/api/v1")


api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(patient_router)
api_router.include_router(appointment_router)
api_router.include_router(charge_router)
api_router.include_router(bilan_router)
api_router.include_router(stats_router)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@api_router.get(
    "/health",
    tags=["System"],
    summary="Health check",
    description="Vérifie que l'API est opérationnelle.",
)
def health_check():
    """Endpoint de santé pour les load balancers et le monitoring."""
    return {
        "status": "healthy",
        "service": "medicabinet-api",
        "version": settings.APP_VERSION,
        "api_version": "v1",
    }
