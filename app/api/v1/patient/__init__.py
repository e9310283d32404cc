"""
Module Patient API.

Expose les routes pour la gestion des dossiers patients
et de leurs consultations (soins).
"""
from app.api.v1.patient.routes import router

__all__ = ["router"]
