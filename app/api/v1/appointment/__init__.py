"""
Module Appointment API.

Expose les routes de l'agenda (rendez-vous patients).
"""
from app.api.v1.appointment.routes import router

__all__ = ["router"]
