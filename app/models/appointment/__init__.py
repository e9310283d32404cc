"""
Appointment models - Agenda du cabinet.

- Appointment : Rendez-vous patient
"""

from app.models.appointment.appointment import Appointment

__all__ = ["Appointment"]
