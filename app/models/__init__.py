"""
MediCabinet Models - Export centralisé de tous les modèles SQLAlchemy.

Ce fichier permet d'importer tous les modèles depuis un seul endroit :
    from app.models import User, Patient, CareEpisode, Appointment, Charge

Structure des sous-dossiers :
    sequence/       - Compteurs nommés (Counter)
    user/           - Comptes du personnel (User, UserRefreshToken)
    patient/        - Dossier patient (Patient, CareEpisode)
    appointment/    - Agenda (Appointment)
    finance/        - Dépenses (Charge)
"""

# === Enums ===
from app.models.enums import (
    UserRole,
    AppointmentStatus,
    APPOINTMENT_STATUS_TRANSITIONS,
)

# === Mixins ===
from app.models.mixins import TimestampMixin, AuditMixin

# === Sequence ===
from app.models.sequence import Counter

# === User ===
from app.models.user import User, UserRefreshToken

# === Patient ===
from app.models.patient import Patient, CareEpisode, PATIENT_SEQUENCE, format_patient_number

# === Appointment ===
from app.models.appointment import Appointment

# === Finance ===
from app.models.finance import Charge

__all__ = [
    # Enums
    "UserRole",
    "AppointmentStatus",
    "APPOINTMENT_STATUS_TRANSITIONS",
    # Mixins
    "TimestampMixin",
    "AuditMixin",
    # Sequence
    "Counter",
    # User
    "User",
    "UserRefreshToken",
    # Patient
    "Patient",
    "CareEpisode",
    "PATIENT_SEQUENCE",
    "format_patient_number",
    # Appointment
    "Appointment",
    # Finance
    "Charge",
]
