"""
Patient models - Dossier patient.

Ce module contient les modèles liés aux patients :
- Patient : Dossier patient
- CareEpisode : Consultations (soins) du patient
"""

from app.models.patient.patient import Patient, PATIENT_SEQUENCE, format_patient_number
from app.models.patient.care_episode import CareEpisode

__all__ = [
    "Patient",
    "PATIENT_SEQUENCE",
    "format_patient_number",
    "CareEpisode",
]
