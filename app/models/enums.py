"""
Enums partagés par les modèles et les schémas.

Les valeurs sont stockées en base telles quelles (str, Enum).
"""

from enum import Enum


# =============================================================================
# ENUMS POUR LE MODULE USER
# =============================================================================

class UserRole(str, Enum):
    """Rôles des utilisateurs du cabinet."""
    ADMIN = "admin"            # Gestion complète, y compris les comptes
    MEDECIN = "medecin"        # Praticien : soins, bilan, charges
    ASSISTANT = "assistant"    # Accueil : patients et rendez-vous


# =============================================================================
# ENUMS POUR LE MODULE APPOINTMENT
# =============================================================================

class AppointmentStatus(str, Enum):
    """Statuts d'un rendez-vous."""
    SCHEDULED = "scheduled"    # Planifié (statut initial)
    CONFIRMED = "confirmed"    # Confirmé par le patient
    COMPLETED = "completed"    # Consultation effectuée
    CANCELLED = "cancelled"    # Annulé (libère le créneau)


# Transitions autorisées quand APPOINTMENT_STRICT_STATUS_TRANSITIONS est actif
APPOINTMENT_STATUS_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}
