"""
Table déclarative des capacités par rôle.

Chaque opération protégée de l'API déclare la capacité qu'elle exige
(`require_capability(Capability.PATIENT_DELETE)`). Les rôles autorisés
pour chaque capacité sont définis ici, en un seul endroit.

Tout le personnel accède aux dossiers, à l'agenda, aux charges et aux
bilans ; seule la gestion des comptes est réservée à l'administrateur.
"""

from enum import Enum

from app.models.enums import UserRole


class Capability(str, Enum):
    """Capacités applicatives."""

    # Patients
    PATIENT_READ = "patient.read"
    PATIENT_WRITE = "patient.write"
    PATIENT_DELETE = "patient.delete"

    # Consultations (soins)
    CARE_WRITE = "care.write"

    # Rendez-vous
    APPOINTMENT_READ = "appointment.read"
    APPOINTMENT_WRITE = "appointment.write"
    APPOINTMENT_DELETE = "appointment.delete"

    # Charges
    CHARGE_READ = "charge.read"
    CHARGE_WRITE = "charge.write"

    # Reporting
    BILAN_READ = "bilan.read"
    STATS_READ = "stats.read"

    # Administration
    USER_MANAGE = "user.manage"


_ALL_ROLES = frozenset(UserRole)
_ADMINS = frozenset({UserRole.ADMIN})


CAPABILITY_ROLES: dict[Capability, frozenset[UserRole]] = {
    Capability.PATIENT_READ: _ALL_ROLES,
    Capability.PATIENT_WRITE: _ALL_ROLES,
    Capability.PATIENT_DELETE: _ALL_ROLES,

    Capability.CARE_WRITE: _ALL_ROLES,

    Capability.APPOINTMENT_READ: _ALL_ROLES,
    Capability.APPOINTMENT_WRITE: _ALL_ROLES,
    Capability.APPOINTMENT_DELETE: _ALL_ROLES,

    Capability.CHARGE_READ: _ALL_ROLES,
    Capability.CHARGE_WRITE: _ALL_ROLES,

    Capability.BILAN_READ: _ALL_ROLES,
    Capability.STATS_READ: _ALL_ROLES,

    Capability.USER_MANAGE: _ADMINS,
}


def is_allowed(role: UserRole | str, capability: Capability | str) -> bool:
    """
    Indique si un rôle dispose d'une capacité.

    Une capacité absente de la table n'est accordée à personne.
    """
    try:
        role = UserRole(role)
        capability = Capability(capability)
    except ValueError:
        return False
    return role in CAPABILITY_ROLES.get(capability, frozenset())
