"""
Arithmétique des créneaux horaires (format "HH:mm", 24h).

Fonctions pures, sans accès base : validation du format, calcul de durée
et test d'intersection de deux intervalles semi-ouverts [début, fin).
"""

import re
from dataclasses import dataclass

from app.core.config import settings
from app.core.exceptions import ValidationError


TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class InvalidTimeFormatError(ValidationError):
    """Heure hors format HH:mm."""
    pass


class InvalidDurationError(ValidationError):
    """Durée hors bornes ou fin avant début."""
    pass


def parse_minutes(value: str) -> int:
    """
    Convertit "HH:mm" en minutes depuis minuit.

    >>> parse_minutes("09:30")
    570

    Raises:
        InvalidTimeFormatError: Format invalide (ex: "9:30", "24:00", "12:60")
    """
    match = TIME_PATTERN.match(value or "")
    if match is None:
        raise InvalidTimeFormatError(
            f"Format d'heure invalide: '{value}' (attendu HH:mm)",
            data={"value": value},
        )
    hours, minutes = match.groups()
    return int(hours) * 60 + int(minutes)


def duration_minutes(start: str, end: str) -> int:
    """Durée en minutes entre deux heures HH:mm (négative si fin < début)."""
    return parse_minutes(end) - parse_minutes(start)


@dataclass(frozen=True)
class TimeSlot:
    """Créneau [start, end) d'une journée."""

    start: str
    end: str

    @property
    def start_minutes(self) -> int:
        return parse_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return parse_minutes(self.end)

    @property
    def duration(self) -> int:
        return self.end_minutes - self.start_minutes

    def overlaps(self, other: "TimeSlot") -> bool:
        """
        Intersection de deux intervalles semi-ouverts.

        Deux créneaux qui se touchent (09:00-10:00 et 10:00-11:00) ne se
        chevauchent pas.
        """
        return other.start_minutes < self.end_minutes and self.start_minutes < other.end_minutes


def validate_slot(
    start: str,
    end: str,
    min_duration: int | None = None,
    max_duration: int | None = None,
) -> TimeSlot:
    """
    Valide un créneau de rendez-vous.

    Ordre des contrôles : format des deux heures, début < fin, puis
    bornes de durée (par défaut celles de la configuration, 15 et 180 min).

    Returns:
        Le créneau validé

    Raises:
        InvalidTimeFormatError: Heure mal formée
        InvalidDurationError: Fin <= début, durée trop courte ou trop longue
    """
    min_duration = min_duration if min_duration is not None else settings.APPOINTMENT_MIN_DURATION_MINUTES
    max_duration = max_duration if max_duration is not None else settings.APPOINTMENT_MAX_DURATION_MINUTES

    slot = TimeSlot(start=start, end=end)
    duration = slot.duration  # valide aussi le format

    if duration <= 0:
        raise InvalidDurationError(
            "L'heure de fin doit être après l'heure de début",
            data={"start_time": start, "end_time": end},
        )

    if duration < min_duration:
        raise InvalidDurationError(
            f"Durée minimum: {min_duration} minutes",
            data={"duration": duration, "min_duration": min_duration},
        )

    if duration > max_duration:
        raise InvalidDurationError(
            f"Durée maximum: {_format_duration(max_duration)}",
            data={"duration": duration, "max_duration": max_duration},
        )

    return slot


def _format_duration(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    if rest:
        return f"{hours}h{rest:02d}" if hours else f"{rest} minutes"
    return f"{hours} heure" if hours == 1 else f"{hours} heures"
