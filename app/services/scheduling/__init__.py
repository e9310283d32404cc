"""
Services de planification (rendez-vous).

- time_slots : validation des heures HH:mm, durées, chevauchements
"""

from app.services.scheduling.time_slots import (
    TimeSlot,
    InvalidTimeFormatError,
    InvalidDurationError,
    parse_minutes,
    duration_minutes,
    validate_slot,
)

__all__ = [
    "TimeSlot",
    "InvalidTimeFormatError",
    "InvalidDurationError",
    "parse_minutes",
    "duration_minutes",
    "validate_slot",
]
