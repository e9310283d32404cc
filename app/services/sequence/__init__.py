"""
Générateur de séquences nommées.

Usage:
    from app.services.sequence import next_value

    sequence_id = next_value(db, "patientId")
"""

from app.services.sequence.generator import next_value, current_value

__all__ = ["next_value", "current_value"]
