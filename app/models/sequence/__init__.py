"""
Sequence models - Compteurs nommés.

- Counter : Compteur monotone (ex: "patientId")
"""

from app.models.sequence.counter import Counter

__all__ = ["Counter"]
