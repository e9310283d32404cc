"""
Finance models - Dépenses du cabinet.

- Charge : Dépense (loyer, matériel, fournitures...)
"""

from app.models.finance.charge import Charge

__all__ = ["Charge"]
