"""
Services financiers (bilan, charges, tableau de bord).

- periods : fenêtres jour / semaine / mois, mois glissants
- aggregation : FinancialService (agrégats en lecture seule)
"""

from app.services.finance.aggregation import FinancialService
from app.services.finance.periods import DateWindow, period_windows, today

__all__ = ["FinancialService", "DateWindow", "period_windows", "today"]
