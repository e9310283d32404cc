"""
Fenêtres de dates utilisées par le reporting financier.

Toutes les fenêtres sont semi-ouvertes [start, end). "Aujourd'hui" est
calculé dans le fuseau du cabinet (settings.TIMEZONE). La semaine
commence le dimanche.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from app.core.config import settings


MONTH_NAMES_FR = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)


@dataclass(frozen=True)
class DateWindow:
    """Intervalle de dates [start, end)."""

    start: date
    end: date

    def __contains__(self, value: date) -> bool:
        return self.start <= value < self.end


def today() -> date:
    """Date du jour dans le fuseau du cabinet."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def day_window(day: date) -> DateWindow:
    return DateWindow(day, day + timedelta(days=1))


def week_window(day: date) -> DateWindow:
    """Semaine du dimanche au samedi contenant `day`."""
    # weekday(): lundi=0 ... dimanche=6
    days_since_sunday = (day.weekday() + 1) % 7
    start = day - timedelta(days=days_since_sunday)
    return DateWindow(start, start + timedelta(days=7))


def add_months(year: int, month: int, delta: int) -> tuple[int, int]:
    """Décale (année, mois) de `delta` mois."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_window(year: int, month: int) -> DateWindow:
    next_year, next_month = add_months(year, month, 1)
    return DateWindow(date(year, month, 1), date(next_year, next_month, 1))


def period_windows(reference: date | None = None) -> dict[str, DateWindow]:
    """Fenêtres jour / semaine / mois contenant la date de référence."""
    reference = reference or today()
    return {
        "day": day_window(reference),
        "week": week_window(reference),
        "month": month_window(reference.year, reference.month),
    }


def trailing_months(months_back: int, reference: date | None = None) -> list[tuple[int, int]]:
    """
    Les `months_back` derniers mois calendaires, mois courant inclus,
    du plus ancien au plus récent.

    >>> trailing_months(3, date(2024, 2, 10))
    [(2023, 12), (2024, 1), (2024, 2)]
    """
    reference = reference or today()
    return [
        add_months(reference.year, reference.month, -offset)
        for offset in range(months_back - 1, -1, -1)
    ]


def month_name_fr(year: int, month: int) -> str:
    """Libellé français d'un mois : 'mai 2024'."""
    return f"{MONTH_NAMES_FR[month - 1]} {year}"
