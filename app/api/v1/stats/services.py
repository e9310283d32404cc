"""
Services pour les statistiques du tableau de bord.

Lecture seule ; les agrégats financiers sont délégués à FinancialService.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.models.appointment.appointment import Appointment
from app.models.enums import AppointmentStatus, UserRole
from app.models.patient.patient import Patient
from app.models.user.user import User
from app.services.finance import FinancialService, today
from app.services.finance.periods import DateWindow, day_window, period_windows

logger = logging.getLogger(__name__)


@dataclass
class Overview:
    total_patients: int
    total_medecins: int
    appointments_today: int
    appointments_month: int
    patients_this_month: int
    revenue_month: Decimal


@dataclass
class AppointmentCounts:
    start_date: date
    end_date: date
    scheduled: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0

    @property
    def total(self) -> int:
        return self.scheduled + self.confirmed + self.completed + self.cancelled


class StatsService:
    """Statistiques du tableau de bord."""

    def __init__(self, db: Session):
        self.db = db
        self.finance = FinancialService(db)

    def overview(self, reference: Optional[date] = None) -> Overview:
        reference = reference or today()
        windows = period_windows(reference)

        total_patients = self.db.execute(select(func.count(Patient.id))).scalar() or 0
        total_medecins = self.db.execute(
            select(func.count(User.id)).where(User.role == UserRole.MEDECIN)
        ).scalar() or 0

        return Overview(
            total_patients=total_patients,
            total_medecins=total_medecins,
            appointments_today=self._count_active_appointments(day_window(reference)),
            appointments_month=self._count_active_appointments(windows["month"]),
            patients_this_month=self._count_patients_created(windows["month"]),
            revenue_month=self.finance.revenue_stats(windows["month"]).total_received,
        )

    def revenue(self, start: Optional[date] = None, end: Optional[date] = None):
        """Encaissements par mois ; par défaut du 1er janvier à aujourd'hui."""
        end = end or today()
        start = start or date(end.year, 1, 1)
        self._check_range(start, end)
        return start, end, self.finance.revenue_by_month(start, end)

    def top_patients(self, limit: int = 10):
        return self.finance.top_patients_by_revenue(limit)

    def appointment_counts(
            self,
            start: Optional[date] = None,
            end: Optional[date] = None,
    ) -> AppointmentCounts:
        """Rendez-vous par statut ; par défaut du 1er du mois à aujourd'hui."""
        end = end or today()
        start = start or end.replace(day=1)
        self._check_range(start, end)

        rows = self.db.execute(
            select(Appointment.status, func.count(Appointment.id))
            .where(Appointment.date >= start, Appointment.date <= end)
            .group_by(Appointment.status)
        ).all()

        counts = {AppointmentStatus(s).value: count for s, count in rows}
        logger.debug(f"📊 Rendez-vous {start} -> {end} : {counts}")
        return AppointmentCounts(start_date=start, end_date=end, **counts)

    # --- Helpers ---

    def _count_active_appointments(self, window: DateWindow) -> int:
        return self.db.execute(
            select(func.count(Appointment.id)).where(
                Appointment.date >= window.start,
                Appointment.date < window.end,
                Appointment.status != AppointmentStatus.CANCELLED,
            )
        ).scalar() or 0

    def _count_patients_created(self, window: DateWindow) -> int:
        # created_at est en UTC, les bornes du mois sont en heure locale
        tz = ZoneInfo(settings.TIMEZONE)
        start = datetime.combine(window.start, time.min, tzinfo=tz).astimezone(timezone.utc)
        end = datetime.combine(window.end, time.min, tzinfo=tz).astimezone(timezone.utc)
        return self.db.execute(
            select(func.count(Patient.id)).where(
                Patient.created_at >= start,
                Patient.created_at < end,
            )
        ).scalar() or 0

    @staticmethod
    def _check_range(start: date, end: date) -> None:
        if end < start:
            raise ValidationError(
                "La date de fin doit être postérieure à la date de début",
                data={"start_date": start.isoformat(), "end_date": end.isoformat()},
            )
