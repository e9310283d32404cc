"""
Agrégats financiers du cabinet (lecture seule).

Chaque appel recalcule depuis l'état courant de la base : aucune mise
en cache, aucune écriture. Deux appels successifs sans écriture entre
eux renvoient donc des résultats identiques.

Vocabulaire :
    billed    : honoraires facturés (CareEpisode.billed_amount)
    received  : montants encaissés (CareEpisode.received_amount)
    charges   : dépenses (Charge.amount)
    profit    : encaissements - charges (bilan final)
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import extract, func, select
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.models.finance.charge import Charge
from app.models.patient.care_episode import CareEpisode
from app.models.patient.patient import Patient, format_patient_number
from app.models.types import ZERO, to_amount
from app.services.finance.periods import (
    DateWindow,
    month_name_fr,
    month_window,
    period_windows,
    today,
    trailing_months,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RÉSULTATS
# =============================================================================

@dataclass
class RevenueStats:
    total_billed: Decimal = ZERO
    total_received: Decimal = ZERO
    episode_count: int = 0

    @property
    def remaining_due(self) -> Decimal:
        return self.total_billed - self.total_received


@dataclass
class ChargeStats:
    total_amount: Decimal = ZERO
    charge_count: int = 0


@dataclass
class MonthlyRow:
    """Ligne mensuelle : consultations + charges d'un mois calendaire."""

    year: int
    month: int
    total_billed: Decimal = ZERO
    total_received: Decimal = ZERO
    episode_count: int = 0
    patient_count: int = 0
    total_amount: Decimal = ZERO
    charge_count: int = 0

    @property
    def month_name(self) -> str:
        return month_name_fr(self.year, self.month)

    @property
    def remaining_due(self) -> Decimal:
        return self.total_billed - self.total_received

    @property
    def profit(self) -> Decimal:
        return self.total_received - self.total_amount


@dataclass
class NetBilan:
    """
    Bilan net d'une période.

    `revenue` correspond aux encaissements ; les honoraires facturés sont
    exposés à part sous `billed`.
    """

    revenue: Decimal = ZERO
    billed: Decimal = ZERO
    charges: Decimal = ZERO
    episode_count: int = 0
    charge_count: int = 0
    year: Optional[int] = None
    month: Optional[int] = None

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.charges

    @property
    def month_name(self) -> Optional[str]:
        if self.year is None or self.month is None:
            return None
        return month_name_fr(self.year, self.month)


@dataclass
class PatientRevenue:
    patient_id: int
    sequence_id: int
    last_name: str
    first_name: str
    phone: str
    total_billed: Decimal = ZERO
    total_received: Decimal = ZERO
    episode_count: int = 0

    @property
    def patient_number(self) -> str:
        return format_patient_number(self.sequence_id)

    @property
    def remaining_due(self) -> Decimal:
        return self.total_billed - self.total_received


@dataclass
class OverallStats:
    total_patients: int = 0
    total_billed: Decimal = ZERO
    total_received: Decimal = ZERO
    episode_count: int = 0

    @property
    def total_remaining(self) -> Decimal:
        return self.total_billed - self.total_received


@dataclass
class MonthlyRevenue:
    """Encaissements d'un mois ("YYYY-MM") pour le tableau de bord."""

    period: str
    total_received: Decimal = ZERO
    episode_count: int = 0


@dataclass
class PeriodStats:
    """Agrégats du jour, de la semaine et du mois courants."""

    day: RevenueStats | ChargeStats
    week: RevenueStats | ChargeStats
    month: RevenueStats | ChargeStats


# =============================================================================
# SERVICE
# =============================================================================

class FinancialService:
    """Calculs financiers sur les consultations et les charges."""

    def __init__(self, db: Session):
        self.db = db

    # --- Agrégats par fenêtre ---

    def revenue_stats(self, window: DateWindow) -> RevenueStats:
        """Honoraires, encaissements et nombre de consultations sur [start, end)."""
        row = self.db.execute(
            select(
                func.sum(CareEpisode.billed_amount),
                func.sum(CareEpisode.received_amount),
                func.count(CareEpisode.id),
            ).where(
                CareEpisode.date >= window.start,
                CareEpisode.date < window.end,
            )
        ).one()
        return RevenueStats(
            total_billed=to_amount(row[0]),
            total_received=to_amount(row[1]),
            episode_count=row[2] or 0,
        )

    def charge_stats(self, window: DateWindow) -> ChargeStats:
        """Total et nombre de charges sur [start, end)."""
        row = self.db.execute(
            select(func.sum(Charge.amount), func.count(Charge.id)).where(
                Charge.date >= window.start,
                Charge.date < window.end,
            )
        ).one()
        return ChargeStats(total_amount=to_amount(row[0]), charge_count=row[1] or 0)

    def period_revenue_stats(self, reference: Optional[date] = None) -> PeriodStats:
        """revenue_stats pour le jour, la semaine et le mois courants."""
        windows = period_windows(reference)
        return PeriodStats(**{name: self.revenue_stats(w) for name, w in windows.items()})

    def period_charge_stats(self, reference: Optional[date] = None) -> PeriodStats:
        """charge_stats pour le jour, la semaine et le mois courants."""
        windows = period_windows(reference)
        return PeriodStats(**{name: self.charge_stats(w) for name, w in windows.items()})

    # --- Ventilation mensuelle ---

    def monthly_breakdown(
        self,
        months_back: int = 12,
        newest_first: bool = False,
        reference: Optional[date] = None,
    ) -> list[MonthlyRow]:
        """
        Une ligne par mois calendaire sur les `months_back` derniers mois
        (mois courant inclus). Les mois sans activité sont présents avec
        des valeurs nulles.
        """
        if months_back < 1:
            raise ValidationError("Le nombre de mois doit être au moins 1")

        months = trailing_months(months_back, reference)
        rows = {key: MonthlyRow(year=key[0], month=key[1]) for key in months}

        start = month_window(*months[0]).start
        end = month_window(*months[-1]).end
        logger.debug(f"📊 Ventilation mensuelle du {start} au {end} ({months_back} mois)")

        episode_year = extract("year", CareEpisode.date)
        episode_month = extract("month", CareEpisode.date)
        episode_results = self.db.execute(
            select(
                episode_year,
                episode_month,
                func.sum(CareEpisode.billed_amount),
                func.sum(CareEpisode.received_amount),
                func.count(CareEpisode.id),
                func.count(func.distinct(CareEpisode.patient_id)),
            )
            .where(CareEpisode.date >= start, CareEpisode.date < end)
            .group_by(episode_year, episode_month)
        ).all()

        for year, month, billed, received, episodes, patients in episode_results:
            row = rows.get((int(year), int(month)))
            if row is None:
                continue
            row.total_billed = to_amount(billed)
            row.total_received = to_amount(received)
            row.episode_count = episodes
            row.patient_count = patients

        charge_year = extract("year", Charge.date)
        charge_month = extract("month", Charge.date)
        charge_results = self.db.execute(
            select(
                charge_year,
                charge_month,
                func.sum(Charge.amount),
                func.count(Charge.id),
            )
            .where(Charge.date >= start, Charge.date < end)
            .group_by(charge_year, charge_month)
        ).all()

        for year, month, amount, count in charge_results:
            row = rows.get((int(year), int(month)))
            if row is None:
                continue
            row.total_amount = to_amount(amount)
            row.charge_count = count

        ordered = [rows[key] for key in months]
        if newest_first:
            ordered.reverse()
        return ordered

    # --- Bilan final ---

    def net_bilan(self, year: int, month: int) -> NetBilan:
        """Encaissements, honoraires et charges d'un mois calendaire."""
        window = month_window(year, month)
        revenue = self.revenue_stats(window)
        charges = self.charge_stats(window)
        return NetBilan(
            revenue=revenue.total_received,
            billed=revenue.total_billed,
            charges=charges.total_amount,
            episode_count=revenue.episode_count,
            charge_count=charges.charge_count,
            year=year,
            month=month,
        )

    def current_net_bilan(self, reference: Optional[date] = None) -> NetBilan:
        reference = reference or today()
        return self.net_bilan(reference.year, reference.month)

    def net_bilan_monthly(
        self,
        months_back: int = 12,
        reference: Optional[date] = None,
    ) -> list[NetBilan]:
        """Bilan net par mois, du plus récent au plus ancien."""
        return [
            NetBilan(
                revenue=row.total_received,
                billed=row.total_billed,
                charges=row.total_amount,
                episode_count=row.episode_count,
                charge_count=row.charge_count,
                year=row.year,
                month=row.month,
            )
            for row in self.monthly_breakdown(months_back, newest_first=True, reference=reference)
        ]

    # --- Classements et totaux ---

    def top_patients_by_revenue(self, limit: int = 10) -> list[PatientRevenue]:
        """
        Patients classés par montant encaissé décroissant.

        Les patients sans consultation n'apparaissent pas. À montant égal,
        l'ordre suit le numéro patient.
        """
        total_received = func.sum(CareEpisode.received_amount)
        results = self.db.execute(
            select(
                Patient.id,
                Patient.sequence_id,
                Patient.last_name,
                Patient.first_name,
                Patient.phone,
                func.sum(CareEpisode.billed_amount),
                total_received,
                func.count(CareEpisode.id),
            )
            .join(CareEpisode, CareEpisode.patient_id == Patient.id)
            .group_by(
                Patient.id,
                Patient.sequence_id,
                Patient.last_name,
                Patient.first_name,
                Patient.phone,
            )
            .order_by(total_received.desc(), Patient.sequence_id.asc())
            .limit(limit)
        ).all()

        return [
            PatientRevenue(
                patient_id=row[0],
                sequence_id=row[1],
                last_name=row[2],
                first_name=row[3],
                phone=row[4],
                total_billed=to_amount(row[5]),
                total_received=to_amount(row[6]),
                episode_count=row[7],
            )
            for row in results
        ]

    def overall(self) -> OverallStats:
        """Totaux depuis l'ouverture du cabinet."""
        total_patients = self.db.execute(select(func.count(Patient.id))).scalar() or 0
        row = self.db.execute(
            select(
                func.sum(CareEpisode.billed_amount),
                func.sum(CareEpisode.received_amount),
                func.count(CareEpisode.id),
            )
        ).one()
        return OverallStats(
            total_patients=total_patients,
            total_billed=to_amount(row[0]),
            total_received=to_amount(row[1]),
            episode_count=row[2] or 0,
        )

    def revenue_by_month(self, start: date, end: date) -> list[MonthlyRevenue]:
        """
        Encaissements par mois entre deux dates (incluses), mois vides inclus.
        """
        if end < start:
            return []

        year_expr = extract("year", CareEpisode.date)
        month_expr = extract("month", CareEpisode.date)
        results = self.db.execute(
            select(
                year_expr,
                month_expr,
                func.sum(CareEpisode.received_amount),
                func.count(CareEpisode.id),
            )
            .where(CareEpisode.date >= start, CareEpisode.date <= end)
            .group_by(year_expr, month_expr)
        ).all()
        by_month = {(int(y), int(m)): (received, count) for y, m, received, count in results}

        span = (end.year - start.year) * 12 + end.month - start.month + 1
        months = []
        for year, month in trailing_months(span, reference=end):
            received, count = by_month.get((year, month), (None, 0))
            months.append(MonthlyRevenue(
                period=f"{year:04d}-{month:02d}",
                total_received=to_amount(received),
                episode_count=count,
            ))
        return months
