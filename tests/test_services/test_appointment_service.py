"""
Tests du service rendez-vous : validation des créneaux et refus des
chevauchements pour un même patient.
"""

from datetime import date

import pytest
from sqlalchemy.orm import Session

from app.api.v1.appointment.schemas import AppointmentCreate, AppointmentUpdate
from app.api.v1.appointment.services import (
    AppointmentNotFoundError,
    AppointmentOverlapError,
    AppointmentPatientNotFoundError,
    AppointmentService,
    InvalidStatusTransitionError,
)
from app.core.config import settings
from app.models import AppointmentStatus, Patient
from app.services.scheduling import InvalidDurationError, InvalidTimeFormatError

DAY = date(2024, 6, 3)


def book(service: AppointmentService, patient: Patient, start: str, end: str, day: date = DAY):
    return service.create(AppointmentCreate(
        patient_id=patient.id,
        date=day,
        start_time=start,
        end_time=end,
        reason="Consultation",
    ))


class TestCreateAppointment:

    def test_create_scheduled(self, db_session: Session, patient: Patient, user_assistant):
        service = AppointmentService(db_session)
        appointment = service.create(
            AppointmentCreate(patient_id=patient.id, date=DAY, start_time="09:00", end_time="09:30"),
            created_by=user_assistant.id,
        )

        assert appointment.id is not None
        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.patient_display_name == "Mansour Leila"
        assert appointment.created_by == user_assistant.id

    def test_unknown_patient(self, db_session: Session):
        with pytest.raises(AppointmentPatientNotFoundError):
            AppointmentService(db_session).create(
                AppointmentCreate(patient_id=999, date=DAY, start_time="09:00", end_time="09:30")
            )

    def test_invalid_time_format(self, db_session: Session, patient: Patient):
        with pytest.raises(InvalidTimeFormatError):
            book(AppointmentService(db_session), patient, "9h00", "09:30")

    def test_too_short(self, db_session: Session, patient: Patient):
        with pytest.raises(InvalidDurationError):
            book(AppointmentService(db_session), patient, "09:00", "09:10")


class TestOverlap:

    def test_overlapping_slot_rejected_with_existing(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        first = book(service, patient, "09:00", "09:30")

        with pytest.raises(AppointmentOverlapError) as exc:
            book(service, patient, "09:15", "09:45")

        assert exc.value.status_code == 409
        assert exc.value.data["id"] == first.id
        assert exc.value.data["start_time"] == "09:00"
        assert exc.value.data["end_time"] == "09:30"
        assert exc.value.data["date"] == "2024-06-03"

    def test_contained_slot_rejected(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        book(service, patient, "09:00", "11:00")
        with pytest.raises(AppointmentOverlapError):
            book(service, patient, "09:30", "10:00")

    def test_touching_slots_accepted(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        book(service, patient, "09:00", "09:30")
        second = book(service, patient, "09:30", "10:00")
        assert second.id is not None

    def test_other_day_accepted(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        book(service, patient, "09:00", "09:30")
        assert book(service, patient, "09:00", "09:30", day=date(2024, 6, 4)).id is not None

    def test_other_patient_accepted(self, db_session: Session, patient: Patient, other_patient: Patient):
        service = AppointmentService(db_session)
        book(service, patient, "09:00", "09:30")
        assert book(service, other_patient, "09:00", "09:30").id is not None

    def test_cancelled_appointment_does_not_block(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        first = book(service, patient, "09:00", "09:30")
        service.update(first.id, AppointmentUpdate(status=AppointmentStatus.CANCELLED))

        assert book(service, patient, "09:00", "09:30").id is not None

    def test_reactivation_is_checked(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        first = book(service, patient, "09:00", "09:30")
        service.update(first.id, AppointmentUpdate(status=AppointmentStatus.CANCELLED))
        book(service, patient, "09:00", "09:30")

        with pytest.raises(AppointmentOverlapError):
            service.update(first.id, AppointmentUpdate(status=AppointmentStatus.SCHEDULED))

    def test_moving_onto_itself_is_allowed(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        first = book(service, patient, "09:00", "09:30")

        moved = service.update(first.id, AppointmentUpdate(end_time="09:45"))

        assert moved.end_time == "09:45"

    def test_moving_onto_another_is_rejected(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        book(service, patient, "09:00", "09:30")
        second = book(service, patient, "10:00", "10:30")

        with pytest.raises(AppointmentOverlapError):
            service.update(second.id, AppointmentUpdate(start_time="09:15"))


class TestUpdateAndDelete:

    def test_status_change_without_time_change(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        appointment = book(service, patient, "09:00", "09:30")

        updated = service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.CONFIRMED))

        assert updated.status == AppointmentStatus.CONFIRMED

    def test_strict_mode_follows_lifecycle(self, db_session: Session, patient: Patient, monkeypatch):
        monkeypatch.setattr(settings, "APPOINTMENT_STRICT_STATUS_TRANSITIONS", True)
        service = AppointmentService(db_session)
        appointment = book(service, patient, "09:00", "09:30")

        service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.CONFIRMED))
        done = service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.COMPLETED))

        assert done.status == AppointmentStatus.COMPLETED
        with pytest.raises(InvalidStatusTransitionError):
            service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.SCHEDULED))

    def test_strict_mode_cannot_skip_confirmation(self, db_session: Session, patient: Patient, monkeypatch):
        monkeypatch.setattr(settings, "APPOINTMENT_STRICT_STATUS_TRANSITIONS", True)
        service = AppointmentService(db_session)
        appointment = book(service, patient, "09:00", "09:30")

        with pytest.raises(InvalidStatusTransitionError):
            service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.COMPLETED))

        assert service.get_by_id(appointment.id).status == AppointmentStatus.SCHEDULED

    def test_strict_mode_cancelled_is_final(self, db_session: Session, patient: Patient, monkeypatch):
        monkeypatch.setattr(settings, "APPOINTMENT_STRICT_STATUS_TRANSITIONS", True)
        service = AppointmentService(db_session)
        appointment = book(service, patient, "09:00", "09:30")
        service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.CANCELLED))

        with pytest.raises(InvalidStatusTransitionError):
            service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.CONFIRMED))

    def test_free_mode_allows_any_change(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        appointment = book(service, patient, "09:00", "09:30")

        updated = service.update(appointment.id, AppointmentUpdate(status=AppointmentStatus.COMPLETED))

        assert updated.status == AppointmentStatus.COMPLETED

    def test_delete(self, db_session: Session, patient: Patient):
        service = AppointmentService(db_session)
        appointment = book(service, patient, "09:00", "09:30")

        service.delete(appointment.id)

        with pytest.raises(AppointmentNotFoundError):
            service.get_by_id(appointment.id)
