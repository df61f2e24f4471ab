"""Tests for the appointment booking workflow."""

from datetime import date, time, timedelta
from decimal import Decimal
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from beautyplaza.core.exceptions import (
    AppointmentConflictException,
    InvalidStateException,
    NotFoundException,
    ServiceException,
    ValidationException,
)
from beautyplaza.core.otp_store import InMemoryOtpStore
from beautyplaza.models.appointment import Appointment, AppointmentStatus
from beautyplaza.schemas.appointment import AppointmentCreate, AppointmentUpdate
from beautyplaza.services.appointment_service import (
    AppointmentService,
    is_slot_constraint_violation,
)
from beautyplaza.services.conflict_checker import ConflictChecker
from beautyplaza.services.otp_service import OtpService

DAY = date(2030, 6, 1)


@pytest.fixture
def service(db, otp_service) -> AppointmentService:
    return AppointmentService(db, otp_service=otp_service)


def _create_payload(customer, technician, haircut, **overrides) -> AppointmentCreate:
    values = {
        "customer_id": customer.id,
        "service_id": haircut.id,
        "technician_id": technician.id,
        "appointment_date": "2030-06-01",
        "appointment_time": "10:00",
    }
    values.update(overrides)
    return AppointmentCreate(**values)


def _fail_next_commit(monkeypatch, db) -> None:
    real_commit = db.commit
    state = {"failed": False}

    def commit() -> None:
        if not state["failed"]:
            state["failed"] = True
            raise OperationalError("COMMIT", {}, Exception("database is locked"))
        real_commit()

    monkeypatch.setattr(db, "commit", commit)


class TestCreateAppointment:
    def test_creates_scheduled_unverified_appointment(
        self, service, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )

        assert appointment.id
        assert appointment.status == AppointmentStatus.SCHEDULED.value
        assert appointment.otp_verified is False
        assert appointment.appointment_time == time(10, 0)
        assert appointment.service_type == "in-store"

    def test_snapshots_contact_details_from_customer(
        self, service, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )

        assert appointment.phone == customer_user.phone
        assert appointment.email == customer_user.email
        assert Decimal(appointment.total_amount) == Decimal("50.00")

    def test_explicit_contact_and_amount_win(
        self, service, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(
                customer_user,
                technician,
                haircut,
                email="carol.alt@example.com",
                phone="5550000000",
                total_amount="42.50",
            )
        )

        assert appointment.email == "carol.alt@example.com"
        assert appointment.phone == "5550000000"
        assert Decimal(appointment.total_amount) == Decimal("42.50")

    def test_issues_otp_to_contact_email(
        self, service, otp_service, customer_user, technician, haircut
    ) -> None:
        service.create_appointment(_create_payload(customer_user, technician, haircut))

        assert otp_service.validate(customer_user.email, "123456") is True

    def test_same_slot_conflicts(self, service, customer_user, technician, haircut) -> None:
        service.create_appointment(_create_payload(customer_user, technician, haircut))

        with pytest.raises(AppointmentConflictException) as exc_info:
            service.create_appointment(_create_payload(customer_user, technician, haircut))

        assert exc_info.value.details["appointment_time"] == "10:00"

    def test_other_technician_same_slot_is_fine(
        self, service, customer_user, technician, second_technician, haircut
    ) -> None:
        service.create_appointment(_create_payload(customer_user, technician, haircut))
        other = service.create_appointment(
            _create_payload(customer_user, second_technician, haircut)
        )

        assert other.technician_id == second_technician.id

    @pytest.mark.parametrize("field", ["customer_id", "service_id", "technician_id"])
    def test_unknown_reference_is_not_found(
        self, service, db, customer_user, technician, haircut, field
    ) -> None:
        payload = _create_payload(customer_user, technician, haircut, **{field: "missing"})

        with pytest.raises(NotFoundException):
            service.create_appointment(payload)

        assert db.query(Appointment).count() == 0

    def test_unavailable_technician_rejected(
        self, service, db, customer_user, technician, haircut
    ) -> None:
        technician.is_available = False
        db.commit()

        with pytest.raises(InvalidStateException):
            service.create_appointment(_create_payload(customer_user, technician, haircut))

    def test_otp_failure_rolls_back_booking(
        self, db, customer_user, technician, haircut
    ) -> None:
        otp = Mock()
        otp.issue.side_effect = ValidationException("no address", code="OTP_ADDRESS_REQUIRED")
        service = AppointmentService(db, otp_service=otp)

        with pytest.raises(ValidationException):
            service.create_appointment(_create_payload(customer_user, technician, haircut))

        assert db.query(Appointment).count() == 0

    def test_failed_commit_restores_earlier_pending_code(
        self, db, monkeypatch, otp_clock, customer_user, technician, haircut
    ) -> None:
        codes = iter(["111111", "222222"])
        otp = OtpService(
            InMemoryOtpStore(), ttl_seconds=300, clock=otp_clock, code_factory=lambda _: next(codes)
        )
        service = AppointmentService(db, otp_service=otp)
        first = service.create_appointment(_create_payload(customer_user, technician, haircut))
        _fail_next_commit(monkeypatch, db)

        with pytest.raises(ServiceException):
            service.create_appointment(
                _create_payload(customer_user, technician, haircut, appointment_time="12:00")
            )

        assert db.query(Appointment).count() == 1
        assert service.verify_otp(first.id, "111111").otp_verified is True

    def test_failed_commit_leaves_no_code_behind(
        self, service, db, monkeypatch, otp_service, customer_user, technician, haircut
    ) -> None:
        _fail_next_commit(monkeypatch, db)

        with pytest.raises(ServiceException):
            service.create_appointment(_create_payload(customer_user, technician, haircut))

        assert otp_service.pending(customer_user.email) is None

    def test_unique_constraint_backstop_becomes_conflict(
        self, db, otp_service, customer_user, technician, haircut
    ) -> None:
        # Checker that misses the race; the unique index still catches it
        checker = ConflictChecker(db)
        checker.has_conflict = Mock(return_value=False)
        service = AppointmentService(db, otp_service=otp_service, conflict_checker=checker)
        service.create_appointment(_create_payload(customer_user, technician, haircut))

        with pytest.raises(AppointmentConflictException):
            service.create_appointment(_create_payload(customer_user, technician, haircut))

        assert db.query(Appointment).count() == 1


class TestUpdateAppointment:
    def test_status_only_update_leaves_schedule_untouched(self, service, make_appointment) -> None:
        appointment = make_appointment()

        updated = service.update_appointment(
            appointment.id, AppointmentUpdate(status="CONFIRMED")
        )

        assert updated.status == AppointmentStatus.CONFIRMED.value
        assert updated.appointment_date == DAY
        assert updated.appointment_time == time(10, 0)
        assert Decimal(updated.total_amount) == Decimal("50.00")

    def test_invalid_status_rejected(self, service, make_appointment) -> None:
        appointment = make_appointment()

        with pytest.raises(ValidationException) as exc_info:
            service.update_appointment(appointment.id, AppointmentUpdate(status="bogus"))

        assert exc_info.value.message == "Invalid appointment status: bogus"

    def test_reschedule_to_free_slot(self, service, make_appointment) -> None:
        appointment = make_appointment()

        updated = service.update_appointment(
            appointment.id,
            AppointmentUpdate(appointment_date=DAY + timedelta(days=1), appointment_time="14:30"),
        )

        assert updated.appointment_date == DAY + timedelta(days=1)
        assert updated.appointment_time == time(14, 30)

    def test_reschedule_onto_taken_slot_conflicts_and_keeps_original(
        self, service, db, make_appointment
    ) -> None:
        make_appointment(appointment_time=time(10, 0))
        moving = make_appointment(appointment_time=time(11, 0))

        with pytest.raises(AppointmentConflictException) as exc_info:
            service.update_appointment(moving.id, AppointmentUpdate(appointment_time="10:00"))

        assert "updated date and time" in exc_info.value.message
        db.expire_all()
        reloaded = db.get(Appointment, moving.id)
        assert reloaded.appointment_time == time(11, 0)

    def test_unchanged_slot_is_not_a_conflict_with_itself(
        self, service, make_appointment
    ) -> None:
        appointment = make_appointment()

        updated = service.update_appointment(
            appointment.id,
            AppointmentUpdate(appointment_time="10:00", notes="Bring reference photo"),
        )

        assert updated.notes == "Bring reference photo"

    def test_service_change_recomputes_amount(self, service, make_appointment, manicure) -> None:
        appointment = make_appointment()

        updated = service.update_appointment(
            appointment.id, AppointmentUpdate(service_id=manicure.id)
        )

        assert updated.service_id == manicure.id
        assert Decimal(updated.total_amount) == Decimal("30.00")

    def test_overlap_service_change_skips_availability_check(
        self, db, otp_service, make_appointment, technician, manicure
    ) -> None:
        appointment = make_appointment()
        technician.is_available = False
        db.commit()
        service = AppointmentService(
            db, otp_service=otp_service, conflict_checker=ConflictChecker(db, mode="overlap")
        )

        updated = service.update_appointment(
            appointment.id, AppointmentUpdate(service_id=manicure.id)
        )

        assert updated.service_id == manicure.id

    def test_overlap_longer_service_still_checks_conflicts(
        self, db, otp_service, make_appointment, haircut, manicure
    ) -> None:
        short = make_appointment(service_id=manicure.id, appointment_time=time(10, 0))
        make_appointment(service_id=manicure.id, appointment_time=time(10, 30))
        service = AppointmentService(
            db, otp_service=otp_service, conflict_checker=ConflictChecker(db, mode="overlap")
        )

        with pytest.raises(AppointmentConflictException):
            service.update_appointment(short.id, AppointmentUpdate(service_id=haircut.id))

    def test_back_to_scheduled_clears_verification(self, service, make_appointment) -> None:
        appointment = make_appointment(status="CONFIRMED", otp_verified=True)

        updated = service.update_appointment(appointment.id, AppointmentUpdate(status="SCHEDULED"))

        assert updated.otp_verified is False

    def test_explicit_nulls_are_ignored(self, service, make_appointment) -> None:
        appointment = make_appointment(notes="keep me")

        updated = service.update_appointment(
            appointment.id, AppointmentUpdate(notes=None, status=None)
        )

        assert updated.notes == "keep me"
        assert updated.status == AppointmentStatus.SCHEDULED.value

    def test_missing_appointment(self, service) -> None:
        with pytest.raises(NotFoundException):
            service.update_appointment("nope", AppointmentUpdate(notes="x"))


class TestOtpConfirmation:
    def test_verify_confirms_appointment(
        self, service, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )

        confirmed = service.verify_otp(appointment.id, "123456")

        assert confirmed.status == AppointmentStatus.CONFIRMED.value
        assert confirmed.otp_verified is True

    def test_code_is_single_use(self, service, customer_user, technician, haircut) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )
        service.verify_otp(appointment.id, "123456")

        with pytest.raises(ValidationException) as exc_info:
            service.verify_otp(appointment.id, "123456")

        assert exc_info.value.message == "Invalid or expired OTP."

    def test_expired_code_leaves_appointment_unchanged(
        self, service, otp_clock, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )
        otp_clock.advance(minutes=6)

        with pytest.raises(ValidationException):
            service.verify_otp(appointment.id, "123456")

        current = service.get_appointment(appointment.id)
        assert current.status == AppointmentStatus.SCHEDULED.value
        assert current.otp_verified is False

    def test_failed_flush_keeps_code_usable(
        self, service, monkeypatch, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )
        monkeypatch.setattr(
            service.repository,
            "flush",
            Mock(side_effect=OperationalError("UPDATE", {}, Exception("disk I/O error"))),
        )

        with pytest.raises(ServiceException):
            service.verify_otp(appointment.id, "123456")

        monkeypatch.undo()
        confirmed = service.verify_otp(appointment.id, "123456")
        assert confirmed.status == AppointmentStatus.CONFIRMED.value

    def test_failed_commit_reinstates_spent_code(
        self, service, db, monkeypatch, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )
        _fail_next_commit(monkeypatch, db)

        with pytest.raises(ServiceException):
            service.verify_otp(appointment.id, "123456")

        assert service.get_appointment(appointment.id).status == AppointmentStatus.SCHEDULED.value
        confirmed = service.verify_otp(appointment.id, "123456")
        assert confirmed.otp_verified is True

    def test_wrong_code_does_not_confirm(
        self, service, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )

        with pytest.raises(ValidationException):
            service.verify_otp(appointment.id, "000000")

        current = service.get_appointment(appointment.id)
        assert current.status == AppointmentStatus.SCHEDULED.value
        assert current.otp_verified is False

    def test_resend_issues_a_fresh_code(
        self, service, otp_clock, customer_user, technician, haircut
    ) -> None:
        appointment = service.create_appointment(
            _create_payload(customer_user, technician, haircut)
        )
        otp_clock.advance(minutes=6)

        challenge = service.resend_otp(appointment.id)
        confirmed = service.verify_otp(appointment.id, challenge.code)

        assert confirmed.status == AppointmentStatus.CONFIRMED.value


class TestStatusAndQueries:
    def test_update_status_accepts_any_case(self, service, make_appointment) -> None:
        appointment = make_appointment()

        updated = service.update_status(appointment.id, "completed")

        assert updated.status == AppointmentStatus.COMPLETED.value

    def test_update_status_rejects_unknown(self, service, make_appointment) -> None:
        appointment = make_appointment()

        with pytest.raises(ValidationException):
            service.update_status(appointment.id, "bogus")

    def test_lists_are_ordered_by_date_then_time(
        self, service, make_appointment, customer_user, technician
    ) -> None:
        late = make_appointment(appointment_time=time(15, 0))
        early = make_appointment(appointment_time=time(9, 0))
        next_day = make_appointment(appointment_date=DAY + timedelta(days=1), appointment_time=time(8, 0))

        expected = [early.id, late.id, next_day.id]
        assert [a.id for a in service.list_appointments()] == expected
        assert [a.id for a in service.list_by_customer(customer_user.id)] == expected
        assert [a.id for a in service.list_by_technician(technician.id)] == expected
        assert [a.id for a in service.list_by_date(DAY)] == [early.id, late.id]

    def test_list_by_unknown_customer_is_not_found(self, service) -> None:
        with pytest.raises(NotFoundException):
            service.list_by_customer("missing")

    def test_delete(self, service, make_appointment) -> None:
        appointment = make_appointment()

        service.delete_appointment(appointment.id)

        with pytest.raises(NotFoundException):
            service.get_appointment(appointment.id)

    def test_available_slots_for_unavailable_technician_is_empty(
        self, service, db, technician
    ) -> None:
        technician.is_available = False
        db.commit()

        result = service.available_slots(technician.id, DAY)

        assert result["slots"] == []

    def test_available_slots_omits_booked_time(self, service, make_appointment, technician) -> None:
        make_appointment(appointment_time=time(10, 0))

        result = service.available_slots(technician.id, DAY)

        assert "10:00" not in result["slots"]
        assert "09:00" in result["slots"]


def test_slot_constraint_detection_by_message() -> None:
    error = IntegrityError(
        "INSERT", {}, Exception("UNIQUE constraint failed: appointments.technician_id, ...")
    )

    assert is_slot_constraint_violation(error) is True
    assert is_slot_constraint_violation(IntegrityError("INSERT", {}, Exception("other"))) is False
