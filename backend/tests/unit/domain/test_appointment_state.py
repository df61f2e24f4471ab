"""Tests for appointment lifecycle rules."""

import pytest

from beautyplaza.core.exceptions import ValidationException
from beautyplaza.domain.appointment_state import (
    StatusParsed,
    StatusRejected,
    apply_otp_verified,
    apply_status,
    confirm,
    parse_status,
    require_status,
)
from beautyplaza.models.appointment import Appointment, AppointmentStatus


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("CONFIRMED", AppointmentStatus.CONFIRMED),
        ("completed", AppointmentStatus.COMPLETED),
        (" Paid ", AppointmentStatus.PAID),
    ],
)
def test_parse_status_accepts_any_case(raw, expected) -> None:
    assert parse_status(raw) == StatusParsed(expected)


def test_parse_status_rejects_unknown_value() -> None:
    assert parse_status("bogus") == StatusRejected("Invalid appointment status: bogus")


def test_require_status_raises_validation_error() -> None:
    with pytest.raises(ValidationException) as exc_info:
        require_status("bogus")

    assert exc_info.value.message == "Invalid appointment status: bogus"
    assert exc_info.value.code == "INVALID_APPOINTMENT_STATUS"


def test_new_appointment_defaults_to_scheduled_and_unverified() -> None:
    appointment = Appointment()

    assert appointment.status == AppointmentStatus.SCHEDULED.value
    assert appointment.otp_verified is False


def test_confirm_sets_status_and_flag_together() -> None:
    appointment = Appointment()

    confirm(appointment)

    assert appointment.status == AppointmentStatus.CONFIRMED.value
    assert appointment.otp_verified is True


def test_back_to_scheduled_clears_verification() -> None:
    appointment = Appointment(status=AppointmentStatus.CONFIRMED.value, otp_verified=True)

    apply_status(appointment, AppointmentStatus.SCHEDULED)

    assert appointment.otp_verified is False


def test_other_transitions_are_permissive() -> None:
    appointment = Appointment(status=AppointmentStatus.CANCELLED.value, otp_verified=True)

    apply_status(appointment, AppointmentStatus.PAID)

    assert appointment.status == AppointmentStatus.PAID.value
    assert appointment.otp_verified is True


def test_marking_verified_advances_scheduled() -> None:
    appointment = Appointment()

    apply_otp_verified(appointment, True)

    assert appointment.status == AppointmentStatus.CONFIRMED.value


def test_marking_verified_keeps_later_status() -> None:
    appointment = Appointment(status=AppointmentStatus.COMPLETED.value)

    apply_otp_verified(appointment, True)

    assert appointment.status == AppointmentStatus.COMPLETED.value
    assert appointment.otp_verified is True
