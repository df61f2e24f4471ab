# backend/beautyplaza/domain/appointment_state.py
"""
Appointment lifecycle rules.

Transitions are permissive: any of the five statuses may be set explicitly.
Two rules keep ``otp_verified`` consistent with the status:

- moving back to SCHEDULED clears ``otp_verified`` (re-confirmation required)
- marking ``otp_verified`` while still SCHEDULED advances to CONFIRMED

Free-text status input is parsed once, at the boundary, into a tagged result.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..core.exceptions import ValidationException
from ..models.appointment import Appointment, AppointmentStatus


@dataclass(frozen=True)
class StatusParsed:
    status: AppointmentStatus


@dataclass(frozen=True)
class StatusRejected:
    message: str


StatusParseResult = Union[StatusParsed, StatusRejected]


def parse_status(raw: Optional[str]) -> StatusParseResult:
    """Parse a case-insensitive status name."""
    candidate = (raw or "").strip().upper()
    try:
        return StatusParsed(AppointmentStatus(candidate))
    except ValueError:
        return StatusRejected(f"Invalid appointment status: {raw}")


def require_status(raw: Optional[str]) -> AppointmentStatus:
    """Parse a status or raise the 400 the HTTP layer reports."""
    result = parse_status(raw)
    if isinstance(result, StatusRejected):
        raise ValidationException(result.message, code="INVALID_APPOINTMENT_STATUS")
    return result.status


def apply_status(appointment: Appointment, status: AppointmentStatus) -> None:
    appointment.status = status.value
    if status == AppointmentStatus.SCHEDULED:
        appointment.otp_verified = False


def apply_otp_verified(appointment: Appointment, verified: bool) -> None:
    appointment.otp_verified = verified
    if verified and appointment.status == AppointmentStatus.SCHEDULED.value:
        appointment.status = AppointmentStatus.CONFIRMED.value


def confirm(appointment: Appointment) -> None:
    """Successful OTP verification: confirmed and verified together."""
    appointment.status = AppointmentStatus.CONFIRMED.value
    appointment.otp_verified = True
