# backend/beautyplaza/services/appointment_service.py
"""
Appointment Service for the Beauty Plaza platform.

Orchestrates the booking workflow:
- Creating appointments with availability and double-booking checks
- Partial updates and rescheduling
- OTP confirmation (issue on booking, verify, resend)
- Explicit status changes
- Schedule queries by customer, technician and date

Each mutating operation runs in a single transaction; any failure rolls
back and nothing is persisted.
"""

from contextlib import contextmanager
from datetime import date, time
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.constants import (
    ERROR_INVALID_OTP,
    ERROR_SLOT_TAKEN,
    ERROR_SLOT_TAKEN_ON_UPDATE,
    ERROR_TECHNICIAN_UNAVAILABLE,
)
from ..core.exceptions import (
    AppointmentConflictException,
    InvalidStateException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from ..core.otp_store import OtpChallenge
from ..domain.appointment_state import (
    apply_otp_verified,
    apply_status,
    confirm,
    require_status,
)
from ..models.appointment import TECHNICIAN_SLOT_CONSTRAINT, Appointment, AppointmentStatus
from ..models.technician import Technician
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.appointment_repository import AppointmentRepository
from ..repositories.factory import RepositoryFactory
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate
from .base import BaseService
from .conflict_checker import ConflictChecker
from .directory import DirectoryLookup
from .otp_service import OtpService

logger = logging.getLogger(__name__)

# Fields copied verbatim from a partial update when present
_PLAIN_UPDATE_FIELDS = (
    "service_type",
    "notes",
    "phone",
    "email",
    "total_amount",
    "loyalty_points_used",
    "loyalty_discount",
)


def is_slot_constraint_violation(error: BaseException) -> bool:
    """Whether a database error is the per-technician slot uniqueness violation."""
    constraint_name: str = ""
    orig = getattr(error, "orig", None)
    diag = getattr(orig, "diag", None)

    if diag is not None:
        constraint_name = getattr(diag, "constraint_name", "") or ""
    if constraint_name:
        return constraint_name == TECHNICIAN_SLOT_CONSTRAINT

    text = str(orig if orig is not None else error).lower()
    return (
        TECHNICIAN_SLOT_CONSTRAINT in text
        # SQLite names the columns instead of the constraint
        or "unique constraint failed: appointments.technician_id" in text
    )


class AppointmentService(BaseService):
    """
    Service layer for appointment operations.

    Collaborators are injectable; by default they are built from the session.
    The OTP service should be the process-wide instance so challenges issued
    on one request can be verified on another.
    """

    def __init__(
        self,
        db: Session,
        otp_service: Optional[OtpService] = None,
        repository: Optional[AppointmentRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        directory: Optional[DirectoryLookup] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_appointment_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)
        self.directory = directory or DirectoryLookup(db)
        self.otp_service = otp_service or OtpService()

    # Commands

    @BaseService.measure_operation("create_appointment")
    def create_appointment(self, data: AppointmentCreate) -> Appointment:
        """
        Book an appointment and send the confirmation code.

        Raises:
            NotFoundException: If the customer, service or technician does not exist
            InvalidStateException: If the technician is not accepting bookings
            AppointmentConflictException: If the technician's slot is already taken
        """
        self.log_operation(
            "create_appointment",
            customer_id=data.customer_id,
            technician_id=data.technician_id,
            appointment_date=str(data.appointment_date),
        )

        with self._booking_transaction() as otp_undo:
            # 1. Resolve references
            customer = self.directory.find_customer(data.customer_id)
            service = self.directory.find_service(data.service_id)
            technician = self.directory.find_technician(data.technician_id)

            # 2. Technician must be accepting bookings
            self._ensure_bookable(technician)

            # 3. Slot must be free
            conflict_details = self._conflict_details(
                technician.id, data.appointment_date, data.appointment_time
            )
            if self.conflict_checker.has_conflict(
                technician.id,
                data.appointment_date,
                data.appointment_time,
                duration_minutes=service.duration_minutes,
            ):
                prometheus_metrics.record_appointment_conflict("check")
                raise AppointmentConflictException(ERROR_SLOT_TAKEN, details=conflict_details)

            # 4. Persist as scheduled and unverified
            try:
                appointment = self.repository.create(
                    customer_id=customer.id,
                    service_id=service.id,
                    technician_id=technician.id,
                    appointment_date=data.appointment_date,
                    appointment_time=data.appointment_time,
                    service_type=data.service_type,
                    total_amount=(
                        data.total_amount if data.total_amount is not None else service.price
                    ),
                    loyalty_points_used=data.loyalty_points_used or 0,
                    loyalty_discount=data.loyalty_discount or 0,
                    status=AppointmentStatus.SCHEDULED.value,
                    otp_verified=False,
                    notes=data.notes,
                    phone=data.phone or customer.phone,
                    email=str(data.email) if data.email else customer.email,
                )
            except (IntegrityError, RepositoryException) as exc:
                self._raise_if_slot_taken(exc, ERROR_SLOT_TAKEN, conflict_details)
                raise

            # 5. Issue the confirmation code; a failure here or at commit rolls
            #    the booking back and restores the address's earlier challenge
            address = appointment.contact_address
            otp_undo.append((address, self.otp_service.pending(address)))
            self.otp_service.issue(address)

        self.repository.refresh(appointment)
        self.logger.info(f"Created appointment {appointment.id} for customer {customer.id}")
        return appointment

    @BaseService.measure_operation("update_appointment")
    def update_appointment(self, appointment_id: str, data: AppointmentUpdate) -> Appointment:
        """
        Apply a partial update; fields absent from the request are untouched.

        Raises:
            NotFoundException: If the appointment or a new reference does not exist
            InvalidStateException: If a newly chosen technician is not accepting bookings
            AppointmentConflictException: If the new slot is already taken
            ValidationException: If the status value is not recognized
        """
        changes = data.provided_fields()
        self.log_operation(
            "update_appointment", appointment_id=appointment_id, fields=sorted(changes)
        )

        with self.transaction():
            # 1. Load
            appointment = self._get_or_404(appointment_id)

            # 2. Re-resolve changed references
            if changes.get("customer_id", appointment.customer_id) != appointment.customer_id:
                appointment.customer_id = self.directory.find_customer(changes["customer_id"]).id

            new_service = None
            if changes.get("service_id", appointment.service_id) != appointment.service_id:
                new_service = self.directory.find_service(changes["service_id"])
                appointment.service_id = new_service.id
                if "total_amount" not in changes:
                    appointment.total_amount = new_service.price

            # 3. Re-check the slot when it moves (or its length changes in overlap mode)
            new_technician_id = changes.get("technician_id", appointment.technician_id)
            new_date = changes.get("appointment_date", appointment.appointment_date)
            new_time = changes.get("appointment_time", appointment.appointment_time)
            slot_moved = (new_technician_id, new_date, new_time) != (
                appointment.technician_id,
                appointment.appointment_date,
                appointment.appointment_time,
            )
            resized = new_service is not None and self.conflict_checker.is_duration_aware

            conflict_details = self._conflict_details(new_technician_id, new_date, new_time)
            if slot_moved:
                # availability is per slot
                technician = self.directory.find_technician(new_technician_id)
                self._ensure_bookable(technician)
                new_technician_id = technician.id
            if slot_moved or resized:
                service = new_service or self.directory.find_service(appointment.service_id)
                if self.conflict_checker.has_conflict(
                    new_technician_id,
                    new_date,
                    new_time,
                    exclude_appointment_id=appointment.id,
                    duration_minutes=service.duration_minutes,
                ):
                    prometheus_metrics.record_appointment_conflict("check")
                    raise AppointmentConflictException(
                        ERROR_SLOT_TAKEN_ON_UPDATE, details=conflict_details
                    )
            if slot_moved:
                appointment.technician_id = new_technician_id
                appointment.appointment_date = new_date
                appointment.appointment_time = new_time

            # 4. Optional fields
            for field in _PLAIN_UPDATE_FIELDS:
                if field in changes:
                    value = changes[field]
                    setattr(appointment, field, str(value) if field == "email" else value)
            if "status" in changes:
                apply_status(appointment, require_status(changes["status"]))
            if "otp_verified" in changes:
                apply_otp_verified(appointment, changes["otp_verified"])

            # 5. Persist
            try:
                self.repository.flush()
            except IntegrityError as exc:
                self._raise_if_slot_taken(exc, ERROR_SLOT_TAKEN_ON_UPDATE, conflict_details)
                raise

        self.repository.refresh(appointment)
        return appointment

    @BaseService.measure_operation("update_appointment_status")
    def update_status(
        self, appointment_id: str, status: Union[AppointmentStatus, str]
    ) -> Appointment:
        """Set the status explicitly. There are no loyalty or payment side effects."""
        new_status = status if isinstance(status, AppointmentStatus) else require_status(status)

        with self.transaction():
            appointment = self._get_or_404(appointment_id)
            apply_status(appointment, new_status)
            self.repository.flush()

        self.log_operation(
            "update_appointment_status", appointment_id=appointment_id, status=new_status.value
        )
        self.repository.refresh(appointment)
        return appointment

    @BaseService.measure_operation("verify_appointment_otp")
    def verify_otp(self, appointment_id: str, code: str) -> Appointment:
        """
        Confirm an appointment with the code sent to its contact address.

        Raises:
            NotFoundException: If the appointment does not exist
            ValidationException: If the code is wrong, expired or already used
        """
        with self._booking_transaction() as otp_undo:
            appointment = self._get_or_404(appointment_id)
            confirm(appointment)
            self.repository.flush()

            # The code is spent last; a failed commit puts it back
            address = appointment.contact_address
            pending = self.otp_service.pending(address)
            if not self.otp_service.validate(address, code):
                raise ValidationException(ERROR_INVALID_OTP, code="INVALID_OTP")
            otp_undo.append((address, pending))

        self.log_operation("verify_appointment_otp", appointment_id=appointment_id)
        self.repository.refresh(appointment)
        return appointment

    @BaseService.measure_operation("resend_appointment_otp")
    def resend_otp(self, appointment_id: str) -> OtpChallenge:
        """Issue a fresh code for the appointment, replacing any outstanding one."""
        appointment = self._get_or_404(appointment_id)
        challenge = self.otp_service.issue(appointment.contact_address)
        self.log_operation("resend_appointment_otp", appointment_id=appointment_id)
        return challenge

    @BaseService.measure_operation("delete_appointment")
    def delete_appointment(self, appointment_id: str) -> None:
        with self.transaction():
            if not self.repository.delete(appointment_id):
                raise NotFoundException.for_resource("Appointment", "id", appointment_id)
        self.log_operation("delete_appointment", appointment_id=appointment_id)

    # Queries

    @BaseService.measure_operation("get_appointment")
    def get_appointment(self, appointment_id: str) -> Appointment:
        return self._get_or_404(appointment_id)

    @BaseService.measure_operation("list_appointments")
    def list_appointments(self) -> List[Appointment]:
        return self.repository.list_all()

    @BaseService.measure_operation("list_customer_appointments")
    def list_by_customer(self, customer_id: str) -> List[Appointment]:
        self.directory.find_customer(customer_id)
        return self.repository.list_by_customer(customer_id)

    @BaseService.measure_operation("list_technician_appointments")
    def list_by_technician(self, technician_id: str) -> List[Appointment]:
        self.directory.find_technician(technician_id)
        return self.repository.list_by_technician(technician_id)

    @BaseService.measure_operation("list_appointments_by_date")
    def list_by_date(self, appointment_date: date) -> List[Appointment]:
        return self.repository.list_by_date(appointment_date)

    @BaseService.measure_operation("available_slots")
    def available_slots(
        self,
        technician_id: str,
        appointment_date: date,
        service_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Free start times for a technician on a date.

        An unavailable technician has no bookable slots.
        """
        technician = self.directory.find_technician(technician_id)
        duration = self.directory.find_service(service_id).duration_minutes if service_id else None

        slots = (
            self.conflict_checker.available_slots(technician.id, appointment_date, duration)
            if technician.is_available
            else []
        )
        return {
            "technician_id": technician.id,
            "date": appointment_date,
            "duration_minutes": duration,
            "slots": [slot.strftime("%H:%M") for slot in slots],
        }

    # Helpers

    @contextmanager
    def _booking_transaction(self) -> Iterator[List[Tuple[str, Optional[OtpChallenge]]]]:
        """
        ``transaction()`` that also undoes OTP store changes on failure.

        Callers append ``(address, challenge_before)`` after touching the store.
        """
        otp_undo: List[Tuple[str, Optional[OtpChallenge]]] = []
        try:
            with self.transaction():
                yield otp_undo
        except Exception:
            for address, previous in reversed(otp_undo):
                self.otp_service.reinstate(address, previous)
            raise

    def _get_or_404(self, appointment_id: str) -> Appointment:
        appointment = self.repository.get_by_id(appointment_id)
        if not appointment:
            raise NotFoundException.for_resource("Appointment", "id", appointment_id)
        return appointment

    @staticmethod
    def _ensure_bookable(technician: Technician) -> None:
        if not technician.is_available:
            raise InvalidStateException(
                ERROR_TECHNICIAN_UNAVAILABLE,
                code="TECHNICIAN_UNAVAILABLE",
                details={"technician_id": technician.id},
            )

    @staticmethod
    def _conflict_details(
        technician_id: str, appointment_date: date, appointment_time: time
    ) -> Dict[str, Any]:
        return {
            "technician_id": technician_id,
            "appointment_date": str(appointment_date),
            "appointment_time": appointment_time.strftime("%H:%M"),
        }

    def _raise_if_slot_taken(
        self, exc: Exception, message: str, details: Dict[str, Any]
    ) -> None:
        """Translate the storage-level double-booking backstop into a conflict."""
        error: BaseException = exc
        if isinstance(exc, RepositoryException) and exc.__cause__ is not None:
            error = exc.__cause__
        if is_slot_constraint_violation(error):
            self.logger.warning(
                f"Slot uniqueness violated for technician {details.get('technician_id')}"
            )
            prometheus_metrics.record_appointment_conflict("constraint")
            raise AppointmentConflictException(message, details=details) from exc

