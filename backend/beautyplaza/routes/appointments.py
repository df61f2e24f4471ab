# backend/beautyplaza/routes/appointments.py
"""
Appointment routes.

All business logic is delegated to AppointmentService; this module only
authenticates, asks the authorization policy, and maps results to schemas.

Endpoints:
    GET /available-slots - Free start times for a technician on a date
    GET /customer/{customer_id} - Appointments of a customer
    GET /technician/{technician_id} - Appointments of a technician
    GET /date/{appointment_date} - Appointments on a date
    GET / - All appointments
    POST / - Book an appointment (issues an OTP)
    GET /{appointment_id} - Appointment details
    PUT /{appointment_id} - Partial update / reschedule
    PATCH /{appointment_id}/status - Set the status
    POST /{appointment_id}/verify-otp - Confirm with the OTP
    POST /{appointment_id}/resend-otp - Issue a fresh OTP
    DELETE /{appointment_id} - Delete
"""

import asyncio
from datetime import date
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..api.dependencies import Principal, enforce, get_appointment_service, get_principal
from ..core.enums import Action
from ..core.exceptions import DomainException
from ..schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    AvailableSlotsResponse,
    OtpResendResponse,
)
from ..services.appointment_service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["appointments"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _many(appointments) -> List[AppointmentResponse]:
    return [AppointmentResponse.model_validate(a) for a in appointments]


# ============================================================================
# Static routes (before dynamic routes with path parameters)
# ============================================================================


@router.get("/available-slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    technician_id: str = Query(..., min_length=1),
    slot_date: date = Query(..., alias="date", description="Date (YYYY-MM-DD)"),
    service_id: Optional[str] = Query(None, description="Sizes slots to this service"),
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AvailableSlotsResponse:
    enforce(principal, Action.VIEW_AVAILABLE_SLOTS)
    try:
        result = await asyncio.to_thread(
            appointment_service.available_slots, technician_id, slot_date, service_id
        )
    except DomainException as e:
        handle_domain_exception(e)
    return AvailableSlotsResponse(**result)


@router.get("/customer/{customer_id}", response_model=List[AppointmentResponse])
async def list_customer_appointments(
    customer_id: str,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> List[AppointmentResponse]:
    enforce(principal, Action.LIST_CUSTOMER_APPOINTMENTS, {"customer_id": customer_id})
    try:
        appointments = await asyncio.to_thread(appointment_service.list_by_customer, customer_id)
    except DomainException as e:
        handle_domain_exception(e)
    return _many(appointments)


@router.get("/technician/{technician_id}", response_model=List[AppointmentResponse])
async def list_technician_appointments(
    technician_id: str,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> List[AppointmentResponse]:
    enforce(principal, Action.LIST_TECHNICIAN_APPOINTMENTS, {"technician_id": technician_id})
    try:
        appointments = await asyncio.to_thread(
            appointment_service.list_by_technician, technician_id
        )
    except DomainException as e:
        handle_domain_exception(e)
    return _many(appointments)


@router.get("/date/{appointment_date}", response_model=List[AppointmentResponse])
async def list_appointments_by_date(
    appointment_date: date,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> List[AppointmentResponse]:
    enforce(principal, Action.LIST_APPOINTMENTS_BY_DATE)
    appointments = await asyncio.to_thread(appointment_service.list_by_date, appointment_date)
    return _many(appointments)


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> List[AppointmentResponse]:
    enforce(principal, Action.LIST_ALL_APPOINTMENTS)
    appointments = await asyncio.to_thread(appointment_service.list_appointments)
    return _many(appointments)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    payload: AppointmentCreate,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    """
    Book an appointment.

    The appointment starts SCHEDULED and unverified; a confirmation code is
    sent to the contact email.
    """
    enforce(principal, Action.CREATE_APPOINTMENT, {"customer_id": payload.customer_id})
    try:
        appointment = await asyncio.to_thread(appointment_service.create_appointment, payload)
    except DomainException as e:
        handle_domain_exception(e)
    return AppointmentResponse.model_validate(appointment)


# ============================================================================
# Dynamic routes
# ============================================================================


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    try:
        appointment = await asyncio.to_thread(appointment_service.get_appointment, appointment_id)
    except DomainException as e:
        handle_domain_exception(e)
    enforce(principal, Action.VIEW_APPOINTMENT, appointment)
    return AppointmentResponse.model_validate(appointment)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: str,
    payload: AppointmentUpdate,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    """Apply only the fields present in the body; moving the slot re-checks conflicts."""
    enforce(principal, Action.UPDATE_APPOINTMENT)
    try:
        appointment = await asyncio.to_thread(
            appointment_service.update_appointment, appointment_id, payload
        )
    except DomainException as e:
        handle_domain_exception(e)
    return AppointmentResponse.model_validate(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    status_value: str = Query(..., alias="status", min_length=1),
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    try:
        appointment = await asyncio.to_thread(appointment_service.get_appointment, appointment_id)
        enforce(principal, Action.UPDATE_APPOINTMENT_STATUS, appointment)
        appointment = await asyncio.to_thread(
            appointment_service.update_status, appointment_id, status_value
        )
    except DomainException as e:
        handle_domain_exception(e)
    return AppointmentResponse.model_validate(appointment)


@router.post("/{appointment_id}/verify-otp", response_model=AppointmentResponse)
async def verify_appointment_otp(
    appointment_id: str,
    otp: str = Query(..., min_length=1, description="Code sent to the contact email"),
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    try:
        appointment = await asyncio.to_thread(appointment_service.get_appointment, appointment_id)
        enforce(principal, Action.VERIFY_APPOINTMENT_OTP, appointment)
        appointment = await asyncio.to_thread(
            appointment_service.verify_otp, appointment_id, otp
        )
    except DomainException as e:
        handle_domain_exception(e)
    return AppointmentResponse.model_validate(appointment)


@router.post("/{appointment_id}/resend-otp", response_model=OtpResendResponse)
async def resend_appointment_otp(
    appointment_id: str,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> OtpResendResponse:
    try:
        appointment = await asyncio.to_thread(appointment_service.get_appointment, appointment_id)
        enforce(principal, Action.RESEND_APPOINTMENT_OTP, appointment)
        challenge = await asyncio.to_thread(appointment_service.resend_otp, appointment_id)
    except DomainException as e:
        handle_domain_exception(e)
    return OtpResendResponse(
        message="A new confirmation code has been sent.", expires_at=challenge.expires_at
    )


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: str,
    principal: Principal = Depends(get_principal),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> Response:
    enforce(principal, Action.DELETE_APPOINTMENT)
    try:
        await asyncio.to_thread(appointment_service.delete_appointment, appointment_id)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
