# backend/beautyplaza/schemas/appointment.py
"""
Appointment schemas for the Beauty Plaza platform.

Requests carry references by id plus the scheduling fields; the customer's
contact snapshot is optional and copied from the customer record when absent.
Times are local wall-clock times in HH:MM.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import ConfigDict, EmailStr, Field, field_serializer, field_validator

from ..core.constants import MAX_NOTES_LENGTH, PHONE_PATTERN
from .base import (
    Money,
    StandardizedModel,
    StrictRequestModel,
    ensure_date_only,
    format_hhmm,
    parse_hhmm,
)

ServiceTypeLiteral = Literal["in-store", "in-home"]


def _normalize_service_type(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower().replace("_", "-")
    return value


class AppointmentCreate(StrictRequestModel):
    """Book a service with a technician at a date and time."""

    customer_id: str = Field(..., min_length=1, description="Customer booking the appointment")
    service_id: str = Field(..., min_length=1, description="Service being booked")
    technician_id: str = Field(..., min_length=1, description="Technician performing the service")
    appointment_date: date = Field(..., description="Date of the appointment")
    appointment_time: time = Field(..., description="Local start time (HH:MM)")
    service_type: ServiceTypeLiteral = Field("in-store", description="in-store or in-home")
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN, description="10-digit contact phone")
    email: Optional[EmailStr] = Field(None, description="Contact email; receives the OTP")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)
    total_amount: Optional[Decimal] = Field(
        None, ge=0, description="Overrides the service price when given"
    )
    loyalty_points_used: Optional[int] = Field(None, ge=0)
    loyalty_discount: Optional[Decimal] = Field(None, ge=0)

    @field_validator("appointment_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return ensure_date_only(v, "appointment_date")

    @field_validator("appointment_time", mode="before")
    @classmethod
    def _parse_time(cls, v: object) -> object:
        return parse_hhmm(v)

    @field_validator("service_type", mode="before")
    @classmethod
    def _service_type(cls, v: object) -> object:
        return _normalize_service_type(v)


class AppointmentUpdate(StrictRequestModel):
    """
    Partial update. Only fields present in the request body are applied.

    ``status`` is free text here and parsed by the lifecycle rules so the
    error message names the offending value.
    """

    customer_id: Optional[str] = Field(None, min_length=1)
    service_id: Optional[str] = Field(None, min_length=1)
    technician_id: Optional[str] = Field(None, min_length=1)
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    service_type: Optional[ServiceTypeLiteral] = None
    status: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    total_amount: Optional[Decimal] = Field(None, ge=0)
    loyalty_points_used: Optional[int] = Field(None, ge=0)
    loyalty_discount: Optional[Decimal] = Field(None, ge=0)
    otp_verified: Optional[bool] = None

    @field_validator("appointment_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return ensure_date_only(v, "appointment_date")

    @field_validator("appointment_time", mode="before")
    @classmethod
    def _parse_time(cls, v: object) -> object:
        return parse_hhmm(v)

    @field_validator("service_type", mode="before")
    @classmethod
    def _service_type(cls, v: object) -> object:
        return _normalize_service_type(v)

    def provided_fields(self) -> dict:
        """Fields explicitly sent with a non-null value."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class AppointmentResponse(StandardizedModel):
    """Appointment as returned by the API."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    customer_id: str
    service_id: str
    technician_id: str
    appointment_date: date
    appointment_time: time
    service_type: str
    total_amount: Money
    loyalty_points_used: int = 0
    loyalty_discount: Money = Money("0")
    status: str
    otp_verified: bool
    notes: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("appointment_time")
    def _serialize_time(self, value: time) -> str:
        return format_hhmm(value)


class AvailableSlotsResponse(StandardizedModel):
    technician_id: str
    date: date
    duration_minutes: Optional[int] = None
    slots: List[str]


class OtpResendResponse(StandardizedModel):
    message: str
    expires_at: datetime
