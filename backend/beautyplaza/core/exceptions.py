# backend/beautyplaza/core/exceptions.py
"""
Exception hierarchy shared by services and routes.

Services raise DomainException subclasses; each one carries the HTTP status
it maps to, so the error handlers never have to guess.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Root of every business error; defaults to a 500."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: Optional[Dict[str, str]] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or "An error occurred processing your request"
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={"message": self.message, "code": self.code, "details": self.details},
            headers=self.headers,
        )


class ValidationException(DomainException):
    """Bad input the schema layer could not catch, e.g. a wrong OTP."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStateException(DomainException):
    """The entity exists but its state forbids the operation."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    status_code = status.HTTP_404_NOT_FOUND

    @classmethod
    def for_resource(cls, resource: str, field: str, value: Any) -> "NotFoundException":
        """``Appointment not found with id: '01H...'``"""
        return cls(
            f"{resource} not found with {field}: '{value}'",
            code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource": resource, "field": field, "value": str(value)},
        )


class ConflictException(DomainException):
    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenException(DomainException):
    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Unexpected failure below the service layer, usually the database."""


class AppointmentConflictException(ConflictException):
    """The technician already holds a live booking for the slot."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message or "This time slot conflicts with an existing appointment",
            code="APPOINTMENT_CONFLICT",
            details=details,
        )


class RepositoryException(Exception):
    """Data access failure; services translate it into a DomainException."""
