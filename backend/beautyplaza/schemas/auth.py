"""Authentication request/response schemas."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from ..core.constants import MIN_PASSWORD_LENGTH, PHONE_PATTERN
from .base import StandardizedModel, StrictRequestModel


class RegisterRequest(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)

    @field_validator("full_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Full name is required")
        return stripped


class LoginRequest(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(StandardizedModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str
