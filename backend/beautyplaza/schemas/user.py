"""User account schemas."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, EmailStr, Field

from ..core.constants import MIN_PASSWORD_LENGTH, PHONE_PATTERN
from ..core.enums import RoleName
from .base import StandardizedModel, StrictRequestModel


class UserCreate(StrictRequestModel):
    """Admin-created account with an explicit role."""

    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: RoleName = RoleName.CUSTOMER
    is_active: bool = True


class UserUpdate(StrictRequestModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: Optional[RoleName] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH)


class UserResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    email: str
    full_name: str
    phone: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
