"""Referral schemas."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, EmailStr, Field

from .base import StandardizedModel, StrictRequestModel


class ReferralGenerate(StrictRequestModel):
    referred_user_email: Optional[EmailStr] = None
    referrer_user_id: Optional[str] = Field(
        None, description="Admins may generate a code on behalf of another user"
    )


class ReferralComplete(StrictRequestModel):
    referred_user_id: str = Field(..., min_length=1)


class ReferralResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    referrer_user_id: str
    referral_code: str
    referred_user_id: Optional[str] = None
    referred_user_email: Optional[str] = None
    status: str
    generated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
