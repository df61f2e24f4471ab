"""Gift card schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import ConfigDict, Field

from .base import Money, StandardizedModel, StrictRequestModel


class GiftCardIssue(StrictRequestModel):
    amount: Decimal = Field(..., gt=0)
    expiry_date: Optional[date] = None
    purchased_by_user_id: Optional[str] = Field(
        None, description="Purchaser; admins may issue on behalf of another user"
    )


class GiftCardRedeem(StrictRequestModel):
    code: str = Field(..., min_length=1, max_length=32)
    amount: Decimal = Field(..., gt=0)


class GiftCardResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    initial_amount: Money
    current_balance: Money
    expiry_date: Optional[date] = None
    is_active: bool
    purchased_by_user_id: Optional[str] = None
    issued_by_user_id: Optional[str] = None
    created_at: Optional[datetime] = None
