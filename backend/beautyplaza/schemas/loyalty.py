"""Loyalty ledger schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import ConfigDict, Field

from .base import Money, StandardizedModel, StrictRequestModel


class LoyaltyTransactionCreate(StrictRequestModel):
    """
    Ledger entry. ``transaction_type`` is EARNED or REDEEMED (any case);
    redemption fields only apply to REDEEMED entries.
    """

    user_id: str = Field(..., min_length=1)
    transaction_type: str = Field(..., min_length=1)
    points: int
    description: Optional[str] = Field(None, max_length=500)
    appointment_id: Optional[str] = None
    redemption_method: Optional[str] = None
    bank_account: Optional[str] = Field(None, max_length=34)
    routing_number: Optional[str] = Field(None, max_length=20)
    redemption_value: Optional[Decimal] = Field(None, ge=0)


class LoyaltyTransactionResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    transaction_type: str
    points: int
    description: Optional[str] = None
    appointment_id: Optional[str] = None
    redemption_method: Optional[str] = None
    bank_account: Optional[str] = None
    routing_number: Optional[str] = None
    redemption_value: Optional[Money] = None
    created_at: Optional[datetime] = None


class LoyaltyBalanceResponse(StandardizedModel):
    user_id: str
    total_points: int
    redemption_value: Money


class LoyaltyTransactionUpdate(StrictRequestModel):
    """Admin correction of a ledger entry; omitted fields keep their value."""

    user_id: Optional[str] = Field(None, min_length=1)
    transaction_type: Optional[str] = Field(None, min_length=1)
    points: Optional[int] = None
    description: Optional[str] = Field(None, max_length=500)
    appointment_id: Optional[str] = None  # explicit null detaches the appointment
    redemption_method: Optional[str] = None
    bank_account: Optional[str] = Field(None, max_length=34)
    routing_number: Optional[str] = Field(None, max_length=20)
    redemption_value: Optional[Decimal] = Field(None, ge=0)
