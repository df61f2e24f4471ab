"""Promotion schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import ConfigDict, Field, model_validator

from ..models.promotion import DiscountType
from .base import Money, StandardizedModel, StrictRequestModel


def _check_discount(discount_type: Optional[DiscountType], value: Optional[Decimal]) -> None:
    if discount_type == DiscountType.PERCENTAGE and value is not None and value > 100:
        raise ValueError("Percentage discount cannot exceed 100")


class PromotionCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    promo_code: str = Field(..., min_length=1, max_length=50)
    discount_type: DiscountType
    discount_value: Decimal = Field(..., ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True

    @model_validator(mode="after")
    def _validate(self) -> "PromotionCreate":
        _check_discount(self.discount_type, self.discount_value)
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PromotionUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    promo_code: Optional[str] = Field(None, min_length=1, max_length=50)
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[Decimal] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None


class PromotionResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    promo_code: str
    discount_type: str
    discount_value: Money
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool
    created_at: Optional[datetime] = None


class PromotionApplyRequest(StrictRequestModel):
    promo_code: str = Field(..., min_length=1, max_length=50)
    appointment_id: str = Field(..., min_length=1)


class PromotionQuote(StandardizedModel):
    promo_code: str
    appointment_id: str
    original_amount: Money
    discount_amount: Money
    discounted_amount: Money
