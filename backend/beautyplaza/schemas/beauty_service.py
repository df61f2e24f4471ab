"""Service catalog schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import ConfigDict, Field

from .base import Money, StandardizedModel, StrictRequestModel


class BeautyServiceCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    duration_minutes: int = Field(..., gt=0)
    image_url: Optional[str] = Field(None, max_length=500)
    is_active: bool = True


class BeautyServiceUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class BeautyServiceResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    price: Money
    duration_minutes: int
    image_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
