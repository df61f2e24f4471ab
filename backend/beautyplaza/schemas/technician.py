"""Technician roster schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import StandardizedModel, StrictRequestModel


def _clean_specialties(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return [value.strip() for value in values if value and value.strip()]


class TechnicianCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    specialties: List[str] = Field(..., description="Services this technician performs")
    is_available: bool = True
    image_url: Optional[str] = Field(None, max_length=500)
    user_id: Optional[str] = Field(None, description="Linked user account, if any")

    @field_validator("specialties")
    @classmethod
    def _specialties(cls, v: List[str]) -> List[str]:
        return _clean_specialties(v) or []


class TechnicianUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    specialties: Optional[List[str]] = None
    is_available: Optional[bool] = None
    image_url: Optional[str] = Field(None, max_length=500)
    user_id: Optional[str] = None

    @field_validator("specialties")
    @classmethod
    def _specialties(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_specialties(v)


class TechnicianResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    specialties: List[str] = []
    is_available: bool
    image_url: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
