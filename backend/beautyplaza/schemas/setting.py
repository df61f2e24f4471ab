"""Application setting schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict, Field

from .base import StandardizedModel, StrictRequestModel


class SettingCreate(StrictRequestModel):
    key: str = Field(..., min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_.\-]+$")
    value: Any = None
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)


class SettingUpdate(StrictRequestModel):
    value: Any = None
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)


class SettingResponse(StandardizedModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    value: Any = None
    description: Optional[str] = None
    category: Optional[str] = None
    updated_at: Optional[datetime] = None
