"""
Shared schema building blocks: request/response bases, the Money type and
the date/time parsing helpers used by the booking payloads.
"""

from datetime import time
from decimal import Decimal, InvalidOperation
import re
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic_core import core_schema

DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class StandardizedModel(BaseModel):
    """Response base: enums render as their values."""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class StrictRequestModel(BaseModel):
    """Request base; unknown fields are a validation error."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class Money(Decimal):
    """Decimal on the way in, JSON number on the way out."""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def to_decimal(value: Any) -> Decimal:
            if isinstance(value, Decimal):
                return value
            try:
                # floats go through str() so 0.1 stays 0.1
                return cls(str(value))
            except InvalidOperation:
                raise ValueError(f"Not a valid amount: {value!r}")

        accepted = core_schema.union_schema(
            [
                core_schema.is_instance_schema(Decimal),
                core_schema.int_schema(),
                core_schema.float_schema(),
                core_schema.str_schema(),
            ]
        )
        return core_schema.no_info_after_validator_function(
            to_decimal,
            accepted,
            serialization=core_schema.plain_serializer_function_ser_schema(
                float, return_schema=core_schema.float_schema()
            ),
        )


def ensure_date_only(value: object, field_name: str) -> object:
    """Reject datetime strings where a plain YYYY-MM-DD date is expected."""
    if isinstance(value, str):
        candidate = value.strip()
        if not DATE_ONLY_REGEX.fullmatch(candidate):
            raise ValueError(f"{field_name} must be a YYYY-MM-DD date-only string")
        return candidate
    return value


def parse_hhmm(value: object) -> object:
    if not isinstance(value, str):
        return value
    parts = value.strip().split(":")
    try:
        if len(parts) not in (2, 3):
            raise ValueError(value)
        hour, minute = int(parts[0]), int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
        return time(hour, minute, second)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")
