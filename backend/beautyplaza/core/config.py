# backend/beautyplaza/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_DEV_ORIGINS

logger = logging.getLogger(__name__)

_DEFAULT_SECRET_KEY = SecretStr("beautyplaza-dev-secret-change-me")

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    # Use a default secret key for local/testing environments
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    environment: str = Field(default="development", description="development|staging|production")
    is_testing: bool = False  # Set to True when running tests
    log_level: str = "INFO"

    database_url: str = Field(
        default="sqlite:///./beautyplaza.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    redis_url: str = "redis://localhost:6379"

    # OTP confirmation
    otp_store_backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Where pending OTP challenges live (memory for single process, redis otherwise)",
    )
    otp_length: int = Field(default=6, ge=4, le=10)
    otp_ttl_seconds: int = Field(default=300, gt=0, description="OTP validity window")
    otp_max_attempts: int = Field(
        default=5,
        ge=0,
        description="Wrong codes tolerated per challenge before it is invalidated (0 disables)",
    )
    otp_key_prefix: str = "otp"

    # Slot / conflict checking
    conflict_mode: Literal["exact", "overlap"] = Field(
        default="exact",
        description="exact: identical start time conflicts; overlap: service durations may not overlap",
    )
    slot_open_time: str = "09:00"
    slot_close_time: str = "19:00"
    slot_interval_minutes: int = Field(default=30, gt=0)

    # Loyalty / gift cards
    loyalty_point_value: float = Field(default=0.01, ge=0, description="Currency value of one point")
    gift_card_validity_days: int = Field(default=365, gt=0)

    cors_allowed_origins: str = Field(
        default=",".join(DEFAULT_DEV_ORIGINS),
        description="Comma-separated list of allowed CORS origins",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,  # allows SECRET_KEY to match secret_key
        extra="ignore",
    )

    @field_validator("slot_open_time", "slot_close_time")
    @classmethod
    def _validate_hhmm(cls, value: str) -> str:
        parts = value.split(":")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")
        hour, minute = int(parts[0]), int(parts[1])
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError(f"Invalid time: {value}")
        return f"{hour:02d}:{minute:02d}"

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


settings = Settings()
