# backend/beautyplaza/routes/health.py
"""
Health check endpoint.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter
from pydantic import BaseModel

from .. import __version__
from ..core.config import settings
from ..core.constants import BRAND_NAME

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


class HealthCheckResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime


@router.get("/health", response_model=HealthCheckResponse)
def health_check() -> HealthCheckResponse:
    return HealthCheckResponse(
        status="healthy",
        service=f"{BRAND_NAME} API",
        version=__version__,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
    )
