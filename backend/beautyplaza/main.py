# backend/beautyplaza/main.py
"""
FastAPI application entry point.

Run locally with ``uvicorn beautyplaza.main:app --reload`` from ``backend/``.
"""

import asyncio
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import (
    appointments,
    auth,
    gift_cards,
    health,
    loyalty_points,
    promotions,
    prometheus,
    referrals,
    services,
    settings as settings_routes,
    technicians,
    users,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(
        "Environment: %s, OTP store: %s, conflict mode: %s",
        settings.environment,
        settings.otp_store_backend,
        settings.conflict_mode,
    )
    await asyncio.to_thread(init_db)

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.allowed_origins)

app.add_middleware(PrometheusMiddleware)

api = APIRouter(prefix="/api")
api.include_router(appointments.router)
api.include_router(users.router)
api.include_router(services.router)
api.include_router(technicians.router)
api.include_router(settings_routes.router)
api.include_router(loyalty_points.router)
api.include_router(gift_cards.router)
api.include_router(promotions.router)
api.include_router(referrals.router)

app.include_router(api)
app.include_router(auth.router)
app.include_router(health.router)
app.include_router(prometheus.router)

# Alias kept for ASGI servers configured with ``beautyplaza.main:fastapi_app``
fastapi_app = app
