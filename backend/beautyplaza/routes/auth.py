# backend/beautyplaza/routes/auth.py
"""
Authentication routes.

Endpoints:
    POST /auth/register - Create a customer account
    POST /auth/login - Exchange credentials for a bearer token
    GET /auth/me - The authenticated user
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from ..api.dependencies import get_auth_service, get_current_active_user
from ..models.user import User
from ..schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from ..schemas.user import UserResponse
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """
    Register a new customer account.

    Raises:
        ConflictException: If the email is already registered
    """
    user = await asyncio.to_thread(auth_service.register_user, payload)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    token, user = await asyncio.to_thread(auth_service.login, payload.email, payload.password)
    return TokenResponse(access_token=token, user_id=user.id, role=user.role)


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_active_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)
