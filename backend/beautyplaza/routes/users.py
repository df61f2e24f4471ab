# backend/beautyplaza/routes/users.py
"""
User administration routes (admin only).
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from ..api.dependencies import Principal, enforce, get_principal, get_user_service
from ..core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ..core.enums import Action
from ..schemas.user import UserCreate, UserResponse, UserUpdate
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    principal: Principal = Depends(get_principal),
    user_service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    enforce(principal, Action.MANAGE_USERS)
    users = await asyncio.to_thread(user_service.list_users, skip, limit)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/email/{email}", response_model=UserResponse)
async def get_user_by_email(
    email: str,
    principal: Principal = Depends(get_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    enforce(principal, Action.MANAGE_USERS)
    user = await asyncio.to_thread(user_service.get_by_email, email)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    principal: Principal = Depends(get_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    enforce(principal, Action.MANAGE_USERS)
    user = await asyncio.to_thread(user_service.get_user, user_id)
    return UserResponse.model_validate(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    principal: Principal = Depends(get_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    enforce(principal, Action.MANAGE_USERS)
    user = await asyncio.to_thread(user_service.create_user, payload)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    principal: Principal = Depends(get_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    enforce(principal, Action.MANAGE_USERS)
    user = await asyncio.to_thread(user_service.update_user, user_id, payload)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    principal: Principal = Depends(get_principal),
    user_service: UserService = Depends(get_user_service),
) -> Response:
    enforce(principal, Action.MANAGE_USERS)
    await asyncio.to_thread(user_service.delete_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
