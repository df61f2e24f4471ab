# backend/beautyplaza/routes/settings.py
"""
Runtime settings routes (admin only).
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..api.dependencies import Principal, enforce, get_principal, get_settings_service
from ..core.enums import Action
from ..schemas.setting import SettingCreate, SettingResponse, SettingUpdate
from ..services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=List[SettingResponse])
async def list_settings(
    principal: Principal = Depends(get_principal),
    settings_service: SettingsService = Depends(get_settings_service),
) -> List[SettingResponse]:
    enforce(principal, Action.MANAGE_SETTINGS)
    items = await asyncio.to_thread(settings_service.list_settings)
    return [SettingResponse.model_validate(s) for s in items]


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(
    key: str,
    principal: Principal = Depends(get_principal),
    settings_service: SettingsService = Depends(get_settings_service),
) -> SettingResponse:
    enforce(principal, Action.MANAGE_SETTINGS)
    setting = await asyncio.to_thread(settings_service.get_setting, key)
    return SettingResponse.model_validate(setting)


@router.post("", response_model=SettingResponse, status_code=status.HTTP_201_CREATED)
async def create_setting(
    payload: SettingCreate,
    principal: Principal = Depends(get_principal),
    settings_service: SettingsService = Depends(get_settings_service),
) -> SettingResponse:
    enforce(principal, Action.MANAGE_SETTINGS)
    setting = await asyncio.to_thread(settings_service.create_setting, payload)
    return SettingResponse.model_validate(setting)


@router.put("/{key}", response_model=SettingResponse)
async def update_setting(
    key: str,
    payload: SettingUpdate,
    principal: Principal = Depends(get_principal),
    settings_service: SettingsService = Depends(get_settings_service),
) -> SettingResponse:
    enforce(principal, Action.MANAGE_SETTINGS)
    setting = await asyncio.to_thread(settings_service.update_setting, key, payload)
    return SettingResponse.model_validate(setting)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_setting(
    key: str,
    principal: Principal = Depends(get_principal),
    settings_service: SettingsService = Depends(get_settings_service),
) -> Response:
    enforce(principal, Action.MANAGE_SETTINGS)
    await asyncio.to_thread(settings_service.delete_setting, key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
