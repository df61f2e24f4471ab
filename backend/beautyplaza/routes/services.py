# backend/beautyplaza/routes/services.py
"""
Service catalog routes.

Everyone signed in can browse active services; admins maintain the catalog.
DELETE deactivates a service instead of removing it.
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from ..api.dependencies import Principal, enforce, get_catalog_service, get_principal
from ..core.enums import Action
from ..schemas.beauty_service import (
    BeautyServiceCreate,
    BeautyServiceResponse,
    BeautyServiceUpdate,
)
from ..services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=List[BeautyServiceResponse])
async def list_services(
    include_inactive: bool = Query(False, description="Admins only"),
    principal: Principal = Depends(get_principal),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[BeautyServiceResponse]:
    enforce(principal, Action.MANAGE_CATALOG if include_inactive else Action.VIEW_CATALOG)
    services = await asyncio.to_thread(catalog_service.list_services, include_inactive)
    return [BeautyServiceResponse.model_validate(s) for s in services]


@router.get("/{service_id}", response_model=BeautyServiceResponse)
async def get_service(
    service_id: str,
    principal: Principal = Depends(get_principal),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> BeautyServiceResponse:
    enforce(principal, Action.VIEW_CATALOG)
    service = await asyncio.to_thread(catalog_service.get_service, service_id)
    return BeautyServiceResponse.model_validate(service)


@router.post("", response_model=BeautyServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    payload: BeautyServiceCreate,
    principal: Principal = Depends(get_principal),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> BeautyServiceResponse:
    enforce(principal, Action.MANAGE_CATALOG)
    service = await asyncio.to_thread(catalog_service.create_service, payload)
    return BeautyServiceResponse.model_validate(service)


@router.put("/{service_id}", response_model=BeautyServiceResponse)
async def update_service(
    service_id: str,
    payload: BeautyServiceUpdate,
    principal: Principal = Depends(get_principal),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> BeautyServiceResponse:
    enforce(principal, Action.MANAGE_CATALOG)
    service = await asyncio.to_thread(catalog_service.update_service, service_id, payload)
    return BeautyServiceResponse.model_validate(service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_service(
    service_id: str,
    principal: Principal = Depends(get_principal),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> Response:
    enforce(principal, Action.MANAGE_CATALOG)
    await asyncio.to_thread(catalog_service.deactivate_service, service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
