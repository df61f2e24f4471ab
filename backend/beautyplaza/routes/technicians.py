# backend/beautyplaza/routes/technicians.py
"""
Technician routes.
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..api.dependencies import Principal, enforce, get_principal, get_technician_service
from ..core.enums import Action
from ..schemas.technician import TechnicianCreate, TechnicianResponse, TechnicianUpdate
from ..services.technician_service import TechnicianService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/technicians", tags=["technicians"])


@router.get("", response_model=List[TechnicianResponse])
async def list_technicians(
    principal: Principal = Depends(get_principal),
    technician_service: TechnicianService = Depends(get_technician_service),
) -> List[TechnicianResponse]:
    enforce(principal, Action.VIEW_CATALOG)
    technicians = await asyncio.to_thread(technician_service.list_technicians)
    return [TechnicianResponse.model_validate(t) for t in technicians]


@router.get("/available", response_model=List[TechnicianResponse])
async def list_available_technicians(
    principal: Principal = Depends(get_principal),
    technician_service: TechnicianService = Depends(get_technician_service),
) -> List[TechnicianResponse]:
    enforce(principal, Action.VIEW_CATALOG)
    technicians = await asyncio.to_thread(technician_service.list_technicians, True)
    return [TechnicianResponse.model_validate(t) for t in technicians]


@router.get("/{technician_id}", response_model=TechnicianResponse)
async def get_technician(
    technician_id: str,
    principal: Principal = Depends(get_principal),
    technician_service: TechnicianService = Depends(get_technician_service),
) -> TechnicianResponse:
    enforce(principal, Action.VIEW_CATALOG)
    technician = await asyncio.to_thread(technician_service.get_technician, technician_id)
    return TechnicianResponse.model_validate(technician)


@router.post("", response_model=TechnicianResponse, status_code=status.HTTP_201_CREATED)
async def create_technician(
    payload: TechnicianCreate,
    principal: Principal = Depends(get_principal),
    technician_service: TechnicianService = Depends(get_technician_service),
) -> TechnicianResponse:
    enforce(principal, Action.MANAGE_TECHNICIANS)
    technician = await asyncio.to_thread(technician_service.create_technician, payload)
    return TechnicianResponse.model_validate(technician)


@router.put("/{technician_id}", response_model=TechnicianResponse)
async def update_technician(
    technician_id: str,
    payload: TechnicianUpdate,
    principal: Principal = Depends(get_principal),
    technician_service: TechnicianService = Depends(get_technician_service),
) -> TechnicianResponse:
    enforce(principal, Action.MANAGE_TECHNICIANS)
    technician = await asyncio.to_thread(
        technician_service.update_technician, technician_id, payload
    )
    return TechnicianResponse.model_validate(technician)


@router.delete("/{technician_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_technician(
    technician_id: str,
    principal: Principal = Depends(get_principal),
    technician_service: TechnicianService = Depends(get_technician_service),
) -> Response:
    enforce(principal, Action.MANAGE_TECHNICIANS)
    await asyncio.to_thread(technician_service.delete_technician, technician_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
