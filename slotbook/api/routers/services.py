"""Admin services router: catalog CRUD. Services are deactivated, never deleted."""
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.api.dependencies import get_session
from slotbook.api.schemas.admin import ServiceCreateRequest, ServiceResponse, ServiceUpdateRequest
from slotbook.services.catalog_service import CatalogService

router = APIRouter(prefix="/admin/services", tags=["admin-services"])


@router.get("", response_model=List[ServiceResponse])
async def list_services(
    active_only: bool = False,
    skip: int = 0,
    limit: int = 100,
    session: AsyncSession = Depends(get_session),
):
    return await CatalogService(session).list_services(active_only=active_only, skip=skip, limit=limit)


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(body: ServiceCreateRequest, session: AsyncSession = Depends(get_session)):
    return await CatalogService(session).create_service(body.model_dump())


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: UUID, session: AsyncSession = Depends(get_session)):
    return await CatalogService(session).get_service(service_id)


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: UUID,
    body: ServiceUpdateRequest,
    session: AsyncSession = Depends(get_session),
):
    return await CatalogService(session).update_service(service_id, body.model_dump(exclude_unset=True))


@router.post("/{service_id}/deactivate", response_model=ServiceResponse)
async def deactivate_service(service_id: UUID, session: AsyncSession = Depends(get_session)):
    return await CatalogService(session).deactivate_service(service_id)
