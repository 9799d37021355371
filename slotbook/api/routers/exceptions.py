"""Admin exceptions router: closures and extra openings on specific dates."""
from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.api.dependencies import get_session
from slotbook.api.schemas.admin import (
    ExceptionCreateRequest,
    ExceptionResponse,
    ExceptionUpdateRequest,
)
from slotbook.scheduling.types import DateRange
from slotbook.services.schedule_service import ScheduleService

router = APIRouter(prefix="/admin/exceptions", tags=["admin-exceptions"])


@router.get("", response_model=List[ExceptionResponse])
async def list_exceptions(
    start: Optional[date] = None,
    end: Optional[date] = None,
    session: AsyncSession = Depends(get_session),
):
    date_range = DateRange(start or date.min, end or date.max) if (start or end) else None
    return await ScheduleService(session).list_exceptions(date_range)


@router.post("", response_model=ExceptionResponse, status_code=status.HTTP_201_CREATED)
async def create_exception(body: ExceptionCreateRequest, session: AsyncSession = Depends(get_session)):
    return await ScheduleService(session).create_exception(body.model_dump())


@router.patch("/{exception_id}", response_model=ExceptionResponse)
async def update_exception(
    exception_id: UUID,
    body: ExceptionUpdateRequest,
    session: AsyncSession = Depends(get_session),
):
    return await ScheduleService(session).update_exception(
        exception_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{exception_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exception(exception_id: UUID, session: AsyncSession = Depends(get_session)):
    await ScheduleService(session).delete_exception(exception_id)
