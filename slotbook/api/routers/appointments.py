"""Admin appointments router: list, get, cancel."""
from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from slotbook.api.dependencies import get_appointment_service
from slotbook.api.routers.booking import appointment_to_schema
from slotbook.api.schemas.booking import AppointmentResponse
from slotbook.core.exceptions import ValidationError
from slotbook.scheduling.types import AppointmentOrder, AppointmentQuery, AppointmentStatus, DateRange
from slotbook.services.appointment_service import AppointmentService

router = APIRouter(prefix="/admin/appointments", tags=["admin-appointments"])


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    status: Optional[AppointmentStatus] = None,
    include_cancelled: bool = False,
    start: Optional[date] = None,
    end: Optional[date] = None,
    service_id: Optional[UUID] = None,
    order_by: AppointmentOrder = AppointmentOrder.START,
    descending: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    if (start is None) != (end is None):
        raise ValidationError("start and end must be given together", details={"field": "start"})
    query = AppointmentQuery(
        date_range=DateRange(start, end) if start and end else None,
        exclude_status=None if (include_cancelled or status is not None) else AppointmentStatus.CANCELLED,
        status=status,
        service_id=service_id,
        order_by=order_by,
        descending=descending,
        skip=skip,
        limit=limit,
    )
    return [appointment_to_schema(a) for a in await appointments.list_appointments(query)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: UUID,
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return appointment_to_schema(await appointments.get_appointment(appointment_id))


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: UUID,
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return appointment_to_schema(await appointments.cancel(appointment_id))
