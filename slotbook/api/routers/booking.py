"""Public booking router: services, open dates, slots, booking and confirmation.

No ``from __future__ import annotations`` here: the slowapi decorator wraps the
booking endpoint and FastAPI must resolve its parameter types eagerly.
"""
import logging
import os
from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.api.dependencies import (
    get_appointment_service,
    get_availability_service,
    get_booking_service,
    get_session,
)
from slotbook.api.schemas.booking import (
    AppointmentResponse,
    BookingRequest,
    OpenDatesResponse,
    PublicServiceResponse,
    SlotResponse,
    SlotsResponse,
)
from slotbook.scheduling.types import Customer, DateRange
from slotbook.services.appointment_service import AppointmentService
from slotbook.services.availability_service import AvailabilityService
from slotbook.services.booking_service import BookingService
from slotbook.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/booking", tags=["booking"])
limiter = Limiter(key_func=get_remote_address)

BOOKING_RATE_LIMIT = os.environ.get("BOOKING_RATE_LIMIT", "10/minute")


def appointment_to_schema(appt) -> AppointmentResponse:
    service = appt.service
    return AppointmentResponse(
        id=appt.id,
        service_id=appt.service_id,
        service_name=service.name if service is not None else None,
        service_price=service.price if service is not None else None,
        service_duration=service.duration_minutes if service is not None else None,
        start_at=appt.start_at,
        end_at=appt.end_at,
        customer_name=appt.customer_name,
        customer_email=appt.customer_email,
        customer_phone=appt.customer_phone,
        notes=appt.notes,
        status=appt.status,
        created_at=appt.created_at,
    )


@router.get("/services", response_model=List[PublicServiceResponse])
async def list_services(session: AsyncSession = Depends(get_session)):
    return await CatalogService(session).list_services(active_only=True)


@router.get("/open-dates", response_model=OpenDatesResponse)
async def list_open_dates(
    start: date,
    end: date,
    availability: AvailabilityService = Depends(get_availability_service),
):
    dates = await availability.list_open_dates(DateRange(start, end))
    return OpenDatesResponse(start=start, end=end, dates=dates)


@router.get("/slots", response_model=SlotsResponse)
async def list_slots(
    service_id: UUID,
    day: date = Query(..., alias="date"),
    availability: AvailabilityService = Depends(get_availability_service),
):
    service, slots = await availability.day_slots(service_id, day)
    return SlotsResponse(
        service_id=service_id,
        date=day,
        slots=[
            SlotResponse(start=s, end=s + service.duration, time=s.strftime("%H:%M"))
            for s in slots
        ],
    )


@router.post("/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(BOOKING_RATE_LIMIT)
async def book_appointment(
    request: Request,
    body: BookingRequest,
    booking: BookingService = Depends(get_booking_service),
):
    customer = Customer(
        name=body.customer_name.strip(),
        email=body.customer_email.strip(),
        phone=body.customer_phone,
        notes=body.notes,
    )
    # Stored as local wall-clock time; an offset-bearing start is converted first.
    start = body.start.astimezone().replace(tzinfo=None) if body.start.tzinfo else body.start
    appt = await booking.book_slot(body.service_id, start, customer)
    return appointment_to_schema(appt)


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_confirmation(
    appointment_id: UUID,
    appointments: AppointmentService = Depends(get_appointment_service),
):
    appt = await appointments.get_appointment(appointment_id)
    return appointment_to_schema(appt)
