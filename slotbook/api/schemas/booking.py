"""Pydantic schemas for the public booking API."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PublicServiceResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    duration_minutes: int
    buffer_after_minutes: int
    price: Decimal
    display_order: int

    model_config = {"from_attributes": True}


class OpenDatesResponse(BaseModel):
    start: date
    end: date
    dates: List[date]


class SlotResponse(BaseModel):
    start: datetime
    end: datetime
    time: str = Field(..., description="Local start time as HH:MM.")


class SlotsResponse(BaseModel):
    service_id: UUID
    date: date
    slots: List[SlotResponse]


class BookingRequest(BaseModel):
    service_id: UUID
    start: datetime = Field(..., description="Local wall-clock start, no timezone.")
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str = Field(..., min_length=3, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=32)
    notes: Optional[str] = Field(None, max_length=2000)


class AppointmentResponse(BaseModel):
    id: UUID
    service_id: UUID
    service_name: Optional[str] = None
    service_price: Optional[Decimal] = None
    service_duration: Optional[int] = None
    start_at: datetime
    end_at: datetime
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    notes: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
