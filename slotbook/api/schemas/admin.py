"""Pydantic schemas for the admin API: services, rules, exceptions, dashboard."""
from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from slotbook.api.schemas.booking import AppointmentResponse


class ServiceCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    duration_minutes: int
    buffer_after_minutes: int = 0
    price: Decimal = Decimal("0")
    active: bool = True
    display_order: int = 0


class ServiceUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    buffer_after_minutes: Optional[int] = None
    price: Optional[Decimal] = None
    active: Optional[bool] = None
    display_order: Optional[int] = None


class ServiceResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    duration_minutes: int
    buffer_after_minutes: int
    price: Decimal
    active: bool
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RuleCreateRequest(BaseModel):
    weekday: int = Field(..., description="0=Sunday .. 6=Saturday")
    start_time: time
    end_time: time
    is_active: bool = True


class RuleUpdateRequest(BaseModel):
    weekday: Optional[int] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_active: Optional[bool] = None


class RuleResponse(BaseModel):
    id: UUID
    weekday: int
    start_time: time
    end_time: time
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ExceptionCreateRequest(BaseModel):
    exception_date: date
    exception_type: Literal["blocked", "extra"]
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    note: Optional[str] = Field(None, max_length=1000)


class ExceptionUpdateRequest(BaseModel):
    exception_date: Optional[date] = None
    exception_type: Optional[Literal["blocked", "extra"]] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    note: Optional[str] = Field(None, max_length=1000)


class ExceptionResponse(BaseModel):
    id: UUID
    exception_date: date
    exception_type: str
    start_time: Optional[time]
    end_time: Optional[time]
    note: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DashboardResponse(BaseModel):
    today: List[AppointmentResponse]
    week_count: int
    active_services: int
