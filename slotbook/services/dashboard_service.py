"""DashboardService: counts for the admin home page. Cancelled appointments never count."""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.infra.database.models.appointment import Appointment
from slotbook.infra.database.repositories import AppointmentRepository, ServiceRepository
from slotbook.scheduling.types import AppointmentQuery, DateRange


@dataclass
class DashboardStats:
    today: List[Appointment]
    week_count: int
    active_services: int


def week_bounds(day: _dt.date) -> DateRange:
    """Monday..Sunday week containing *day*."""
    monday = day - _dt.timedelta(days=day.weekday())
    return DateRange(monday, monday + _dt.timedelta(days=6))


class DashboardService:
    def __init__(self, session: AsyncSession) -> None:
        self._appointments = AppointmentRepository(session)
        self._services = ServiceRepository(session)

    async def stats(self, now: _dt.datetime) -> DashboardStats:
        today_range = DateRange.single(now.date())
        today = [
            a for a in await self._appointments.list_by_query(AppointmentQuery(date_range=today_range))
            if a.start_at.date() == now.date()
        ]
        week = week_bounds(now.date())
        week_count = await self._appointments.count_starting_between(week.lower_bound(), week.upper_bound())
        return DashboardStats(
            today=today,
            week_count=week_count,
            active_services=await self._services.count_active(),
        )
