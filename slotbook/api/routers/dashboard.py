"""Dashboard stats endpoint: today's appointments and counts for the admin home page."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.api.dependencies import get_clock, get_session
from slotbook.api.routers.booking import appointment_to_schema
from slotbook.api.schemas.admin import DashboardResponse
from slotbook.services.availability_service import Clock
from slotbook.services.dashboard_service import DashboardService

router = APIRouter(prefix="/admin/dashboard", tags=["admin-dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard_stats(
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    stats = await DashboardService(session).stats(clock())
    return DashboardResponse(
        today=[appointment_to_schema(a) for a in stats.today],
        week_count=stats.week_count,
        active_services=stats.active_services,
    )
