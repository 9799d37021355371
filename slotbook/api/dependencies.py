"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.config import BookingConfig
from slotbook.infra.database.availability_store import SqlAvailabilityStore
from slotbook.scheduling.store import AvailabilityStore
from slotbook.services.appointment_service import AppointmentService
from slotbook.services.availability_service import AvailabilityService, Clock
from slotbook.services.booking_service import BookingService
from slotbook.services.notification_service import WebhookNotifier


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional AsyncSession from the app-level session factory."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_booking_config(request: Request) -> BookingConfig:
    return request.app.state.booking_config


def get_notifier(request: Request) -> Optional[WebhookNotifier]:
    return getattr(request.app.state, "notifier", None)


def get_clock() -> Clock:
    """Local wall clock; tests override this to pin 'now'."""
    return datetime.now


def get_store(session: AsyncSession = Depends(get_session)) -> AvailabilityStore:
    return SqlAvailabilityStore(session)


def get_availability_service(
    store: AvailabilityStore = Depends(get_store),
    config: BookingConfig = Depends(get_booking_config),
    clock: Clock = Depends(get_clock),
) -> AvailabilityService:
    return AvailabilityService(store, config=config, clock=clock)


def get_booking_service(
    store: AvailabilityStore = Depends(get_store),
    config: BookingConfig = Depends(get_booking_config),
    notifier: Optional[WebhookNotifier] = Depends(get_notifier),
    clock: Clock = Depends(get_clock),
) -> BookingService:
    return BookingService(store, config=config, notifier=notifier, clock=clock)


def get_appointment_service(
    session: AsyncSession = Depends(get_session),
    notifier: Optional[WebhookNotifier] = Depends(get_notifier),
) -> AppointmentService:
    return AppointmentService(session, notifier=notifier)
