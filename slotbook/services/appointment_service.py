"""AppointmentService: admin listing and cancellation, plus the booking confirmation lookup."""
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from slotbook.core.exceptions import NotFoundError
from slotbook.infra.database.models.appointment import Appointment
from slotbook.infra.database.repositories.appointment import AppointmentRepository
from slotbook.scheduling.types import AppointmentQuery, AppointmentStatus, BookingNotice
from slotbook.services.notification_service import BOOKING_CANCELLED, WebhookNotifier

logger = logging.getLogger(__name__)


class AppointmentService:
    def __init__(self, session: AsyncSession, *, notifier: Optional[WebhookNotifier] = None) -> None:
        self._session = session
        self._repo = AppointmentRepository(session)
        self._notifier = notifier

    async def list_appointments(self, query: AppointmentQuery) -> List[Appointment]:
        return await self._repo.list_by_query(query)

    async def get_appointment(self, appointment_id: UUID) -> Appointment:
        appt = await self._repo.get_by_id(appointment_id)
        if appt is None:
            raise NotFoundError("Appointment not found", details={"appointment_id": str(appointment_id)})
        return appt

    async def cancel(self, appointment_id: UUID) -> Appointment:
        """Mark cancelled (never deleted). The interval is free for the next slot query."""
        appt = await self.get_appointment(appointment_id)
        if appt.status == AppointmentStatus.CANCELLED.value:
            return appt

        updated = await self._repo.update_status(appointment_id, AppointmentStatus.CANCELLED.value)
        await self._session.commit()
        logger.info("AppointmentService: cancelled appointment %s (%s)", appointment_id, appt.start_at)

        if self._notifier is not None and updated is not None:
            notice = BookingNotice(
                event=BOOKING_CANCELLED,
                appointment_id=updated.id,
                service_name=updated.service.name,
                service_price=updated.service.price,
                service_duration=updated.service.duration_minutes,
                start=updated.start_at,
                customer_name=updated.customer_name,
                customer_email=updated.customer_email,
                customer_phone=updated.customer_phone,
                notes=updated.notes,
            )
            try:
                await self._notifier.notify(notice)
            except Exception:
                logger.exception("AppointmentService: cancellation notice failed for %s", appointment_id)
        return updated  # type: ignore[return-value]
