"""BookingService: re-validate a chosen slot against fresh data, store it, notify.

The slot list a customer saw earlier is never trusted. At submission the
day's rules, exceptions and appointments are read again and the start time
must still be one of the computed slots. The store's guarded insert then
settles races between customers who passed validation at the same time.
"""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Optional
from uuid import UUID

from slotbook.config import BookingConfig
from slotbook.scheduling import engine
from slotbook.scheduling.store import AvailabilityStore
from slotbook.scheduling.types import (
    AppointmentQuery,
    BookingNotice,
    Customer,
    DateRange,
    NewAppointment,
)
from slotbook.services.availability_service import AvailabilityService, Clock
from slotbook.services.notification_service import BOOKING_CONFIRMED, WebhookNotifier

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        store: AvailabilityStore,
        *,
        config: Optional[BookingConfig] = None,
        notifier: Optional[WebhookNotifier] = None,
        clock: Clock = _dt.datetime.now,
    ) -> None:
        self._store = store
        self._config = config or BookingConfig()
        self._notifier = notifier
        self._clock = clock
        self._availability = AvailabilityService(store, config=self._config, clock=clock)

    async def book_slot(self, service_id: UUID, start: _dt.datetime, customer: Customer) -> Any:
        """Create a confirmed appointment at *start*.

        Raises:
            NotFoundError: unknown or inactive service.
            SlotUnavailableError: *start* is not a bookable slot any more.
            ConflictError: a concurrent booking for an overlapping time won.
        """
        service = await self._availability.bookable_service(service_id)
        day_range = DateRange.single(start.date())
        rules = await self._store.get_active_weekly_rules()
        exceptions = await self._store.get_exceptions(day_range)
        appointments = await self._store.get_appointments(AppointmentQuery.blocking(day_range))

        engine.validate_booking(
            service, start, rules, exceptions, appointments, self._clock(),
            blocked_mode=self._config.blocked_window_mode,
        )

        appointment = await self._store.insert_appointment(
            NewAppointment(
                service_id=service.id,
                start=start,
                end=start + service.duration,
                customer=customer,
            )
        )
        await self._store.commit()
        logger.info(
            "BookingService: booked %s at %s for %s",
            service.name, start.isoformat(), customer.email,
        )

        if self._notifier is not None:
            notice = BookingNotice(
                event=BOOKING_CONFIRMED,
                appointment_id=appointment.id,
                service_name=service.name,
                service_price=service.price,
                service_duration=service.duration_minutes,
                start=start,
                customer_name=customer.name,
                customer_email=customer.email,
                customer_phone=customer.phone,
                notes=customer.notes,
            )
            try:
                await self._notifier.notify(notice)
            except Exception:
                # The appointment is committed; a lost notification must not undo it.
                logger.exception("BookingService: notification failed for %s", appointment.id)
        return appointment
